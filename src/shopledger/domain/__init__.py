"""Domain layer — records, canonical keys, aggregates, and the query pipeline.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
