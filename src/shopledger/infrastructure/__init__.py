"""Infrastructure layer — stores, durable storage, and the shop container.

This layer builds on the domain layer and third-party libs (SQLAlchemy).
It must never import from services, commands, or output.
"""
