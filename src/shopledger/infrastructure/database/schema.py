"""SQLAlchemy Core table definitions for the shopledger database.

One table: the durable key-value collaborator stores each collection
(customers, inventory items, categories) as a JSON document under its
own key.
"""

from __future__ import annotations

from sqlalchemy import Column, MetaData, Table, Text

metadata = MetaData()

kv_entries = Table(
    "kv_entries",
    metadata,
    Column("key", Text, primary_key=True),
    Column("value", Text, nullable=False),
    Column("modified", Text, nullable=False),
)
