"""Database engine setup for SQLite with WAL mode.

The DB is stored at ``{root}/.shopledger/{db_name}``. SQLAlchemy Core
(not ORM) is used because shopledger is a short-lived CLI process and the
schema is a single key-value table.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from shopledger.infrastructure.database.schema import metadata

DATA_DIRNAME = ".shopledger"
DEFAULT_DB_NAME = "shopledger.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL journaling."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(root: Path, db_name: str = DEFAULT_DB_NAME) -> Engine:
    """Initialize the database at ``{root}/.shopledger/{db_name}``.

    Creates the data directory and all tables from :data:`schema.metadata`.
    Idempotent — safe to call on an existing shop.
    """
    data_dir = root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / db_name)
    metadata.create_all(engine)
    return engine
