"""Tests for database engine setup and initialization."""

from pathlib import Path

from sqlalchemy import inspect, text

from shopledger.infrastructure.database.engine import create_db_engine, init_database


class TestCreateDbEngine:
    def test_creates_engine(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        assert engine is not None

    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            result = conn.execute(text("PRAGMA journal_mode")).scalar()
            assert result == "wal"
        engine.dispose()


class TestInitDatabase:
    def test_creates_data_directory(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        assert (tmp_path / ".shopledger").is_dir()
        assert (tmp_path / ".shopledger" / "shopledger.db").exists()
        engine.dispose()

    def test_custom_db_name(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path, "books.db")
        assert (tmp_path / ".shopledger" / "books.db").exists()
        engine.dispose()

    def test_creates_kv_table(self, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        assert "kv_entries" in inspect(engine).get_table_names()
        engine.dispose()

    def test_idempotent(self, tmp_path: Path) -> None:
        """Calling init_database twice should not raise."""
        init_database(tmp_path).dispose()
        engine = init_database(tmp_path)
        assert "kv_entries" in inspect(engine).get_table_names()
        engine.dispose()
