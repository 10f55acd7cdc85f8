"""Unit tests for the SQLite database wrapper."""

import sqlite3
from pathlib import Path

import pytest
from fileadopt.errors import StoreError
from fileadopt.models.records import IndexRecord
from fileadopt.store.database import INDEX_TABLE, Database, store_errors
from fileadopt.store.index import IndexStore


def _record(uri: str) -> IndexRecord:
    return IndexRecord(uri=uri, is_ignored=False, is_managed=False, directory_depth=0, timestamp=1)


class TestDatabase:
    """Tests for connection handling and batches."""

    def test_creates_file_and_parent(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "fileadopt.db"

        with Database(path) as db:
            db.execute(f"SELECT COUNT(*) FROM {INDEX_TABLE}")

        assert path.exists()

    def test_batch_commits_once(self, tmp_path: Path) -> None:
        path = tmp_path / "db.sqlite"
        with Database(path) as db:
            index = IndexStore(db)
            with db.batch():
                index.upsert(_record("public://a"))
                index.upsert(_record("public://b"))

        with Database(path) as db:
            assert IndexStore(db).count_files() == 2

    def test_batch_rolls_back_on_error(self, database: Database) -> None:
        index = IndexStore(database)
        index.upsert(_record("public://kept"))

        with pytest.raises(RuntimeError), database.batch():
            index.upsert(_record("public://lost"))
            raise RuntimeError("boom")

        assert index.get("public://lost") is None
        assert index.get("public://kept") is not None

    def test_nested_batch_joins_outer(self, database: Database) -> None:
        index = IndexStore(database)

        with pytest.raises(RuntimeError), database.batch():
            with database.batch():
                index.upsert(_record("public://inner"))
            raise RuntimeError("boom")

        assert index.get("public://inner") is None


class TestStoreErrors:
    """Tests for the store_errors context manager."""

    def test_wraps_sqlite_errors(self) -> None:
        with pytest.raises(StoreError, match="Failed to do thing"), store_errors("do thing"):
            raise sqlite3.OperationalError("locked")

    def test_unencodable_uri_raises_store_error(self, database: Database) -> None:
        """Lone surrogates from undecodable file names cannot be bound."""
        index = IndexStore(database)

        with pytest.raises(StoreError, match="upsert index row"):
            index.upsert(_record("public://bad\udcff.txt"))

        assert index.count_files() == 0

    def test_unreadable_database(self, tmp_path: Path) -> None:
        path = tmp_path / "not-a-db"
        path.write_text("garbage" * 100)

        with pytest.raises(StoreError):
            Database(path).connect()
