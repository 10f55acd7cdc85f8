"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fileadopt.core.config import AdoptionConfig
from fileadopt.engine.hooks import EntityLifecycleHook
from fileadopt.engine.reconciler import ReconciliationEngine
from fileadopt.registry.sqlite import SqliteRegistry
from fileadopt.store.database import Database
from fileadopt.store.index import IndexStore
from fileadopt.store.orphans import OrphanStore

FIXED_TIME = 1_700_000_000


@pytest.fixture
def public_root(tmp_path: Path) -> Path:
    """Empty directory acting as the public root."""
    root = tmp_path / "files"
    root.mkdir()
    return root


@pytest.fixture
def make_files(public_root: Path) -> Callable[..., list[Path]]:
    """Create files below the public root from relative paths."""

    def _make(*relative_paths: str) -> list[Path]:
        created = []
        for relative in relative_paths:
            path = public_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(f"content of {relative}")
            created.append(path)
        return created

    return _make


@pytest.fixture
def config(public_root: Path) -> AdoptionConfig:
    """Configuration pointing at the public root with no ignore patterns."""
    return AdoptionConfig(public_root=public_root, ignore_patterns="")


@pytest.fixture
def database() -> Iterator[Database]:
    """Connected in-memory database."""
    db = Database(":memory:")
    db.connect()
    yield db
    db.close()


@pytest.fixture
def index(database: Database) -> IndexStore:
    return IndexStore(database)


@pytest.fixture
def orphans(database: Database) -> OrphanStore:
    return OrphanStore(database)


@pytest.fixture
def registry(database: Database) -> SqliteRegistry:
    """Reference registry sharing the test database."""
    return SqliteRegistry(database)


@pytest.fixture
def engine(
    config: AdoptionConfig,
    registry: SqliteRegistry,
    database: Database,
    index: IndexStore,
    orphans: OrphanStore,
) -> ReconciliationEngine:
    """Engine with a fixed clock and the lifecycle hook registered."""
    registry.add_listener(EntityLifecycleHook(config, index, clock=lambda: FIXED_TIME))
    return ReconciliationEngine(
        config,
        registry,
        database,
        index=index,
        orphans=orphans,
        clock=lambda: FIXED_TIME,
    )
