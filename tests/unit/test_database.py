"""
Unit tests for database configuration
"""
import importlib.util

import pytest

from registrar.database import Base, normalize_database_url


@pytest.mark.parametrize("url,expected", [
    ("postgresql://u:p@db/registrar", "postgresql+asyncpg://u:p@db/registrar"),
    ("sqlite:///./registrar.db", "sqlite+aiosqlite:///./registrar.db"),
    ("sqlite+aiosqlite:///./registrar.db", "sqlite+aiosqlite:///./registrar.db"),
])
def test_sync_urls_rewritten_to_async_drivers(url, expected):
    assert normalize_database_url(url) == expected


def test_async_engine_runtime_installed():
    """The async engine bridges through greenlet, pulled in by sqlalchemy[asyncio]"""
    assert importlib.util.find_spec("greenlet") is not None


def test_tables_never_reuse_sqlite_rowids():
    import registrar.models  # noqa: F401

    for name in ("students", "courses", "enrollments"):
        assert Base.metadata.tables[name].dialect_options["sqlite"]["autoincrement"] is True
