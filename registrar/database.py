"""Database engine and session management using SQLAlchemy async ORM"""
import os
from typing import Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from dotenv import load_dotenv

load_dotenv()

# Database Configuration
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./registrar.db"
DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# Base class for declarative models
Base = declarative_base()


def normalize_database_url(url: str) -> str:
    """Convert sync driver URLs to their async equivalents"""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite:///"):
        return url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """
    Create an async engine for the given database URL.

    Args:
        url: Database URL (defaults to DATABASE_URL from the environment)
        echo: Log emitted SQL (defaults to SQL_ECHO)

    Returns:
        AsyncEngine: Configured engine
    """
    url = normalize_database_url(url or DATABASE_URL)
    echo = SQL_ECHO if echo is None else echo

    if url.startswith("sqlite"):
        engine = create_async_engine(
            url,
            echo=echo,
            connect_args={"timeout": 30},
        )
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # pool_size=10: Keep 10 connections alive in the pool
    # max_overflow=20: Allow 20 additional connections under load
    # pool_recycle=3600: Recycle connections every hour to prevent stale connections
    return create_async_engine(
        url,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        pool_pre_ping=True,  # Verify connection health before using
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create the async session factory bound to an engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create all registrar tables that do not exist yet"""
    # Models must be imported so their tables are registered on Base.metadata
    import registrar.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

