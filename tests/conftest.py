"""Pytest fixtures for registrar tests.

Every test gets its own SQLite database file so state never leaks between tests.
"""
import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from registrar.database import Base, create_engine, create_session_factory, init_models
from registrar.services.integrity_auditor import IntegrityAuditor
from registrar.services.integrity_enforcer import IntegrityEnforcer
from registrar.services.query_facade import QueryFacade


@pytest.fixture(scope="function")
def db_url(tmp_path) -> str:
    """Get database URL for tests."""
    return os.environ.get(
        "TEST_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'registrar_test.db'}",
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine(db_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine with a fresh schema."""
    engine = create_engine(db_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_models(engine)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker:
    return create_session_factory(db_engine)


@pytest.fixture(scope="function")
def enforcer(session_factory) -> IntegrityEnforcer:
    return IntegrityEnforcer(session_factory)


@pytest.fixture(scope="function")
def queries(session_factory) -> QueryFacade:
    return QueryFacade(session_factory)


@pytest.fixture(scope="function")
def auditor(session_factory) -> IntegrityAuditor:
    return IntegrityAuditor(session_factory)


@pytest_asyncio.fixture(scope="function")
async def ada(enforcer):
    """Student S1 from the enrollment walkthrough"""
    return await enforcer.create_student({"first_name": "Ada", "last_name": "Lovelace"})


@pytest_asyncio.fixture(scope="function")
async def data_structures(enforcer):
    """Course C1 from the enrollment walkthrough"""
    return await enforcer.create_course({"title": "Data Structures", "credits": 4})
