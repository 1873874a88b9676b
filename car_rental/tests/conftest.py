"""
Centralized Test Configuration.

Every store-level and HTTP test runs against both backends: the in-memory
store and the SQLAlchemy store over an in-memory SQLite database.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import Pool, StaticPool

from car_rental.app.main import create_app
from car_rental.app.stores.database import SQLAlchemyRentalStore
from car_rental.app.stores.memory import InMemoryRentalStore

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


async def open_database_store() -> SQLAlchemyRentalStore:
    """SQLAlchemy store on a fresh in-memory database, seeded."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    store = SQLAlchemyRentalStore(engine)
    await store.initialize()
    return store


@pytest.fixture
async def database_store():
    store = await open_database_store()
    yield store
    await store.close()


@pytest.fixture
def memory_store():
    return InMemoryRentalStore()


@pytest.fixture(params=["memory", "database"])
async def store(request):
    """Both backends; tests using this fixture run once per backend."""
    if request.param == "memory":
        yield InMemoryRentalStore()
        return
    store = await open_database_store()
    yield store
    await store.close()


@pytest.fixture
def app(store):
    """Application wired to the test store (ASGITransport skips lifespan)."""
    application = create_app()
    application.state.store = store
    return application


@pytest.fixture
async def client(app):
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
