"""
Database session configuration.

This module handles database engine creation and session management
using SQLAlchemy with async support. PostgreSQL (asyncpg) is the
production target; tests run the same models against SQLite (aiosqlite).
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base
from car_rental.app.core.config import Settings

# Create declarative base for models
Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the durable store.

    Pool sizing only applies to server databases; SQLite URLs get the
    dialect's default pool.
    """
    url = settings.sqlalchemy_url
    if url.startswith("sqlite"):
        return create_async_engine(url, echo=settings.db_echo, future=True)

    return create_async_engine(
        url,
        echo=settings.db_echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,
        future=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Create async session factory bound to `engine`."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


def display_url(settings: Settings) -> str:
    """Effective database URL with the password masked, for logs and output."""
    return make_url(settings.sqlalchemy_url).render_as_string(hide_password=True)


def asyncpg_dsn(settings: Settings) -> str:
    """
    Effective database URL as the plain `postgresql://` DSN asyncpg accepts.

    Raises:
        ValueError: The configured database is not PostgreSQL
    """
    url = make_url(settings.sqlalchemy_url)
    if url.get_backend_name() != "postgresql":
        raise ValueError(f"Not a PostgreSQL database: {display_url(settings)}")
    return url.set(drivername="postgresql").render_as_string(hide_password=False)
