"""
Store selection at startup.

The durable store is preferred. If it cannot be reached while the process
starts, the service runs on the in-memory store for the rest of its life;
the choice is never revisited.
"""

import asyncio
import logging

from car_rental.app.core.config import Settings
from car_rental.app.db.session import build_engine
from car_rental.app.stores.base import RentalStore
from car_rental.app.stores.database import SQLAlchemyRentalStore
from car_rental.app.stores.memory import InMemoryRentalStore

logger = logging.getLogger("car_rental")


async def open_store(settings: Settings) -> RentalStore:
    """Return a ready-to-use store, falling back to memory on any connect failure."""
    engine = None
    try:
        engine = build_engine(settings)
        store = SQLAlchemyRentalStore(engine)
        await asyncio.wait_for(store.initialize(), timeout=settings.db_connect_timeout_seconds)
    except Exception as exc:
        logger.warning("Database connection failed, falling back to in-memory store: %s", exc)
        if engine is not None:
            await engine.dispose()
        logger.warning("Running with in-memory data. Data will not persist across restarts.")
        return InMemoryRentalStore()

    logger.info("Database connected and tables ensured")
    return store
