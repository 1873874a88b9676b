"""
Raw connectivity check for the durable database.

Uses the same settings as the service (environment / .env). Exits 0 if a
connection can be opened, 1 otherwise; the service itself would fall back
to in-memory storage in the failing case.
"""

import asyncio
import asyncpg

from car_rental.app.core.config import settings
from car_rental.app.db.session import asyncpg_dsn, display_url


async def check_db():
    print(f"Testing connection to: {display_url(settings)}")
    try:
        dsn = asyncpg_dsn(settings)
    except ValueError as e:
        print(f"❌ {e}")
        return 1

    try:
        conn = await asyncpg.connect(dsn, timeout=settings.db_connect_timeout_seconds)
        print("✅ Connection Successful!")
        await conn.close()
        return 0
    except Exception as e:
        print(f"❌ Connection Failed: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(check_db()))
