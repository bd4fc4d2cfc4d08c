"""Create the expert biodata schema.

    python init_db.py           # create missing tables
    python init_db.py --reset   # drop every table first

Run this before starting the API server.
"""

import asyncio
import sys

from biodata.config import settings
from biodata.db import engine
from biodata.models import Base


async def init_database(reset: bool = False) -> list[str]:
    """Create all tables, optionally dropping existing ones first."""
    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
            print("✓ Dropped existing tables")
        await conn.run_sync(Base.metadata.create_all)

    await engine.dispose()
    return list(Base.metadata.tables.keys())


async def main(argv: list[str]) -> int:
    reset = "--reset" in argv
    print(f"Initializing database: {settings.db.url.split('@')[-1]}")
    try:
        tables = await init_database(reset=reset)
    except Exception as e:
        print(f"\n❌ Error initializing database: {e}")
        return 1

    print(f"✅ Tables ready: {', '.join(tables)}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
