import asyncio
import os
import sys

# Add parent directory to path so we can import ironlog modules
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from ironlog.db.seed import seed_catalog
from ironlog.db.session import async_session_maker, engine


async def main():
    print("Seeding exercise catalog...")
    async with async_session_maker() as session:
        added = await seed_catalog(session)
        await session.commit()
    print(f"Added {added} exercises.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
