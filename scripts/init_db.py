"""Script to initialize the database."""

import asyncio

from sqlalchemy import text

from app.database import AsyncSessionLocal, engine
from app.models import metadata
from app.services.user_service import seed_roles


async def init_db() -> None:
    """Initialize the database by creating all tables and the global roles."""
    async with engine.begin() as conn:
        if conn.dialect.name == "postgresql":
            # Enable pgcrypto extension
            await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))

        # Create all tables
        await conn.run_sync(metadata.create_all)

    async with AsyncSessionLocal() as session:
        await seed_roles(session)

    await engine.dispose()
    print("✓ Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db())
