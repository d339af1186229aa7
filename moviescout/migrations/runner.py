"""Schema migrations for the trending database.

The schema version lives in SQLite's `user_version`; migration N in
MIGRATIONS takes the database from version N-1 to N. Each module exposes an
async `upgrade(db)`.
"""

import importlib
import logging

import aiosqlite

from moviescout.errors import StoreError

logger = logging.getLogger(__name__)

MIGRATIONS = (
    "moviescout.migrations.m001_trending",
)


async def schema_version(db: aiosqlite.Connection) -> int:
    cursor = await db.execute("PRAGMA user_version")
    return (await cursor.fetchone())[0]


async def run_migrations(db: aiosqlite.Connection) -> int:
    """Apply pending migrations and return the resulting schema version."""
    current = await schema_version(db)
    latest = len(MIGRATIONS)
    if current > latest:
        raise StoreError(
            f"Trending database is at schema v{current}, this build only knows v{latest}"
        )

    for version, migration_name in enumerate(MIGRATIONS[current:], start=current + 1):
        module = importlib.import_module(migration_name)
        await module.upgrade(db)
        # PRAGMA does not take bound parameters; version is an int we computed
        await db.execute(f"PRAGMA user_version = {version}")
        await db.commit()
        logger.info("Applied migration %s (schema v%d)", migration_name, version)

    return latest
