"""Trending database connection.

One aiosqlite connection per process. Several processes may point at the same
file, so the journal is WAL and writers wait on a busy lock instead of failing.
"""

import logging
from pathlib import Path

import aiosqlite

from moviescout.config import settings
from moviescout.errors import StoreError
from moviescout.migrations.runner import run_migrations

logger = logging.getLogger(__name__)

_PRAGMAS = (
    "PRAGMA journal_mode=WAL",
    "PRAGMA busy_timeout=5000",
    # Losing the last counter bump on power loss is acceptable
    "PRAGMA synchronous=NORMAL",
)

_db: aiosqlite.Connection | None = None


async def get_db() -> aiosqlite.Connection:
    """Get the database connection. Raises if not initialized."""
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db


async def init_db(db_path: Path | None = None) -> None:
    """Open the trending database and bring its schema up to date.

    Raises StoreError if the file cannot be created, opened or migrated.
    """
    global _db

    path = db_path or settings.db_path
    conn = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(str(path))
        for pragma in _PRAGMAS:
            await conn.execute(pragma)
        version = await run_migrations(conn)
    except (OSError, aiosqlite.Error) as e:
        if conn is not None:
            await conn.close()
        raise StoreError(f"Cannot open trending database at {path}: {e}") from e
    except StoreError:
        await conn.close()
        raise

    _db = conn
    logger.info("Trending database ready at %s (schema v%d)", path, version)


async def close_db() -> None:
    """Close the database connection."""
    global _db
    if _db is not None:
        await _db.close()
        _db = None
