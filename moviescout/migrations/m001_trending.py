"""Trending searches table.

One row per subject (TMDB movie id); `count` is only ever bumped by the
upsert in the trending store.
"""

import aiosqlite


async def upgrade(db: aiosqlite.Connection) -> None:
    await db.execute("""
        CREATE TABLE IF NOT EXISTS trending_searches (
            id           INTEGER PRIMARY KEY AUTOINCREMENT,
            search_term  TEXT NOT NULL,
            movie_id     INTEGER NOT NULL UNIQUE,
            title        TEXT NOT NULL,
            poster_url   TEXT,
            count        INTEGER NOT NULL DEFAULT 1 CHECK (count >= 1),
            created_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
            updated_at   TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
        )
    """)
    await db.execute(
        "CREATE INDEX IF NOT EXISTS idx_trending_count ON trending_searches(count DESC, updated_at DESC)"
    )
    await db.commit()
