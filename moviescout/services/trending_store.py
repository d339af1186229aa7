"""Trending leaderboard persisted in the `trending_searches` table.

Counts are merged per movie id. The increment is a single upsert statement so
concurrent writers (other processes sharing the database file included) never
lose a hit; there is no client-side locking.
"""

import logging

import aiosqlite

from moviescout.database import get_db
from moviescout.errors import StoreError
from moviescout.models.movie import Movie, TrendingMovie

logger = logging.getLogger(__name__)

_COLUMNS = "id, search_term, movie_id, title, poster_url, count, created_at, updated_at"


def _row_to_record(cursor: aiosqlite.Cursor, row) -> TrendingMovie:
    columns = [desc[0] for desc in cursor.description]
    return TrendingMovie(**dict(zip(columns, row)))


class TrendingStore:
    def __init__(self, db: aiosqlite.Connection | None = None):
        # None means "use the application connection from moviescout.database"
        self._db = db

    async def _conn(self) -> aiosqlite.Connection:
        if self._db is not None:
            return self._db
        try:
            return await get_db()
        except RuntimeError as e:
            raise StoreError(str(e)) from e

    async def record_hit(self, query: str, chosen: Movie) -> TrendingMovie:
        """Create the record for `chosen.id` with count 1, or bump its count by 1."""
        db = await self._conn()
        try:
            await db.execute(
                """INSERT INTO trending_searches (search_term, movie_id, title, poster_url)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(movie_id) DO UPDATE SET
                       count = count + 1,
                       updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')""",
                (query, chosen.id, chosen.title, chosen.poster_url),
            )
            await db.commit()
        except (aiosqlite.Error, ValueError) as e:
            raise StoreError(f"Could not record search for movie {chosen.id}: {e}") from e

        record = await self.get_trending(chosen.id)
        if record is None:
            raise StoreError(f"Trending record for movie {chosen.id} vanished after write")
        logger.info("Trending hit: %r -> %s (count=%d)", query, chosen.title, record.count)
        return record

    async def get_trending(self, movie_id: int) -> TrendingMovie | None:
        """Get a single trending record by its subject key."""
        db = await self._conn()
        try:
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM trending_searches WHERE movie_id = ?",
                (movie_id,),
            )
            row = await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as e:
            raise StoreError(f"Could not read trending record {movie_id}: {e}") from e
        if row is None:
            return None
        return _row_to_record(cursor, row)

    async def top_trending(self, limit: int = 5) -> list[TrendingMovie]:
        """Most searched movies first, at most `limit` of them."""
        if limit < 1:
            return []
        db = await self._conn()
        try:
            cursor = await db.execute(
                f"""SELECT {_COLUMNS} FROM trending_searches
                    ORDER BY count DESC, updated_at DESC, id ASC
                    LIMIT ?""",
                (limit,),
            )
            rows = await cursor.fetchall()
        except (aiosqlite.Error, ValueError) as e:
            raise StoreError(f"Could not list trending movies: {e}") from e
        return [_row_to_record(cursor, row) for row in rows]
