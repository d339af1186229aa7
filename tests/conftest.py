"""Shared test fixtures for all test modules."""

import os
import tempfile
from datetime import datetime, timezone

import httpx
import pytest

# ── Environment overrides (must be set before importing moviescout modules) ──
_tmp = tempfile.mkdtemp(prefix="ms_pytest_")
os.environ["MOVIESCOUT_DATA_DIR"] = _tmp
os.environ["MOVIESCOUT_DB_PATH"] = os.path.join(_tmp, "test.db")
os.environ["MOVIESCOUT_TMDB_API_KEY"] = "pytest-token"
os.environ["MOVIESCOUT_TMDB_BASE_URL"] = "https://tmdb.test/3"
os.environ["MOVIESCOUT_TMDB_IMAGE_BASE_URL"] = "https://img.test/w500"

from moviescout.config import settings  # noqa: E402
from moviescout.errors import StoreError  # noqa: E402
from moviescout.models.movie import Movie, TrendingMovie  # noqa: E402
from moviescout.models.outcome import Success  # noqa: E402


def make_movie(movie_id: int, title: str | None = None, **extra) -> Movie:
    return Movie(id=movie_id, title=title or f"Movie {movie_id}", **extra)


def trending_record(movie_id: int, count: int) -> TrendingMovie:
    now = datetime.now(timezone.utc).isoformat()
    return TrendingMovie(
        id=movie_id,
        search_term=f"term {movie_id}",
        movie_id=movie_id,
        title=f"Movie {movie_id}",
        count=count,
        created_at=now,
        updated_at=now,
    )


def tmdb_result(movie_id: int, title: str, poster_path: str | None = None, popularity: float = 1.0) -> dict:
    """A result entry shaped like TMDB's, including fields we ignore."""
    return {
        "adult": False,
        "id": movie_id,
        "title": title,
        "poster_path": poster_path,
        "popularity": popularity,
        "vote_average": 7.5,
        "release_date": "2008-07-16",
        "original_language": "en",
        "genre_ids": [28, 80],
    }


class FakeClient:
    """Stands in for MetadataClient. `gates` hold a fetch until the event is set."""

    def __init__(self, outcomes: dict | None = None):
        self.outcomes = outcomes or {}
        self.gates = {}
        self.calls: list[str] = []

    async def fetch(self, query: str = ""):
        self.calls.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        return self.outcomes.get(query, Success([]))


class FakeStore:
    def __init__(self, trending: list[TrendingMovie] | None = None, fail: bool = False):
        self.trending = trending or []
        self.fail = fail
        self.hits: list[tuple[str, Movie]] = []

    async def record_hit(self, query: str, chosen: Movie):
        if self.fail:
            raise StoreError("store is down")
        self.hits.append((query, chosen))

    async def top_trending(self, limit: int = 5):
        if self.fail:
            raise StoreError("store is down")
        return self.trending[:limit]


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def mock_tmdb():
    """Build a MockTransport from a handler and record every request it sees."""
    requests: list[httpx.Request] = []

    def factory(handler):
        def recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        return httpx.MockTransport(recording)

    factory.requests = requests
    return factory


@pytest.fixture
async def db(tmp_path):
    """Fresh trending database for a single test."""
    import moviescout.database as db_mod

    original_db_path = settings.db_path
    settings.db_path = tmp_path / "trending.db"
    await db_mod.init_db()

    yield await db_mod.get_db()

    await db_mod.close_db()
    settings.db_path = original_db_path
