"""
MovieScout command line.

Usage:
    moviescout search "the dark knight"   # one search, records the trending hit
    moviescout search                     # discover popular movies
    moviescout trending --limit 10
    moviescout serve --port 8080
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from moviescout.config import settings
from moviescout.database import close_db, init_db
from moviescout.errors import ConfigurationError, StoreError
from moviescout.services.metadata_client import MetadataClient
from moviescout.services.search_orchestrator import SearchOrchestrator
from moviescout.services.trending_store import TrendingStore

logger = logging.getLogger("moviescout.cli")


def _format_movie(index: int, movie: dict) -> str:
    year = (movie.get("release_date") or "")[:4] or "----"
    rating = movie.get("vote_average")
    rating_str = f"{rating:.1f}" if isinstance(rating, (int, float)) else "N/A"
    return f"{index:>3}. {movie['title']} ({year})  rating {rating_str}"


async def run_search(term: str) -> int:
    api_key = settings.require_api_key()
    try:
        await init_db()
        async with MetadataClient(api_key) as client:
            orchestrator = SearchOrchestrator(client, TrendingStore())
            await orchestrator.on_debounced_query(term)
            state = orchestrator.snapshot()
            orchestrator.close()
    finally:
        await close_db()

    if state["errorMessage"]:
        print(state["errorMessage"], file=sys.stderr)
        return 1

    for i, movie in enumerate(state["movieList"], start=1):
        print(_format_movie(i, movie))
    return 0


async def run_trending(limit: int) -> int:
    try:
        await init_db()
        records = await TrendingStore().top_trending(limit)
    except StoreError as e:
        print(f"Trending movies are unavailable: {e}", file=sys.stderr)
        return 1
    finally:
        await close_db()

    if not records:
        print("No trending movies yet.")
        return 0
    for i, record in enumerate(records, start=1):
        print(f"{i:>3}. {record.title}  [{record.count} searches, first as {record.search_term!r}]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="moviescout", description="Search TMDB and track trending movies")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search movies (no term = discover popular)")
    p_search.add_argument("term", nargs="?", default="")

    p_trending = sub.add_parser("trending", help="Show the trending leaderboard")
    p_trending.add_argument("--limit", type=int, default=settings.trending_limit)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8080)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        if args.command == "search":
            return asyncio.run(run_search(args.term))
        if args.command == "trending":
            return asyncio.run(run_trending(args.limit))
        if args.command == "serve":
            import uvicorn

            settings.require_api_key()
            uvicorn.run("moviescout.main:app", host=args.host, port=args.port)
            return 0
    except (ConfigurationError, StoreError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
