"""MovieScout FastAPI application."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from moviescout.config import settings

# Configure logging so our INFO messages appear in container logs
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
# Keep noisy libraries at WARNING
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

from moviescout.database import close_db, init_db
from moviescout.routers import search, trending
from moviescout.services.metadata_client import MetadataClient
from moviescout.services.search_orchestrator import SearchOrchestrator
from moviescout.services.trending_store import TrendingStore

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Fail before anything talks to TMDB without a token
    api_key = settings.require_api_key()

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    await init_db()

    client = MetadataClient(api_key)
    store = TrendingStore()
    orchestrator = SearchOrchestrator(client, store)
    app.state.trending_store = store
    app.state.orchestrator = orchestrator

    # Trending + initial discover run in the background so startup is not
    # held up by a slow TMDB
    startup = asyncio.create_task(orchestrator.start())
    logger.info("MovieScout %s started (debounce=%dms)", VERSION, settings.debounce_ms)

    yield

    startup.cancel()
    with suppress(asyncio.CancelledError):
        await startup
    orchestrator.close()
    await client.aclose()
    await close_db()
    app.state.orchestrator = None


app = FastAPI(
    title="MovieScout",
    description="Movie search with a trending leaderboard",
    version=VERSION,
    lifespan=lifespan,
)

# CORS: localhost defaults plus any extra origins from MOVIESCOUT_CORS_ORIGINS
_cors_origins = ["http://localhost:5173", "http://localhost:8080"]
if settings.cors_origins:
    _cors_origins.extend(o.strip() for o in settings.cors_origins.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(search.router)
app.include_router(trending.router)


# Health check
@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}
