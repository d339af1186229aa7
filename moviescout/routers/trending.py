"""Trending leaderboard routes."""

import logging

from fastapi import APIRouter, HTTPException, Request

from moviescout.errors import StoreError
from moviescout.models.search import TrendingListResponse
from moviescout.services.trending_store import TrendingStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trending", tags=["trending"])


@router.get("", response_model=TrendingListResponse)
async def list_trending(request: Request, limit: int = 5):
    """Most searched movies, straight from the store."""
    limit = max(1, min(limit, 50))
    store: TrendingStore = getattr(request.app.state, "trending_store", None) or TrendingStore()
    try:
        records = await store.top_trending(limit)
    except StoreError as e:
        logger.warning("Trending lookup failed: %s", e)
        raise HTTPException(status_code=503, detail="Trending movies are unavailable")
    return {
        "trending": [r.model_dump(by_alias=True) for r in records],
        "limit": limit,
    }
