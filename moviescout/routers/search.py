"""Search routes: live query input and the ViewState the frontend renders."""

import asyncio
import json

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from moviescout.models.search import SearchTermUpdate
from moviescout.services.search_orchestrator import SearchOrchestrator

router = APIRouter(prefix="/api", tags=["search"])

# Seconds of silence before the stream sends a keepalive comment
KEEPALIVE_SECONDS = 30.0


def get_orchestrator(request: Request) -> SearchOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Search is not ready yet")
    return orchestrator


@router.get("/state")
async def get_state(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """Current view state (searchTerm, movieList, trendingMovies, ...)."""
    return orchestrator.snapshot()


@router.post("/search")
async def update_search_term(
    body: SearchTermUpdate,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """Feed a keystroke. The TMDB request fires once input settles."""
    orchestrator.on_query_change(body.search_term)
    return orchestrator.snapshot()


@router.get("/state/stream")
async def stream_state(orchestrator: SearchOrchestrator = Depends(get_orchestrator)):
    """Server-Sent Events stream: one `state` event per change."""
    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = orchestrator.subscribe(queue.put_nowait)

    async def event_generator():
        try:
            yield f"event: state\ndata: {json.dumps(orchestrator.snapshot())}\n\n"
            while True:
                try:
                    snapshot = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                yield f"event: state\ndata: {json.dumps(snapshot)}\n\n"
        finally:
            unsubscribe()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
