"""Search orchestration: keystrokes in, ViewState out.

Raw input is stored immediately and handed to a Debouncer; only debounced
queries hit TMDB. Each fetch takes a request token, and its outcome is applied
only if no newer debounced query has started in the meantime. In-flight
requests are never aborted, just ignored when they come back late.
"""

import logging
from typing import Callable

from moviescout.config import settings
from moviescout.errors import ProviderLogicalError, StoreError
from moviescout.models.outcome import EmptyResult, Failure, SearchOutcome, Success
from moviescout.models.view_state import ViewState
from moviescout.services.debouncer import Debouncer
from moviescout.services.metadata_client import MetadataClient
from moviescout.services.trending_store import TrendingStore

logger = logging.getLogger(__name__)

FETCH_ERROR_MESSAGE = "Error fetching movies. Try again later."
EMPTY_RESULT_MESSAGE = "No movies found."

Listener = Callable[[dict], None]


class SearchOrchestrator:
    def __init__(
        self,
        client: MetadataClient,
        store: TrendingStore,
        debounce_ms: int | None = None,
        trending_limit: int | None = None,
    ):
        self.client = client
        self.store = store
        self.trending_limit = trending_limit if trending_limit is not None else settings.trending_limit
        self.state = ViewState()
        self.debouncer = Debouncer(
            self.on_debounced_query,
            debounce_ms if debounce_ms is not None else settings.debounce_ms,
        )
        self._listeners: list[Listener] = []
        self._latest_token = 0
        self._closed = False

    # ── Observers ────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state snapshots. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> dict:
        return self.state.to_dict()

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning("State listener %r failed: %s", listener, e)

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def start(self) -> None:
        """Load the trending list and run the initial discover fetch.

        The discover fetch is skipped if a user query already settled while
        trending was loading; that query owns the result list.
        """
        await self.load_trending()
        if self._latest_token == 0 and not self._closed:
            await self.on_debounced_query("")

    def close(self) -> None:
        self._closed = True
        self.debouncer.close()
        # Invalidate whatever is still in flight
        self._latest_token += 1
        self._listeners.clear()

    # ── Input ────────────────────────────────────────────────────────────

    def on_query_change(self, raw: str) -> None:
        """Record the live input; the fetch waits for the debouncer."""
        if self._closed:
            return
        self.state.search_term = raw
        self._notify()
        self.debouncer.observe(raw)

    async def on_debounced_query(self, query: str) -> None:
        """Fetch movies for a settled query and apply the outcome if still current."""
        if self._closed:
            return

        self._latest_token += 1
        token = self._latest_token

        self.state.debounced_search_term = query
        self.state.is_loading = True
        self.state.error_message = ""
        self._notify()

        try:
            outcome = await self.client.fetch(query)
            if token != self._latest_token:
                logger.debug("Discarding stale outcome for %r", query)
                return
            await self._apply(query.strip(), outcome)
        finally:
            if token == self._latest_token:
                self.state.is_loading = False
                self._notify()

    async def _apply(self, query: str, outcome: SearchOutcome) -> None:
        if isinstance(outcome, Success) and not outcome.movies:
            outcome = EmptyResult(EMPTY_RESULT_MESSAGE)

        if isinstance(outcome, Success):
            self.state.movie_list = list(outcome.movies)
            self.state.error_message = ""
            if query:
                await self._record_hit(query, outcome)
        elif isinstance(outcome, EmptyResult):
            self.state.movie_list = []
            self.state.error_message = outcome.message
        elif isinstance(outcome, Failure):
            self.state.movie_list = []
            if isinstance(outcome.error, ProviderLogicalError):
                self.state.error_message = outcome.message
            else:
                self.state.error_message = FETCH_ERROR_MESSAGE

    async def _record_hit(self, query: str, outcome: Success) -> None:
        # Attribution goes to the top-ranked result, not a clicked one
        try:
            await self.store.record_hit(query, outcome.movies[0])
        except StoreError as e:
            logger.warning("Could not record trending hit for %r: %s", query, e)

    # ── Trending ─────────────────────────────────────────────────────────

    async def load_trending(self) -> None:
        try:
            movies = await self.store.top_trending(self.trending_limit)
        except StoreError as e:
            logger.warning("Error fetching trending movies: %s", e)
            return
        self.state.trending_movies = movies
        self._notify()
