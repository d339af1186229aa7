"""TMDB metadata client.

Two request shapes: discover (empty query, most popular first) and search by
term. Every response is normalized into a SearchOutcome; no exception leaves
`fetch()`, which makes this the failure boundary of the search pipeline.
"""

import logging

import httpx
from pydantic import ValidationError

from moviescout.config import settings
from moviescout.errors import (
    HttpError,
    MetadataError,
    ParseError,
    ProviderLogicalError,
    TransportError,
)
from moviescout.models.movie import Movie
from moviescout.models.outcome import Failure, SearchOutcome, Success

logger = logging.getLogger(__name__)

REQUEST_FAILED = "request failed"
PROVIDER_FALLBACK_MESSAGE = "Failed to fetch movies"


def _provider_failure_message(payload: dict) -> str | None:
    """Return the provider's message if the payload flags a logical failure."""
    # TMDB: {"success": false, "status_message": "..."}; OMDb-style: {"Response": "False"}
    failed = payload.get("success") is False
    legacy_flag = payload.get("response", payload.get("Response"))
    if legacy_flag in (0, "0", False, "False"):
        failed = True
    if not failed:
        return None
    return (
        payload.get("status_message")
        or payload.get("error")
        or payload.get("Error")
        or PROVIDER_FALLBACK_MESSAGE
    )


class MetadataClient:
    """Async TMDB client. Use as an async context manager or call `aclose()`."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
        image_base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.tmdb_base_url).rstrip("/")
        self.image_base_url = (image_base_url or settings.tmdb_image_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self._client = httpx.AsyncClient(
            headers={
                "accept": "application/json",
                "Authorization": f"Bearer {api_key}",
            },
            timeout=self.timeout,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _request_args(self, query: str) -> tuple[str, dict]:
        if query:
            return f"{self.base_url}/search/movie", {"query": query}
        return f"{self.base_url}/discover/movie", {"sort_by": "popularity.desc"}

    def _poster_url(self, poster_path: str | None) -> str | None:
        if not poster_path:
            return None
        return f"{self.image_base_url}/{poster_path.lstrip('/')}"

    def _parse_results(self, payload: dict) -> list[Movie]:
        results = payload.get("results") or []
        if not isinstance(results, list):
            raise ParseError("'results' is not a list")
        movies = []
        for item in results:
            if not isinstance(item, dict):
                raise ParseError("result entry is not an object")
            movies.append(
                Movie.model_validate(
                    {**item, "poster_url": self._poster_url(item.get("poster_path"))}
                )
            )
        return movies

    async def fetch(self, query: str = "") -> SearchOutcome:
        """Discover popular movies (empty query) or search by term."""
        query = query.strip()
        url, params = self._request_args(query)

        try:
            resp = await self._client.get(url, params=params)
            if not resp.is_success:
                logger.warning("TMDB returned HTTP %d for %r", resp.status_code, query)
                return Failure(REQUEST_FAILED, HttpError(resp.status_code))

            payload = resp.json()
            if not isinstance(payload, dict):
                raise ParseError("payload is not an object")

            message = _provider_failure_message(payload)
            if message is not None:
                logger.warning("TMDB reported failure for %r: %s", query, message)
                return Failure(message, ProviderLogicalError(message))

            return Success(self._parse_results(payload))

        except httpx.TimeoutException as e:
            logger.warning("TMDB request timed out after %.1fs for %r", self.timeout, query)
            return Failure(REQUEST_FAILED, TransportError(f"timeout: {e}"))
        except httpx.HTTPError as e:
            logger.warning("TMDB transport error for %r: %s", query, e)
            return Failure(REQUEST_FAILED, TransportError(str(e)))
        except ParseError as e:
            logger.warning("Malformed TMDB payload for %r: %s", query, e)
            return Failure(REQUEST_FAILED, e)
        except (ValueError, ValidationError) as e:
            logger.warning("Could not decode TMDB response for %r: %s", query, e)
            return Failure(REQUEST_FAILED, ParseError(str(e)))
        except Exception as e:
            logger.warning("Unexpected error fetching movies for %r: %s", query, e)
            return Failure(REQUEST_FAILED, MetadataError(str(e)))
