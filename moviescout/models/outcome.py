"""Normalized result of a metadata fetch.

`MetadataClient.fetch` never raises; callers branch on the variant instead.
"""

from dataclasses import dataclass, field

from moviescout.errors import MetadataError
from moviescout.models.movie import Movie


@dataclass(frozen=True)
class Success:
    movies: list[Movie] = field(default_factory=list)


@dataclass(frozen=True)
class EmptyResult:
    message: str


@dataclass(frozen=True)
class Failure:
    message: str
    error: MetadataError | None = None


SearchOutcome = Success | EmptyResult | Failure
