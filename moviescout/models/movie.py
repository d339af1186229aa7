"""Pydantic models for movies and trending records."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Movie(BaseModel):
    """One TMDB search/discover result. Unknown provider fields are dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    title: str
    poster_path: str | None = None
    poster_url: str | None = None
    popularity: float = 0.0
    vote_average: float | None = None
    release_date: str | None = None
    original_language: str | None = None


class TrendingMovie(BaseModel):
    """A persisted trending record, keyed by `movie_id`.

    Serialised with camelCase aliases (`searchTerm`, `posterUrl`, `movieId`, ...)
    to match the document shape the frontend reads.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    search_term: str
    movie_id: int
    title: str
    poster_url: str | None = None
    count: int = Field(..., ge=1)
    created_at: str
    updated_at: str
