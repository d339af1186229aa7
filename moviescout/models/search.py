"""Pydantic models for the search routes."""

from pydantic import BaseModel, Field


class SearchTermUpdate(BaseModel):
    search_term: str = Field("", alias="searchTerm", max_length=200)

    model_config = {"populate_by_name": True}


class TrendingListResponse(BaseModel):
    trending: list[dict]
    limit: int
