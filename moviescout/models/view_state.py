"""Observable state read by presentation code."""

from dataclasses import dataclass, field

from moviescout.models.movie import Movie, TrendingMovie


@dataclass
class ViewState:
    search_term: str = ""
    debounced_search_term: str = ""
    movie_list: list[Movie] = field(default_factory=list)
    trending_movies: list[TrendingMovie] = field(default_factory=list)
    error_message: str = ""
    is_loading: bool = False

    def to_dict(self) -> dict:
        """Presentation contract: the only shape views may depend on."""
        return {
            "searchTerm": self.search_term,
            "debouncedSearchTerm": self.debounced_search_term,
            "movieList": [m.model_dump() for m in self.movie_list],
            "trendingMovies": [t.model_dump(by_alias=True) for t in self.trending_movies],
            "errorMessage": self.error_message,
            "isLoading": self.is_loading,
        }
