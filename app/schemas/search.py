"""
Listing filters for GET /movies
Sort values come from a fixed safelist so nothing user supplied reaches ORDER BY
"""
from pydantic import BaseModel, Field
from typing import List

MOVIE_SORT_SAFELIST = ["title", "rating", "release_date", "-title", "-rating", "-release_date"]
DEFAULT_MOVIE_SORT = "-rating"


class UnsafeSortError(Exception):
    """sort_column() was reached with a value outside the safelist"""


class Filters(BaseModel):
    sort: str = Field(DEFAULT_MOVIE_SORT, description="Sort field, '-' prefix for descending")
    sort_safelist: List[str] = Field(default_factory=lambda: list(MOVIE_SORT_SAFELIST))

    def sort_column(self) -> str:
        """
        Column name for the validated sort value, without the '-' marker.
        Callers must run validate_filters() first.
        """
        for safe_value in self.sort_safelist:
            if self.sort == safe_value:
                return self.sort[1:] if self.sort.startswith("-") else self.sort
        raise UnsafeSortError(f"unsafe sort parameter: {self.sort}")

    def sort_direction(self) -> str:
        return "DESC" if self.sort.startswith("-") else "ASC"
