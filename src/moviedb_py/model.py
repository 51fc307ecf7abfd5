from __future__ import annotations

from dataclasses import dataclass

YEAR = "Year"
TITLE = "Title"
PLOT = "Plot"
RANK = "Rank"

KEY_ATTRIBUTES = (YEAR, TITLE)


@dataclass(frozen=True)
class Movie:
    year: int
    title: str


@dataclass(frozen=True)
class MovieInfo:
    plot: str | None = None
    rank: int | None = None

    def is_empty(self) -> bool:
        return self.plot is None and self.rank is None


@dataclass(frozen=True)
class MovieItem:
    year: int
    title: str
    plot: str | None = None
    rank: int | None = None

