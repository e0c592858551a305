from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Generic, List, Optional, Tuple, TypeVar

# Ratings are stored in half-star steps
RATING_STEP = 0.5
MIN_RATING = 0.0
MAX_RATING = 5.0

MIN_VOTE = 0.0
MAX_VOTE = 10.0

T = TypeVar("T")


@dataclass(frozen=True)
class WatchedEntry:
    """One logged watch of a movie"""

    id: str
    title: str
    my_rating: float
    watched_date: Optional[date] = None
    release_year: Optional[int] = None
    genres: Tuple[str, ...] = ()
    runtime_minutes: int = 0
    directors: Tuple[str, ...] = ()
    actors: Tuple[str, ...] = ()
    is_favorite: bool = False
    tags: Tuple[str, ...] = ()

    @property
    def decade(self) -> Optional[int]:
        """First year of the release decade (1994 -> 1990)"""
        if self.release_year is None:
            return None
        return (self.release_year // 10) * 10

    @property
    def decade_label(self) -> Optional[str]:
        if self.decade is None:
            return None
        return f"{self.decade}s"

    @property
    def week_start(self) -> Optional[date]:
        """Monday of the ISO week the entry was watched in"""
        if self.watched_date is None:
            return None
        return self.watched_date - timedelta(days=self.watched_date.weekday())

    def __repr__(self):
        return f"<WatchedEntry(title='{self.title}', rating={self.my_rating}, watched={self.watched_date})>"


@dataclass(frozen=True)
class RatedEpisode:
    """Community rating of a single TV episode"""

    show_id: int
    season_number: int
    episode_number: int
    name: str
    vote_average: float

    @property
    def key(self) -> Tuple[int, int, int]:
        return (self.show_id, self.season_number, self.episode_number)

    @property
    def position(self) -> Tuple[int, int]:
        return (self.season_number, self.episode_number)

    def __repr__(self):
        return (
            f"<RatedEpisode(show={self.show_id}, S{self.season_number:02d}E{self.episode_number:02d}, "
            f"rating={self.vote_average})>"
        )


@dataclass
class NormalizedBatch(Generic[T]):
    """Normalizer output: accepted records plus the number dropped"""

    records: List[T] = field(default_factory=list)
    skipped: int = 0

    def __len__(self):
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


def is_valid_rating(value: float) -> bool:
    """Half-star rating within the 0-5 scale"""
    if not MIN_RATING <= value <= MAX_RATING:
        return False
    return (value / RATING_STEP).is_integer()


def is_valid_vote(value: float) -> bool:
    return MIN_VOTE <= value <= MAX_VOTE
