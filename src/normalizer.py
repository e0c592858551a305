"""
Entry normalizer

Shapes raw watch-history documents and episode payloads into the canonical
records the aggregators consume. Records that break an invariant are dropped
and counted, never raised.
"""
import logging
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from src.models import (
    NormalizedBatch,
    RatedEpisode,
    WatchedEntry,
    is_valid_rating,
    is_valid_vote,
)

logger = logging.getLogger(__name__)


class SkipRecord(Exception):
    """Internal signal that a raw record cannot be used"""


def _first(raw: Mapping, *keys: str, default=None):
    """Return the first present, non-None value among the given keys"""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return default


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_date(value) -> Optional[date]:
    """Parse a date, datetime or ISO string; None stays None"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.strptime(text[:10], "%Y-%m-%d").date()
        except ValueError:
            raise SkipRecord(f"unparseable date {value!r}")
    raise SkipRecord(f"unsupported date type {type(value).__name__}")


def _parse_int(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _names(values) -> Tuple[str, ...]:
    """Collect distinct, non-blank names from strings or {'name': ...} mappings"""
    if values is None:
        return ()
    if isinstance(values, str):
        # Exports join names into one comma-separated string
        values = values.split(",")

    names = []
    for value in values:
        if isinstance(value, Mapping):
            value = value.get("name")
        if not isinstance(value, str):
            continue
        name = value.strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)


def _flag(value) -> bool:
    """Boolean flag; exports write 'Yes' / 'No'"""
    if isinstance(value, str):
        return value.strip().lower() in ("yes", "true")
    return bool(value)


def _release_year(raw: Mapping) -> Optional[int]:
    year = _first(raw, "releaseYear", "release_year", "year")
    if year is not None:
        return _parse_int(year)

    release_date = _first(raw, "releaseDate", "release_date")
    if release_date is None:
        return None
    try:
        parsed = parse_date(release_date)
    except SkipRecord:
        return None
    return parsed.year if parsed else None


def _runtime(raw: Mapping) -> int:
    runtime = _first(raw, "runtimeMinutes", "runtime_minutes", "runtime")
    if not _is_number(runtime) or runtime < 0:
        return 0
    return int(runtime)


def build_entry(raw: Mapping) -> WatchedEntry:
    """Build a WatchedEntry from one raw movie document"""
    if not isinstance(raw, Mapping):
        raise SkipRecord(f"not a mapping: {type(raw).__name__}")

    rating = _first(raw, "myRating", "my_rating", "rating")
    if not _is_number(rating):
        raise SkipRecord(f"missing or non-numeric rating {rating!r}")
    rating = float(rating)
    if not is_valid_rating(rating):
        raise SkipRecord(f"rating {rating} outside 0-5 half-star scale")

    directors = _first(raw, "directors", "director")
    entry_id = _first(raw, "id", "_id", "tmdbId", default="")

    return WatchedEntry(
        id=str(entry_id),
        title=str(_first(raw, "title", default="")),
        my_rating=rating,
        watched_date=parse_date(_first(raw, "watchedDate", "watched_date")),
        release_year=_release_year(raw),
        genres=_names(_first(raw, "genres", "tmdbGenres")),
        runtime_minutes=_runtime(raw),
        directors=_names(directors),
        actors=_names(_first(raw, "actors", "cast")),
        is_favorite=_flag(_first(raw, "isFavorite", "is_favorite", default=False)),
        tags=_names(raw.get("tags")),
    )


def build_episode(raw: Mapping) -> RatedEpisode:
    """Build a RatedEpisode from one raw episode document"""
    if not isinstance(raw, Mapping):
        raise SkipRecord(f"not a mapping: {type(raw).__name__}")

    show_id = _parse_int(_first(raw, "showId", "tmdbShowId", "show_id"))
    season = _parse_int(_first(raw, "seasonNumber", "season_number"))
    episode = _parse_int(_first(raw, "episodeNumber", "episode_number"))
    if show_id is None or season is None or episode is None:
        raise SkipRecord("missing show, season or episode number")

    vote = _first(raw, "voteAverage", "vote_average")
    if not _is_number(vote) or not is_valid_vote(float(vote)):
        raise SkipRecord(f"vote average {vote!r} outside 0-10")

    return RatedEpisode(
        show_id=show_id,
        season_number=season,
        episode_number=episode,
        name=str(_first(raw, "name", default="")),
        vote_average=float(vote),
    )


def normalize_entries(raw_entries: Optional[Iterable[Any]]) -> NormalizedBatch:
    """Normalize raw movie documents, counting the ones that are dropped"""
    batch = NormalizedBatch()
    for index, raw in enumerate(raw_entries or []):
        if isinstance(raw, WatchedEntry):
            batch.records.append(raw)
            continue
        try:
            batch.records.append(build_entry(raw))
        except SkipRecord as e:
            batch.skipped += 1
            logger.debug(f"Skipping entry #{index}: {e}")

    if batch.skipped:
        logger.info(f"Normalized {len(batch.records)} entries, skipped {batch.skipped}")
    return batch


def normalize_episodes(raw_episodes: Optional[Iterable[Any]]) -> NormalizedBatch:
    """Normalize raw episode documents; later duplicates of an episode are dropped"""
    batch = NormalizedBatch()
    seen = set()
    for index, raw in enumerate(raw_episodes or []):
        try:
            episode = raw if isinstance(raw, RatedEpisode) else build_episode(raw)
            if episode.key in seen:
                raise SkipRecord(f"duplicate episode {episode.key}")
        except SkipRecord as e:
            batch.skipped += 1
            logger.debug(f"Skipping episode #{index}: {e}")
            continue
        seen.add(episode.key)
        batch.records.append(episode)

    if batch.skipped:
        logger.info(f"Normalized {len(batch.records)} episodes, skipped {batch.skipped}")
    return batch


def dated(entries: Iterable[WatchedEntry]) -> List[WatchedEntry]:
    """Entries that carry a watched date"""
    return [entry for entry in entries if entry.watched_date is not None]
