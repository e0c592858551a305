"""
Aggregation facade

The only entry point callers need: validates request parameters, normalizes
the raw snapshot once, then runs every aggregator over the same records and
assembles the response payloads the client renders.
"""
import logging
import math
from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from config.config import Config
from src.credits import top_credits
from src.distribution import decade_rollup, genre_rollup, rating_histogram, top_tags, year_rollup
from src.errors import ValidationError, validate_limit, validate_year
from src.models import WatchedEntry
from src.normalizer import dated, normalize_entries, normalize_episodes
from src.show_analytics import analyze_show
from src.stats_utils import round_half_up, rounded_mean
from src.streaks import watching_streaks
from src.temporal import annual_heatmap, monthly_timeline, weekday_pattern

logger = logging.getLogger(__name__)


def movie_summary(entry: WatchedEntry, include_watched: bool = False) -> Dict:
    summary = {
        "id": entry.id,
        "title": entry.title,
        "year": entry.release_year,
        "myRating": entry.my_rating,
    }
    if include_watched:
        summary["watchedDate"] = entry.watched_date.isoformat() if entry.watched_date else None
    return summary


def overview(entries: Iterable[WatchedEntry]) -> Dict:
    """Headline numbers for the stats page"""
    entries = list(entries)
    ratings = [entry.my_rating for entry in entries]
    total_runtime = sum(entry.runtime_minutes for entry in entries)

    top_rated = max(entries, key=lambda e: e.my_rating) if entries else None
    watched = dated(entries)
    most_recent = max(watched, key=lambda e: e.watched_date) if watched else None

    # Ties go to the most recent release year
    year_counts = Counter(e.release_year for e in entries if e.release_year is not None)
    most_watched_year = None
    if year_counts:
        most_watched_year = max(year_counts.items(), key=lambda item: (item[1], item[0]))[0]

    return {
        "totalMovies": len(entries),
        "averageRating": rounded_mean(ratings, 1),
        "totalRuntime": total_runtime,
        "totalRuntimeHours": int(round_half_up(total_runtime / 60, 0)),
        "favoriteCount": sum(1 for entry in entries if entry.is_favorite),
        "maxRating": max(ratings) if ratings else 0,
        "minRating": min(ratings) if ratings else 0,
        "topRatedMovie": movie_summary(top_rated) if top_rated else None,
        "mostRecentMovie": movie_summary(most_recent, include_watched=True) if most_recent else None,
        "mostWatchedYear": most_watched_year,
    }


def _top_n(top_n: Optional[int]) -> int:
    if top_n is None:
        return Config.DEFAULT_TOP_N
    return validate_limit(top_n, "top_n", maximum=Config.MAX_TOP_N)


def _threshold(threshold: Optional[float]) -> float:
    if threshold is None:
        return Config.TREND_THRESHOLD
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
        raise ValidationError("threshold", "must be a non-negative number")
    if not math.isfinite(threshold) or threshold < 0:
        raise ValidationError("threshold", "must be a non-negative number")
    return float(threshold)


def build_stats(
    raw_entries: Optional[Iterable[Any]],
    year: Optional[int] = None,
    top_n: Optional[int] = None,
    today: Optional[date] = None,
) -> Dict:
    """Every per-user aggregate in one payload"""
    today = today or date.today()
    year = validate_year(today.year if year is None else year)
    top_n = _top_n(top_n)

    batch = normalize_entries(raw_entries)
    entries: List[WatchedEntry] = batch.records
    logger.debug(f"Computing stats over {len(entries)} entries for {year}")

    return {
        "overview": overview(entries),
        "ratingDistribution": rating_histogram(entries),
        "byGenre": genre_rollup(entries),
        "byDecade": decade_rollup(entries),
        "byYear": year_rollup(entries),
        "timeline": monthly_timeline(entries),
        "heatmap": annual_heatmap(entries, year),
        "streaks": watching_streaks(entries, today=today),
        "credits": top_credits(entries, top_n),
        "topTags": top_tags(entries, Config.TOP_TAGS_LIMIT),
        "watchPattern": weekday_pattern(entries),
        "skipped": batch.skipped,
    }


def build_show_stats(
    raw_episodes: Optional[Iterable[Any]],
    show_id: Optional[int] = None,
    threshold: Optional[float] = None,
) -> Dict:
    """Show analytics for one show's episode ratings"""
    if show_id is not None and (isinstance(show_id, bool) or not isinstance(show_id, int)):
        raise ValidationError("show_id", "must be an integer")
    threshold = _threshold(threshold)

    batch = normalize_episodes(raw_episodes)
    episodes = batch.records
    skipped = batch.skipped

    if show_id is not None:
        matching = [episode for episode in episodes if episode.show_id == show_id]
        skipped += len(episodes) - len(matching)
        episodes = matching

    if not episodes:
        logger.info(f"No episode data for show {show_id}")

    result = analyze_show(episodes, threshold)
    result["showId"] = show_id if show_id is not None else (episodes[0].show_id if episodes else None)
    result["skipped"] = skipped
    return result
