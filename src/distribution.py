"""
Distribution aggregator: rating histogram and genre / decade / year rollups
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from src.models import MAX_RATING, RATING_STEP, WatchedEntry
from src.stats_utils import rounded_mean

# 0.5, 1.0, ..., 5.0
RATING_BUCKETS = [RATING_STEP * step for step in range(1, int(MAX_RATING / RATING_STEP) + 1)]


def rating_key(rating: float) -> str:
    return f"{rating:.1f}"


def rating_histogram(entries: Iterable[WatchedEntry]) -> Dict[str, int]:
    """
    Count entries per half-star rating, every bucket from 0.5 to 5.0 present.
    A "0.0" bucket is added only when some entry is rated 0.
    """
    histogram = {rating_key(bucket): 0 for bucket in RATING_BUCKETS}
    zero_rated = 0
    for entry in entries:
        key = rating_key(entry.my_rating)
        if key in histogram:
            histogram[key] += 1
        else:
            zero_rated += 1

    if zero_rated:
        histogram = {rating_key(0.0): zero_rated, **histogram}
    return histogram


def genre_rollup(entries: Iterable[WatchedEntry], limit: Optional[int] = None) -> List[Dict]:
    """
    Group entries by genre. An entry with several genres counts once in each.
    Sorted by count (descending), then genre name.
    """
    ratings_by_genre = defaultdict(list)
    for entry in entries:
        for genre in entry.genres:
            ratings_by_genre[genre].append(entry.my_rating)

    rollup = [
        {"genre": genre, "count": len(ratings), "avgRating": rounded_mean(ratings, 1)}
        for genre, ratings in ratings_by_genre.items()
    ]
    rollup.sort(key=lambda row: (-row["count"], row["genre"]))

    if limit is not None:
        rollup = rollup[:limit]
    return rollup


def decade_rollup(entries: Iterable[WatchedEntry]) -> List[Dict]:
    """Group entries by release decade, oldest decade first"""
    decades = defaultdict(list)
    for entry in entries:
        if entry.decade is not None:
            decades[entry.decade].append(entry)

    return [
        {
            "decade": f"{decade}s",
            "count": len(group),
            "avgRating": rounded_mean((e.my_rating for e in group), 1),
            "totalRuntime": sum(e.runtime_minutes for e in group),
        }
        for decade, group in sorted(decades.items())
    ]


def year_rollup(entries: Iterable[WatchedEntry]) -> List[Dict]:
    """Group entries by release year, most recent year first"""
    years = defaultdict(list)
    for entry in entries:
        if entry.release_year is not None:
            years[entry.release_year].append(entry)

    return [
        {
            "year": year,
            "count": len(group),
            "avgRating": rounded_mean((e.my_rating for e in group), 1),
            "totalRuntime": sum(e.runtime_minutes for e in group),
        }
        for year, group in sorted(years.items(), reverse=True)
    ]


def top_tags(entries: Iterable[WatchedEntry], limit: Optional[int] = 20) -> List[Dict]:
    """Most used personal tags"""
    counts = defaultdict(int)
    for entry in entries:
        for tag in entry.tags:
            counts[tag] += 1

    tags = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    if limit is not None:
        tags = tags[:limit]
    return [{"tag": tag, "count": count} for tag, count in tags]
