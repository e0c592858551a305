"""
Temporal aggregator

Monthly timeline, the per-year daily activity heatmap, and the weekend vs
weekday viewing pattern. Only entries with a watched date take part.
"""
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from src.errors import validate_year
from src.models import WatchedEntry
from src.normalizer import dated
from src.stats_utils import rounded_mean

WEEKEND_PATTERN = "More active on weekends"
WEEKDAY_PATTERN = "Steady viewer throughout the week"


def monthly_timeline(entries: Iterable[WatchedEntry], limit: Optional[int] = None) -> List[Dict]:
    """Entries per (year, month) of watch date, most recent month first"""
    months = defaultdict(list)
    for entry in dated(entries):
        months[(entry.watched_date.year, entry.watched_date.month)].append(entry.my_rating)

    timeline = [
        {"year": year, "month": month, "count": len(ratings), "avgRating": rounded_mean(ratings, 1)}
        for (year, month), ratings in sorted(months.items(), reverse=True)
    ]

    if limit is not None:
        timeline = timeline[:limit]
    return timeline


def days_of_year(year: int) -> List[date]:
    """Every calendar day of the year, Feb 29 included on leap years"""
    first_day = date(year, 1, 1)
    total_days = (date(year, 12, 31) - first_day).days + 1
    return [first_day + timedelta(days=offset) for offset in range(total_days)]


def annual_heatmap(entries: Iterable[WatchedEntry], year: int) -> Dict:
    """
    Daily activity for one calendar year.

    Returns ``{"year", "days", "maxCount"}`` where ``days`` maps ISO date
    strings to ``{"count", "avgRating"}``. Days without entries are left out
    of the map; a year with no data yields an empty map and ``maxCount`` 0.
    """
    validate_year(year)

    ratings_by_day = defaultdict(list)
    for entry in dated(entries):
        if entry.watched_date.year == year:
            ratings_by_day[entry.watched_date].append(entry.my_rating)

    days = {}
    max_count = 0
    if ratings_by_day:
        for day in days_of_year(year):
            ratings = ratings_by_day.get(day)
            if not ratings:
                continue
            days[day.isoformat()] = {"count": len(ratings), "avgRating": rounded_mean(ratings, 1)}
            max_count = max(max_count, len(ratings))

    return {"year": year, "days": days, "maxCount": max_count}


def weekday_pattern(entries: Iterable[WatchedEntry]) -> Dict:
    """Weekend vs weekday split of watch dates"""
    watched = dated(entries)
    # Saturday = 5, Sunday = 6
    weekend_count = sum(1 for entry in watched if entry.watched_date.weekday() >= 5)
    weekday_count = len(watched) - weekend_count

    pattern = WEEKEND_PATTERN if weekend_count > len(watched) / 2 else WEEKDAY_PATTERN
    return {"weekendCount": weekend_count, "weekdayCount": weekday_count, "pattern": pattern}
