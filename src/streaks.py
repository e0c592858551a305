"""
Streak detector

A streak is a run of consecutive ISO weeks (Monday start) with at least one
watched entry. The current streak stays alive through the week after the
last active one, so a user who watched something last week but nothing yet
this week keeps their streak until the week is over.
"""
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from src.models import WatchedEntry
from src.normalizer import dated
from src.stats_utils import round_half_up

ONE_WEEK = timedelta(days=7)


def week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())


def active_weeks(entries: Iterable[WatchedEntry]) -> List[date]:
    """Sorted, distinct Mondays of the weeks that have an entry"""
    return sorted({entry.week_start for entry in dated(entries)})


def week_runs(weeks: List[date]) -> List[int]:
    """Lengths of consecutive-week runs, in chronological order"""
    runs = []
    previous = None
    for week in weeks:
        if previous is not None and week - previous == ONE_WEEK:
            runs[-1] += 1
        else:
            runs.append(1)
        previous = week
    return runs


def months_spanned(first: date, last: date) -> int:
    """Calendar months from first to last, both inclusive"""
    return (last.year - first.year) * 12 + (last.month - first.month) + 1


def watching_streaks(entries: Iterable[WatchedEntry], today: Optional[date] = None) -> Dict:
    """Current and longest weekly streaks plus recency figures"""
    today = today or date.today()
    watched = dated(entries)

    if not watched:
        return {
            "currentStreak": 0,
            "longestStreak": 0,
            "avgMoviesPerMonth": 0.0,
            "daysSinceLastWatch": 0,
        }

    weeks = active_weeks(watched)
    runs = week_runs(weeks)

    # Only the latest run can be live, and only if it reaches last week
    previous_week = week_start(today) - ONE_WEEK
    current_streak = runs[-1] if weeks[-1] >= previous_week else 0

    dates = [entry.watched_date for entry in watched]
    first_watch, last_watch = min(dates), max(dates)

    return {
        "currentStreak": current_streak,
        "longestStreak": max(runs),
        "avgMoviesPerMonth": round_half_up(len(watched) / months_spanned(first_watch, last_watch), 1),
        "daysSinceLastWatch": max((today - last_watch).days, 0),
    }
