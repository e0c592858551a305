"""
Credit ranker: most watched directors and actors
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from src.errors import ValidationError, validate_limit
from src.models import WatchedEntry
from src.stats_utils import mean, round_half_up

ROLES = ("directors", "actors")


def rank_people(entries: Iterable[WatchedEntry], role: str, top_n: Optional[int] = None) -> List[Dict]:
    """
    Rank people credited in the given role.

    Each entry counts once per distinct person, even if the name is listed
    twice in its credits. Sorted by appearance count, then average rating
    (both descending), then name. The full ranking is built before it is
    truncated to ``top_n``.
    """
    if role not in ROLES:
        raise ValidationError("role", f"must be one of {', '.join(ROLES)}")
    top_n = validate_limit(top_n, "top_n")

    ratings_by_person = defaultdict(list)
    for entry in entries:
        for name in set(getattr(entry, role)):
            ratings_by_person[name].append(entry.my_rating)

    ranking = []
    for name, ratings in ratings_by_person.items():
        average = mean(ratings)
        ranking.append((len(ratings), average, name))
    ranking.sort(key=lambda row: (-row[0], -row[1], row[2]))

    if top_n is not None:
        ranking = ranking[:top_n]

    return [
        {"name": name, "count": count, "avgRating": round_half_up(average, 2)}
        for count, average, name in ranking
    ]


def top_credits(entries: Iterable[WatchedEntry], top_n: Optional[int] = None) -> Dict[str, List[Dict]]:
    entries = list(entries)
    return {role: rank_people(entries, role, top_n) for role in ROLES}
