"""
Show analytics

Per-show episode statistics and a season-over-season quality trend, computed
from community episode ratings (0-10 scale).
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from src.models import RatedEpisode
from src.stats_utils import mean, round_half_up, rounded_mean

# Minimum gap between the later and earlier season means to call a trend
TREND_THRESHOLD = 0.3

IMPROVING = "improving"
DECLINING = "declining"
STABLE = "stable"


def empty_show_analytics() -> Dict:
    return {
        "totalEpisodes": 0,
        "averageRating": 0.0,
        "bestEpisode": None,
        "worstEpisode": None,
        "trend": STABLE,
        "seasonAverages": [],
    }


def episode_summary(episode: RatedEpisode) -> Dict:
    return {
        "season": episode.season_number,
        "episode": episode.episode_number,
        "name": episode.name,
        "rating": episode.vote_average,
    }


def season_averages(episodes: Iterable[RatedEpisode]) -> List[Dict]:
    """Average, count and range of episode ratings per season, ascending"""
    seasons = defaultdict(list)
    for episode in episodes:
        seasons[episode.season_number].append(episode.vote_average)

    return [
        {
            "seasonNumber": season,
            "averageRating": rounded_mean(votes, 2),
            "episodeCount": len(votes),
            "maxRating": max(votes),
            "minRating": min(votes),
        }
        for season, votes in sorted(seasons.items())
    ]


def classify_trend(season_means: List[float], threshold: float = TREND_THRESHOLD) -> str:
    """
    Compare the earlier half of the seasons with the later half.

    With an odd number of seasons the middle one belongs to the later half.
    Fewer than two seasons is always stable.
    """
    if len(season_means) < 2:
        return STABLE

    midpoint = len(season_means) // 2
    earlier = mean(season_means[:midpoint])
    later = mean(season_means[midpoint:])
    difference = round_half_up(later - earlier, 4)

    if difference > threshold:
        return IMPROVING
    if -difference > threshold:
        return DECLINING
    return STABLE


def analyze_show(episodes: Iterable[RatedEpisode], threshold: Optional[float] = None) -> Dict:
    """Episode and season statistics for a single show"""
    episodes = list(episodes)
    if not episodes:
        return empty_show_analytics()

    if threshold is None:
        threshold = TREND_THRESHOLD

    # Earliest (season, episode) wins ties for both best and worst
    in_order = sorted(episodes, key=lambda ep: ep.position)
    best = max(in_order, key=lambda ep: ep.vote_average)
    worst = min(in_order, key=lambda ep: ep.vote_average)

    seasons = defaultdict(list)
    for episode in in_order:
        seasons[episode.season_number].append(episode.vote_average)
    season_means = [mean(votes) for _, votes in sorted(seasons.items())]

    return {
        "totalEpisodes": len(episodes),
        "averageRating": rounded_mean((ep.vote_average for ep in episodes), 2),
        "bestEpisode": episode_summary(best),
        "worstEpisode": episode_summary(worst),
        "trend": classify_trend(season_means, threshold),
        "seasonAverages": season_averages(in_order),
    }
