"""
Pytest configuration and fixtures for testing
"""

from datetime import date

import pytest

from src.app import app as flask_app
from src.models import RatedEpisode, WatchedEntry


@pytest.fixture(scope="function")
def app():
    """Create application for testing"""
    flask_app.config.update({"TESTING": True, "SECRET_KEY": "test-secret-key"})

    yield flask_app


@pytest.fixture(scope="function")
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def today():
    """Fixed 'now' (a Wednesday) so streak and recency figures are stable"""
    return date(2024, 6, 12)


@pytest.fixture
def make_entry():
    """Factory for canonical entries with sensible defaults"""
    counter = {"next_id": 1}

    def _make_entry(**overrides):
        fields = {
            "id": str(counter["next_id"]),
            "title": f"Test Movie {counter['next_id']}",
            "my_rating": 4.0,
            "watched_date": date(2024, 1, 1),
            "release_year": 2000,
            "genres": ("Drama",),
            "runtime_minutes": 120,
        }
        fields.update(overrides)
        counter["next_id"] += 1
        return WatchedEntry(**fields)

    return _make_entry


@pytest.fixture
def raw_entry():
    """A raw movie document as the CRUD layer stores it"""
    return {
        "_id": "65a1f0c2",
        "tmdbId": 550,
        "title": "Fight Club",
        "year": 1999,
        "runtime": 139,
        "tmdbGenres": [{"id": 18, "name": "Drama"}, {"id": 53, "name": "Thriller"}],
        "director": "David Fincher",
        "cast": ["Brad Pitt", "Edward Norton", "Helena Bonham Carter"],
        "myRating": 4.5,
        "watchedDate": "2024-03-10T20:15:00.000Z",
        "tags": ["rewatch", "cult"],
        "isFavorite": True,
    }


@pytest.fixture
def sample_entries(make_entry):
    """A small watch history spread over a few months"""
    return [
        make_entry(
            title="Fight Club",
            my_rating=4.5,
            watched_date=date(2024, 3, 10),
            release_year=1999,
            genres=("Drama", "Thriller"),
            runtime_minutes=139,
            directors=("David Fincher",),
            actors=("Brad Pitt", "Edward Norton"),
            is_favorite=True,
            tags=("cult",),
        ),
        make_entry(
            title="Se7en",
            my_rating=4.0,
            watched_date=date(2024, 3, 17),
            release_year=1995,
            genres=("Crime", "Thriller"),
            runtime_minutes=127,
            directors=("David Fincher",),
            actors=("Brad Pitt", "Morgan Freeman"),
            tags=("cult", "dark"),
        ),
        make_entry(
            title="Heat",
            my_rating=5.0,
            watched_date=date(2024, 5, 2),
            release_year=1995,
            genres=("Crime", "Drama"),
            runtime_minutes=170,
            directors=("Michael Mann",),
            actors=("Al Pacino", "Robert De Niro"),
        ),
        make_entry(
            title="Oppenheimer",
            my_rating=3.5,
            watched_date=None,
            release_year=2023,
            genres=("Drama", "History"),
            runtime_minutes=180,
            directors=("Christopher Nolan",),
            actors=("Cillian Murphy",),
        ),
    ]


@pytest.fixture
def make_episode():
    def _make_episode(season, episode, vote, show_id=1399, name=None):
        return RatedEpisode(
            show_id=show_id,
            season_number=season,
            episode_number=episode,
            name=name or f"S{season}E{episode}",
            vote_average=vote,
        )

    return _make_episode


@pytest.fixture
def sample_episodes(make_episode):
    """Two seasons of three episodes, the second clearly weaker"""
    return [
        make_episode(1, 1, 8.5, name="Winter Is Coming"),
        make_episode(1, 2, 9.0, name="The Kingsroad"),
        make_episode(1, 3, 9.5, name="Lord Snow"),
        make_episode(2, 1, 6.0, name="The North Remembers"),
        make_episode(2, 2, 6.5, name="The Night Lands"),
        make_episode(2, 3, 5.5, name="What Is Dead May Never Die"),
    ]
