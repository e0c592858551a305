"""
Tests for the entry normalizer
"""
from datetime import date, datetime

from src.models import RatedEpisode, WatchedEntry
from src.normalizer import build_entry, normalize_entries, normalize_episodes


class TestNormalizeEntries:
    """Tests for movie document normalization"""

    def test_crud_document(self, raw_entry):
        """Test a stored movie document maps onto every canonical field"""
        batch = normalize_entries([raw_entry])

        assert batch.skipped == 0
        entry = batch.records[0]
        assert entry.id == "65a1f0c2"
        assert entry.title == "Fight Club"
        assert entry.my_rating == 4.5
        assert entry.watched_date == date(2024, 3, 10)
        assert entry.release_year == 1999
        assert entry.genres == ("Drama", "Thriller")
        assert entry.runtime_minutes == 139
        assert entry.directors == ("David Fincher",)
        assert entry.actors == ("Brad Pitt", "Edward Norton", "Helena Bonham Carter")
        assert entry.tags == ("rewatch", "cult")
        assert entry.is_favorite is True

    def test_snake_case_document(self):
        raw = {
            "id": 7,
            "title": "Heat",
            "my_rating": 5,
            "watched_date": date(2024, 5, 2),
            "release_date": "1995-12-15",
            "genres": ["Crime", "Drama", "Crime", " "],
            "directors": ["Michael Mann"],
            "actors": [{"name": "Al Pacino"}, {"name": "Robert De Niro"}],
            "runtime_minutes": 170,
        }
        entry = build_entry(raw)

        assert entry.id == "7"
        assert entry.my_rating == 5.0
        assert entry.release_year == 1995
        assert entry.genres == ("Crime", "Drama")
        assert entry.actors == ("Al Pacino", "Robert De Niro")

    def test_datetime_watched_date(self, raw_entry):
        raw_entry["watchedDate"] = datetime(2024, 3, 10, 23, 59)
        assert build_entry(raw_entry).watched_date == date(2024, 3, 10)

    def test_missing_date_is_kept_undated(self, raw_entry):
        """Test an entry without a watched date still counts"""
        del raw_entry["watchedDate"]
        batch = normalize_entries([raw_entry])

        assert batch.skipped == 0
        assert batch.records[0].watched_date is None

    def test_unparseable_date_is_skipped(self, raw_entry):
        raw_entry["watchedDate"] = "last tuesday"
        batch = normalize_entries([raw_entry])

        assert batch.records == []
        assert batch.skipped == 1

    def test_invalid_ratings_are_skipped(self, raw_entry):
        """Test out-of-range, off-step and missing ratings are counted, not raised"""
        bad_ratings = [5.5, -1, 3.3, None, "4", True]
        raws = [dict(raw_entry, myRating=rating) for rating in bad_ratings]
        raws.append(raw_entry)

        batch = normalize_entries(raws)

        assert len(batch.records) == 1
        assert batch.skipped == len(bad_ratings)

    def test_zero_rating_is_valid(self, raw_entry):
        raw_entry["myRating"] = 0
        assert normalize_entries([raw_entry]).records[0].my_rating == 0.0

    def test_exported_document(self):
        """Test a row from the app's own export file"""
        raw = {
            "title": "Fight Club",
            "year": 1999,
            "myRating": 4.5,
            "watchedDate": "2024-03-10",
            "tags": "rewatch, cult",
            "isFavorite": "No",
            "genres": "Drama, Thriller",
            "runtime": 139,
            "director": "David Fincher",
        }
        entry = build_entry(raw)

        assert entry.genres == ("Drama", "Thriller")
        assert entry.tags == ("rewatch", "cult")
        assert entry.directors == ("David Fincher",)
        assert entry.is_favorite is False
        assert build_entry(dict(raw, isFavorite="Yes")).is_favorite is True

    def test_exported_blank_fields(self):
        raw = {"title": "Heat", "myRating": 5, "watchedDate": "", "tags": "", "genres": ""}
        entry = build_entry(raw)

        assert entry.watched_date is None
        assert entry.tags == ()
        assert entry.genres == ()

    def test_non_mapping_records_are_skipped(self, raw_entry):
        batch = normalize_entries([None, "Fight Club", 42, raw_entry])

        assert len(batch.records) == 1
        assert batch.skipped == 3

    def test_bad_runtime_defaults_to_zero(self, raw_entry):
        for runtime in (None, -5, "long"):
            raw_entry["runtime"] = runtime
            assert build_entry(raw_entry).runtime_minutes == 0

    def test_unknown_year(self, raw_entry):
        raw_entry["year"] = "unknown"
        assert build_entry(raw_entry).release_year is None

    def test_canonical_entries_pass_through(self, make_entry):
        entry = make_entry()
        batch = normalize_entries([entry])

        assert batch.records == [entry]
        assert isinstance(batch.records[0], WatchedEntry)

    def test_empty_and_none_input(self):
        assert normalize_entries([]).records == []
        assert normalize_entries(None).skipped == 0


class TestNormalizeEpisodes:
    """Tests for episode normalization"""

    def test_crud_and_tmdb_shapes(self):
        raws = [
            {
                "tmdbShowId": 1399,
                "seasonNumber": 1,
                "episodeNumber": 1,
                "name": "Winter Is Coming",
                "voteAverage": 8.1,
            },
            {
                "show_id": 1399,
                "season_number": 1,
                "episode_number": 2,
                "name": "The Kingsroad",
                "vote_average": 7.9,
            },
        ]
        batch = normalize_episodes(raws)

        assert batch.skipped == 0
        assert batch.records[0] == RatedEpisode(1399, 1, 1, "Winter Is Coming", 8.1)
        assert batch.records[1].position == (1, 2)

    def test_invalid_episodes_are_skipped(self):
        raws = [
            {"showId": 1, "seasonNumber": 1, "episodeNumber": 1, "voteAverage": 11},
            {"showId": 1, "seasonNumber": 1, "voteAverage": 7},
            {"showId": 1, "seasonNumber": "one", "episodeNumber": 1, "voteAverage": 7},
            None,
        ]
        batch = normalize_episodes(raws)

        assert batch.records == []
        assert batch.skipped == 4

    def test_duplicate_episode_keeps_first(self):
        raws = [
            {"showId": 1, "seasonNumber": 1, "episodeNumber": 1, "name": "first", "voteAverage": 7},
            {"showId": 1, "seasonNumber": 1, "episodeNumber": 1, "name": "again", "voteAverage": 2},
        ]
        batch = normalize_episodes(raws)

        assert [ep.name for ep in batch.records] == ["first"]
        assert batch.skipped == 1
