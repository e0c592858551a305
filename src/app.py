import logging
from datetime import date
from typing import List, Optional

from flask import Flask, jsonify, request

from config.config import Config
from src.analytics import build_show_stats, build_stats, overview
from src.credits import top_credits
from src.distribution import decade_rollup, genre_rollup, rating_histogram, top_tags, year_rollup
from src.errors import ValidationError, validate_limit, validate_year
from src.normalizer import normalize_entries
from src.streaks import watching_streaks
from src.temporal import annual_heatmap, monthly_timeline

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.from_object(Config)
app.secret_key = Config.SECRET_KEY


@app.errorhandler(ValidationError)
def handle_validation_error(error):
    logger.info(f"Rejected request to {request.path}: {error}")
    return jsonify(error.to_dict()), 400


def get_snapshot(key: str) -> List:
    """Read the record list the caller posted under ``key``"""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("body", "must be a JSON object")
    records = payload.get(key, [])
    if not isinstance(records, list):
        raise ValidationError(key, "must be a list")
    return records


def get_int_arg(name: str, default: Optional[int] = None) -> Optional[int]:
    """Integer query parameter; present but malformed values are rejected"""
    value = request.args.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValidationError(name, "must be an integer")


def get_entries():
    return normalize_entries(get_snapshot("entries"))


# ==========================================
# STATS API
# ==========================================


@app.route("/api/v1/stats", methods=["POST"])
def api_stats():
    """All per-user aggregates in one response"""
    year = get_int_arg("year")
    top_n = get_int_arg("limit")
    return jsonify(build_stats(get_snapshot("entries"), year=year, top_n=top_n))


@app.route("/api/v1/stats/overview", methods=["POST"])
def api_stats_overview():
    batch = get_entries()
    return jsonify({**overview(batch.records), "skipped": batch.skipped})


@app.route("/api/v1/stats/by-rating", methods=["POST"])
def api_stats_by_rating():
    """Rating distribution"""
    batch = get_entries()
    return jsonify({"ratingDistribution": rating_histogram(batch.records), "skipped": batch.skipped})


@app.route("/api/v1/stats/by-genre", methods=["POST"])
def api_stats_by_genre():
    """Genre breakdown"""
    limit = validate_limit(get_int_arg("limit", Config.GENRE_LIMIT))
    batch = get_entries()
    return jsonify({"byGenre": genre_rollup(batch.records, limit), "skipped": batch.skipped})


@app.route("/api/v1/stats/by-decade", methods=["POST"])
def api_stats_by_decade():
    batch = get_entries()
    return jsonify({"byDecade": decade_rollup(batch.records), "skipped": batch.skipped})


@app.route("/api/v1/stats/by-year", methods=["POST"])
def api_stats_by_year():
    batch = get_entries()
    return jsonify({"byYear": year_rollup(batch.records), "skipped": batch.skipped})


@app.route("/api/v1/stats/timeline", methods=["POST"])
def api_stats_timeline():
    """Watching timeline (entries by month)"""
    limit = validate_limit(get_int_arg("limit", Config.TIMELINE_LIMIT))
    batch = get_entries()
    return jsonify({"timeline": monthly_timeline(batch.records, limit), "skipped": batch.skipped})


@app.route("/api/v1/stats/heatmap", methods=["POST"])
def api_stats_heatmap():
    """Daily activity for one calendar year"""
    year = validate_year(get_int_arg("year", date.today().year))
    batch = get_entries()
    return jsonify({**annual_heatmap(batch.records, year), "skipped": batch.skipped})


@app.route("/api/v1/stats/streaks", methods=["POST"])
def api_stats_streaks():
    batch = get_entries()
    return jsonify({**watching_streaks(batch.records), "skipped": batch.skipped})


@app.route("/api/v1/stats/credits", methods=["POST"])
def api_stats_credits():
    """Top directors and actors"""
    limit = validate_limit(get_int_arg("limit", Config.DEFAULT_TOP_N), maximum=Config.MAX_TOP_N)
    batch = get_entries()
    return jsonify({**top_credits(batch.records, limit), "skipped": batch.skipped})


@app.route("/api/v1/stats/tags", methods=["POST"])
def api_stats_tags():
    limit = validate_limit(get_int_arg("limit", Config.TOP_TAGS_LIMIT), maximum=Config.MAX_TOP_N)
    batch = get_entries()
    return jsonify({"topTags": top_tags(batch.records, limit), "skipped": batch.skipped})


@app.route("/api/v1/shows/<int:show_id>/analytics", methods=["POST"])
def api_show_analytics(show_id):
    """Episode and season analytics for a TV show"""
    return jsonify(build_show_stats(get_snapshot("episodes"), show_id=show_id))


# ==========================================
# SYSTEM
# ==========================================


@app.route("/api/v1/health", methods=["GET"])
def api_health():
    """Health check endpoint"""
    return jsonify({"status": "healthy"})


@app.route("/api/v1/docs", methods=["GET"])
def api_docs():
    """API documentation"""
    entries_body = "JSON object with an 'entries' list of watched movies"
    docs = {
        "version": "1.0",
        "endpoints": {
            "stats": {
                "POST /api/v1/stats": {
                    "description": "All viewing statistics in one response",
                    "body": entries_body,
                    "parameters": {
                        "year": "Heatmap year (default: current year)",
                        "limit": f"Top directors/actors (default: {Config.DEFAULT_TOP_N})",
                    },
                },
                "POST /api/v1/stats/overview": {"description": "Headline numbers"},
                "POST /api/v1/stats/by-rating": {"description": "Rating distribution"},
                "POST /api/v1/stats/by-genre": {
                    "description": "Genre breakdown",
                    "parameters": {"limit": f"Number of genres (default: {Config.GENRE_LIMIT})"},
                },
                "POST /api/v1/stats/by-decade": {"description": "Release decade breakdown"},
                "POST /api/v1/stats/by-year": {"description": "Release year breakdown"},
                "POST /api/v1/stats/timeline": {
                    "description": "Entries per month, most recent first",
                    "parameters": {"limit": f"Number of months (default: {Config.TIMELINE_LIMIT})"},
                },
                "POST /api/v1/stats/heatmap": {
                    "description": "Daily activity map",
                    "parameters": {"year": "Calendar year (default: current year)"},
                },
                "POST /api/v1/stats/streaks": {"description": "Weekly watching streaks"},
                "POST /api/v1/stats/credits": {
                    "description": "Top directors and actors",
                    "parameters": {"limit": f"Number of people (max: {Config.MAX_TOP_N})"},
                },
                "POST /api/v1/stats/tags": {"description": "Most used tags"},
            },
            "shows": {
                "POST /api/v1/shows/<id>/analytics": {
                    "description": "Season averages, best/worst episodes and trend",
                    "body": "JSON object with an 'episodes' list of rated episodes",
                }
            },
            "system": {
                "GET /api/v1/health": {"description": "Health check endpoint"},
                "GET /api/v1/docs": {"description": "API documentation"},
            },
        },
    }

    return jsonify(docs)


if __name__ == "__main__":
    app.run(debug=True)
