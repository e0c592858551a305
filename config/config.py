import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration loaded from environment variables"""

    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Show analytics: minimum season-average gap (0-10 scale) to call a trend
    TREND_THRESHOLD = float(os.getenv("TREND_THRESHOLD", "0.3"))

    # Rankings
    DEFAULT_TOP_N = int(os.getenv("DEFAULT_TOP_N", "10"))
    MAX_TOP_N = int(os.getenv("MAX_TOP_N", "100"))
    TOP_TAGS_LIMIT = int(os.getenv("TOP_TAGS_LIMIT", "20"))

    # HTTP defaults
    GENRE_LIMIT = int(os.getenv("GENRE_LIMIT", "15"))
    TIMELINE_LIMIT = int(os.getenv("TIMELINE_LIMIT", "24"))
