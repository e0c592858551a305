"""
Viewing Stats Export Script

Computes the viewing statistics payload from a JSON export of a user's
watch history, without going through the HTTP API.

Usage:
    python scripts/compute_stats.py export.json [--year 2024] [--top 10]
    python scripts/compute_stats.py export.json --show-id 1399 --output show.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config import Config
from src.analytics import build_show_stats, build_stats
from src.errors import ValidationError

# Setup logging
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)


class StatsExporter:
    """Loads an export file and computes payloads from it"""

    def __init__(self, path: Path):
        self.path = path
        self.entries: List = []
        self.episodes: List = []
        self.stats = {"entries_loaded": 0, "episodes_loaded": 0, "records_skipped": 0}

    def load(self) -> None:
        """Read entries (and optionally episodes) from the export"""
        logger.info(f"Loading export from {self.path}...")
        with open(self.path, encoding="utf-8") as fh:
            data = json.load(fh)

        # A bare list of entries, the app's movie export ({"movies": [...]}),
        # or an object with named lists
        if isinstance(data, list):
            self.entries = data
        elif isinstance(data, dict):
            if not any(key in data for key in ("entries", "movies", "episodes")):
                raise ValueError("export has no 'entries', 'movies' or 'episodes' list")
            self.entries = data.get("entries", data.get("movies", []))
            self.episodes = data.get("episodes", [])
        else:
            raise ValueError(f"Unexpected export type: {type(data).__name__}")

        if not isinstance(self.entries, list) or not isinstance(self.episodes, list):
            raise ValueError("'entries' and 'episodes' must be lists")

        self.stats["entries_loaded"] = len(self.entries)
        self.stats["episodes_loaded"] = len(self.episodes)

    def compute(self, year: Optional[int] = None, top_n: Optional[int] = None) -> Dict:
        payload = build_stats(self.entries, year=year, top_n=top_n)
        self.stats["records_skipped"] += payload["skipped"]
        return payload

    def compute_show(self, show_id: int) -> Dict:
        payload = build_show_stats(self.episodes, show_id=show_id)
        self.stats["records_skipped"] += payload["skipped"]
        return payload


def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(description="Compute viewing statistics from a JSON export")
    parser.add_argument("export", type=Path, help="JSON file with watched entries")
    parser.add_argument("--year", type=int, help="Heatmap year (default: current year)")
    parser.add_argument(
        "--top",
        type=int,
        default=Config.DEFAULT_TOP_N,
        help=f"Number of directors/actors to rank (default: {Config.DEFAULT_TOP_N})",
    )
    parser.add_argument(
        "--show-id", type=int, help="Compute show analytics for this show instead"
    )
    parser.add_argument("--output", type=Path, help="Write JSON here instead of stdout")

    args = parser.parse_args(argv)

    exporter = StatsExporter(args.export)

    try:
        exporter.load()

        if args.show_id is not None:
            payload = exporter.compute_show(args.show_id)
        else:
            payload = exporter.compute(year=args.year, top_n=args.top)

        output = json.dumps(payload, indent=2)
        if args.output:
            args.output.write_text(output + "\n", encoding="utf-8")
            logger.info(f"Wrote stats to {args.output}")
        else:
            print(output)

        logger.info("=" * 60)
        logger.info("EXPORT STATISTICS:")
        logger.info(f"  Entries loaded:  {exporter.stats['entries_loaded']}")
        logger.info(f"  Episodes loaded: {exporter.stats['episodes_loaded']}")
        logger.info(f"  Records skipped: {exporter.stats['records_skipped']}")
        logger.info("=" * 60)

    except ValidationError as e:
        logger.error(f"Invalid parameter: {e}")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read export {args.export}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
