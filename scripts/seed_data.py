"""
CLI helper to seed countries and sample grants into the configured database.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from grantdesk.config import get_settings, normalize_database_url
from grantdesk.db import PostgresDbClient
from grantdesk.seed import seed_reference_data


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed grant portal reference data")
    parser.add_argument(
        "-d",
        "--database-url",
        type=str,
        default=None,
        help="Override DATABASE_URL",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    database_url = (
        normalize_database_url(args.database_url) or get_settings().database_url
    )
    if not database_url:
        print("DATABASE_URL is not set; nothing to seed.", file=sys.stderr)
        return 1
    inserted = seed_reference_data(PostgresDbClient(database_url))
    print(
        f"Inserted {inserted['countries']} countries and {inserted['grants']} grants"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
