#!/usr/bin/env python3
"""
Create the drop_data table on a local store so the meso fetcher can be
tried out without a live game server database.
"""
import argparse
import logging
import os
import sys
from pathlib import Path

# ── Ensure src/ is on import path ────────────────────────────────────────────
SCRIPT_DIR   = Path(__file__).parent.resolve()
PROJECT_ROOT = SCRIPT_DIR.parent
SRC_DIR      = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

import sqlalchemy as sa

from mesofetcher.store import metadata

# ── Paths ────────────────────────────────────────────────────────────────────
DB_DIR  = PROJECT_ROOT / "db"
DB_PATH = DB_DIR / "drops.db"

# ── Logging Setup ────────────────────────────────────────────────────────────
LOG = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)


def run_setup(db_url: str):
    engine = sa.create_engine(db_url)
    try:
        metadata.create_all(engine)
    finally:
        engine.dispose()
    LOG.info(f"drop_data schema ready on {db_url}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the drop_data schema")
    parser.add_argument("--db-url", default=os.environ.get("DB_URL"),
                        help="SQLAlchemy URL (default: $DB_URL or db/drops.db)")
    args = parser.parse_args()

    db_url = args.db_url
    if not db_url:
        DB_DIR.mkdir(parents=True, exist_ok=True)
        db_url = f"sqlite:///{DB_PATH}"
    run_setup(db_url)
