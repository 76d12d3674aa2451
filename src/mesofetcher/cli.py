#!/usr/bin/env python3
# src/mesofetcher/cli.py
import argparse
import logging
import os
import sys
from pathlib import Path

from .errors import MesoFetcherError
from .fetcher import run
from .schemas import FetcherConfig, RunOutcome

# ── Paths ────────────────────────────────────────────────────────────────────
LOG_DIR  = Path("logs") / "meso_fetcher"
LOG_FILE = LOG_DIR / "meso_fetcher.log"

logger = logging.getLogger(__name__)


def setup_logging(log_file: Path = LOG_FILE):
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(log_file),
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Propose meso drop_data rows for mobs that have items but no mesos"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)
    run_p = sub.add_parser("run", help="Audit drop_data and write the SQL proposal")
    run_p.add_argument("--catalog", default=None,
                       help="Monster stat catalog (JSON path or http(s) URL)")
    run_p.add_argument("--db-url", default=os.environ.get("DB_URL"),
                       help="SQLAlchemy URL of the drop store (default: $DB_URL)")
    run_p.add_argument("--output", type=Path, default=None,
                       help="Destination of the generated SQL file")
    run_p.add_argument("--min-items", type=int, default=None,
                       help="Minimum drop rows a mob needs to be considered")
    run_p.add_argument("--permit-excluded-bosses", action="store_true",
                       help="Do not emit the DELETE for the excluded boss zone")
    args = parser.parse_args(argv)

    if not args.db_url:
        parser.error("--db-url is required when DB_URL is not set")
    return args


def build_config(args) -> FetcherConfig:
    overrides = {
        "db_url": args.db_url,
        "catalog_source": args.catalog,
        "output_file": args.output,
        "min_items": args.min_items,
    }
    if args.permit_excluded_bosses:
        overrides["permit_mesos_on_excluded_bosses"] = True
    return FetcherConfig(**{k: v for k, v in overrides.items() if v is not None})


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()
    config = build_config(args)

    print("▶ Fetching missing meso ranges…")
    try:
        result = run(config)
    except MesoFetcherError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return 1

    if result.outcome is RunOutcome.UP_TO_DATE:
        print("✔️  The DB is already up-to-date, no file generated.")
    else:
        print(f"✔️  Wrote {len(result.candidates)} meso rows to {result.output_file}")
    print(f"Elapsed time: {result.elapsed_ms} ms ({result.elapsed_ms // 1000} s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
