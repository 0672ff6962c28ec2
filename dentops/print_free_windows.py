"""Print a provider's free appointment windows for one day.

Usage:
    python -m dentops.print_free_windows --provider-id 3 --date 2026-10-19
"""
import argparse
import sys
from datetime import date, datetime

from sqlalchemy.exc import SQLAlchemyError

from dentops import repository
from dentops.core import config
from dentops.core.free_windows import InvalidArgument, compute_free_windows
from dentops.database import SessionLocal


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--provider-id", type=int, required=True)
    parser.add_argument("--date", type=date.fromisoformat, required=True)
    parser.add_argument("--duration-minutes", type=int, default=config.DEFAULT_DURATION_MINUTES)
    parser.add_argument("--slot-interval-minutes", type=int, default=config.DEFAULT_SLOT_INTERVAL_MINUTES)
    parser.add_argument("--max-results", type=int, default=config.DEFAULT_MAX_RESULTS)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    db = SessionLocal()
    try:
        rules = repository.list_rules_for_date(db, args.provider_id, args.date)
        booked = repository.list_booked_intervals(db, args.provider_id, args.date)
    except SQLAlchemyError as exc:
        print(f"Database unavailable: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()

    try:
        windows = compute_free_windows(
            args.date,
            rules,
            booked,
            args.duration_minutes,
            slot_granularity_minutes=args.slot_interval_minutes,
            max_results=args.max_results,
            now=datetime.now(),
        )
    except InvalidArgument as exc:
        print(f"Invalid argument: {exc}", file=sys.stderr)
        sys.exit(1)

    for window in windows:
        print(f"{window.start_time:%H:%M}-{window.end_time:%H:%M}")


if __name__ == "__main__":
    main()
