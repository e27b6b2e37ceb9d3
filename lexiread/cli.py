"""
Command-line access to the review schedule and session stats.

Usage:
    lexiread due --limit 20
    lexiread forecast --days 7
    lexiread stats --window 30
    lexiread reset ITEM_ID
    lexiread init-db [--reset]
"""

from __future__ import annotations

import argparse
from datetime import timedelta
from typing import Optional, Sequence

from loguru import logger

from lexiread import config
from lexiread.analytics import build_stats_dashboard, format_duration
from lexiread.clock import utc_day, utc_now
from lexiread.scheduler import ReviewScheduler
from lexiread.srs import FAMILIARITY_LABELS, SqlStore, get_engine, init_db, reset_db


def _open_store(args: argparse.Namespace) -> SqlStore:
    return SqlStore(get_engine(args.database_url))


def cmd_due(args: argparse.Namespace) -> int:
    store = _open_store(args)
    now = utc_now()
    due_ids = ReviewScheduler().select_due(store.list_records(), now, limit=args.limit)

    if not due_ids:
        print("Nothing due for review")
        return 0

    print(f"{len(due_ids)} item(s) due for review:")
    for record in store.list_records(due_ids):
        when = record.next_review_date.isoformat() if record.next_review_date else "new"
        print(f"  {record.item_id:<30} ef={record.easiness_factor:.2f}  due={when}")
    return 0


def cmd_forecast(args: argparse.Namespace) -> int:
    store = _open_store(args)
    now = utc_now()
    scheduler = ReviewScheduler()
    records = store.list_records()

    counts = scheduler.forecast(records, args.days, now)
    today = utc_day(now)
    print(f"Review forecast ({args.days} days)")
    print("-" * 40)
    for offset, count in enumerate(counts):
        print(f"  {today + timedelta(days=offset)}  {count:>5}")

    overdue = scheduler.overdue_breakdown(records, now)
    print()
    print(f"Overdue: {overdue.total}")
    print(f"  today {overdue.today}, yesterday {overdue.yesterday}, "
          f"this week {overdue.within_week}, older {overdue.older}")

    print()
    print("Familiarity")
    print("-" * 40)
    for level, count in scheduler.familiarity_breakdown(records).items():
        label = FAMILIARITY_LABELS.get(level, "New")
        print(f"  {label:<10} {count:>5}")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    store = _open_store(args)
    window = args.window if args.window is not None else config.get_stats_window_days()
    dashboard = build_stats_dashboard(store.list_sessions(), utc_now(), window)

    print(f"Study stats (last {dashboard.window_days} days)")
    print("=" * 40)
    print(f"Current streak:  {dashboard.streaks.current} day(s)")
    print(f"Longest streak:  {dashboard.streaks.longest} day(s)")
    print(f"Last studied:    {dashboard.streaks.last_study_date or 'never'}")
    print(
        f"Accuracy:        {dashboard.accuracy.overall_percent:.1f}% "
        f"({dashboard.accuracy.total_correct}/{dashboard.accuracy.total_answers})"
    )
    print(
        f"Study time:      {format_duration(dashboard.study_time.total_seconds)} "
        f"over {dashboard.study_time.sessions_count} session(s)"
    )
    print("Grades:")
    for grade, count in dashboard.quality.counts.items():
        print(f"  {grade}: {count}")
    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    store = _open_store(args)
    store.reset_record(args.item_id)
    print(f"✓ Reset familiarity for {args.item_id}")
    return 0


def cmd_init_db(args: argparse.Namespace) -> int:
    engine = get_engine(args.database_url)

    if not args.reset:
        init_db(engine)
        print("✓ Database ready")
        return 0

    if not args.yes:
        print("WARNING: this deletes all review history and session logs.")
        response = input("Are you sure you want to reset? (type 'yes' to confirm): ")
        if response.lower() != "yes":
            print("Cancelled. No changes made.")
            return 1

    reset_db(engine)
    print("✓ Database reset complete")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lexiread", description="LexiRead spaced repetition tools")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL (defaults to DATABASE_URL)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level (defaults to LOG_LEVEL)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    due = subparsers.add_parser("due", help="List items due for review now")
    due.add_argument("--limit", type=int, default=None, help="Maximum number of items")
    due.set_defaults(func=cmd_due)

    forecast = subparsers.add_parser("forecast", help="Reviews due per day")
    forecast.add_argument("--days", type=int, default=7, help="Forecast horizon in days")
    forecast.set_defaults(func=cmd_forecast)

    stats = subparsers.add_parser("stats", help="Streaks, accuracy and study time")
    stats.add_argument("--window", type=int, default=None, help="Trailing window in days")
    stats.set_defaults(func=cmd_stats)

    reset = subparsers.add_parser("reset", help="Reset one item's familiarity")
    reset.add_argument("item_id")
    reset.set_defaults(func=cmd_reset)

    init = subparsers.add_parser("init-db", help="Create the SRS tables")
    init.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    init.add_argument("--yes", action="store_true", help="Skip the reset confirmation")
    init.set_defaults(func=cmd_init_db)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.configure_logging(args.log_level)
    logger.debug("Running command {}", args.command)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
