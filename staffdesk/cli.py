"""Command line report of frequently asked questions."""

from __future__ import annotations

import argparse
import sys
from datetime import date, datetime
from typing import Optional, Sequence

from staffdesk.stats_model import (
    MAX_DISPLAY_ROWS,
    TimeRange,
    compute_percentages,
    custom_window,
    describe_time_range,
    format_count,
    format_percentage,
    summarize,
    time_window,
)
from staffdesk.stats_store import (
    QuestionStore,
    default_database_path,
    export_csv,
    generate_report,
)

_RANGES = {
    "today": TimeRange.TODAY,
    "7d": TimeRange.LAST_7_DAYS,
    "month": TimeRange.LAST_MONTH,
    "3m": TimeRange.LAST_3_MONTHS,
    "custom": TimeRange.CUSTOM,
}


def _parse_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date: {text!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="staffdesk", description="Frequent question statistics.")
    parser.add_argument("--db", help="path of the question database")
    parser.add_argument("--range", choices=sorted(_RANGES), default="7d", dest="time_range")
    parser.add_argument("--from", type=_parse_date, dest="date_from", help="first day (YYYY-MM-DD)")
    parser.add_argument("--to", type=_parse_date, dest="date_to", help="last day (YYYY-MM-DD)")
    parser.add_argument("--limit", type=int, default=MAX_DISPLAY_ROWS)
    parser.add_argument("--export", metavar="CSV", help="write the ranking to a CSV file")
    parser.add_argument("--report", action="store_true", help="print the summary report")
    parser.add_argument("--no-seed", action="store_true", help="do not fill an empty database")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print question statistics for the chosen time range."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    time_range = _RANGES[args.time_range]

    custom_start = custom_end = None
    if time_range is TimeRange.CUSTOM:
        if args.date_from is None or args.date_to is None:
            parser.error("--range custom needs both --from and --to")
        custom_start, custom_end = custom_window(args.date_from, args.date_to)

    now = datetime.now()
    start, end = time_window(time_range, now, custom_start, custom_end)
    label = describe_time_range(time_range, custom_start, custom_end)

    with QuestionStore(args.db or default_database_path()) as store:
        if not args.no_seed:
            store.seed_mock_data(now)
        stats = compute_percentages(store.question_stats(start, end, args.limit))

    summary = summarize(stats, start, end)

    if args.export:
        try:
            export_csv(stats, args.export)
        except OSError as exc:
            print(f"CSV导出失败: {exc}", file=sys.stderr)
            return 1
        print(f"CSV文件已保存至: {args.export}")

    if args.report:
        print(generate_report(stats, summary, label), end="")
        return 0

    print(f"显示 {len(stats)} 个高频问题 (时间范围: {label})")
    for rank, item in enumerate(stats, start=1):
        first = item.first_occurrence.strftime("%m-%d %H:%M") if item.first_occurrence else ""
        last = item.last_occurrence.strftime("%m-%d %H:%M") if item.last_occurrence else ""
        print(
            f"{rank}\t{item.question}\t{format_count(item.count)}\t"
            f"{format_percentage(item.percentage)}\t{first}\t{last}"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())