"""Question statistics: time ranges, keyword extraction, percentages and summaries."""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable, Optional

MAX_DISPLAY_ROWS = 100
MIN_KEYWORD_LENGTH = 2
AUTO_REFRESH_INTERVAL_MS = 300_000

_COMMON_WORDS = frozenset({"如何", "怎么", "什么", "哪里", "可以", "需要", "多少", "时候"})
_WORD_SEPARATORS = re.compile(r"[\s\?？，。！!\.,;；:]")


class TimeRange(Enum):
    """Period over which questions are counted."""

    TODAY = 0
    LAST_7_DAYS = 1
    LAST_MONTH = 2
    LAST_3_MONTHS = 3
    CUSTOM = 4


@dataclass
class QuestionStats:
    """How often one question was asked, and when."""

    question: str
    count: int
    percentage: float = 0.0
    first_occurrence: Optional[datetime] = None
    last_occurrence: Optional[datetime] = None
    keywords: list[str] = field(default_factory=list)


@dataclass
class StatsSummary:
    """Aggregate figures over a list of question statistics."""

    total_questions: int = 0
    unique_questions: int = 0
    top_question_count: int = 0
    top_question: str = ""
    avg_questions_per_day: float = 0.0


def extract_keywords(question: str) -> list[str]:
    """Split a question on punctuation and whitespace, dropping short and common words."""
    return [
        word
        for word in _WORD_SEPARATORS.split(question)
        if word and len(word) >= MIN_KEYWORD_LENGTH and word not in _COMMON_WORDS
    ]


def format_percentage(percentage: float) -> str:
    """Format a percentage with one decimal place and a percent sign."""
    return f"{percentage:.1f}%"


def format_count(count: int) -> str:
    """Format a count, abbreviating thousands as ``1.2k``."""
    if count >= 1000:
        return f"{count / 1000.0:.1f}k"
    return str(count)


def _midnight(day: date) -> datetime:
    return datetime.combine(day, time())


def _add_months(moment: datetime, months: int) -> datetime:
    index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def time_window(
    time_range: TimeRange,
    now: datetime,
    custom_start: Optional[datetime] = None,
    custom_end: Optional[datetime] = None,
) -> tuple[datetime, datetime]:
    """Return the (start, end) datetimes that a time range covers at ``now``."""
    if time_range is TimeRange.TODAY:
        start = _midnight(now.date())
        return start, start + timedelta(days=1)
    if time_range is TimeRange.LAST_7_DAYS:
        return now - timedelta(days=7), now
    if time_range is TimeRange.LAST_MONTH:
        return _midnight(now.date().replace(day=1)), now
    if time_range is TimeRange.LAST_3_MONTHS:
        return _add_months(now, -3), now
    if time_range is TimeRange.CUSTOM:
        if custom_start is None or custom_end is None:
            raise ValueError("a custom time range needs both a start and an end")
        return custom_start, custom_end
    raise ValueError(f"unknown time range: {time_range!r}")


def custom_window(date_from: date, date_to: date) -> tuple[datetime, datetime]:
    """Return the window from midnight of ``date_from`` to the midnight after ``date_to``."""
    return _midnight(date_from), _midnight(date_to + timedelta(days=1))


def describe_time_range(
    time_range: TimeRange,
    custom_start: Optional[datetime] = None,
    custom_end: Optional[datetime] = None,
) -> str:
    """Return the display label of a time range."""
    labels = {
        TimeRange.TODAY: "今天",
        TimeRange.LAST_7_DAYS: "近7天",
        TimeRange.LAST_MONTH: "本月",
        TimeRange.LAST_3_MONTHS: "近3个月",
    }
    if time_range is TimeRange.CUSTOM:
        start = custom_start.strftime("%m-%d") if custom_start else ""
        end = custom_end.strftime("%m-%d") if custom_end else ""
        return f"{start} 至 {end}"
    return labels.get(time_range, "未知")


def compute_percentages(stats: Iterable[QuestionStats]) -> list[QuestionStats]:
    """Return copies of the statistics with each share of the total filled in."""
    items = list(stats)
    total = sum(item.count for item in items)
    return [
        replace(item, percentage=(item.count * 100.0 / total) if total > 0 else 0.0)
        for item in items
    ]


def summarize(stats: Iterable[QuestionStats], start: datetime, end: datetime) -> StatsSummary:
    """Summarise statistics ordered by descending count over the window start..end."""
    items = list(stats)
    if not items:
        return StatsSummary()
    total = sum(item.count for item in items)
    days = (end.date() - start.date()).days + 1
    return StatsSummary(
        total_questions=total,
        unique_questions=len(items),
        top_question_count=items[0].count,
        top_question=items[0].question,
        avg_questions_per_day=(total / days) if days > 0 else 0.0,
    )