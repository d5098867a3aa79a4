"""Consultation records: sample data, filtering and display helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

ALL_STATUSES = "全部"
STATUS_REPLIED = "已回复"
STATUS_UNANSWERED = "未回复"
STATUS_IN_PROGRESS = "处理中"
STATUS_CHOICES = (ALL_STATUSES, STATUS_REPLIED, STATUS_UNANSWERED, STATUS_IN_PROGRESS)

TABLE_HEADERS = ("用户ID", "用户名", "问题摘要", "状态", "分类", "时间")
DEFAULT_LOOKBACK_DAYS = 7
_SUMMARY_LENGTH = 30

_ROW_COLORS = {
    STATUS_REPLIED: (240, 248, 240),
    STATUS_UNANSWERED: (255, 245, 245),
    STATUS_IN_PROGRESS: (255, 248, 220),
}


@dataclass(frozen=True)
class Record:
    """One visitor question and the reply it received."""

    user_id: str
    user_name: str
    question: str
    response: str
    status: str
    timestamp: str
    category: str

    @property
    def date(self) -> Optional[date]:
        """The day part of the timestamp, or None if it cannot be read."""
        day = self.timestamp.split(" ")[0]
        try:
            return date.fromisoformat(day)
        except ValueError:
            return None


@dataclass(frozen=True)
class RecordFilter:
    """Criteria that select records: keyword, status and an inclusive date span."""

    date_from: date
    date_to: date
    keyword: str = ""
    status: str = ALL_STATUSES

    def __post_init__(self) -> None:
        if self.status not in STATUS_CHOICES:
            raise ValueError(f"unknown status: {self.status!r}")

    def matches(self, record: Record) -> bool:
        """Return whether a record satisfies every criterion."""
        keyword = self.keyword.lower()
        if keyword and keyword not in record.user_name.lower() and keyword not in record.question.lower():
            return False
        if self.status != ALL_STATUSES and record.status != self.status:
            return False
        day = record.date
        return day is not None and self.date_from <= day <= self.date_to


class RecordBook:
    """A collection of consultation records that can be searched."""

    def __init__(self, records: Optional[Iterable[Record]] = None, today: Optional[date] = None) -> None:
        self.records = tuple(sample_records() if records is None else records)
        self.today = today or date.today()

    def default_filter(self) -> RecordFilter:
        """Return the criteria the search form starts with: the last week, any status."""
        return RecordFilter(
            date_from=self.today - timedelta(days=DEFAULT_LOOKBACK_DAYS),
            date_to=self.today,
        )

    def filter(self, criteria: Optional[RecordFilter] = None) -> list[Record]:
        """Return the records matching the criteria, in their stored order."""
        criteria = criteria or self.default_filter()
        return [record for record in self.records if criteria.matches(record)]


def sample_records() -> list[Record]:
    """Return the built-in demonstration records."""
    return [
        Record("U001", "张三", "如何预约挂号？", "您可以通过官方微信...", STATUS_REPLIED, "2024-01-15 09:30", "挂号预约"),
        Record("U002", "李四", "公司在哪里？", "我院地址位于...", STATUS_REPLIED, "2024-01-15 10:15", "公司信息"),
        Record("U003", "王五", "检查结果什么时候出来？", "", STATUS_UNANSWERED, "2024-01-15 11:00", "检查结果"),
        Record("U004", "赵六", "医保怎么报销？", "正在处理中...", STATUS_IN_PROGRESS, "2024-01-15 14:20", "医保报销"),
        Record("U005", "孙七", "停车场收费标准？", "停车场收费标准为...", STATUS_REPLIED, "2024-01-14 16:45", "其他服务"),
    ]


def record_details_html(record: Record) -> str:
    """Return the HTML detail view of one record."""
    response = record.response or "暂无回复"
    return f"""
<h3>📋 咨询详情</h3>
<hr>
<p><b>用户ID:</b> {record.user_id}</p>
<p><b>用户名:</b> {record.user_name}</p>
<p><b>分类:</b> {record.category}</p>
<p><b>状态:</b> {record.status}</p>
<p><b>时间:</b> {record.timestamp}</p>
<br>
<h4>💬 用户问题:</h4>
<p style="background-color: #F8F9FA; padding: 10px; border-left: 4px solid #007AFF;">{record.question}</p>
<br>
<h4>🤖 系统回复:</h4>
<p style="background-color: #F0F8F0; padding: 10px; border-left: 4px solid #34C759;">{response}</p>
        """


def row_color(status: str) -> Optional[tuple[int, int, int]]:
    """Return the RGB background of a table row for a status, or None for no colour."""
    return _ROW_COLORS.get(status)


def table_row(record: Record) -> tuple[str, str, str, str, str, str]:
    """Return the table cells shown for a record."""
    return (
        record.user_id,
        record.user_name,
        record.question[:_SUMMARY_LENGTH] + "...",
        record.status,
        record.category,
        record.timestamp,
    )