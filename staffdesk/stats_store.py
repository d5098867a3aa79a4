"""Persistent question log and the reports built from it."""

from __future__ import annotations

import os
import random
import sqlite3
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from staffdesk.stats_model import (
    MAX_DISPLAY_ROWS,
    QuestionStats,
    StatsSummary,
    extract_keywords,
)

MOCK_QUESTIONS = (
    "如何预约住院？", "医保卡如何使用？", "住院费用是多少？", "如何修改住院日期？",
    "检查部门在哪？", "公司的停车收费标准是什么？", "门诊开诊时间是几点？",
    "挂号需要带什么资料？", "可以使用支付宝支付吗？", "如何获取检查报告？",
    "药品领取在哪里？", "急诊就诊需要排队吗？", "住院病房在哪里？", "探视规定是什么？",
    "医保报销的流程是什么？", "如何申请出院证明？", "公司体检项目有哪些？",
    "化验结果如何解读？", "手术的具体费用包括哪些？", "康复科的治疗项目有哪些？",
    "儿童门诊在几楼？", "妇科的门诊时间是什么时候？", "如何挂眼科的专家号？",
    "皮肤科治疗哪些皮肤病？", "中医科的针灸治疗有哪些功效？",
    "骨科手术后的恢复需要多长时间？", "心血管检查项目包括哪些？", "神经控制部可以治疗头痛吗？",
)
MOCK_CATEGORIES = ("挂号预约", "就诊咨询", "医保问题", "部门导航", "其他问题")

MOCK_RECORD_COUNT = 1000
_FREQUENT_RECORDS = 300
_FREQUENT_QUESTIONS = 10
_MOCK_SPAN_DAYS = 30

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS question_records ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT,"
    "user_id TEXT,"
    "question TEXT,"
    "keywords TEXT,"
    "category TEXT,"
    "timestamp TEXT)"
)

_STATS_QUERY = (
    "SELECT question, COUNT(*) AS count, "
    "MIN(timestamp) AS first_time, MAX(timestamp) AS last_time "
    "FROM question_records "
    "WHERE timestamp BETWEEN ? AND ? "
    "GROUP BY question "
    "ORDER BY count DESC "
    "LIMIT ?"
)


def _iso(moment: datetime) -> str:
    return moment.isoformat(timespec="seconds")


def _parse(text: Optional[str]) -> Optional[datetime]:
    if not text:
        return None
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _fmt(moment: Optional[datetime], pattern: str) -> str:
    return moment.strftime(pattern) if moment else ""


def default_database_path() -> Path:
    """Return the per-user location of the question database."""
    base = os.environ.get("XDG_DATA_HOME")
    root = Path(base) if base else Path.home() / ".local" / "share"
    return root / "staffdesk" / "question_stats.db"


class QuestionStore:
    """SQLite log of visitor questions."""

    def __init__(self, path: Union[str, Path] = ":memory:") -> None:
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path))
        self._conn.execute(_SCHEMA)
        self._conn.commit()

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> "QuestionStore":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def record(self, user_id: str, question: str, category: str, timestamp: datetime) -> int:
        """Store one asked question and return its row id."""
        cursor = self._conn.execute(
            "INSERT INTO question_records (user_id, question, keywords, category, timestamp) "
            "VALUES (?, ?, ?, ?, ?)",
            (user_id, question, ",".join(extract_keywords(question)), category, _iso(timestamp)),
        )
        self._conn.commit()
        return cursor.lastrowid

    def count(self) -> int:
        """Return the number of stored questions."""
        (total,) = self._conn.execute("SELECT COUNT(*) FROM question_records").fetchone()
        return total

    def seed_mock_data(self, now: datetime, rng: Optional[random.Random] = None) -> int:
        """Fill an empty store with sample questions from the 30 days before ``now``.

        Returns the number of rows added; a store that already holds data is left alone.
        """
        if self.count() > 0:
            return 0
        rng = rng or random.Random()
        base = now - timedelta(days=_MOCK_SPAN_DAYS)
        rows = []
        for index in range(MOCK_RECORD_COUNT):
            pool = MOCK_QUESTIONS[:_FREQUENT_QUESTIONS] if index < _FREQUENT_RECORDS else MOCK_QUESTIONS
            question = rng.choice(pool)
            user_id = f"user_{rng.randrange(1, 200)}"
            category = rng.choice(MOCK_CATEGORIES)
            stamp = base + timedelta(seconds=rng.randrange(86400 * _MOCK_SPAN_DAYS))
            rows.append((user_id, question, ",".join(extract_keywords(question)), category, _iso(stamp)))
        self._conn.executemany(
            "INSERT INTO question_records (user_id, question, keywords, category, timestamp) "
            "VALUES (?, ?, ?, ?, ?)",
            rows,
        )
        self._conn.commit()
        return len(rows)

    def question_stats(
        self, start: datetime, end: datetime, limit: int = MAX_DISPLAY_ROWS
    ) -> list[QuestionStats]:
        """Return per-question counts within start..end, most frequent first."""
        rows = self._conn.execute(_STATS_QUERY, (_iso(start), _iso(end), limit)).fetchall()
        return [
            QuestionStats(
                question=question,
                count=count,
                first_occurrence=_parse(first),
                last_occurrence=_parse(last),
                keywords=extract_keywords(question),
            )
            for question, count, first, last in rows
        ]


def export_csv(stats: Iterable[QuestionStats], path: Union[str, Path]) -> None:
    """Write the ranking to a UTF-8 CSV file with a byte-order mark."""
    with open(path, "w", encoding="utf-8-sig") as out:
        out.write("排名,问题内容,出现次数,占比(%),首次时间,最后时间\n")
        for rank, item in enumerate(stats, start=1):
            out.write(
                f'{rank},"{item.question}",{item.count},{item.percentage:.2f},'
                f"{_fmt(item.first_occurrence, '%Y-%m-%d %H:%M')},"
                f"{_fmt(item.last_occurrence, '%Y-%m-%d %H:%M')}\n"
            )


def generate_report(stats: Sequence[QuestionStats], summary: StatsSummary, range_label: str) -> str:
    """Return a plain-text report with the summary and the ten most frequent questions."""
    report = (
        "高频问题统计报告\n"
        "===================\n\n"
        f"统计时间范围: {range_label}\n"
        f"总问题数: {summary.total_questions}\n"
        f"不重复问题数: {summary.unique_questions}\n"
        f"最高频问题: {summary.top_question} ({summary.top_question_count}次)\n"
        f"日均问题数: {summary.avg_questions_per_day:.1f}\n\n"
        "前10高频问题:\n"
    )
    lines = [
        f"{rank}. {item.question} ({item.count}次, {item.percentage:.1f}%)\n"
        for rank, item in enumerate(stats[:10], start=1)
    ]
    return report + "".join(lines)


def question_details(stats: QuestionStats) -> str:
    """Return the detailed description of one question's statistics."""
    return (
        "问题详情\n\n"
        f"内容: {stats.question}\n"
        f"出现次数: {stats.count}\n"
        f"占比: {stats.percentage:.2f}%\n"
        f"首次出现: {_fmt(stats.first_occurrence, '%Y-%m-%d %H:%M:%S')}\n"
        f"最后出现: {_fmt(stats.last_occurrence, '%Y-%m-%d %H:%M:%S')}\n"
        f"相关关键词: {', '.join(stats.keywords)}"
    )


def question_info_line(stats: QuestionStats) -> str:
    """Return a one-line status summary of one question's statistics."""
    return f"问题: {stats.question} | 频次: {stats.count} | 占比: {stats.percentage:.2f}%"