from datetime import date, timedelta

import pytest

from staffdesk.records import (
    TABLE_HEADERS,
    Record,
    RecordBook,
    RecordFilter,
    record_details_html,
    row_color,
    sample_records,
    table_row,
)

TODAY = date(2024, 1, 15)


@pytest.fixture
def book():
    return RecordBook(sample_records(), TODAY)


def test_default_filter_spans_last_week(book):
    criteria = book.default_filter()
    assert criteria.date_to == TODAY
    assert criteria.date_from == TODAY - timedelta(days=7)
    assert criteria.status == "全部"
    assert criteria.keyword == ""


def test_default_filter_keeps_all_samples_in_order(book):
    result = book.filter()
    assert [r.user_id for r in result] == [r.user_id for r in sample_records()]


def test_status_filter(book):
    criteria = RecordFilter(date_from=TODAY - timedelta(days=7), date_to=TODAY, status="未回复")
    result = book.filter(criteria)
    assert [r.user_id for r in result] == ["U003"]
    assert all(r.status == "未回复" for r in result)


def test_keyword_matches_name(book):
    criteria = RecordFilter(date_from=TODAY - timedelta(days=7), date_to=TODAY, keyword="张三")
    assert [r.user_name for r in book.filter(criteria)] == ["张三"]


def test_keyword_matches_question_case_insensitively():
    rec = Record("X1", "Ann", "Where is PARKING?", "", "未回复", "2024-01-15 08:00", "misc")
    other = Record("X2", "Bob", "Opening hours", "", "未回复", "2024-01-15 08:00", "misc")
    book = RecordBook([rec, other], TODAY)
    criteria = RecordFilter(date_from=TODAY, date_to=TODAY, keyword="parking")
    assert book.filter(criteria) == [rec]


def test_date_window_excludes_old_records():
    book = RecordBook(sample_records(), TODAY + timedelta(days=30))
    assert book.filter() == []


def test_single_day_window(book):
    day = date(2024, 1, 14)
    result = book.filter(RecordFilter(date_from=day, date_to=day))
    assert all(r.date == day for r in result)
    assert [r.user_id for r in result] == ["U005"]


def test_unreadable_timestamp_never_matches():
    rec = Record("X1", "Ann", "q", "", "未回复", "garbage", "misc")
    assert rec.date is None
    book = RecordBook([rec], TODAY)
    assert book.filter(RecordFilter(date_from=date(2000, 1, 1), date_to=TODAY)) == []


def test_unknown_status_rejected():
    with pytest.raises(ValueError):
        RecordFilter(date_from=TODAY, date_to=TODAY, status="nonsense")


def test_details_without_response_shows_placeholder():
    unanswered = next(r for r in sample_records() if not r.response)
    html = record_details_html(unanswered)
    assert "暂无回复" in html
    assert unanswered.question in html


def test_details_with_response():
    answered = sample_records()[0]
    html = record_details_html(answered)
    assert answered.response in html
    assert "暂无回复" not in html
    assert answered.user_id in html


def test_row_colors():
    assert row_color("已回复") == (240, 248, 240)
    assert row_color("未回复") == (255, 245, 245)
    assert row_color("处理中") == (255, 248, 220)
    assert row_color("other") is None


def test_table_row_appends_ellipsis():
    rec = sample_records()[0]
    row = table_row(rec)
    assert len(row) == len(TABLE_HEADERS)
    assert row[2] == rec.question + "..."
    assert row[0] == rec.user_id and row[5] == rec.timestamp


def test_table_row_truncates_long_question():
    rec = Record("X", "n", "q" * 50, "", "未回复", "2024-01-15 08:00", "c")
    summary = table_row(rec)[2]
    assert summary.endswith("...")
    assert len(summary) == 33