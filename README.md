# staffdesk

Tools for the staff side of a customer service desk. The package uses only
the standard library.

- **Question statistics** (`staffdesk.stats_model`, `staffdesk.stats_store`):
  `QuestionStore` keeps asked questions in SQLite. `question_stats` ranks the
  most frequent questions in a time window. `compute_percentages` fills in
  each question's share of the total, and `summarize` works out the totals
  and the daily average. `export_csv` writes the ranking as CSV, and
  `generate_report` writes it as a plain-text report.
- **Consultation records** (`staffdesk.records`): `RecordBook` filters
  `Record`s by keyword, status and an inclusive date span. The filter is a
  `RecordFilter`; the default one covers the last seven days and any status.
  `record_details_html`, `table_row` and `row_color` give the display form of
  a record.
- **Manual takeover** (`staffdesk.manual_chat`): `ManualChat` holds a queue
  of visitors waiting for a person and the transcript of the selected
  visitor.
- **Knowledge base** (`staffdesk.knowledge`): a `KnowledgeNode` category
  tree, which `walk()` traverses depth first, and the list of visitors
  awaiting consultation.
- **Live chat sessions** (`staffdesk.chat_sessions`, `staffdesk.workspace`):
  `StaffChatManager` sorts sessions into waiting sessions and the active
  sessions of the logged-in staff member. It accepts, selects and closes
  sessions, sends replies, and takes in incoming and unread messages, all
  through a `ChatBackend` that you supply. `StaffWorkspace` passes the
  logged-in user on to the chat manager and lists the workspace tabs.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

The `staffdesk` command prints a ranking of the most frequent questions:

```
staffdesk --help
staffdesk --range today
staffdesk --range custom --from 2024-01-01 --to 2024-01-31 --export ranking.csv
staffdesk --report
```

Options:

- `--db PATH`: the database file. By default the command uses
  `$XDG_DATA_HOME/staffdesk/question_stats.db`, or
  `~/.local/share/staffdesk/question_stats.db` when that variable is unset.
- `--range {today,7d,month,3m,custom}`: the time window. The default is `7d`.
  `month` runs from the first day of the current month. `custom` needs both
  `--from` and `--to` (YYYY-MM-DD), and both days are included.
- `--limit N`: the most rows to show. The default is 100.
- `--export CSV`: also write the ranking to a UTF-8 CSV file with a
  byte-order mark.
- `--report`: print the summary report in place of the table.
- `--no-seed`: do not fill an empty database. Without this option, an empty
  database first gets 1000 generated sample questions from the last 30 days.

## Library use

```python
from datetime import datetime
from staffdesk.stats_model import TimeRange, time_window, summarize, compute_percentages
from staffdesk.stats_store import QuestionStore, generate_report

now = datetime.now()
with QuestionStore(":memory:") as store:
    store.record("user_1", "如何预约住院？", "挂号预约", now)
    start, end = time_window(TimeRange.LAST_7_DAYS, now)
    stats = compute_percentages(store.question_stats(start, end))
    summary = summarize(stats, start, end)
    print(generate_report(stats, summary, "近7天"))
```

Filtering consultation records:

```python
from staffdesk.records import RecordBook, RecordFilter, STATUS_REPLIED
from datetime import date

book = RecordBook(today=date(2024, 1, 16))
for record in book.filter(RecordFilter(date(2024, 1, 1), date(2024, 1, 31), status=STATUS_REPLIED)):
    print(record.user_name, record.question)
```

## What the package does not do

- It has no graphical screens. It holds the state and the text that such
  screens would show.
- It has no chat storage of its own. `StaffChatManager` works only with a
  `ChatBackend` object that you supply, and the package includes no
  implementation of one. It does no polling on timers either: you call
  `refresh_sessions()` and `check_for_new_messages()` yourself.
- The knowledge base is a fixed sample tree. It has no search, no editing and
  no stored entries.
- Statistics export only to CSV and plain text.