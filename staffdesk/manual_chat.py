"""Manual takeover of visitor conversations by a staff member."""

from __future__ import annotations

from typing import Iterable, Optional

WAITING_MARKER = "🔴"
TRANSFER_NOTICE = "已将用户转回AI处理"


def default_waiting_users() -> list[str]:
    """Return the built-in list of visitors waiting for a person."""
    return ["张三 - 预约问题", "李四 - 医保咨询", "王五 - 检查结果"]


class ManualChat:
    """A queue of waiting visitors and the transcript of the selected conversation."""

    def __init__(self, users: Optional[Iterable[str]] = None) -> None:
        self.items = [f"{WAITING_MARKER} {user}" for user in (default_waiting_users() if users is None else users)]
        self.selected: Optional[str] = None
        self.transcript: list[str] = []

    def select_user(self, index: int) -> str:
        """Start serving the visitor at ``index`` and return the transcript header."""
        if not 0 <= index < len(self.items):
            raise IndexError(f"no waiting user at index {index}")
        name = self.items[index][len(WAITING_MARKER):]
        self.selected = name
        header = f"<h3>正在为 {name} 提供人工服务</h3><hr>"
        self.transcript = [header]
        return header

    def send_message(self, text: str) -> Optional[str]:
        """Append a staff reply; return its HTML, or None if the text is blank."""
        message = text.strip()
        if not message:
            return None
        line = f"<div style='text-align: right; color: #007AFF;'><b>客服:</b> {message}</div><br>"
        self.transcript.append(line)
        return line

    def transfer_to_ai(self) -> str:
        """Hand the visitor back to the automatic assistant and return the notice."""
        return TRANSFER_NOTICE