"""Live chat sessions between visitors and staff members."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Callable, Optional, Protocol

SESSION_CHECK_INTERVAL_MS = 3000
MESSAGE_CHECK_INTERVAL_MS = 2000
SYSTEM_MESSAGE_TYPE = 1

DEFAULT_TITLE = "当前会话"
CLOSED_TITLE = "普通会话"

_WAITING_COLORS = ("#FFF3CD", "#856404")
_ACTIVE_COLORS = ("#D4EDDA", "#155724")


class SessionStatus(IntEnum):
    """States of a chat session that the staff desk shows."""

    ACTIVE = 1
    WAITING = 2


class BubbleAlignment(Enum):
    """Where a message bubble is placed in the conversation view."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


@dataclass
class UserInfo:
    """A logged-in user of the desk."""

    id: int
    username: str
    real_name: str = ""
    role: str = ""

    @property
    def display_name(self) -> str:
        """The real name if known, the user name otherwise."""
        return self.real_name or self.username


@dataclass
class ChatSession:
    """A conversation between a visitor and, possibly, a staff member."""

    id: int
    visitor_name: str
    status: int = SessionStatus.WAITING
    staff_id: int = 0
    visitor_id: int = 0
    last_message_at: Optional[datetime] = None


@dataclass
class ChatMessage:
    """One message within a chat session."""

    id: int
    session_id: int
    sender_id: int
    content: str
    sender_name: str = ""
    sender_role: str = ""
    timestamp: Optional[datetime] = None
    message_type: int = 0
    is_read: bool = False


class ChatBackend(Protocol):
    """Storage the chat manager reads sessions and messages from."""

    def update_user_online_status(self, user_id: int, online: bool) -> None: ...

    def get_active_sessions(self) -> list[ChatSession]: ...

    def update_chat_session(self, session_id: int, staff_id: int) -> bool: ...

    def close_chat_session(self, session_id: int) -> bool: ...

    def send_message(self, session_id: int, sender_id: int, content: str) -> int: ...

    def mark_message_as_read(self, message_id: int) -> None: ...

    def mark_session_as_read(self, session_id: int, user_id: int) -> None: ...

    def get_chat_messages(self, session_id: int) -> list[ChatMessage]: ...

    def get_unread_messages(self, user_id: int) -> list[ChatMessage]: ...


def format_time(time: datetime, now: datetime) -> str:
    """Describe a moment relative to ``now``: just now, minutes ago, a time or a date."""
    secs = int((now - time).total_seconds())
    if secs < 60:
        return "刚刚"
    if secs < 3600:
        return f"{secs // 60}分钟前"
    if time.date() == now.date():
        return time.strftime("%H:%M")
    return time.strftime("%m-%d %H:%M")


def bubble_alignment(message: ChatMessage, current_user_id: int) -> BubbleAlignment:
    """Place own messages right, system messages centred and the rest left."""
    if message.sender_id == current_user_id:
        return BubbleAlignment.RIGHT
    if message.message_type == SYSTEM_MESSAGE_TYPE:
        return BubbleAlignment.CENTER
    return BubbleAlignment.LEFT


def session_item_text(session: ChatSession, now: datetime) -> str:
    """Return the list entry text of a session."""
    last = format_time(session.last_message_at, now) if session.last_message_at else ""
    return f"{session.visitor_name}\n最后消息: {last}"


def session_colors(session: ChatSession) -> Optional[tuple[str, str]]:
    """Return (background, foreground) colours of a session entry, or None."""
    if session.status == SessionStatus.WAITING:
        return _WAITING_COLORS
    if session.status == SessionStatus.ACTIVE:
        return _ACTIVE_COLORS
    return None


class StaffChatManager:
    """A staff member's view of waiting and active sessions and the open conversation."""

    def __init__(self, backend: ChatBackend, now: Optional[Callable[[], datetime]] = None) -> None:
        self.backend = backend
        self._now = now or datetime.now
        self.current_user: Optional[UserInfo] = None
        self.current_session_id: Optional[int] = None
        self.sessions: dict[int, ChatSession] = {}
        self.waiting: list[ChatSession] = []
        self.active: list[ChatSession] = []
        self.messages: list[ChatMessage] = []
        self.title = DEFAULT_TITLE
        self.input_enabled = False

    @property
    def waiting_title(self) -> str:
        return f"等待接入 ({len(self.waiting)})"

    @property
    def active_title(self) -> str:
        return f"当前对话 ({len(self.active)})"

    def _logged_in(self) -> bool:
        return self.current_user is not None and self.current_user.id > 0

    def set_current_user(self, user: UserInfo) -> None:
        """Log a staff member in, mark them online and load their sessions."""
        self.current_user = user
        self.backend.update_user_online_status(user.id, True)
        self.refresh_sessions()

    def refresh_sessions(self) -> None:
        """Reload waiting sessions and the sessions this staff member handles."""
        if not self._logged_in():
            return
        self.sessions = {}
        self.waiting = []
        self.active = []
        for session in self.backend.get_active_sessions():
            self.sessions[session.id] = session
            if session.status == SessionStatus.WAITING:
                self.waiting.append(session)
            elif session.status == SessionStatus.ACTIVE and session.staff_id == self.current_user.id:
                self.active.append(session)

    def _clear_conversation(self) -> None:
        self.messages = []

    def _show(self, message: ChatMessage) -> None:
        self.messages.append(message)

    def select_session(self, session_id: int) -> ChatSession:
        """Open one of this staff member's active sessions and load its history."""
        session = next((s for s in self.active if s.id == session_id), None)
        if session is None:
            raise KeyError(f"no active session {session_id}")
        self.current_session_id = session_id
        self.title = f"与 {session.visitor_name} 的对话"
        self.input_enabled = True
        self._clear_conversation()
        for message in self.backend.get_chat_messages(session_id):
            self._show(message)
        self.backend.mark_session_as_read(session_id, self.current_user.id)
        return session

    def accept_session(self, session_id: int) -> bool:
        """Take over a waiting session and open it; return whether it was accepted."""
        if not self._logged_in():
            return False
        if not self.backend.update_chat_session(session_id, self.current_user.id):
            return False
        self.refresh_sessions()
        if any(s.id == session_id for s in self.active):
            self.select_session(session_id)
        return True

    def close_session(self, session_id: int) -> bool:
        """End a session; return whether the backend closed it."""
        if not self.backend.close_chat_session(session_id):
            return False
        self.current_session_id = None
        self.title = CLOSED_TITLE
        self.input_enabled = False
        self._clear_conversation()
        self.refresh_sessions()
        return True

    def can_send(self, text: str) -> bool:
        """Return whether ``text`` could be sent in the open conversation."""
        return bool(text.strip()) and self.current_session_id is not None

    def send_message(self, content: str) -> Optional[ChatMessage]:
        """Send a reply in the open session; return the shown message, or None."""
        text = content.strip()
        if not text or self.current_session_id is None or not self._logged_in():
            return None
        message_id = self.backend.send_message(self.current_session_id, self.current_user.id, text)
        if message_id <= 0:
            return None
        message = ChatMessage(
            id=message_id,
            session_id=self.current_session_id,
            sender_id=self.current_user.id,
            content=text,
            sender_name=self.current_user.display_name,
            sender_role=self.current_user.role,
            timestamp=self._now(),
            message_type=0,
            is_read=True,
        )
        self._show(message)
        return message

    def _accept_incoming(self, message: ChatMessage) -> None:
        if (
            self.current_session_id is not None
            and message.session_id == self.current_session_id
            and (self.current_user is None or message.sender_id != self.current_user.id)
        ):
            self._show(message)
            self.backend.mark_message_as_read(message.id)

    def on_message_received(self, message: ChatMessage) -> None:
        """Show an incoming message of the open session and refresh the lists."""
        self._accept_incoming(message)
        self.refresh_sessions()

    def check_for_new_messages(self) -> None:
        """Show unread messages that belong to the open session."""
        if self.current_session_id is None or not self._logged_in():
            return
        for message in self.backend.get_unread_messages(self.current_user.id):
            self._accept_incoming(message)

    def close(self) -> None:
        """Mark the logged-in staff member offline."""
        if self._logged_in():
            self.backend.update_user_online_status(self.current_user.id, False)