from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from staffdesk.chat_sessions import (
    BubbleAlignment,
    ChatMessage,
    ChatSession,
    SessionStatus,
    StaffChatManager,
    UserInfo,
    bubble_alignment,
    format_time,
    session_colors,
    session_item_text,
)

NOW = datetime(2024, 1, 15, 18, 0)


class FakeBackend:
    def __init__(self, sessions=(), messages=()):
        self.sessions = {s.id: s for s in sessions}
        self.messages = list(messages)
        self.online = {}
        self.read_messages = set()
        self.read_sessions = []
        self.next_id = 100
        self.fail_send = False

    def update_user_online_status(self, user_id, online):
        self.online[user_id] = online

    def get_active_sessions(self):
        return [s for s in self.sessions.values() if s.status in (1, 2)]

    def update_chat_session(self, session_id, staff_id):
        session = self.sessions.get(session_id)
        if session is None or session.status != SessionStatus.WAITING:
            return False
        self.sessions[session_id] = replace(session, status=SessionStatus.ACTIVE, staff_id=staff_id)
        return True

    def close_chat_session(self, session_id):
        session = self.sessions.get(session_id)
        if session is None:
            return False
        self.sessions[session_id] = replace(session, status=0)
        return True

    def send_message(self, session_id, sender_id, content):
        if self.fail_send:
            return -1
        self.next_id += 1
        self.messages.append(ChatMessage(self.next_id, session_id, sender_id, content))
        return self.next_id

    def mark_message_as_read(self, message_id):
        self.read_messages.add(message_id)

    def mark_session_as_read(self, session_id, user_id):
        self.read_sessions.append((session_id, user_id))

    def get_chat_messages(self, session_id):
        return [m for m in self.messages if m.session_id == session_id]

    def get_unread_messages(self, user_id):
        return [m for m in self.messages if m.id not in self.read_messages and m.sender_id != user_id]


STAFF = UserInfo(id=7, username="staff7", real_name="Alice", role="staff")


def make_manager():
    sessions = [
        ChatSession(1, "Visitor A", SessionStatus.WAITING, last_message_at=NOW),
        ChatSession(2, "Visitor B", SessionStatus.ACTIVE, staff_id=7, last_message_at=NOW),
        ChatSession(3, "Visitor C", SessionStatus.ACTIVE, staff_id=99, last_message_at=NOW),
    ]
    messages = [ChatMessage(10, 2, 50, "hello", sender_name="Visitor B")]
    backend = FakeBackend(sessions, messages)
    manager = StaffChatManager(backend, now=lambda: NOW)
    manager.set_current_user(STAFF)
    return backend, manager


def test_format_time_ranges():
    assert format_time(NOW - timedelta(seconds=30), NOW) == "刚刚"
    assert format_time(NOW - timedelta(minutes=5), NOW) == "5分钟前"
    assert format_time(datetime(2024, 1, 15, 9, 30), NOW) == "09:30"
    assert format_time(datetime(2024, 1, 14, 16, 45), NOW) == "01-14 16:45"


def test_bubble_alignment():
    own = ChatMessage(1, 1, 7, "x")
    system = ChatMessage(2, 1, 3, "x", message_type=1)
    other = ChatMessage(3, 1, 3, "x")
    assert bubble_alignment(own, 7) is BubbleAlignment.RIGHT
    assert bubble_alignment(system, 7) is BubbleAlignment.CENTER
    assert bubble_alignment(other, 7) is BubbleAlignment.LEFT


def test_session_item_text_and_colors():
    session = ChatSession(1, "Visitor A", SessionStatus.WAITING, last_message_at=NOW)
    assert session_item_text(session, NOW) == "Visitor A\n最后消息: 刚刚"
    assert session_colors(session) == ("#FFF3CD", "#856404")
    assert session_colors(replace(session, status=SessionStatus.ACTIVE)) == ("#D4EDDA", "#155724")
    assert session_colors(replace(session, status=0)) is None


def test_set_current_user_loads_lists():
    backend, manager = make_manager()
    assert backend.online[7] is True
    assert [s.id for s in manager.waiting] == [1]
    assert [s.id for s in manager.active] == [2]
    assert manager.waiting_title.endswith(f"({len(manager.waiting)})")
    assert manager.active_title.endswith(f"({len(manager.active)})")


def test_select_session_loads_history():
    backend, manager = make_manager()
    manager.select_session(2)
    assert manager.current_session_id == 2
    assert manager.input_enabled is True
    assert "Visitor B" in manager.title
    assert [m.id for m in manager.messages] == [10]
    assert backend.read_sessions == [(2, 7)]


def test_select_unknown_session_raises():
    _, manager = make_manager()
    with pytest.raises(KeyError):
        manager.select_session(3)


def test_accept_session_opens_it():
    backend, manager = make_manager()
    assert manager.accept_session(1) is True
    assert manager.current_session_id == 1
    assert {s.id for s in manager.active} == {1, 2}
    assert manager.waiting == []
    assert manager.accept_session(42) is False


def test_send_message():
    backend, manager = make_manager()
    assert manager.send_message("hi") is None
    manager.select_session(2)
    assert manager.can_send("   ") is False
    assert manager.can_send("ok") is True
    sent = manager.send_message("  reply  ")
    assert sent.content == "reply"
    assert sent.sender_name == "Alice"
    assert sent.timestamp == NOW
    assert sent.is_read is True
    assert manager.messages[-1] == sent
    assert backend.messages[-1].content == "reply"


def test_send_message_failure_shows_nothing():
    backend, manager = make_manager()
    manager.select_session(2)
    backend.fail_send = True
    before = list(manager.messages)
    assert manager.send_message("reply") is None
    assert manager.messages == before


def test_close_session_resets_view():
    backend, manager = make_manager()
    manager.select_session(2)
    assert manager.close_session(2) is True
    assert manager.current_session_id is None
    assert manager.title == "普通会话"
    assert manager.input_enabled is False
    assert manager.messages == []
    assert manager.active == []
    assert manager.close_session(42) is False


def test_incoming_messages():
    backend, manager = make_manager()
    manager.select_session(2)
    incoming = ChatMessage(20, 2, 50, "more")
    other_session = ChatMessage(21, 1, 50, "elsewhere")
    own = ChatMessage(22, 2, 7, "mine")
    for message in (incoming, other_session, own):
        manager.on_message_received(message)
    assert [m.id for m in manager.messages] == [10, 20]
    assert backend.read_messages == {20}


def test_check_for_new_messages():
    backend, manager = make_manager()
    manager.select_session(2)
    backend.messages.append(ChatMessage(30, 2, 50, "new"))
    backend.messages.append(ChatMessage(31, 1, 50, "other"))
    manager.check_for_new_messages()
    ids = [m.id for m in manager.messages]
    assert 30 in ids and 31 not in ids
    assert 30 in backend.read_messages


def test_close_marks_offline():
    backend, manager = make_manager()
    manager.close()
    assert backend.online[7] is False