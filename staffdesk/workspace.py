"""The staff member's main workspace with its tabs."""

from __future__ import annotations

from typing import Optional

from staffdesk.chat_sessions import StaffChatManager, UserInfo

CHAT_TAB = "客服聊天"
STATS_TAB = "高频问题统计"


class StaffWorkspace:
    """Holds the logged-in user and passes them on to the chat manager."""

    def __init__(self, chat_manager: Optional[StaffChatManager] = None) -> None:
        self.chat_manager = chat_manager
        self.current_user: Optional[UserInfo] = None

    def set_current_user(self, user: UserInfo) -> None:
        """Log a user in to the workspace and its chat manager."""
        self.current_user = user
        if self.chat_manager is not None:
            self.chat_manager.set_current_user(user)

    def tabs(self) -> list[str]:
        """Return the titles of the workspace tabs in display order."""
        return [CHAT_TAB, STATS_TAB]