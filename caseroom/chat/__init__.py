"""Room chat: posting, mention replies and membership checks."""

from caseroom.chat.service import ChatService

__all__ = ["ChatService"]
