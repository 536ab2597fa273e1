"""Canonical data models for Case Room.

This module exports all domain models used throughout the application:
- BaseEntity: Base class with id, timestamp
- Room, RoomType, RoomContext: Chat namespaces and per-call identity
- Participant: Room members
- Message, MessageStatus: Chat messages and their mention lifecycle
- Canvas: Rich-text content pages
"""

from caseroom.models.base import BaseEntity, new_id, utc_now
from caseroom.models.canvas import Canvas
from caseroom.models.message import Message, MessageStatus
from caseroom.models.participant import Participant
from caseroom.models.room import Room, RoomContext, RoomType

__all__ = [
    # Base
    "BaseEntity",
    "new_id",
    "utc_now",
    # Room
    "Room",
    "RoomContext",
    "RoomType",
    # Participant
    "Participant",
    # Message
    "Message",
    "MessageStatus",
    # Canvas
    "Canvas",
]
