"""Room lifecycle and shared documents."""

from caseroom.rooms.service import RoomService

__all__ = ["RoomService"]
