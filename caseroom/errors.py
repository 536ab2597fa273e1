"""Error taxonomy for participant ingestion, chat and storage.

Per-row ingestion failures are collected as data in ImportSummary and
never raised. The exceptions below are for whole-operation failures.
"""


class CaseRoomError(Exception):
    """Base class for all application errors."""


class ParticipantRejected(CaseRoomError):
    """A single participant record was refused.

    Attributes:
        reason: Human-readable reason shown to the user
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ValidationError(ParticipantRejected):
    """Record violates a field rule."""


class DuplicateError(ParticipantRejected):
    """Name or email collides with another participant in the room."""


class StoreError(CaseRoomError):
    """Backend call failed (connection, permission, malformed query)."""


class BulkImportError(StoreError):
    """A batch insert failed part way through a bulk import.

    Batches committed before the failure stay committed. The partial
    summary reflects only those.
    """

    def __init__(self, message: str, summary):
        super().__init__(message)
        self.summary = summary


class ParseError(CaseRoomError):
    """CSV upload is malformed or unreadable."""


class NotFoundError(CaseRoomError):
    """Requested room, participant or message does not exist."""


class AccessDeniedError(CaseRoomError):
    """Caller is not allowed to perform the operation."""


class MentionStateError(CaseRoomError):
    """Message is not in a state that allows the requested transition."""
