"""Participant field rules.

validate_participant applies the rules in a fixed order and stops at the
first failure, so a bulk upload reports one reason per row.
validate_profile_fields checks the self-editable fields and reports
every failure at once.
"""

import re

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from caseroom.ingestion.schemas import ParticipantInput
from caseroom.models.room import RoomType

NAME_PATTERN = re.compile(r"[A-Za-z\s-]{2,}")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_PATTERN = re.compile(r"[\d\s()+.-]{10,}")

MAX_ORGANIZATION_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

_url_adapter = TypeAdapter(AnyUrl)


def is_valid_name(name: str) -> bool:
    return NAME_PATTERN.fullmatch(name) is not None


def is_valid_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def is_valid_phone(phone: str) -> bool:
    return PHONE_PATTERN.fullmatch(phone) is not None


def is_valid_url(url: str) -> bool:
    """Check that url parses as an absolute URL."""
    try:
        _url_adapter.validate_python(url)
    except PydanticValidationError:
        return False
    return True


def validate_participant(
    candidate: ParticipantInput, room_type: RoomType
) -> str | None:
    """Validate a normalized participant candidate.

    Rules, in order:
    1. name is required; email too unless the room is public
    2. name: 2+ letters, spaces or hyphens
    3. email shape (non-public rooms)
    4. phone, if given: 10+ of digits, spaces, ()+.-
    5. photo URL, if given: absolute URL
    6. organization <= 100 chars, description <= 500 chars

    Args:
        candidate: Normalized candidate
        room_type: Type of the target room

    Returns:
        None if valid, else the reason for the first failed rule
    """
    public_room = room_type == RoomType.PUBLIC

    required = ["name"] if public_room else ["name", "email"]
    missing = [field for field in required if not getattr(candidate, field)]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"

    if not is_valid_name(candidate.name):
        return (
            "Name must be at least 2 characters and contain only letters, "
            "spaces, and hyphens"
        )

    if not public_room and not is_valid_email(candidate.email):
        return "Invalid email format"

    if candidate.phone and not is_valid_phone(candidate.phone):
        return "Invalid phone number format"

    if candidate.photo_url and not is_valid_url(candidate.photo_url):
        return "Invalid photo URL format"

    if (
        candidate.organization
        and len(candidate.organization) > MAX_ORGANIZATION_LENGTH
    ):
        return (
            f"Organization must be at most {MAX_ORGANIZATION_LENGTH} characters"
        )

    if candidate.description and len(candidate.description) > MAX_DESCRIPTION_LENGTH:
        return f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"

    return None


def validate_profile_fields(
    organization: str | None = None,
    phone: str | None = None,
    description: str | None = None,
    photo_url: str | None = None,
) -> str | None:
    """Validate self-editable profile fields, collecting every failure.

    Returns:
        None if valid, else all failure messages joined by newlines
    """
    errors = []

    if phone and not is_valid_phone(phone):
        errors.append(
            "Invalid phone number format. Please enter at least 10 digits "
            "with optional spaces, brackets, plus, dots, or hyphens."
        )

    if photo_url and not is_valid_url(photo_url):
        errors.append(
            "Invalid photo URL format. Please enter a valid URL starting "
            "with http:// or https://"
        )

    if organization and len(organization) > MAX_ORGANIZATION_LENGTH:
        errors.append(
            "Organization name is too long. "
            f"Maximum {MAX_ORGANIZATION_LENGTH} characters allowed."
        )

    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(
            "Description is too long. "
            f"Maximum {MAX_DESCRIPTION_LENGTH} characters allowed."
        )

    return "\n".join(errors) if errors else None
