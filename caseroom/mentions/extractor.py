"""@mention extraction from message text."""

import re

MENTION_PATTERN = re.compile(r"@([a-zA-Z0-9_-]+)")


def extract_mentions(text: str | None) -> list[str]:
    """Return mentioned names in order of appearance, repeats included.

    Names are not checked against the room's participants; resolving
    them is up to the caller.

    >>> extract_mentions("please review @Alice and @Bob")
    ['Alice', 'Bob']
    """
    if not text:
        return []
    return MENTION_PATTERN.findall(text)


def has_mentions(text: str | None) -> bool:
    return bool(text) and MENTION_PATTERN.search(text) is not None
