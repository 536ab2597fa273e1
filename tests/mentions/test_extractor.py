"""Tests for @mention extraction."""

import pytest

from caseroom.mentions.extractor import extract_mentions, has_mentions


def test_extracts_in_order():
    assert extract_mentions("please review @Alice and @Bob") == ["Alice", "Bob"]


def test_keeps_repeats():
    assert extract_mentions("@Alice @Bob @Alice") == ["Alice", "Bob", "Alice"]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("ping @jo_smith", ["jo_smith"]),
        ("ping @mary-jane!", ["mary-jane"]),
        ("@R2D2, status?", ["R2D2"]),
        ("mail me at a@x.com", ["x"]),
        ("no mentions here", []),
        ("lonely @ sign", []),
    ],
)
def test_token_characters(text, expected):
    assert extract_mentions(text) == expected


@pytest.mark.parametrize("text", ["", None])
def test_empty_text(text):
    assert extract_mentions(text) == []
    assert not has_mentions(text)


def test_has_mentions():
    assert has_mentions("hi @Alice")
    assert not has_mentions("hi Alice")
