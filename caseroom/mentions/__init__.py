"""Mention tracking for room chats.

This module provides:
- extract_mentions: @name scanner
- compute_unanswered / find_reply / find_messages_for_participant /
  annotate_messages / summarize_unanswered: pure reconciliation helpers
- MentionReconciler: per-room unanswered list and the replied transition
- LiveMentionView: recompute on message change notifications
"""

from caseroom.mentions.extractor import MENTION_PATTERN, extract_mentions, has_mentions
from caseroom.mentions.live import LiveMentionView
from caseroom.mentions.reconciler import (
    MentionReconciler,
    annotate_messages,
    compute_unanswered,
    find_messages_for_participant,
    find_reply,
    load_messages,
    summarize_unanswered,
)
from caseroom.mentions.schemas import AnnotatedMessage, MentionRecord, UnansweredSummary

__all__ = [
    "MENTION_PATTERN",
    "AnnotatedMessage",
    "LiveMentionView",
    "MentionReconciler",
    "MentionRecord",
    "UnansweredSummary",
    "annotate_messages",
    "compute_unanswered",
    "extract_mentions",
    "find_messages_for_participant",
    "find_reply",
    "has_mentions",
    "load_messages",
    "summarize_unanswered",
]
