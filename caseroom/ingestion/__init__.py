"""Participant ingestion: validation, normalization, dedup and persistence.

This module provides:
- IngestionPipeline: single add and bulk CSV or Excel import
- validate_participant / validate_profile_fields: field rules
- parse_csv / parse_xlsx / normalize_row: upload parsing and cleanup
- DeduplicationIndex / DuplicateChecker: in-file and in-store duplicate checks
- Schemas for candidates and import results
"""

from caseroom.ingestion.dedup import DeduplicationIndex, DuplicateChecker
from caseroom.ingestion.normalizer import (
    RECOGNIZED_COLUMNS,
    normalize_row,
    parse_csv,
    parse_xlsx,
)
from caseroom.ingestion.pipeline import IngestionPipeline
from caseroom.ingestion.schemas import (
    ImportSummary,
    ParticipantInput,
    RejectedRow,
    RejectionKind,
)
from caseroom.ingestion.validation import validate_participant, validate_profile_fields

__all__ = [
    "RECOGNIZED_COLUMNS",
    "DeduplicationIndex",
    "DuplicateChecker",
    "ImportSummary",
    "IngestionPipeline",
    "ParticipantInput",
    "RejectedRow",
    "RejectionKind",
    "normalize_row",
    "parse_csv",
    "parse_xlsx",
    "validate_participant",
    "validate_profile_fields",
]
