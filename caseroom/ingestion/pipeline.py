"""Participant ingestion pipeline.

Single add: normalize -> validate -> existence check -> insert.
Bulk add: parse CSV or Excel -> per row (validate -> in-file dedup -> existence
check) -> insert accepted rows in sequential batches.

Per-row problems are collected in the ImportSummary. Only parse
failures and store failures end the operation.
"""

from collections.abc import Callable, Mapping

import structlog

from caseroom.config import settings
from caseroom.errors import BulkImportError, DuplicateError, StoreError, ValidationError
from caseroom.events.bus import EventBus
from caseroom.events.types import ParticipantAdded, ParticipantsImported
from caseroom.ingestion.dedup import DeduplicationIndex, DuplicateChecker
from caseroom.ingestion.normalizer import normalize_row, parse_csv
from caseroom.ingestion.schemas import ImportSummary, ParticipantInput, RejectionKind
from caseroom.ingestion.validation import validate_participant
from caseroom.models.participant import Participant
from caseroom.models.room import RoomContext
from caseroom.store.base import PARTICIPANTS, Store

logger = structlog.get_logger()

ProgressCallback = Callable[[int, int], None]

# Spreadsheet line of data row 0 (line 1 is the header)
FIRST_DATA_LINE = 2


class IngestionPipeline:
    """Validates, deduplicates and persists participants for a room."""

    def __init__(
        self,
        store: Store,
        event_bus: EventBus | None = None,
        batch_size: int | None = None,
    ):
        """Initialize pipeline.

        Args:
            store: Store holding the participants table
            event_bus: Optional bus notified after participants are stored
            batch_size: Rows per insert during bulk import
                (default: settings.import_batch_size)
        """
        self._store = store
        self._bus = event_bus
        self._checker = DuplicateChecker(store)
        self._batch_size = batch_size or settings.import_batch_size

    async def add_single(
        self, fields: Mapping[str, str | None], context: RoomContext
    ) -> Participant:
        """Add one participant from form fields.

        Args:
            fields: Raw form fields keyed like the CSV columns
                (name, email, phone, org, photourl, desc)
            context: Target room

        Returns:
            The stored participant

        Raises:
            ValidationError: A field rule failed
            DuplicateError: Name or email already used in the room
            StoreError: The store call failed
        """
        candidate = ParticipantInput.from_row(normalize_row(fields))

        reason = validate_participant(candidate, context.room_type)
        if reason:
            raise ValidationError(reason)

        reason = await self._checker.check_existing(
            candidate, context.room_type, context.room_id
        )
        if reason:
            raise DuplicateError(reason)

        participant = candidate.to_participant(
            context.room_id, public_room=context.is_public
        )
        stored = Participant.from_row(
            await self._store.insert_one(PARTICIPANTS, participant.to_row())
        )
        logger.info(
            "Participant added",
            room_id=context.room_id,
            participant_id=stored.id,
        )

        if self._bus:
            await self._bus.publish(
                ParticipantAdded(room_id=context.room_id, participant_id=stored.id)
            )
        return stored

    async def add_bulk(
        self,
        csv_text: str,
        context: RoomContext,
        on_progress: ProgressCallback | None = None,
    ) -> ImportSummary:
        """Import participants from CSV text.

        Every row is attempted. Rows failing validation or duplicate
        checks are reported in the summary and skipped. Accepted rows are
        inserted in batches, one batch at a time.

        Args:
            csv_text: CSV content with a header row
            context: Target room
            on_progress: Called as (rows_persisted, rows_accepted) after
                each batch

        Returns:
            ImportSummary with counts and per-row reasons

        Raises:
            ParseError: CSV unreadable (nothing was processed)
            BulkImportError: A batch insert failed; earlier batches stay
                committed and the error carries the partial summary
            StoreError: An existence check failed before any insert
        """
        return await self.add_bulk_rows(parse_csv(csv_text), context, on_progress)

    async def add_bulk_rows(
        self,
        rows: list[dict[str, str]],
        context: RoomContext,
        on_progress: ProgressCallback | None = None,
    ) -> ImportSummary:
        """Import already-parsed rows (from parse_csv or parse_xlsx).

        Same rules and errors as add_bulk, minus parsing. Row numbers in
        the summary count the header as line 1.
        """
        summary = ImportSummary(total_rows=len(rows))
        index = DeduplicationIndex()
        accepted: list[tuple[int, Participant]] = []

        for i, row in enumerate(rows):
            row_number = i + FIRST_DATA_LINE
            candidate = ParticipantInput.from_row(row)

            reason = validate_participant(candidate, context.room_type)
            if reason:
                summary.reject(row_number, reason, RejectionKind.VALIDATION)
                continue

            reason = index.check(candidate, context.room_type)
            if not reason:
                reason = await self._checker.check_existing(
                    candidate, context.room_type, context.room_id
                )
            if reason:
                summary.reject(row_number, reason, RejectionKind.DUPLICATE)
                continue

            index.add(candidate, context.room_type)
            accepted.append(
                (
                    row_number,
                    candidate.to_participant(
                        context.room_id, public_room=context.is_public
                    ),
                )
            )

        await self._persist(accepted, summary, context, on_progress)

        logger.info(
            "Bulk import finished",
            room_id=context.room_id,
            total_rows=summary.total_rows,
            added=summary.added_count,
            validation_rejected=summary.validation_rejected_count,
            duplicate_rejected=summary.duplicate_rejected_count,
        )

        if self._bus and summary.added_count:
            await self._bus.publish(
                ParticipantsImported(
                    room_id=context.room_id, added_count=summary.added_count
                )
            )
        return summary

    async def _persist(
        self,
        accepted: list[tuple[int, Participant]],
        summary: ImportSummary,
        context: RoomContext,
        on_progress: ProgressCallback | None,
    ) -> None:
        """Insert accepted participants in sequential batches."""
        for start in range(0, len(accepted), self._batch_size):
            batch = accepted[start : start + self._batch_size]
            try:
                await self._insert_batch(batch, summary)
            except StoreError as e:
                logger.error(
                    "Bulk import batch failed",
                    room_id=context.room_id,
                    batch_start=start,
                    committed=summary.added_count,
                    error=str(e),
                )
                raise BulkImportError(
                    f"Import stopped after {summary.added_count} participant(s): {e}",
                    summary,
                ) from e

            if on_progress:
                on_progress(summary.added_count, len(accepted))

    async def _insert_batch(
        self,
        batch: list[tuple[int, Participant]],
        summary: ImportSummary,
    ) -> None:
        """Insert one batch and record what was stored in the summary.

        A unique-index conflict rolls back the whole batch insert, so the
        batch is replayed row by row and each conflicting row is reported
        as a duplicate.
        """
        try:
            rows = await self._store.insert_many(
                PARTICIPANTS, [participant.to_row() for _, participant in batch]
            )
            for row in rows:
                summary.record_added(Participant.from_row(row))
            return
        except DuplicateError:
            logger.warning(
                "Batch hit a unique conflict, inserting rows one at a time",
                batch_size=len(batch),
            )

        for row_number, participant in batch:
            try:
                row = await self._store.insert_one(PARTICIPANTS, participant.to_row())
            except DuplicateError as e:
                summary.reject(row_number, e.reason, RejectionKind.DUPLICATE)
                continue
            summary.record_added(Participant.from_row(row))
