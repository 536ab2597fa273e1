"""CSV and Excel parsing and row normalization for participant uploads."""

import csv
from collections.abc import Mapping
from io import BytesIO, StringIO
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from caseroom.errors import ParseError

RECOGNIZED_COLUMNS = ("name", "email", "phone", "org", "photourl", "desc")


def normalize_row(row: Mapping[str | None, str | None]) -> dict[str, str]:
    """Clean up a raw header -> value row.

    Header keys are trimmed and lower-cased, values trimmed, missing
    values become "". Overflow cells (no header, key None) are dropped.
    Every recognized column is present in the result.

    Args:
        row: Raw row as produced by csv.DictReader or a form

    Returns:
        Normalized row
    """
    normalized = {column: "" for column in RECOGNIZED_COLUMNS}
    for key, value in row.items():
        if key is None:
            continue
        normalized[key.strip().lower()] = (value or "").strip()
    return normalized


def parse_csv(text: str) -> list[dict[str, str]]:
    """Parse CSV text with a header row into normalized rows.

    Blank lines are skipped.

    Args:
        text: Decoded CSV content

    Returns:
        Normalized rows in file order

    Raises:
        ParseError: If the text has no header or is malformed
    """
    if not text or not text.strip():
        raise ParseError("CSV file is empty")

    # Strip a UTF-8 BOM left in by spreadsheet exports
    text = text.removeprefix("\ufeff")

    reader = csv.DictReader(StringIO(text, newline=""), strict=True)
    try:
        header = reader.fieldnames
        if not header or not any(h.strip() for h in header):
            raise ParseError("CSV file has no header row")
        rows = [normalize_row(raw) for raw in reader]
    except csv.Error as e:
        raise ParseError(f"Malformed CSV at line {reader.line_num}: {e}") from e

    return rows


def _cell_text(value: object) -> str:
    """Render a spreadsheet cell as trimmed text.

    Whole-number floats lose their ".0" so numeric phone cells survive.
    """
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def parse_xlsx(data: bytes) -> list[dict[str, str]]:
    """Parse the first worksheet of an .xlsx workbook into normalized rows.

    The first row is the header, read the same way as a CSV header.
    Fully blank rows are skipped.

    Args:
        data: Raw workbook bytes

    Returns:
        Normalized rows in sheet order

    Raises:
        ParseError: If the bytes are not a workbook or the sheet has no header
    """
    try:
        workbook = load_workbook(BytesIO(data), read_only=True, data_only=True)
    except (BadZipFile, InvalidFileException, KeyError, ValueError) as e:
        raise ParseError(f"Unreadable Excel file: {e}") from e

    try:
        values = workbook.active.iter_rows(values_only=True)
        header = [_cell_text(cell) or None for cell in next(values, ())]
        if not any(header):
            raise ParseError("Excel sheet has no header row")

        rows = []
        for raw in values:
            cells = [_cell_text(cell) for cell in raw]
            if any(cells):
                rows.append(normalize_row(dict(zip(header, cells))))
    finally:
        workbook.close()

    return rows
