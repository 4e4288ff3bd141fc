"""
Spreadsheet Export - XLSX document builder

Turns stored user records into a single-sheet Excel workbook held in memory.

Usage:
    from utils.export import build_document

    content = build_document(store.list_records())
"""

import io
from typing import Iterable

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from utils.logging import get_logger
from utils.schemas import UserRecord

logger = get_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, record field, column width)
COLUMNS = (
    ("ID", "id", 10),
    ("Name", "name", 30),
    ("Email", "email", 30),
    ("Timestamp", "timestamp", 30),
)


class SerializationError(Exception):
    """Raised when the workbook cannot be built or written."""


def build_document(records: Iterable[UserRecord], sheet_title: str = "Users") -> bytes:
    """
    Build an XLSX workbook with a header row followed by one row per record.

    Args:
        records: Records in the order they should appear
        sheet_title: Worksheet name

    Returns:
        Serialized workbook bytes

    Raises:
        SerializationError: If a value cannot be written or the workbook cannot be saved
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title

    sheet.append([header for header, _, _ in COLUMNS])
    for index, (_, _, width) in enumerate(COLUMNS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width

    row_count = 0
    try:
        for record in records:
            sheet.append([getattr(record, field) for _, field, _ in COLUMNS])
            row_count += 1

        buffer = io.BytesIO()
        workbook.save(buffer)
    except (IllegalCharacterError, ValueError, TypeError) as e:
        raise SerializationError(str(e) or e.__class__.__name__) from e

    logger.debug("Workbook built: sheet=%s, rows=%d", sheet_title, row_count)
    return buffer.getvalue()
