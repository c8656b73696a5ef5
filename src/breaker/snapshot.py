"""
CSV snapshot parsing for the breaker box export.

The device emits a loosely structured CSV file: row widths vary, and the
block of interest starts at a row whose first field is the ``YYYYMMDDhhmm``
marker. The readings are on the row right after it.
"""
import csv
import io
from typing import List

from src.common.exceptions import (
    DataRowMissingError,
    HeaderNotFoundError,
    SnapshotParseError,
)

HEADER_MARKER = "YYYYMMDDhhmm"

Row = List[str]


def parse_snapshot(text: str) -> List[Row]:
    """
    Decode a CSV body into rows, allowing a different width on every row.

    Blank lines carry no row.

    Raises:
        SnapshotParseError: If the body is not decodable CSV
    """
    reader = csv.reader(io.StringIO(text), strict=True)
    try:
        return [row for row in reader if row]
    except csv.Error as e:
        raise SnapshotParseError(
            f"Error parsing CSV data at line {reader.line_num}: {e}"
        ) from e


def find_header(rows: List[Row], marker: str = HEADER_MARKER) -> int:
    """
    Return the index of the first row whose first field equals *marker*.

    Raises:
        HeaderNotFoundError: If no row starts with the marker
    """
    for index, row in enumerate(rows):
        if row and row[0] == marker:
            return index
    raise HeaderNotFoundError(f"CSV header row ('{marker}') not found in the response")


def select_data_row(rows: List[Row], marker: str = HEADER_MARKER) -> Row:
    """
    Return the row immediately following the header marker row.

    Raises:
        HeaderNotFoundError: If the marker row is missing
        DataRowMissingError: If the marker row is the last row
    """
    header_index = find_header(rows, marker)
    if len(rows) <= header_index + 1:
        raise DataRowMissingError("Data row not found immediately after the header row")
    return rows[header_index + 1]
