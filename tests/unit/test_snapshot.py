"""
Unit tests for CSV snapshot parsing and data row selection.
"""
import pytest

from src.breaker.snapshot import (
    HEADER_MARKER,
    find_header,
    parse_snapshot,
    select_data_row,
)
from src.common.exceptions import (
    DataRowMissingError,
    HeaderNotFoundError,
    SnapshotParseError,
)

BODY = (
    "SNO,PANA-01,2024\r\n"
    "UNIT,W\r\n"
    "YYYYMMDDhhmm,ch1,ch2,ch3\r\n"
    "202410190930,1F4,A,3E8\r\n"
)


class TestParseSnapshot:
    """Test CSV decoding"""

    def test_ragged_rows(self):
        rows = parse_snapshot(BODY)
        assert [len(r) for r in rows] == [3, 2, 4, 4]

    def test_blank_lines_dropped(self):
        rows = parse_snapshot("a,b\n\n\nc\n")
        assert rows == [["a", "b"], ["c"]]

    def test_quoted_fields(self):
        rows = parse_snapshot('"x,y",z\n')
        assert rows == [["x,y", "z"]]

    def test_empty_body(self):
        assert parse_snapshot("") == []

    def test_unterminated_quote_raises(self):
        with pytest.raises(SnapshotParseError, match="Error parsing CSV"):
            parse_snapshot('YYYYMMDDhhmm,a\n"unterminated,1F4\n')

    def test_garbage_after_closing_quote_raises(self):
        with pytest.raises(SnapshotParseError):
            parse_snapshot('"a"b,c\n')


class TestFindHeader:
    """Test header marker lookup"""

    def test_marker_value(self):
        assert HEADER_MARKER == "YYYYMMDDhhmm"

    def test_found(self):
        assert find_header(parse_snapshot(BODY)) == 2

    def test_first_match_wins(self):
        rows = [["YYYYMMDDhhmm"], ["1"], ["YYYYMMDDhhmm"], ["2"]]
        assert find_header(rows) == 0

    def test_marker_must_be_first_field(self):
        with pytest.raises(HeaderNotFoundError):
            find_header([["x", "YYYYMMDDhhmm"], ["1"]])

    def test_marker_must_match_exactly(self):
        with pytest.raises(HeaderNotFoundError):
            find_header([[" YYYYMMDDhhmm"], ["yyyymmddhhmm"]])

    def test_missing(self):
        with pytest.raises(HeaderNotFoundError, match="not found"):
            find_header([["a"], ["b"]])


class TestSelectDataRow:
    """Test data row selection"""

    def test_row_after_header(self):
        assert select_data_row(parse_snapshot(BODY)) == ["202410190930", "1F4", "A", "3E8"]

    def test_header_last_row(self):
        with pytest.raises(DataRowMissingError):
            select_data_row(parse_snapshot("UNIT,W\nYYYYMMDDhhmm,ch1\n"))

    def test_blank_line_between_header_and_data(self):
        rows = parse_snapshot("YYYYMMDDhhmm,ch1\n\n202410190930,1F4\n")
        assert select_data_row(rows) == ["202410190930", "1F4"]

    def test_missing_header(self):
        with pytest.raises(HeaderNotFoundError):
            select_data_row(parse_snapshot("a,b\nc,d\n"))

    def test_errors_are_parse_errors(self):
        assert issubclass(HeaderNotFoundError, SnapshotParseError)
        assert issubclass(DataRowMissingError, SnapshotParseError)
