"""
Custom exceptions for the Panasonic breaker box exporter.
Hierarchical exception structure separating startup failures from
recoverable per-scrape failures.
"""


class BaseExporterException(Exception):
    """Base exception for the exporter"""
    pass


class ConfigurationError(BaseExporterException):
    """Error in configuration loading or validation"""
    pass


class FetchError(BaseExporterException):
    """Error fetching the snapshot from the breaker box"""
    pass


class SnapshotParseError(BaseExporterException):
    """Response body could not be decoded as CSV"""
    pass


class HeaderNotFoundError(SnapshotParseError):
    """Header marker row missing from the snapshot"""
    pass


class DataRowMissingError(SnapshotParseError):
    """No data row follows the header marker row"""
    pass


class ReadingError(BaseExporterException):
    """A single mapping entry could not be turned into a reading"""

    def __init__(self, entity: str, message: str):
        super().__init__(message)
        self.entity = entity


class ColumnOutOfRangeError(ReadingError):
    """Mapped column index is beyond the end of the data row"""
    pass


class InvalidHexValueError(ReadingError):
    """Field at the mapped column is not a hexadecimal integer"""
    pass
