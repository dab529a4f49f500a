"""
Exception types raised by the LPJ ASCII to NetCDF converter.

All exceptions inherit from ConversionError so callers can abort a run with a
single handler.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base exception for all conversion errors."""
    pass


class InvalidGrid(ConversionError):
    """Raised when the grid extent/resolution arguments cannot form a lattice."""
    pass


class RecordError(ConversionError):
    """Base exception for malformed input records."""
    pass


class ColumnCountMismatch(RecordError):
    """Raised when a record's field count differs from the expected count."""

    def __init__(self, expected: int, found: int, line_number: int | None = None):
        self.expected = expected
        self.found = found
        self.line_number = line_number
        where = f" (line {line_number})" if line_number is not None else ""
        super().__init__(
            f"Number of columns incorrect{where}. Should be {expected} is {found}."
        )


class MalformedRecord(RecordError):
    """Raised when a record field is not numeric."""
    pass


class EmptyInput(RecordError):
    """Raised when the input holds a header but no records."""
    pass


class IndexOutOfRange(ConversionError):
    """Raised when a record maps outside the computed lattice or time extent."""
    pass


class UnsortedInput(ConversionError):
    """Raised when records of a point are not in strictly ascending year order."""
    pass


class StoreError(ConversionError):
    """Raised when the NetCDF output cannot be opened or written."""
    pass


class OutputExists(StoreError):
    """Raised when the output exists and neither overwrite nor modify was requested."""
    pass


class AxisMismatch(StoreError):
    """Raised when a modified file's dimension sizes differ from the new grid."""
    pass
