"""Custom exceptions for gsheetsync addressing and sheet resolution."""

from __future__ import annotations


class SheetsError(Exception):
    """Base exception for gsheetsync validation errors."""

    pass


class InvalidReferenceError(SheetsError, ValueError):
    """Raised when a cell, column or row reference is not valid A1 notation.

    Covers grammar failures ("2B", "") and bound violations (column beyond
    ZZ, row beyond 100000).
    """

    def __init__(self, reference: str, reason: str | None = None) -> None:
        self.reference = reference
        self.reason = reason
        message = f"Invalid cell reference: '{reference}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidRangeError(SheetsError, ValueError):
    """Raised when a range is malformed.

    Either its start lies after its end, or a sheet-qualified range string
    lacks the '!' separator or carries an invalid cell.
    """

    def __init__(self, range_: str, reason: str) -> None:
        self.range = range_
        self.reason = reason
        super().__init__(f"Invalid range '{range_}': {reason}")


class SheetNotFoundError(SheetsError, LookupError):
    """Raised when a sheet title cannot be resolved to a numeric sheet ID."""

    def __init__(self, title: str, spreadsheet_id: str | None = None) -> None:
        self.title = title
        self.spreadsheet_id = spreadsheet_id
        where = f" in spreadsheet '{spreadsheet_id}'" if spreadsheet_id else ""
        super().__init__(f"Sheet '{title}' not found{where}")


class ResponseFormatError(SheetsError):
    """Raised when an API response does not have the expected shape."""

    def __init__(self, what: str, reason: str) -> None:
        self.what = what
        self.reason = reason
        super().__init__(f"Malformed {what} in API response: {reason}")
