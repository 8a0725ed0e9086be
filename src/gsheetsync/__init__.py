"""gsheetsync - Google Sheets v4 client built on validated A1 addressing.

Reads come back as sparse {"B2": "value"} maps reconciled against the
requested window; writes and structural edits are translated into the
zero-based half-open indices the API expects.
"""

__version__ = "0.1.0"

from gsheetsync.a1 import (
    CellAddress,
    CellRange,
    column_name_to_number,
    column_number_to_name,
    is_valid_cell_reference,
    parse_cell_range,
    parse_cell_reference,
)
from gsheetsync.client import SheetConfig, SheetsClient, extract_spreadsheet_id
from gsheetsync.engine import OperationStatus, SheetsEngine, SyncResult
from gsheetsync.exceptions import (
    InvalidRangeError,
    InvalidReferenceError,
    ResponseFormatError,
    SheetNotFoundError,
    SheetsError,
)
from gsheetsync.reconcile import reconcile
from gsheetsync.transport import (
    APIError,
    AuthenticationError,
    GoogleSheetsTransport,
    LocalFileTransport,
    NotFoundError,
    Transport,
    TransportError,
)

__all__ = [
    "APIError",
    "AuthenticationError",
    "CellAddress",
    "CellRange",
    "GoogleSheetsTransport",
    "InvalidRangeError",
    "InvalidReferenceError",
    "LocalFileTransport",
    "NotFoundError",
    "OperationStatus",
    "ResponseFormatError",
    "SheetConfig",
    "SheetNotFoundError",
    "SheetsClient",
    "SheetsEngine",
    "SheetsError",
    "SyncResult",
    "Transport",
    "TransportError",
    "__version__",
    "column_name_to_number",
    "column_number_to_name",
    "extract_spreadsheet_id",
    "is_valid_cell_reference",
    "parse_cell_range",
    "parse_cell_reference",
    "reconcile",
]
