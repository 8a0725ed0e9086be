"""Transport layer for talking to the Sheets and Drive APIs.

Defines the Transport protocol and implementations:
- GoogleSheetsTransport: Production transport using the Google REST APIs
- LocalFileTransport: Test transport reading from local golden files
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.parse
from abc import ABC, abstractmethod
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

import certifi
import httpx

from gsheetsync.config import Settings, get_settings
from gsheetsync.models import SPREADSHEET_MIME_TYPE, DriveFile, SpreadsheetInfo, ValueRange

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Base exception for transport errors."""


class AuthenticationError(TransportError):
    """Raised when authentication fails (401/403)."""


class NotFoundError(TransportError):
    """Raised when a spreadsheet or file is not found (404)."""


class APIError(TransportError):
    """Raised when the API returns an error."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class Transport(ABC):
    """Abstract base class for spreadsheet transport.

    Implementations fetch spreadsheet metadata and values and send
    write requests to a spreadsheet source (Google API, local files, etc.).
    """

    @abstractmethod
    async def get_spreadsheet(self, spreadsheet_id: str) -> SpreadsheetInfo:
        """Fetch spreadsheet metadata (sheets and protected ranges, no cells)."""
        ...

    @abstractmethod
    async def create_spreadsheet(self, body: dict[str, Any]) -> SpreadsheetInfo:
        """Create a spreadsheet from a spreadsheets.create body."""
        ...

    @abstractmethod
    async def get_values(self, spreadsheet_id: str, range_: str) -> ValueRange:
        """Fetch cell values for a sheet-qualified A1 range."""
        ...

    @abstractmethod
    async def batch_update_values(
        self, spreadsheet_id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """Send a values:batchUpdate body."""
        ...

    @abstractmethod
    async def clear_values(self, spreadsheet_id: str, range_: str) -> dict[str, Any]:
        """Clear the values of a sheet-qualified A1 range."""
        ...

    @abstractmethod
    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Send spreadsheets:batchUpdate requests."""
        ...

    @abstractmethod
    async def find_files(self, name: str) -> list[DriveFile]:
        """Find spreadsheets in Drive by exact name."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""
        ...


class GoogleSheetsTransport(Transport):
    """Production transport that talks to the Google Sheets and Drive APIs.

    Handles authentication, SSL, and HTTP communication.
    """

    def __init__(
        self,
        access_token: str,
        timeout: int | None = None,
        *,
        settings: Settings | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth2 access token with spreadsheets (and
                drive.metadata.readonly, for name lookups) scope
            timeout: Request timeout in seconds (defaults to settings)
            settings: Endpoint configuration (defaults to get_settings())
            http_transport: Optional httpx transport, e.g. httpx.MockTransport
        """
        if not access_token.strip():
            raise ValueError("Access token cannot be blank")
        self._settings = settings or get_settings()
        self._timeout = timeout if timeout is not None else self._settings.timeout
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        self._client = httpx.AsyncClient(
            timeout=self._timeout,
            verify=ssl_context,
            transport=http_transport,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    def _sheets_url(self, spreadsheet_id: str, suffix: str = "") -> str:
        return f"{self._settings.sheets_api_base}/{spreadsheet_id}{suffix}"

    async def get_spreadsheet(self, spreadsheet_id: str) -> SpreadsheetInfo:
        """Fetch spreadsheet metadata from Google Sheets API."""
        response = await self._request("GET", self._sheets_url(spreadsheet_id))
        return SpreadsheetInfo.from_api(response)

    async def create_spreadsheet(self, body: dict[str, Any]) -> SpreadsheetInfo:
        response = await self._request(
            "POST", self._settings.sheets_api_base, payload=body
        )
        return SpreadsheetInfo.from_api(response)

    async def get_values(self, spreadsheet_id: str, range_: str) -> ValueRange:
        quoted = urllib.parse.quote(range_, safe="")
        response = await self._request(
            "GET", self._sheets_url(spreadsheet_id, f"/values/{quoted}")
        )
        return ValueRange.from_api(response)

    async def batch_update_values(
        self, spreadsheet_id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "POST", self._sheets_url(spreadsheet_id, "/values:batchUpdate"), payload=body
        )

    async def clear_values(self, spreadsheet_id: str, range_: str) -> dict[str, Any]:
        quoted = urllib.parse.quote(range_, safe="")
        return await self._request(
            "POST", self._sheets_url(spreadsheet_id, f"/values/{quoted}:clear"), payload={}
        )

    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Send batch update requests to Google Sheets API."""
        return await self._request(
            "POST",
            self._sheets_url(spreadsheet_id, ":batchUpdate"),
            payload={"requests": requests},
        )

    async def find_files(self, name: str) -> list[DriveFile]:
        """Look up spreadsheets by name with a Drive files.list query."""
        escaped = name.replace("\\", "\\\\").replace("'", "\\'")
        params = {
            "q": f"name = '{escaped}' and mimeType = '{SPREADSHEET_MIME_TYPE}' "
            "and trashed = false",
            "fields": "files(id,name,mimeType)",
        }
        response = await self._request(
            "GET", f"{self._settings.drive_api_base}/files", params=params
        )
        return [DriveFile.from_api(f) for f in response.get("files", [])]

    async def _request(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and decode the JSON response."""
        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(method, url, json=payload, params=params)
            response.raise_for_status()
            result: dict[str, Any] = response.json() if response.content else {}
            return result
        except httpx.HTTPStatusError as e:
            raise self._handle_http_error(e) from e
        except httpx.RequestError as e:
            raise TransportError(f"Network error: {e}") from e

    def _handle_http_error(self, e: httpx.HTTPStatusError) -> TransportError:
        """Convert HTTP errors to appropriate transport exceptions."""
        status = e.response.status_code
        if status == 401:
            return AuthenticationError("Invalid or expired access token")
        if status == 403:
            return AuthenticationError(
                "Access denied. Check your scopes and permissions."
            )
        if status == 404:
            return NotFoundError(
                "Spreadsheet not found. Check the ID and sharing permissions."
            )
        body = e.response.text
        return APIError(f"API error ({status}): {body}", status_code=status)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()


class LocalFileTransport(Transport):
    """Test transport that reads from local golden files.

    Expected directory structure:
        golden_dir/
            drive_files.json            (optional, list of Drive file dicts)
            <spreadsheet_id>/
                spreadsheet.json
                values.json             (optional, requested range -> ValueRange)

    Writes are not applied; they are recorded for test assertions.
    """

    def __init__(self, golden_dir: Path) -> None:
        """Initialize the transport.

        Args:
            golden_dir: Directory containing golden test files
        """
        self._golden_dir = golden_dir
        self._batch_updates: list[dict[str, Any]] = []
        self._value_updates: list[dict[str, Any]] = []
        self._cleared_ranges: list[dict[str, str]] = []
        self._created: list[dict[str, Any]] = []
        self._next_sheet_id = 1000

    def _read_json(self, path: Path) -> Any:
        if not path.exists():
            raise NotFoundError(f"Golden file not found: {path}")
        return json.loads(path.read_text())

    async def get_spreadsheet(self, spreadsheet_id: str) -> SpreadsheetInfo:
        """Read spreadsheet metadata from local file."""
        path = self._golden_dir / spreadsheet_id / "spreadsheet.json"
        return SpreadsheetInfo.from_api(self._read_json(path))

    async def create_spreadsheet(self, body: dict[str, Any]) -> SpreadsheetInfo:
        """Record the create request and return a mock spreadsheet."""
        self._created.append(body)
        return SpreadsheetInfo.from_api(
            {
                "spreadsheetId": f"local-{len(self._created)}",
                "properties": body.get("properties", {}),
                "sheets": [
                    {"properties": {"sheetId": 0, "title": "Sheet1", "index": 0}}
                ],
            }
        )

    async def get_values(self, spreadsheet_id: str, range_: str) -> ValueRange:
        """Read the served ValueRange for ``range_`` from values.json.

        Ranges without an entry are served as empty, as the API does.
        """
        path = self._golden_dir / spreadsheet_id / "values.json"
        if not path.exists():
            return ValueRange(range=range_)
        served = json.loads(path.read_text()).get(range_)
        if served is None:
            return ValueRange(range=range_)
        return ValueRange.from_api(served)

    async def batch_update_values(
        self, spreadsheet_id: str, body: dict[str, Any]
    ) -> dict[str, Any]:
        """Record values:batchUpdate bodies (for testing)."""
        self._value_updates.append({"spreadsheet_id": spreadsheet_id, "body": body})
        return {
            "spreadsheetId": spreadsheet_id,
            "totalUpdatedCells": len(body.get("data", [])),
        }

    async def clear_values(self, spreadsheet_id: str, range_: str) -> dict[str, Any]:
        """Record cleared ranges (for testing)."""
        self._cleared_ranges.append({"spreadsheet_id": spreadsheet_id, "range": range_})
        return {"spreadsheetId": spreadsheet_id, "clearedRange": range_}

    async def batch_update(
        self, spreadsheet_id: str, requests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Record batch update requests (for testing).

        addSheet requests get a reply carrying a newly assigned sheetId.
        """
        self._batch_updates.append(
            {"spreadsheet_id": spreadsheet_id, "requests": requests}
        )
        replies: list[dict[str, Any]] = []
        for request in requests:
            if "addSheet" in request:
                properties = dict(request["addSheet"].get("properties", {}))
                properties.setdefault("sheetId", self._next_sheet_id)
                self._next_sheet_id += 1
                replies.append({"addSheet": {"properties": properties}})
            else:
                replies.append({})
        return {"spreadsheetId": spreadsheet_id, "replies": replies}

    async def find_files(self, name: str) -> list[DriveFile]:
        path = self._golden_dir / "drive_files.json"
        if not path.exists():
            return []
        return [
            DriveFile.from_api(f)
            for f in json.loads(path.read_text())
            if f.get("name") == name
        ]

    async def close(self) -> None:
        """No-op for local file transport."""
        pass

    @property
    def batch_updates(self) -> list[dict[str, Any]]:
        """Get recorded batch updates (for test assertions)."""
        return self._batch_updates

    @property
    def value_updates(self) -> list[dict[str, Any]]:
        return self._value_updates

    @property
    def cleared_ranges(self) -> list[dict[str, str]]:
        return self._cleared_ranges

    @property
    def created(self) -> list[dict[str, Any]]:
        return self._created
