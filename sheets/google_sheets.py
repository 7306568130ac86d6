"""Client for the Google Sheets values endpoint holding the event table."""
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import requests

from processor.event_mapper import EventMapper
from processor.models import Event

logger = logging.getLogger(__name__)

DEFAULT_SHEET_ID = '1184qmC-7mpZtpg15R--il4K3tVxSTAcJUZxpWf9KFAs'
DEFAULT_SHEET_NAME = 'Página2'


class SheetsFetchError(Exception):
    """Raised when the sheet cannot be fetched or its payload is unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GoogleSheetsClient:
    """Read-only client for a single sheet of a spreadsheet."""

    BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"

    def __init__(
        self,
        sheet_id: str = DEFAULT_SHEET_ID,
        sheet_name: str = DEFAULT_SHEET_NAME,
        api_key: Optional[str] = None,
        timeout: int = 30,
        mapper: Optional[EventMapper] = None
    ):
        """
        Initialize the sheets client.

        Args:
            sheet_id: Spreadsheet identifier
            sheet_name: Name of the sheet holding the events
            api_key: Google API key (the request is attempted even without it)
            timeout: HTTP request timeout in seconds (default: 30)
            mapper: Row mapper (default: EventMapper())
        """
        self.sheet_id = sheet_id
        self.sheet_name = sheet_name
        self.api_key = api_key
        self.timeout = timeout
        self.mapper = mapper or EventMapper()

        if not api_key:
            logger.error(
                "Google Sheets API key is missing. "
                "Set GOOGLE_SHEETS_API_KEY in the environment"
            )

    @property
    def values_url(self) -> str:
        """URL of the values endpoint for the configured sheet."""
        return (
            f"{self.BASE_URL}/{quote(self.sheet_id, safe='')}"
            f"/values/{quote(self.sheet_name, safe='')}"
        )

    def fetch_events(self) -> List[Event]:
        """
        Fetch the sheet and map its rows to events.

        Returns:
            List of Event objects (empty if the sheet has no data rows)

        Raises:
            SheetsFetchError: If the request fails or the payload is malformed
        """
        values = self.fetch_values()
        events = self.mapper.map_rows(self.mapper.rows_from_values(values))
        logger.info(f"Successfully fetched {len(events)} events")
        return events

    def fetch_values(self) -> List[List[Any]]:
        """
        Fetch the raw values grid, header row included.

        Returns:
            Two-dimensional list of cells

        Raises:
            SheetsFetchError: If the request fails or the payload is malformed
        """
        params = {'key': self.api_key} if self.api_key else None

        logger.info(f"Fetching sheet '{self.sheet_name}'")
        try:
            response = requests.get(
                self.values_url,
                params=params,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Request to Google Sheets failed: {e}")
            raise SheetsFetchError(
                f"Failed to fetch data from Google Sheets: {e}"
            ) from e

        if not response.ok:
            detail = self._error_detail(response)
            logger.error(
                f"Google Sheets responded with status {response.status_code}: {detail}"
            )
            raise SheetsFetchError(
                f"Failed to fetch data from Google Sheets: {detail}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise SheetsFetchError(
                "Failed to fetch data from Google Sheets: response is not valid JSON",
                status_code=response.status_code
            ) from e

        if not isinstance(data, dict):
            raise SheetsFetchError(
                f"Failed to fetch data from Google Sheets: unexpected payload type "
                f"{type(data).__name__}",
                status_code=response.status_code
            )

        values = data.get('values')
        if values is None:
            return []
        if not isinstance(values, list):
            raise SheetsFetchError(
                "Failed to fetch data from Google Sheets: 'values' is not a list",
                status_code=response.status_code
            )
        return values

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        """
        Extract a readable error from a non-success response.

        Uses the ``error.message`` field of a JSON body when present,
        otherwise the HTTP reason phrase.
        """
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            error = body.get('error')
            if isinstance(error, dict) and error.get('message'):
                return str(error['message'])

        return response.reason or str(response.status_code)
