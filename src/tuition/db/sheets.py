"""Google Sheets access.

Provides a thin client over the Sheets v4 ``spreadsheets.values`` API. The
API service object is passed in (constructor injection); the ``from_*``
factories build one from service-account credentials.

Any failure to reach or read the spreadsheet is raised as DataUnavailable.
No retries are attempted here.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Protocol

import httplib2
import structlog
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from tuition.config.app_config import SheetsConfig

logger = structlog.get_logger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]


class DataUnavailable(Exception):
    """Raised when the spreadsheet cannot be reached or read."""

    pass


class RowSource(Protocol):
    """Anything that can return a grid of cells for a range."""

    def get_values(self, range_name: str) -> list[list[Any]]: ...

    def batch_get(self, ranges: list[str]) -> list[list[list[Any]]]: ...


def decode_service_account(encoded: str) -> dict[str, Any]:
    """Decode base64-encoded service account JSON.

    Raises:
        DataUnavailable: If the value is not valid base64 JSON
    """
    try:
        info = json.loads(base64.b64decode(encoded).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise DataUnavailable("Service account credentials are not valid base64 JSON") from e
    if not isinstance(info, dict):
        raise DataUnavailable("Service account credentials must be a JSON object")
    return info


class SheetsClient:
    """Read-only client for one spreadsheet."""

    def __init__(self, service: Any, spreadsheet_id: str):
        self._service = service
        self.spreadsheet_id = spreadsheet_id

    @classmethod
    def from_service_account_info(cls, info: dict[str, Any], spreadsheet_id: str) -> SheetsClient:
        """Build a client from service account key data."""
        try:
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=SCOPES
            )
        except (ValueError, KeyError) as e:
            raise DataUnavailable(f"Invalid service account credentials: {e}") from e
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return cls(service, spreadsheet_id)

    @classmethod
    def from_service_account_file(cls, path: str, spreadsheet_id: str) -> SheetsClient:
        """Build a client from a service account key file."""
        try:
            credentials = service_account.Credentials.from_service_account_file(
                path, scopes=SCOPES
            )
        except (OSError, ValueError, KeyError) as e:
            raise DataUnavailable(f"Cannot load service account file: {e}") from e
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return cls(service, spreadsheet_id)

    @classmethod
    def from_config(cls, config: SheetsConfig) -> SheetsClient:
        """Build a client from environment variables named in SheetsConfig.

        Raises:
            DataUnavailable: If the spreadsheet ID or credentials are missing
        """
        spreadsheet_id = config.get_spreadsheet_id()
        if not spreadsheet_id:
            raise DataUnavailable(f"Missing {config.spreadsheet_id_env}")

        encoded = config.get_service_account_b64()
        if encoded:
            return cls.from_service_account_info(decode_service_account(encoded), spreadsheet_id)

        key_file = config.get_service_account_file()
        if key_file:
            return cls.from_service_account_file(key_file, spreadsheet_id)

        raise DataUnavailable(
            f"Missing {config.service_account_env} or {config.service_account_file_env}"
        )

    def get_values(self, range_name: str) -> list[list[Any]]:
        """Fetch the cell grid of a range (A1 notation or tab name).

        Returns:
            Rows of cells; empty list when the range has no data.

        Raises:
            DataUnavailable: On any API, auth or transport failure
        """
        try:
            response = (
                self._service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=range_name)
                .execute()
            )
        except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            logger.error("sheets_fetch_failed", range=range_name, error=str(e))
            raise DataUnavailable(f"Failed to load range '{range_name}'") from e

        values = response.get("values") or []
        logger.debug("sheets_fetched", range=range_name, rows=len(values))
        return values

    def batch_get(self, ranges: list[str]) -> list[list[list[Any]]]:
        """Fetch several ranges in one request, in the order given."""
        try:
            response = (
                self._service.spreadsheets()
                .values()
                .batchGet(spreadsheetId=self.spreadsheet_id, ranges=ranges)
                .execute()
            )
        except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            logger.error("sheets_batch_fetch_failed", ranges=ranges, error=str(e))
            raise DataUnavailable("Failed to load sheet data") from e

        value_ranges = response.get("valueRanges") or []
        grids = [vr.get("values") or [] for vr in value_ranges]
        # Pad when the API returns fewer ranges than requested
        grids.extend([] for _ in range(len(ranges) - len(grids)))
        return grids
