import logging
from typing import Callable, Optional

import gspread
import requests

from linkaudit.exceptions import StoreError

logger = logging.getLogger(__name__)

USER_ENTERED = "USER_ENTERED"


class SheetStore:
    """Range-addressed reads and writes against one Google Sheets document.

    `connect(credentials)` must be called before any other operation. The
    `client_factory` turns credentials into a gspread client and defaults to
    `gspread.authorize`.
    """

    def __init__(self, spreadsheet_id: str, client_factory: Callable = gspread.authorize):
        self.spreadsheet_id = spreadsheet_id
        self._client_factory = client_factory
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._sheet_ids: dict = {}

    def connect(self, credentials) -> None:
        client = self._call("open", lambda: self._client_factory(credentials))
        self._spreadsheet = self._call("open", lambda: client.open_by_key(self.spreadsheet_id))
        logger.debug("Opened spreadsheet %s", self.spreadsheet_id)

    @property
    def spreadsheet(self) -> gspread.Spreadsheet:
        if self._spreadsheet is None:
            raise RuntimeError("SheetStore.connect() has not been called")
        return self._spreadsheet

    def _call(self, operation: str, fn: Callable):
        try:
            return fn()
        except (gspread.exceptions.GSpreadException, requests.exceptions.RequestException) as e:
            raise StoreError(operation, e) from e

    def read_range(self, range_name: str) -> list:
        response = self._call("read_range", lambda: self.spreadsheet.values_get(range_name))
        return response.get("values", []) or []

    def update_values(self, range_name: str, rows: list):
        body = {"range": range_name, "majorDimension": "ROWS", "values": rows}
        return self._call(
            "update_values",
            lambda: self.spreadsheet.values_update(range_name, params={"valueInputOption": USER_ENTERED}, body=body),
        )

    def append_values(self, range_name: str, rows: list):
        body = {"range": range_name, "majorDimension": "ROWS", "values": rows}
        return self._call(
            "append_values",
            lambda: self.spreadsheet.values_append(range_name, params={"valueInputOption": USER_ENTERED}, body=body),
        )

    def batch_update(self, requests_: list):
        return self._call("batch_update", lambda: self.spreadsheet.batch_update({"requests": requests_}))

    def sheet_id(self, title: str) -> int:
        """Numeric id of the worksheet named `title`, looked up once and cached."""
        if title not in self._sheet_ids:
            worksheet = self._call("sheet_id", lambda: self.spreadsheet.worksheet(title))
            self._sheet_ids[title] = worksheet.id
        return self._sheet_ids[title]
