from unittest.mock import MagicMock

import gspread
import pytest
import requests

from linkaudit.exceptions import StoreError
from linkaudit.services.sheet_store import SheetStore


def _connected_store():
    spreadsheet = MagicMock()
    client = MagicMock()
    client.open_by_key.return_value = spreadsheet
    factory = MagicMock(return_value=client)
    store = SheetStore("sheet-123", client_factory=factory)
    store.connect("creds")
    return store, spreadsheet, factory, client


def test_connect_opens_by_key():
    store, spreadsheet, factory, client = _connected_store()
    factory.assert_called_once_with("creds")
    client.open_by_key.assert_called_once_with("sheet-123")
    assert store.spreadsheet is spreadsheet


def test_operations_require_connect():
    with pytest.raises(RuntimeError):
        SheetStore("sheet-123", client_factory=MagicMock()).read_range("A1")


def test_read_range_returns_values():
    store, spreadsheet, _, _ = _connected_store()
    spreadsheet.values_get.return_value = {"range": "ExcludeKeywords!A2:B3", "values": [["a", "b"]]}
    assert store.read_range("ExcludeKeywords!A2:B") == [["a", "b"]]
    spreadsheet.values_get.assert_called_once_with("ExcludeKeywords!A2:B")


def test_read_range_without_values_is_empty():
    store, spreadsheet, _, _ = _connected_store()
    spreadsheet.values_get.return_value = {"range": "ExcludeKeywords!A2:B"}
    assert store.read_range("ExcludeKeywords!A2:B") == []


def test_append_uses_user_entered_rows():
    store, spreadsheet, _, _ = _connected_store()
    store.append_values("Pages!A2:E2", [["x", 1, 1, 0, 0]])
    spreadsheet.values_append.assert_called_once_with(
        "Pages!A2:E2",
        params={"valueInputOption": "USER_ENTERED"},
        body={"range": "Pages!A2:E2", "majorDimension": "ROWS", "values": [["x", 1, 1, 0, 0]]},
    )


def test_update_values():
    store, spreadsheet, _, _ = _connected_store()
    store.update_values("Summary!A4", [["Finished"]])
    spreadsheet.values_update.assert_called_once_with(
        "Summary!A4",
        params={"valueInputOption": "USER_ENTERED"},
        body={"range": "Summary!A4", "majorDimension": "ROWS", "values": [["Finished"]]},
    )


def test_batch_update_wraps_requests():
    store, spreadsheet, _, _ = _connected_store()
    store.batch_update([{"a": 1}])
    spreadsheet.batch_update.assert_called_once_with({"requests": [{"a": 1}]})


def test_sheet_id_is_cached():
    store, spreadsheet, _, _ = _connected_store()
    spreadsheet.worksheet.return_value = MagicMock(id=42)
    assert store.sheet_id("Errors") == 42
    assert store.sheet_id("Errors") == 42
    spreadsheet.worksheet.assert_called_once_with("Errors")


@pytest.mark.parametrize("error", [gspread.exceptions.GSpreadException("boom"), requests.exceptions.ConnectionError("down")])
def test_api_errors_become_store_errors(error):
    store, spreadsheet, _, _ = _connected_store()
    spreadsheet.values_append.side_effect = error
    with pytest.raises(StoreError) as exc:
        store.append_values("Errors!A2:D2", [["x"]])
    assert exc.value.operation == "append_values"
    assert exc.value.original is error


def test_connect_failure_is_store_error():
    client = MagicMock()
    client.open_by_key.side_effect = gspread.exceptions.SpreadsheetNotFound("missing")
    store = SheetStore("nope", client_factory=MagicMock(return_value=client))
    with pytest.raises(StoreError):
        store.connect("creds")
