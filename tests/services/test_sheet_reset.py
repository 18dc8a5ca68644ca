from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from linkaudit.exceptions import StoreError
from linkaudit.services.sheet_reset import ERRORS_HEADERS, PAGES_HEADERS, SheetReset, build_requests

STARTED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
SHEET_IDS = {"Summary": 635298754, "Errors": 0, "Pages": 352617043}


def _store():
    store = MagicMock()
    store.sheet_id.side_effect = lambda title: SHEET_IDS[title]
    return store


def _header_values(requests_, sheet_id):
    for r in requests_:
        cells = r.get("updateCells", {})
        if cells.get("start", {}).get("sheetId") == sheet_id and "rows" in cells and cells["start"]["rowIndex"] == 0:
            return cells["rows"][0]["values"]
    return None


def test_headers_are_bold_and_labelled():
    requests_ = build_requests(635298754, 0, 352617043, STARTED)
    errors = _header_values(requests_, 0)
    pages = _header_values(requests_, 352617043)
    assert [c["userEnteredValue"]["stringValue"] for c in errors] == ERRORS_HEADERS
    assert [c["userEnteredValue"]["stringValue"] for c in pages] == PAGES_HEADERS
    assert all(c["userEnteredFormat"]["textFormat"]["bold"] for c in errors + pages)


def test_both_result_sheets_are_cleared_and_frozen():
    requests_ = build_requests(635298754, 0, 352617043, STARTED)
    cleared = [r["updateCells"]["range"]["sheetId"] for r in requests_ if "range" in r.get("updateCells", {})]
    frozen = [r["updateSheetProperties"]["properties"]["sheetId"] for r in requests_ if "updateSheetProperties" in r]
    assert cleared == [0, 352617043]
    assert frozen == [0, 352617043]


def test_summary_row_marks_run_as_running():
    requests_ = build_requests(635298754, 0, 352617043, STARTED)
    insert = requests_[0]["insertDimension"]["range"]
    assert (insert["sheetId"], insert["startIndex"], insert["endIndex"]) == (635298754, 3, 4)
    values = requests_[1]["updateCells"]["rows"][0]["values"]
    assert [v["userEnteredValue"]["stringValue"] for v in values] == ["Running", "2024-01-02T03:04:05+00:00"]


def test_reset_sends_one_batch_update_and_is_repeatable():
    store = _store()
    reset = SheetReset(store)
    reset.reset(STARTED)
    reset.reset(STARTED)

    assert store.batch_update.call_count == 2
    first, second = (c.args[0] for c in store.batch_update.call_args_list)
    assert first == second


def test_reset_failure_propagates():
    store = _store()
    store.batch_update.side_effect = StoreError("batch_update", RuntimeError("500"))
    with pytest.raises(StoreError):
        SheetReset(store).reset(STARTED)
