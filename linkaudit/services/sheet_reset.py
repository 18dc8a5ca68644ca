import logging
from datetime import datetime

from linkaudit.services.sheet_store import SheetStore
from linkaudit.utils.datetime_utils import format_timestamp

logger = logging.getLogger(__name__)

SUMMARY_SHEET = "Summary"
ERRORS_SHEET = "Errors"
PAGES_SHEET = "Pages"

ERRORS_HEADERS = ["Source URL", "Issue", "Resolved URL", "Original URL"]
PAGES_HEADERS = ["Source URL", "Links", "OK", "Broken", "Skipped"]

# Zero-based row of the summary line written for this run (A4).
SUMMARY_ROW_INDEX = 3


def _string_cell(value: str, bold: bool = False) -> dict:
    cell = {"userEnteredValue": {"stringValue": value}}
    if bold:
        cell["userEnteredFormat"] = {"textFormat": {"bold": True}}
    return cell


def _clear_values(sheet_id: int) -> dict:
    return {"updateCells": {"range": {"sheetId": sheet_id}, "fields": "userEnteredValue"}}


def _header_row(sheet_id: int, headers: list) -> dict:
    return {
        "updateCells": {
            "start": {"sheetId": sheet_id, "rowIndex": 0, "columnIndex": 0},
            "rows": [{"values": [_string_cell(h, bold=True) for h in headers]}],
            "fields": "userEnteredValue,userEnteredFormat.textFormat",
        }
    }


def _freeze_header(sheet_id: int) -> dict:
    return {
        "updateSheetProperties": {
            "properties": {"sheetId": sheet_id, "gridProperties": {"frozenRowCount": 1}},
            "fields": "gridProperties.frozenRowCount",
        }
    }


def build_requests(summary_id: int, errors_id: int, pages_id: int, started_at: datetime) -> list:
    """The batchUpdate requests that reset the workbook for a new run."""
    return [
        {
            "insertDimension": {
                "range": {
                    "sheetId": summary_id,
                    "dimension": "ROWS",
                    "startIndex": SUMMARY_ROW_INDEX,
                    "endIndex": SUMMARY_ROW_INDEX + 1,
                }
            }
        },
        {
            "updateCells": {
                "start": {"sheetId": summary_id, "rowIndex": SUMMARY_ROW_INDEX, "columnIndex": 0},
                "rows": [{"values": [_string_cell("Running"), _string_cell(format_timestamp(started_at))]}],
                "fields": "userEnteredValue",
            }
        },
        _clear_values(errors_id),
        _header_row(errors_id, ERRORS_HEADERS),
        _freeze_header(errors_id),
        _clear_values(pages_id),
        _header_row(pages_id, PAGES_HEADERS),
        _freeze_header(pages_id),
    ]


class SheetReset:
    def __init__(self, store: SheetStore):
        self.store = store

    def reset(self, started_at: datetime):
        """Clear and relabel the Errors and Pages sheets and mark the run as running in Summary.

        Sent as a single batchUpdate; a failure raises `StoreError`.
        """
        logger.info("Resetting workbook...")
        requests_ = build_requests(
            self.store.sheet_id(SUMMARY_SHEET),
            self.store.sheet_id(ERRORS_SHEET),
            self.store.sheet_id(PAGES_SHEET),
            started_at,
        )
        response = self.store.batch_update(requests_)
        logger.info("-> Workbook reset")
        return response
