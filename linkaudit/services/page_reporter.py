import logging
from typing import Optional

from linkaudit.domain.link_result import PageFetchError
from linkaudit.domain.page_record import PageRecord
from linkaudit.domain.run_session import RunSession
from linkaudit.services.result_classifier import record_broken_link
from linkaudit.services.sheet_store import SheetStore
from linkaudit.services.write_policy import WritePolicy

logger = logging.getLogger(__name__)

ERRORS_RANGE = "Errors!A2:D2"
PAGES_RANGE = "Pages!A2:E2"

# A page "error" with this code means the page answered but was not HTML.
NOT_HTML_CODE = 200


class PageReporter:
    """Writes each completed page's broken links and link counts to the sheet."""

    def __init__(self, store: SheetStore, write_policy: WritePolicy):
        self.store = store
        self.write_policy = write_policy

    def on_html(self, session: RunSession, page_url: str) -> PageRecord:
        logger.info("%s", page_url)
        return session.start_page(page_url)

    def on_page(self, session: RunSession, error: Optional[PageFetchError], page_url: str) -> PageRecord:
        if error is not None:
            self.on_html(session, page_url)
            if error.code != NOT_HTML_CODE:
                record_broken_link(session, f"HTTP_{error.code}", error.message, "")
                session.summary.record_broken(page_url)
        page = session.current_page

        self.save_errors(page)
        session.summary.record_page_completion(page)
        self._log_progress(session, page)
        self.save_page(session, page)
        return page

    def _log_progress(self, session: RunSession, page: PageRecord) -> None:
        logger.info(
            "Links: %s | OK: %s | Broken: %s | Skipped: %s",
            page.link_count,
            page.link_ok,
            page.link_broken,
            page.link_excluded,
        )
        checked = session.summary.pages_checked
        logger.info("Pages Completed: %s of %s", checked, checked + session.pages_remaining())

    def save_errors(self, page: PageRecord):
        if not page.broken_link_rows:
            return None
        rows = [row.as_row() for row in page.broken_link_rows]
        return self.write_policy.submit("save_errors", lambda: self.store.append_values(ERRORS_RANGE, rows))

    def save_page(self, session: RunSession, page: PageRecord):
        row = page.summary_row(session.site_url)
        return self.write_policy.submit("save_page", lambda: self.store.append_values(PAGES_RANGE, [row]))
