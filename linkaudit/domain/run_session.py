from typing import Optional

from linkaudit.domain.crawl_options import CrawlOptions
from linkaudit.domain.page_record import PageRecord
from linkaudit.domain.run_state import RunState
from linkaudit.domain.run_summary import RunSummary


class RunSession:
    """
    State for a single link audit run.

    Passed to every crawl event handler. Holds the run summary, the record of
    the page currently being checked and the run's lifecycle state.
    """

    def __init__(self, site_url: str, summary: RunSummary, options: Optional[CrawlOptions] = None):
        self.site_url = site_url
        self.summary = summary
        self.options = options or CrawlOptions()
        self.state = RunState.IDLE
        self.current_page: Optional[PageRecord] = None
        self._crawler = None

    def start_page(self, page_url: str) -> PageRecord:
        """Replace the current page record with a fresh one for `page_url`."""
        self.current_page = PageRecord(url=page_url)
        return self.current_page

    def attach_crawler(self, crawler) -> None:
        self._crawler = crawler

    def pages_remaining(self) -> int:
        """Pages still queued in the attached site checker (0 when none is attached)."""
        if self._crawler is None:
            return 0
        return self._crawler.num_pages()

    def transition(self, state: RunState) -> None:
        self.state = state
