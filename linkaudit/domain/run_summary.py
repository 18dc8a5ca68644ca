from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Set

from linkaudit.domain.page_record import PageRecord
from linkaudit.utils.datetime_utils import format_timestamp


@dataclass
class RunSummary:
    """Counters for the whole run, folded in page by page.

    `links_total` always equals the sum of `link_count` over completed pages.
    """

    started_at: datetime
    pages_checked: int = 0
    pages_with_errors: int = 0
    links_total: int = 0
    links_ok: int = 0
    broken_links: Set[str] = field(default_factory=set)
    skipped_links: Set[str] = field(default_factory=set)
    finished_at: Optional[datetime] = None

    def record_broken(self, url: str) -> None:
        self.broken_links.add(url)

    def record_skipped(self, url: str) -> None:
        self.skipped_links.add(url)

    def record_page_completion(self, page: PageRecord) -> None:
        self.pages_checked += 1
        if page.has_errors:
            self.pages_with_errors += 1
        self.links_total += page.link_count
        self.links_ok += page.link_ok

    def finish(self, finished_at: datetime) -> None:
        self.finished_at = finished_at

    def summary_row(self) -> list:
        return [
            "Finished",
            format_timestamp(self.started_at),
            format_timestamp(self.finished_at),
            self.pages_checked,
            self.pages_with_errors,
            self.links_total,
            self.links_ok,
            len(self.broken_links),
            len(self.skipped_links),
        ]
