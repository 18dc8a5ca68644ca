import logging
from dataclasses import dataclass
from typing import Optional

from linkaudit.domain.link_result import LinkResult
from linkaudit.domain.page_record import BrokenLinkRow, hyperlink_formula
from linkaudit.domain.run_session import RunSession

logger = logging.getLogger(__name__)

BROKEN = "broken"
EXCLUDED = "excluded"
OK = "ok"


@dataclass(frozen=True)
class Disposition:
    kind: str
    reason: Optional[str] = None
    cached: bool = False

    @classmethod
    def broken(cls, reason: Optional[str]) -> "Disposition":
        return cls(BROKEN, reason)

    @classmethod
    def excluded(cls, reason: Optional[str]) -> "Disposition":
        return cls(EXCLUDED, reason)

    @classmethod
    def ok(cls, cached: bool = False) -> "Disposition":
        return cls(OK, cached=cached)


def classify(result: LinkResult) -> Disposition:
    # broken > excluded > ok
    if result.broken:
        return Disposition.broken(result.broken_reason)
    if result.excluded:
        return Disposition.excluded(result.excluded_reason)
    return Disposition.ok(cached=bool(result.cached))


def pad_status(status: str) -> str:
    return status.ljust(7)[:7]


def record_broken_link(session: RunSession, reason: str, resolved_url: Optional[str], original_url: Optional[str]) -> BrokenLinkRow:
    """Add a broken row for the current page and log it."""
    page = session.current_page
    row = BrokenLinkRow(
        source_url_formula=hyperlink_formula(page.url, session.site_url),
        reason=reason,
        resolved_url=resolved_url,
        original_url=original_url,
    )
    page.record_broken(row)
    logger.warning("-> %s %s %s", pad_status("ERROR"), resolved_url or original_url, reason)
    return row


class ResultClassifier:
    """Turns each checked link into a disposition and updates the run's counters."""

    def handle(self, session: RunSession, result: LinkResult) -> Disposition:
        disposition = classify(result)
        url = result.display_url
        if disposition.kind == BROKEN:
            record_broken_link(session, disposition.reason, result.resolved_url, result.original_url)
            session.summary.record_broken(url)
        elif disposition.kind == EXCLUDED:
            session.current_page.record_excluded()
            session.summary.record_skipped(url)
            logger.debug("-> %s %s %s", pad_status("SKIPPED"), url, disposition.reason)
        else:
            session.current_page.record_ok()
            logger.debug("-> %s %s", pad_status("CACHED" if disposition.cached else "OK"), url)
        return disposition
