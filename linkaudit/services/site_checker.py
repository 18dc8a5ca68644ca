import logging
import time
from collections import deque
from typing import Callable, Deque, Optional
from urllib.parse import urljoin, urlparse

from linkaudit.domain.crawl_options import CrawlOptions
from linkaudit.domain.http_response import HttpResponse
from linkaudit.domain.link_result import BLC_INVALID, LinkResult, PageFetchError
from linkaudit.domain.visited_tracker import VisitedTracker
from linkaudit.exceptions import HttpFetchError
from linkaudit.services.content_review_service import ContentReviewService, ExtractedLink, parse_html
from linkaudit.services.event_channels import CrawlEventChannels
from linkaudit.services.http_service import HttpService
from linkaudit.services.link_checker import LinkChecker, cache_key
from linkaudit.services.link_filter import CHECKABLE_SCHEMES, LinkFilter
from linkaudit.services.robots_service import RobotsService

logger = logging.getLogger(__name__)

CRAWLABLE_TAGS = ("a", "area")


def _is_html(response: HttpResponse) -> bool:
    ct = (response.content_type or "").lower()
    return ct == "" or "text/html" in ct or "application/xhtml+xml" in ct


def _meta_robots(soup) -> str:
    meta = soup.find("meta", attrs={"name": lambda v: v and v.lower() == "robots"})
    return (meta.get("content") or "") if meta is not None else ""


class SiteChecker:
    """Crawls the pages of enqueued sites and checks every link on them.

    Pages are processed one at a time, so the events for one page are always
    contiguous. Only internal `a`/`area` links that are not broken are
    followed, each page URL (without fragment) at most once per site.
    """

    def __init__(
        self,
        *,
        options: CrawlOptions,
        channels: CrawlEventChannels,
        http_service: HttpService,
        link_checker: LinkChecker,
        robots_service: RobotsService,
        content_review_service: Optional[ContentReviewService] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.options = options
        self.channels = channels
        self.http_service = http_service
        self.link_checker = link_checker
        self.robots_service = robots_service
        self.content_review_service = content_review_service or ContentReviewService()
        self._sleep = sleep
        self._sites: Deque[str] = deque()
        self._pages: Deque[str] = deque()

    def enqueue(self, site_url: str) -> None:
        self._sites.append(site_url)

    def num_pages(self) -> int:
        """Pages queued for the current site and not yet started."""
        return len(self._pages)

    def run(self) -> None:
        """Check every enqueued site, then emit `end`."""
        while self._sites:
            self._check_site(self._sites.popleft())
        self.channels.emit("end")

    def _throttle(self) -> None:
        if self.options.rate_limit_ms > 0:
            self._sleep(self.options.rate_limit_ms / 1000.0)

    def _check_site(self, site_url: str) -> None:
        logger.debug("Checking site %s", site_url)
        link_filter = LinkFilter(self.options, site_url, self.robots_service)
        visited = VisitedTracker()
        visited.mark(cache_key(site_url))
        self._pages.append(site_url)
        while self._pages:
            self._check_page(self._pages.popleft(), link_filter, visited)
        self.channels.emit("site", None, site_url)

    def _check_page(self, page_url: str, link_filter: LinkFilter, visited: VisitedTracker) -> None:
        if not self.robots_service.allowed_by_robots(page_url, self.options.honor_robot_exclusions):
            logger.info("Skipping (robots) %s", page_url)
            self.channels.emit("robots", page_url)
            return

        try:
            response = self.http_service.fetch(page_url)
        except HttpFetchError as e:
            self._throttle()
            self.channels.emit("page", PageFetchError(type(e.original).__name__, str(e)), page_url)
            return
        self._throttle()
        self.link_checker.remember_page(page_url, response.status_code, response.content_type)

        if response.status_code >= 400:
            self.channels.emit("page", PageFetchError(response.status_code, f"HTTP {response.status_code} for {page_url}"), page_url)
            return
        if not _is_html(response):
            message = f"Expected type text/html but got {response.content_type}"
            self.channels.emit("page", PageFetchError(200, message), page_url)
            return

        soup = parse_html(response.text)
        self.channels.emit("html", soup, _meta_robots(soup), response, page_url)

        base_href = self.content_review_service.base_href(soup)
        base_url = urljoin(page_url, base_href) if base_href else page_url
        for link in self.content_review_service.extract_links(soup, self.options.filter_level):
            result = self._check_link(link, base_url, link_filter)
            self.channels.emit("junk" if result.excluded else "link", result)
            if self._should_crawl(result):
                key = cache_key(result.resolved_url)
                if not visited.is_visited(key):
                    visited.mark(key)
                    self._pages.append(key)

        self.channels.emit("page", None, page_url)

    def _check_link(self, link: ExtractedLink, base_url: str, link_filter: LinkFilter) -> LinkResult:
        try:
            resolved = urljoin(base_url, link.url)
            parsed = urlparse(resolved)
        except ValueError:
            resolved, parsed = None, None

        result = LinkResult(original_url=link.url, resolved_url=resolved, base_url=base_url, html_tag=link.tag)
        if parsed is None or (parsed.scheme in CHECKABLE_SCHEMES and not parsed.netloc):
            return result.mark_broken(BLC_INVALID)

        result.internal = link_filter.is_internal(resolved)
        reason = link_filter.exclusion_reason(resolved, result.internal)
        if reason is not None:
            return result.mark_excluded(reason)

        if self.link_checker.check(result):
            self._throttle()
        return result

    def _should_crawl(self, result: LinkResult) -> bool:
        return (
            result.internal
            and not result.broken
            and not result.excluded
            and result.html_tag in CRAWLABLE_TAGS
        )
