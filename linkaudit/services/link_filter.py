import fnmatch
import logging
from typing import Optional
from urllib.parse import urlparse

from linkaudit.domain.crawl_options import CrawlOptions
from linkaudit.domain.link_result import (
    BLC_EXTERNAL,
    BLC_KEYWORD,
    BLC_ROBOTS,
    BLC_SCHEME,
    BLC_UNSUPPORTED,
)

logger = logging.getLogger(__name__)

CHECKABLE_SCHEMES = ("http", "https")


def _normalize_scheme(scheme: str) -> str:
    return scheme.strip().lower().rstrip(":")


class LinkFilter:
    """Decides whether a resolved link is excluded from checking, and why."""

    def __init__(self, options: CrawlOptions, site_url: str, robots_service=None):
        self.options = options
        self.site_url = site_url
        self.robots_service = robots_service
        self._site = urlparse(site_url)
        self._excluded_schemes = {_normalize_scheme(s) for s in options.excluded_schemes if s.strip()}

    def is_internal(self, url: str) -> bool:
        """True when `url` lives on the site's host under the site root path."""
        try:
            parsed = urlparse(url)
            same_host = (parsed.hostname or "").lower() == (self._site.hostname or "").lower()
        except ValueError:
            logger.debug("Unparseable URL treated as external: %s", url)
            return False
        return same_host and parsed.path.startswith(self._site.path or "/")

    def _matches_keyword(self, url: str) -> bool:
        for keyword in self.options.excluded_keywords:
            if fnmatch.fnmatchcase(url, f"*{keyword}*"):
                return True
        return False

    def exclusion_reason(self, url: str, internal: bool) -> Optional[str]:
        scheme = _normalize_scheme(urlparse(url).scheme)
        if scheme in self._excluded_schemes:
            return BLC_SCHEME
        if scheme not in CHECKABLE_SCHEMES:
            return BLC_UNSUPPORTED
        if self.options.exclude_external_links and not internal:
            return BLC_EXTERNAL
        if self._matches_keyword(url):
            return BLC_KEYWORD
        if self.robots_service is not None and not self.robots_service.allowed_by_robots(url, self.options.honor_robot_exclusions):
            return BLC_ROBOTS
        return None
