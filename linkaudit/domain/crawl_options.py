from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterable

from linkaudit.config import DEFAULT_USER_AGENT

REQUEST_METHODS = ("get", "head")
FILTER_LEVELS = (0, 1, 2, 3)


@dataclass(frozen=True)
class CrawlOptions:
    """Settings handed to the site checker once per run.

    The exclusion lists are only extended by the exclusion loader, via
    `with_exclusions`, before the crawl starts.
    """

    cache_expiry_seconds: int = 3 * 60 * 60
    cache_responses: bool = True
    excluded_keywords: tuple[str, ...] = field(default_factory=tuple)
    excluded_schemes: tuple[str, ...] = field(default_factory=tuple)
    exclude_external_links: bool = False
    filter_level: int = 3
    honor_robot_exclusions: bool = False
    rate_limit_ms: int = 10
    max_sockets_per_host: int = 1
    request_method: str = "get"
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.filter_level not in FILTER_LEVELS:
            raise ValueError(f"filter_level must be one of {FILTER_LEVELS}, got {self.filter_level!r}")
        method = (self.request_method or "").strip().lower()
        if method not in REQUEST_METHODS:
            raise ValueError(f"request_method must be one of {REQUEST_METHODS}, got {self.request_method!r}")
        object.__setattr__(self, "request_method", method)
        object.__setattr__(self, "excluded_keywords", tuple(self.excluded_keywords))
        object.__setattr__(self, "excluded_schemes", tuple(self.excluded_schemes))
        if self.max_sockets_per_host < 1:
            object.__setattr__(self, "max_sockets_per_host", 1)

    def with_exclusions(self, keywords: Iterable[str], schemes: Iterable[str]) -> "CrawlOptions":
        return replace(
            self,
            excluded_keywords=self.excluded_keywords + tuple(keywords),
            excluded_schemes=self.excluded_schemes + tuple(schemes),
        )
