from dataclasses import dataclass
from typing import Optional

BLC_INVALID = "BLC_INVALID"
BLC_EXTERNAL = "BLC_EXTERNAL"
BLC_KEYWORD = "BLC_KEYWORD"
BLC_SCHEME = "BLC_SCHEME"
BLC_ROBOTS = "BLC_ROBOTS"
BLC_UNSUPPORTED = "BLC_UNSUPPORTED"


@dataclass
class LinkResult:
    """Outcome of checking a single link found on a page.

    `broken` and `excluded` are never both set.
    """

    original_url: Optional[str]
    resolved_url: Optional[str]
    base_url: str
    html_tag: str = "a"
    internal: bool = False
    broken: bool = False
    broken_reason: Optional[str] = None
    excluded: bool = False
    excluded_reason: Optional[str] = None
    http_status: Optional[int] = None
    cached: bool = False

    @property
    def display_url(self) -> str:
        return self.resolved_url or self.original_url or ""

    def mark_broken(self, reason: str) -> "LinkResult":
        self.broken = True
        self.broken_reason = reason
        return self

    def mark_excluded(self, reason: str) -> "LinkResult":
        self.excluded = True
        self.excluded_reason = reason
        return self


@dataclass(frozen=True)
class PageFetchError:
    """Why a page could not be checked.

    `code` is an HTTP status when the server answered, or the name of the
    transport exception. A code of 200 means the page loaded but was not HTML.
    """

    code: object
    message: str
