from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse


def hyperlink_formula(page_url: str, site_url: str) -> str:
    """Build a sheet HYPERLINK formula labelled with the page's path under the site root."""
    label = page_url
    if page_url.startswith(site_url):
        root_path = urlparse(site_url).path or "/"
        label = root_path + page_url[len(site_url):]
    return '=hyperlink("{}", "{}")'.format(_quote(page_url), _quote(label))


def _quote(value: str) -> str:
    return value.replace('"', '""')


@dataclass(frozen=True)
class BrokenLinkRow:
    source_url_formula: str
    reason: str
    resolved_url: Optional[str] = None
    original_url: Optional[str] = None

    def as_row(self) -> list:
        return [
            self.source_url_formula,
            self.reason,
            self.resolved_url or "",
            self.original_url or "",
        ]


@dataclass
class PageRecord:
    """Per-page link counters; one instance per page being checked."""

    url: str
    link_count: int = 0
    link_ok: int = 0
    link_broken: int = 0
    link_excluded: int = 0
    broken_link_rows: list = field(default_factory=list)

    def record_ok(self) -> None:
        self.link_count += 1
        self.link_ok += 1

    def record_broken(self, row: BrokenLinkRow) -> None:
        self.link_count += 1
        self.link_broken += 1
        self.broken_link_rows.append(row)

    def record_excluded(self) -> None:
        self.link_count += 1
        self.link_excluded += 1

    @property
    def has_errors(self) -> bool:
        return self.link_broken > 0

    def summary_row(self, site_url: str) -> list:
        return [
            hyperlink_formula(self.url, site_url),
            self.link_count,
            self.link_ok,
            self.link_broken,
            self.link_excluded,
        ]
