from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup

# (tag, attribute, minimum filter level). Level 0 is clickable links only;
# each level adds to the one below it.
_LINK_ATTRIBUTES = (
    ("a", "href", 0),
    ("area", "href", 0),
    ("audio", "src", 1),
    ("embed", "src", 1),
    ("frame", "src", 1),
    ("iframe", "src", 1),
    ("img", "src", 1),
    ("input", "src", 1),
    ("object", "data", 1),
    ("source", "src", 1),
    ("track", "src", 1),
    ("video", "src", 1),
    ("video", "poster", 1),
    ("form", "action", 2),
    ("script", "src", 2),
    ("blockquote", "cite", 3),
    ("del", "cite", 3),
    ("ins", "cite", 3),
    ("q", "cite", 3),
)


@dataclass(frozen=True)
class ExtractedLink:
    url: str
    tag: str
    attribute: str


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class ContentReviewService:
    """Finds the link-bearing attributes of a page for a given filter level."""

    def base_href(self, soup: BeautifulSoup) -> Optional[str]:
        base = soup.find("base", href=True)
        return base.get("href") if base is not None else None

    def extract_links(self, soup: BeautifulSoup, filter_level: int = 3) -> list:
        links = []
        for el in soup.find_all(True):
            tag = el.name
            for link_tag, attr, level in _LINK_ATTRIBUTES:
                if tag != link_tag or level > filter_level:
                    continue
                value = el.get(attr)
                if value is not None:
                    links.append(ExtractedLink(value.strip(), tag, attr))
            if tag == "link" and el.get("href") is not None:
                rel = [r.lower() for r in (el.get("rel") or [])]
                level = 2 if "stylesheet" in rel else 3
                if level <= filter_level:
                    links.append(ExtractedLink(el.get("href").strip(), tag, "href"))
            if tag == "meta" and filter_level >= 1:
                refresh = self._meta_refresh_url(el)
                if refresh:
                    links.append(ExtractedLink(refresh, tag, "content"))
        return links

    def _meta_refresh_url(self, el) -> Optional[str]:
        if (el.get("http-equiv") or "").lower() != "refresh":
            return None
        content = el.get("content") or ""
        _, sep, rest = content.partition(";")
        if not sep:
            return None
        rest = rest.strip()
        if rest.lower().startswith("url="):
            rest = rest[4:]
        return rest.strip().strip("'\"") or None
