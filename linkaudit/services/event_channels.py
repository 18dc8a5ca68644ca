from typing import Callable, Dict, List

# Crawl lifecycle events, in the order they occur for one site:
#   html(soup, robots, response, page_url) -> link(result) / junk(result) ... -> page(error, page_url)
#   robots(page_url) when a page is skipped because of robots.txt
#   site(error, site_url) once every page of a site is done
#   end() once every enqueued site is done
EVENTS = ("html", "junk", "link", "page", "end", "robots", "site")


class CrawlEventChannels:
    """Named event channels the site checker emits on."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {name: [] for name in EVENTS}

    def on(self, name: str, handler: Callable) -> "CrawlEventChannels":
        if name not in self._handlers:
            raise ValueError(f"Unknown crawl event {name!r}; expected one of {EVENTS}")
        self._handlers[name].append(handler)
        return self

    def emit(self, name: str, *args) -> None:
        if name not in self._handlers:
            raise ValueError(f"Unknown crawl event {name!r}")
        for handler in self._handlers[name]:
            handler(*args)

    def handlers(self, name: str) -> List[Callable]:
        return list(self._handlers.get(name, []))
