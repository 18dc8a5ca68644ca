from collections import OrderedDict
from typing import Optional


class VisitedTracker:
    """
    Tracks which page URLs have been queued during a site check.

    Unbounded by default: evicting an entry would let the site checker
    enqueue the same page twice.
    """

    def __init__(self, max_size: Optional[int] = None):
        """Create a visited tracker.

        `max_size` bounds memory usage by evicting least-recently-added URLs.
        If `max_size` is None or <= 0, the tracker behaves as unbounded.
        """
        self._max_size = int(max_size) if max_size is not None else None
        if self._max_size is not None and self._max_size <= 0:
            self._max_size = None

        self._visited: "OrderedDict[str, None]" = OrderedDict()

    def mark(self, url: str) -> None:
        """Mark a URL as visited."""
        if url in self._visited:
            self._visited.move_to_end(url)
            return
        self._visited[url] = None
        if self._max_size is not None:
            while len(self._visited) > self._max_size:
                self._visited.popitem(last=False)

    def is_visited(self, url: str) -> bool:
        """Check if a URL has been visited."""
        return url in self._visited

    def __len__(self) -> int:
        return len(self._visited)
