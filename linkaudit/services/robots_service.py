import logging
from typing import Dict, Optional
from urllib.parse import urljoin, urlparse
from urllib.robotparser import RobotFileParser

from linkaudit.exceptions import HttpFetchError

logger = logging.getLogger(__name__)


class RobotsService:
    """
    Answers robots.txt questions for the site checker.

    robots.txt is fetched once per scheme+host and kept for the lifetime of the
    service. A missing or unreadable robots.txt allows everything.
    """

    def __init__(self, http_service, user_agent: str):
        self.http_service = http_service
        self.user_agent = user_agent
        self._parsers: Dict[str, Optional[RobotFileParser]] = {}

    def _load(self, base: str) -> Optional[RobotFileParser]:
        robots_url = urljoin(base, "/robots.txt")
        try:
            response = self.http_service.fetch_robots(robots_url)
        except HttpFetchError:
            logger.warning("Network error fetching robots.txt from %s", robots_url, exc_info=True)
            return None

        if response.status_code != 200 or not response.text:
            return None

        parser = RobotFileParser()
        parser.parse(response.text.splitlines())
        return parser

    def allowed_by_robots(self, url: str, robots_enabled: bool) -> bool:
        if not robots_enabled:
            return True

        parsed = urlparse(url)
        if not parsed.scheme or not parsed.netloc:
            return True

        base = f"{parsed.scheme}://{parsed.netloc}"
        if base not in self._parsers:
            self._parsers[base] = self._load(base)
        parser = self._parsers[base]
        if parser is None:
            return True

        try:
            return parser.can_fetch(self.user_agent, url)
        except Exception:
            logger.exception("Error checking robots permission for %s", url)
            return True
