import logging
from urllib.parse import urldefrag

from linkaudit.domain.link_result import LinkResult
from linkaudit.exceptions import HttpFetchError
from linkaudit.services.http_service import HttpService
from linkaudit.services.response_cache import CachedCheck, ResponseCache

logger = logging.getLogger(__name__)


def cache_key(url: str) -> str:
    return urldefrag(url)[0]


def broken_reason_for_status(status_code: int):
    if status_code >= 400:
        return f"HTTP_{status_code}"
    return None


def broken_reason_for_error(error: HttpFetchError) -> str:
    return "ERRNO_" + type(error.original).__name__.upper()


class LinkChecker:
    """Checks one link over HTTP, consulting the response cache first."""

    def __init__(self, http_service: HttpService, cache: ResponseCache, request_method: str = "get"):
        self.http_service = http_service
        self.cache = cache
        self.request_method = request_method

    def check(self, result: LinkResult) -> bool:
        """Fill in the status fields of `result`.

        Returns True when a network request was made, False on a cache hit.
        """
        key = cache_key(result.resolved_url)
        cached = self.cache.get(key)
        if cached is not None:
            self._apply(result, cached)
            result.cached = True
            return False

        try:
            response = self.http_service.request(self.request_method, result.resolved_url, read_body=False)
            check = CachedCheck(response.status_code, broken_reason_for_status(response.status_code), response.content_type)
        except HttpFetchError as e:
            logger.debug("Link check failed for %s: %s", result.resolved_url, e)
            check = CachedCheck(None, broken_reason_for_error(e))

        self.cache.set(key, check)
        self._apply(result, check)
        return True

    def remember_page(self, url: str, status_code: int, content_type=None) -> None:
        """Cache the outcome of a page fetch so links back to it are not re-requested."""
        self.cache.set(cache_key(url), CachedCheck(status_code, broken_reason_for_status(status_code), content_type))

    def _apply(self, result: LinkResult, check: CachedCheck) -> None:
        result.http_status = check.status_code
        if check.broken_reason:
            result.mark_broken(check.broken_reason)
