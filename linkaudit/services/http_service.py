import requests
from requests.adapters import HTTPAdapter
from typing import Callable

from linkaudit.domain.http_response import HttpResponse
from linkaudit.exceptions import HttpFetchError


def make_session(max_sockets_per_host: int = 1) -> requests.Session:
    """Return a `requests.Session` whose pool keeps at most `max_sockets_per_host` connections per host."""
    size = max(1, int(max_sockets_per_host))
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=size, pool_maxsize=size, pool_block=True)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class HttpService:
    """
    HTTP client wrapper for fetching pages and checking links.

    Requires http_client callable with the signature of `requests.Session.request`
    so tests can inject a fake without patching.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10, verify: bool = True):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client
        self.verify = verify

    def request(self, method: str, url: str, read_body: bool = True) -> HttpResponse:
        """Issue `method` against `url`, following redirects.

        When `read_body` is False the body is never downloaded and `text` is empty.
        """
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(
                method.upper(),
                url,
                headers=headers,
                timeout=self.timeout,
                allow_redirects=True,
                verify=self.verify,
                stream=not read_body,
            )
            text = resp.text if read_body else ""
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e
        if not read_body:
            resp.close()

        ct = None
        if hasattr(resp, "headers"):
            ct = resp.headers.get("Content-Type")

        return HttpResponse(resp.status_code, text, ct)

    def fetch(self, url: str) -> HttpResponse:
        """GET a page and return status code, body text, and Content-Type."""
        return self.request("get", url)

    def fetch_robots(self, robots_url: str) -> HttpResponse:
        """Fetch robots.txt - delegates to fetch()."""
        return self.fetch(robots_url)
