"""Custom exceptions for linkaudit services."""


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class CredentialsError(Exception):
    """Raised when OAuth client secrets or the cached token cannot be used."""

    def __init__(self, path: str, reason: str = "could not be loaded"):
        self.path = path
        self.reason = reason
        super().__init__(f"Credentials '{path}' {reason}")


class StoreError(Exception):
    """Raised when a spreadsheet API call fails."""

    def __init__(self, operation: str, original: Exception):
        self.operation = operation
        self.original = original
        super().__init__(f"Sheet operation {operation} failed: {original}")
