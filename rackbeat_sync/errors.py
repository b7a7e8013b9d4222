"""
Exceptions raised by the Rackbeat and Shopify clients.
"""

from typing import Optional


class SyncClientError(Exception):
    """Base exception for API client errors."""
    pass


class TransportError(SyncClientError):
    """Connection failure or non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class DecodeError(SyncClientError):
    """Response body did not parse into the expected shape."""
    pass


class ApiError(TransportError):
    """Shopify rejected a write. Status and body are kept for diagnostics."""

    def __init__(self, status: int, body: str, url: Optional[str] = None):
        super().__init__(f"Shopify API error {status}: {body}", status_code=status, url=url)
        self.status = status
        self.body = body

    @property
    def is_unprocessable(self) -> bool:
        return self.status == 422


class IntegrityError(SyncClientError):
    """Write returned 2xx but the response lacked the written product."""
    pass
