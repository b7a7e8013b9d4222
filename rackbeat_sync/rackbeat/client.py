"""
Rackbeat REST API client.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import DecodeError, TransportError
from .models import ProductsResponse, RackbeatProduct

logger = logging.getLogger(__name__)


class RackbeatClient:
    """
    Async HTTP client for the Rackbeat products endpoint.
    
    Fetches the whole catalog in one request. No pagination, no retries.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        products_path: str = "products",
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Rackbeat client.
        
        Args:
            base_url: API root (e.g., "https://app.rackbeat.com/api/")
            api_key: Bearer token
            products_path: Path of the products endpoint under base_url
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.products_url = f"{self.base_url}/{products_path.lstrip('/')}"
        self.timeout = timeout

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "RackbeatClient":
        return cls(
            base_url=settings.rackbeat_api_url,
            api_key=settings.rackbeat_api_key,
            products_path=settings.rackbeat_products_path,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                headers={
                    "Accept": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def fetch_all(self) -> List[RackbeatProduct]:
        """
        Fetch the full product catalog.
        
        Returns:
            List of products, empty if the response has no products
            
        Raises:
            TransportError: Connection failure or non-success status
            DecodeError: Body is not JSON or not a products envelope
        """
        client = await self._get_client()
        logger.info(f"Fetching products from Rackbeat: {self.products_url}")

        try:
            response = await client.get(self.products_url)
        except httpx.RequestError as e:
            raise TransportError(
                f"Request error: {e}", url=self.products_url
            ) from e

        if not response.is_success:
            raise TransportError(
                f"Failed to fetch products from Rackbeat: HTTP {response.status_code}",
                status_code=response.status_code,
                url=self.products_url,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(f"Rackbeat response is not valid JSON: {e}") from e

        try:
            envelope = ProductsResponse.model_validate(body)
        except ValidationError as e:
            raise DecodeError(f"Unexpected Rackbeat products response: {e}") from e

        products = list(envelope.products or [])
        logger.info(f"Fetched {len(products)} products from Rackbeat")
        return products

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
