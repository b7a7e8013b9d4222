"""
Shopify REST Admin API client.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..errors import ApiError, DecodeError, IntegrityError, TransportError
from ..rackbeat.models import RackbeatProduct
from .models import (
    ChannelPublication,
    ProductResponse,
    ProductsResponse,
    PublicationReport,
    SalesChannel,
    SalesChannelsResponse,
    ShopifyProduct,
    WriteResult,
)
from .payload import build_product, to_payload
from .rate_limit import AsyncRateLimiter

logger = logging.getLogger(__name__)


def find_exact_match(
    candidates: Sequence[ShopifyProduct], number: str
) -> Optional[ShopifyProduct]:
    """
    First candidate whose title equals the product number exactly.

    Shopify's title filter is a loose match, so search results are
    always narrowed with this before being treated as the same product.
    """
    for candidate in candidates:
        if candidate.title == number:
            return candidate
    return None


class ShopifyClient:
    """
    Async HTTP client for the Shopify REST Admin API.

    Handles authentication and rate limiting. Requests are attempted once.
    """

    API_VERSION = "2024-01"
    DEFAULT_LIST_LIMIT = 250

    def __init__(
        self,
        shop_name: str,
        access_token: str,
        api_version: str = API_VERSION,
        rate_limiter: Optional[AsyncRateLimiter] = None,
        publish_on_create: bool = False,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Shopify client.

        Args:
            shop_name: Store name or domain (e.g., "mystore" or "mystore.myshopify.com")
            access_token: Admin API access token
            api_version: REST API version
            rate_limiter: Limiter applied to every request, None to disable
            publish_on_create: Publish new products to all sales channels
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        # Clean domain
        domain = shop_name.strip()
        if domain.startswith("https://"):
            domain = domain[8:]
        elif domain.startswith("http://"):
            domain = domain[7:]
        domain = domain.rstrip("/")
        if "." not in domain:
            domain = f"{domain}.myshopify.com"

        self.shop_domain = domain
        self.access_token = access_token
        self.api_version = api_version
        self.base_url = f"https://{domain}/admin/api/{api_version}/"
        self.rate_limiter = rate_limiter
        self.publish_on_create = publish_on_create
        self.timeout = timeout

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ShopifyClient":
        return cls(
            shop_name=settings.shopify_shop_name,
            access_token=settings.shopify_access_token,
            api_version=settings.shopify_api_version,
            rate_limiter=AsyncRateLimiter(
                rate=settings.shopify_rate_limit_per_second,
                capacity=settings.shopify_rate_limit_burst,
            ),
            publish_on_create=settings.publish_to_channels,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=10.0),
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                    "X-Shopify-Access-Token": self.access_token,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send one rate-limited request. Connection failures become TransportError."""
        client = await self._get_client()
        if self.rate_limiter is not None:
            await self.rate_limiter.acquire()

        try:
            return await client.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            raise TransportError(
                f"Request error: {e}", url=f"{self.base_url}{path}"
            ) from e

    async def _read(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a JSON document, raising TransportError/DecodeError."""
        response = await self._send("GET", path, params=params)

        if not response.is_success:
            logger.error(
                f"Shopify API error {response.status_code} on GET {path}: {response.text}"
            )
            raise TransportError(
                f"GET {path} failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                url=str(response.request.url),
            )

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"GET {path} returned invalid JSON: {e}") from e

    async def _write(self, method: str, path: str, payload: Dict[str, Any]) -> ShopifyProduct:
        """Send a product write, raising ApiError/IntegrityError."""
        response = await self._send(method, path, json=payload)

        if not response.is_success:
            logger.error(
                f"Shopify API error {response.status_code} on {method} {path}: {response.text}"
            )
            logger.debug(f"Request body: {payload}")
            raise ApiError(
                response.status_code, response.text, url=str(response.request.url)
            )

        try:
            result = ProductResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise IntegrityError(
                f"{method} {path} succeeded but the response could not be decoded: {e}"
            ) from e

        if result.product is None or result.product.id is None:
            raise IntegrityError(
                f"{method} {path} succeeded but the response has no product"
            )
        return result.product

    # ===== Products =====

    async def list_products(self, limit: int = DEFAULT_LIST_LIMIT) -> List[ShopifyProduct]:
        """
        List products, first page only.

        Args:
            limit: Page size (Shopify maximum is 250)

        Returns:
            Up to `limit` products
        """
        logger.info(f"Fetching products from Shopify store '{self.shop_domain}'")
        body = await self._read("products.json", params={"limit": limit})
        return self._decode_products(body)

    async def search_by_title(self, query: str) -> List[ShopifyProduct]:
        """
        Search products by title.

        Shopify matches loosely, so the result can hold zero, one or several
        products. Use find_exact_match() to narrow it.
        """
        logger.info(f"Searching for Shopify product: {query}")
        body = await self._read("products.json", params={"title": query})
        return self._decode_products(body)

    def _decode_products(self, body: Any) -> List[ShopifyProduct]:
        try:
            result = ProductsResponse.model_validate(body)
        except ValidationError as e:
            raise DecodeError(f"Unexpected products response: {e}") from e
        return list(result.products or [])

    async def create_product(
        self,
        product: RackbeatProduct,
        publish: Optional[bool] = None,
    ) -> WriteResult:
        """
        Create a Shopify product for a Rackbeat product.

        Args:
            product: Source product
            publish: Publish to all sales channels afterwards
                     (defaults to the client's publish_on_create)

        Returns:
            WriteResult with the created product and publication report

        Raises:
            ApiError: Shopify rejected the create
            IntegrityError: Response lacked the created product
        """
        logger.info(
            f"Creating Shopify product {product.number}, price: {product.sales_price}"
        )
        payload = to_payload(build_product(product))
        created = await self._write("POST", "products.json", payload)
        logger.info(f"Created Shopify product {created.id} ({created.title})")

        if publish is None:
            publish = self.publish_on_create

        publication = None
        if publish:
            publication = await self.publish_to_all_channels(created.id)

        return WriteResult(product=created, publication=publication)

    async def update_product(
        self,
        product_id: int,
        product: RackbeatProduct,
    ) -> WriteResult:
        """
        Overwrite an existing Shopify product with Rackbeat data.

        Raises:
            ApiError: Shopify rejected the update
            IntegrityError: Response lacked the updated product
        """
        logger.info(
            f"Updating Shopify product {product_id} ({product.number}), "
            f"price: {product.sales_price}"
        )
        payload = to_payload(build_product(product, product_id=product_id))
        updated = await self._write("PUT", f"products/{product_id}.json", payload)
        logger.info(f"Updated Shopify product {updated.id} ({updated.title})")
        return WriteResult(product=updated)

    async def create_or_update(
        self,
        product: RackbeatProduct,
        candidates: Optional[Sequence[ShopifyProduct]] = None,
        publish: Optional[bool] = None,
    ) -> WriteResult:
        """
        Update the product whose title equals the number, or create it.

        Repeated calls converge on one Shopify product per number, its
        contents overwritten from Rackbeat each time.

        Args:
            product: Source product
            candidates: Search results already fetched for this number;
                        searched here when None
            publish: Passed to create_product when a product is created
        """
        if candidates is None:
            candidates = await self.search_by_title(product.number)

        match = find_exact_match(candidates, product.number)
        if match is not None and match.id is not None:
            logger.info(f"Found existing product '{product.number}' with ID {match.id}")
            return await self.update_product(match.id, product)

        logger.info(f"No existing product found for '{product.number}'")
        return await self.create_product(product, publish=publish)

    # ===== Sales channels =====

    async def list_sales_channels(self) -> List[SalesChannel]:
        body = await self._read("sales_channels.json")
        try:
            result = SalesChannelsResponse.model_validate(body)
        except ValidationError as e:
            raise DecodeError(f"Unexpected sales channels response: {e}") from e
        return list(result.sales_channels or [])

    async def publish_to_all_channels(self, product_id: int) -> PublicationReport:
        """
        Publish a product to every sales channel.

        Best effort: failures are logged and recorded in the report,
        never raised.
        """
        report = PublicationReport(product_id=product_id)

        try:
            channels = await self.list_sales_channels()
        except Exception as e:
            logger.warning(f"Could not list sales channels for product {product_id}: {e}")
            report.listing_error = str(e)
            return report

        for channel in channels:
            payload = {
                "product_publication": {
                    "product_id": product_id,
                    "channel_id": channel.id,
                    "published": True,
                }
            }
            try:
                response = await self._send("POST", "product_publications.json", json=payload)
                if not response.is_success:
                    raise ApiError(response.status_code, response.text)
                report.channels.append(ChannelPublication(channel=channel))
                logger.info(f"Published product {product_id} to channel '{channel.name}'")
            except Exception as e:
                logger.warning(
                    f"Failed to publish product {product_id} to channel '{channel.name}': {e}"
                )
                report.channels.append(ChannelPublication(channel=channel, error=str(e)))

        return report

    # ===== GraphQL =====

    async def execute_raw_query(self, query: str) -> str:
        """
        Run a GraphQL query and return the raw response body.

        Used for ad-hoc inspection; the response is not interpreted.
        """
        response = await self._send("POST", "graphql.json", json={"query": query})
        if not response.is_success:
            logger.error(f"Shopify GraphQL error {response.status_code}: {response.text}")
            raise TransportError(
                f"GraphQL request failed: {response.status_code} - {response.text}",
                status_code=response.status_code,
                url=str(response.request.url),
            )
        return response.text

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
