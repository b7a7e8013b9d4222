"""
In-memory stand-ins for the Rackbeat and Shopify HTTP APIs.

Both are plugged into the real clients through httpx.MockTransport.
"""

import copy
import json
from typing import Dict, List, Optional, Set

import httpx

from rackbeat_sync.rackbeat import RackbeatClient
from rackbeat_sync.shopify import ShopifyClient

SHOP_NAME = "test-shop"
API_VERSION = "2024-01"
API_PREFIX = f"/admin/api/{API_VERSION}/"
RACKBEAT_URL = "http://rackbeat.test/api/"


class FakeShopify:
    """
    Shopify REST admin API kept in a dict.

    The title filter matches loosely (title or tags containing the query),
    the way the real search can return more than the exact product.
    """

    def __init__(self, price_as_number: bool = False):
        self.products: Dict[int, dict] = {}
        self.channels = [
            {"id": 1, "name": "Online Store"},
            {"id": 2, "name": "Point of Sale"},
        ]
        self.requests: List[httpx.Request] = []
        self.publications: List[dict] = []
        self.graphql_queries: List[str] = []

        # Failure injection
        self.fail_search: Set[str] = set()
        self.reject_create: Dict[str, int] = {}
        self.fail_channels: Set[int] = set()
        self.fail_channel_listing = False

        self.price_as_number = price_as_number
        self._next_id = 1000

    # ===== Helpers =====

    def add_product(self, title: str, tags: str = "", price: str = "10.00") -> dict:
        product = {
            "title": title,
            "tags": tags,
            "variants": [{"sku": title, "barcode": title, "price": price}],
        }
        return self._store(product)

    def _store(self, product: dict, product_id: Optional[int] = None) -> dict:
        if product_id is None:
            self._next_id += 1
            product_id = self._next_id
        stored = copy.deepcopy(product)
        stored["id"] = product_id
        for index, variant in enumerate(stored.get("variants", [])):
            variant["id"] = product_id * 10 + index
            variant["product_id"] = product_id
        self.products[product_id] = stored
        return stored

    def _render(self, product: dict) -> dict:
        rendered = copy.deepcopy(product)
        rendered["admin_graphql_api_id"] = f"gid://shopify/Product/{product['id']}"
        if self.price_as_number:
            for variant in rendered.get("variants", []):
                if variant.get("price") is not None:
                    variant["price"] = float(variant["price"])
        return rendered

    def titles(self) -> List[str]:
        return sorted(p["title"] for p in self.products.values())

    def calls(self, method: str, name: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == f"{API_PREFIX}{name}"
        ]

    @property
    def creates(self) -> List[httpx.Request]:
        return self.calls("POST", "products.json")

    @property
    def updates(self) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == "PUT" and r.url.path.startswith(f"{API_PREFIX}products/")
        ]

    # ===== Transport =====

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        name = request.url.path[len(API_PREFIX):]

        if request.method == "GET" and name == "products.json":
            return self._get_products(request)

        if request.method == "POST" and name == "products.json":
            body = json.loads(request.content)["product"]
            status = self.reject_create.get(body.get("title"))
            if status:
                return httpx.Response(status, json={"errors": {"title": ["has already been taken"]}})
            stored = self._store(body)
            return httpx.Response(201, json={"product": self._render(stored)})

        if request.method == "PUT" and name.startswith("products/"):
            product_id = int(name[len("products/"):-len(".json")])
            if product_id not in self.products:
                return httpx.Response(404, json={"errors": "Not Found"})
            body = json.loads(request.content)["product"]
            stored = self._store(body, product_id=product_id)
            return httpx.Response(200, json={"product": self._render(stored)})

        if request.method == "GET" and name == "sales_channels.json":
            if self.fail_channel_listing:
                return httpx.Response(503, json={"errors": "Unavailable"})
            return httpx.Response(200, json={"sales_channels": self.channels})

        if request.method == "POST" and name == "product_publications.json":
            body = json.loads(request.content)["product_publication"]
            if body["channel_id"] in self.fail_channels:
                return httpx.Response(422, json={"errors": "Channel not available"})
            self.publications.append(body)
            return httpx.Response(201, json={"product_publication": body})

        if request.method == "POST" and name == "graphql.json":
            self.graphql_queries.append(json.loads(request.content)["query"])
            return httpx.Response(200, json={"data": {"shop": {"name": "Test Shop"}}})

        return httpx.Response(404, json={"errors": "Not Found"})

    def _get_products(self, request: httpx.Request) -> httpx.Response:
        title = request.url.params.get("title")
        if title is not None:
            if title in self.fail_search:
                return httpx.Response(500, json={"errors": "Internal Server Error"})
            matches = [
                p for p in self.products.values()
                if title in p.get("title", "") or title in (p.get("tags") or "")
            ]
        else:
            limit = int(request.url.params.get("limit", 50))
            matches = list(self.products.values())[:limit]
        return httpx.Response(200, json={"products": [self._render(p) for p in matches]})

    def client(self, **kwargs) -> ShopifyClient:
        return ShopifyClient(
            SHOP_NAME,
            "shpat_test",
            api_version=API_VERSION,
            transport=httpx.MockTransport(self.handler),
            **kwargs
        )


class FakeRackbeat:
    """Rackbeat products endpoint returning a fixed response."""

    def __init__(
        self,
        products: Optional[List[dict]] = None,
        status_code: int = 200,
        body: Optional[bytes] = None,
    ):
        self.products = products or []
        self.status_code = status_code
        self.body = body
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json={"products": self.products})

    def client(self) -> RackbeatClient:
        return RackbeatClient(
            RACKBEAT_URL,
            "rb_test_key",
            transport=httpx.MockTransport(self.handler),
        )


def rackbeat_product(number, name=None, sales_price=None, **extra):
    """Rackbeat product payload as returned by the API."""
    data = {"number": number, "name": name or f"Product {number}", **extra}
    if sales_price is not None:
        data["sales_price"] = sales_price
    return data
