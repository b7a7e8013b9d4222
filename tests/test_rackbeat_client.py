"""
Tests for the Rackbeat client and product decoding.
"""

from decimal import Decimal

import httpx
import pytest
from pydantic import ValidationError

from fakes import FakeRackbeat, RACKBEAT_URL
from rackbeat_sync.errors import DecodeError, TransportError
from rackbeat_sync.rackbeat import RackbeatClient, RackbeatProduct
from rackbeat_sync.rackbeat.models import ProductsResponse


class TestFetchAll:
    """Tests for RackbeatClient.fetch_all."""

    @pytest.mark.asyncio
    async def test_fetches_products(self):
        fake = FakeRackbeat(products=[
            {"number": "ABC-100", "name": "Widget", "sales_price": 49.99},
            {"number": "ABC-101", "name": "Gadget", "sales_price": "12.50"},
        ])

        async with fake.client() as client:
            products = await client.fetch_all()

        assert [p.number for p in products] == ["ABC-100", "ABC-101"]
        assert products[0].sales_price == Decimal("49.99")
        assert products[1].sales_price == Decimal("12.50")

    @pytest.mark.asyncio
    async def test_sends_bearer_token_to_products_url(self):
        fake = FakeRackbeat()

        async with fake.client() as client:
            await client.fetch_all()

        request = fake.requests[0]
        assert str(request.url) == f"{RACKBEAT_URL}products"
        assert request.headers["Authorization"] == "Bearer rb_test_key"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b"{}", b'{"products": null}', b'{"products": []}'])
    async def test_empty_catalog(self, body):
        fake = FakeRackbeat(body=body)

        async with fake.client() as client:
            assert await client.fetch_all() == []

    @pytest.mark.asyncio
    async def test_non_success_status_is_transport_error(self):
        fake = FakeRackbeat(status_code=503, body=b"Service Unavailable")

        async with fake.client() as client:
            with pytest.raises(TransportError) as exc_info:
                await client.fetch_all()

        assert exc_info.value.status_code == 503
        assert exc_info.value.url == f"{RACKBEAT_URL}products"

    @pytest.mark.asyncio
    async def test_connection_failure_is_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = RackbeatClient(RACKBEAT_URL, "key", transport=httpx.MockTransport(handler))
        with pytest.raises(TransportError) as exc_info:
            await client.fetch_all()
        await client.close()

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json_is_decode_error(self):
        fake = FakeRackbeat(body=b"<html>not json</html>")

        async with fake.client() as client:
            with pytest.raises(DecodeError):
                await client.fetch_all()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [b"[1, 2]", b'{"products": "nope"}'])
    async def test_wrong_shape_is_decode_error(self, body):
        fake = FakeRackbeat(body=body)

        async with fake.client() as client:
            with pytest.raises(DecodeError):
                await client.fetch_all()

    @pytest.mark.asyncio
    async def test_blank_quantity_does_not_fail_catalog(self):
        fake = FakeRackbeat(products=[
            {"number": "A-1", "stock_quantity": "", "sales_price": "5"},
            {"number": "A-2", "stock_quantity": 3, "sales_price": "6"},
        ])

        async with fake.client() as client:
            products = await client.fetch_all()

        assert [p.stock_quantity for p in products] == [None, Decimal("3")]

    @pytest.mark.asyncio
    async def test_unparsable_price_is_decode_error(self):
        fake = FakeRackbeat(products=[{"number": "A-1", "sales_price": "12,50"}])

        async with fake.client() as client:
            with pytest.raises(DecodeError):
                await client.fetch_all()

    def test_products_path_is_joined_once(self):
        client = RackbeatClient("https://app.rackbeat.com/api/", "key", products_path="/products")

        assert client.products_url == "https://app.rackbeat.com/api/products"


class TestRackbeatProduct:
    """Tests for decoding Rackbeat product payloads."""

    def test_keys_match_case_insensitively(self):
        product = RackbeatProduct.model_validate({
            "Number": "ABC-100",
            "NAME": "Widget",
            "salesPrice": "12.50",
            "Stock_Quantity": 4,
        })

        assert product.number == "ABC-100"
        assert product.name == "Widget"
        assert product.sales_price == Decimal("12.50")
        assert product.stock_quantity == Decimal("4")

    def test_envelope_key_matches_case_insensitively(self):
        envelope = ProductsResponse.model_validate({"Products": [{"number": "A-1"}]})

        assert envelope.products[0].number == "A-1"

    def test_numeric_number_becomes_string(self):
        assert RackbeatProduct.model_validate({"number": 1001}).number == "1001"

    def test_unknown_fields_are_ignored(self):
        product = RackbeatProduct.model_validate({"number": "A-1", "brand_new_field": True})

        assert product.number == "A-1"

    def test_nested_objects(self):
        product = RackbeatProduct.model_validate({
            "number": "A-1",
            "default_location": {"Name": "Main", "number": 1, "self": "https://x/locations/1"},
            "physical": {"weight": "1.25", "WEIGHT_UNIT": "kg"},
            "group": {"number": 3, "vat_domestic": 25},
            "self": "https://x/products/A-1",
        })

        assert product.default_location.name == "Main"
        assert product.default_location.self_url == "https://x/locations/1"
        assert product.physical.weight == Decimal("1.25")
        assert product.physical.weight_unit == "kg"
        assert product.group.vat_domestic == Decimal("25")
        assert product.self_url == "https://x/products/A-1"

    def test_missing_price_is_none(self):
        assert RackbeatProduct.model_validate({"number": "A-1"}).sales_price is None

    @pytest.mark.parametrize("field", ["stock_quantity", "min_order", "cost_addition_percentage"])
    def test_blank_quantity_is_none(self, field):
        product = RackbeatProduct.model_validate({"number": "A-1", field: ""})

        assert getattr(product, field) is None

    def test_blank_nested_decimals_are_none(self):
        product = RackbeatProduct.model_validate({
            "number": "A-1",
            "physical": {"weight": "", "height": " "},
            "group": {"vat_domestic": ""},
        })

        assert product.physical.weight is None
        assert product.physical.height is None
        assert product.group.vat_domestic is None

    @pytest.mark.parametrize("price", ["", "  ", None])
    def test_blank_price_is_none(self, price):
        assert RackbeatProduct.model_validate({"number": "A-1", "sales_price": price}).sales_price is None

    @pytest.mark.parametrize("price", ["12,50", "abc", "NaN", True])
    def test_unparsable_price_is_rejected(self, price):
        with pytest.raises(ValidationError):
            RackbeatProduct.model_validate({"number": "A-1", "sales_price": price})

    def test_products_are_immutable(self):
        product = RackbeatProduct.model_validate({"number": "A-1"})

        with pytest.raises(ValidationError):
            product.number = "B-2"
