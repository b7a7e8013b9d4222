"""Pytest fixtures for client and sync tests."""

import pytest

from fakes import FakeRackbeat, FakeShopify
from rackbeat_sync.config import Settings


@pytest.fixture
def shopify_fake():
    """Empty in-memory Shopify store."""
    return FakeShopify()


@pytest.fixture
def shopify(shopify_fake):
    """ShopifyClient wired to the fake store, without rate limiting."""
    return shopify_fake.client()


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        rackbeat_api_url="http://rackbeat.test/api/",
        shopify_shop_name="test-shop",
        shopify_access_token="shpat_test",
        database_path=str(tmp_path / "app.db"),
    )


@pytest.fixture
def make_rackbeat():
    """Factory for a Rackbeat fake serving the given product payloads."""
    def factory(*products, **kwargs):
        return FakeRackbeat(products=list(products), **kwargs)
    return factory
