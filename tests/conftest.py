"""Pytest configuration and fixtures for the shopify_admin test suite.

Provides:
- Consistent Shopify settings for every test
- Mock httpx.AsyncClient for client unit tests
- Real httpx.Response factory for response handling
- OAuth callback HMAC signer
"""

import hashlib
import hmac
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch
from urllib.parse import urlencode

import httpx
import pytest

from shopify_admin.core.deps import get_shopify_client

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
SHOPIFY_TEST_SHOP = "test-store.myshopify.com"
SHOPIFY_TEST_API_KEY = "test-shopify-api-key"
SHOPIFY_TEST_API_SECRET = "test-shopify-api-secret"
SHOPIFY_TEST_PASSWORD = "test-shopify-password"
SHOPIFY_TEST_ACCESS_TOKEN = "shpat_test_access_token_123"


@pytest.fixture(autouse=True)
def set_shopify_test_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Ensure Shopify settings are set for all tests.

    This is autouse=True so all tests have consistent Shopify config and
    never pick up credentials from a developer's .env file.
    """
    monkeypatch.setattr("shopify_admin.core.config.settings.shopify_domain", SHOPIFY_TEST_SHOP)
    monkeypatch.setattr("shopify_admin.core.config.settings.shopify_api_key", SHOPIFY_TEST_API_KEY)
    monkeypatch.setattr(
        "shopify_admin.core.config.settings.shopify_api_secret", SHOPIFY_TEST_API_SECRET
    )
    monkeypatch.setattr("shopify_admin.core.config.settings.shopify_password", "")
    monkeypatch.setattr("shopify_admin.core.config.settings.shopify_access_token", "")
    monkeypatch.setattr("shopify_admin.core.config.settings.shopify_api_version", None)
    monkeypatch.setattr("shopify_admin.core.config.settings.shopify_timeout", 30.0)
    get_shopify_client.cache_clear()
    yield
    get_shopify_client.cache_clear()


# ---------------------------------------------------------------------------
# HTTP mocks
# ---------------------------------------------------------------------------


def make_response(
    status_code: int = 200,
    json: Any = None,
    *,
    method: str = "GET",
    url: str = f"https://{SHOPIFY_TEST_SHOP}/admin/products.json",
    content: bytes | None = None,
) -> httpx.Response:
    """Build a real httpx.Response bound to a request, so raise_for_status works."""
    request = httpx.Request(method, url)
    if content is not None:
        return httpx.Response(status_code, content=content, request=request)
    if json is None:
        return httpx.Response(status_code, request=request)
    return httpx.Response(status_code, json=json, request=request)


@pytest.fixture
def mock_shopify_http() -> Generator[MagicMock, None, None]:
    """Mock httpx.AsyncClient for client unit tests.

    The patched class is exposed as ``mock_client.client_class`` so tests
    can assert on the constructor arguments (base_url, headers, timeout).
    """
    with patch("shopify_admin.client.httpx.AsyncClient") as mock_class:
        mock_client = AsyncMock()
        mock_class.return_value.__aenter__.return_value = mock_client
        mock_client.request.return_value = make_response(200, {})
        mock_client.client_class = mock_class

        yield mock_client


# ---------------------------------------------------------------------------
# OAuth signing
# ---------------------------------------------------------------------------


@pytest.fixture
def shopify_oauth_hmac() -> Callable[[dict[str, str]], str]:
    """Generate a valid Shopify OAuth callback HMAC for query params.

    Usage:
        params = {"code": "abc", "shop": "store.myshopify.com", "timestamp": "1700000000"}
        params["hmac"] = shopify_oauth_hmac(params)
    """

    def _compute(params: dict[str, str]) -> str:
        filtered = {k: v for k, v in sorted(params.items()) if k not in ("hmac", "signature")}
        message = urlencode(filtered)
        return hmac.new(
            SHOPIFY_TEST_API_SECRET.encode(),
            message.encode(),
            hashlib.sha256,
        ).hexdigest()

    return _compute
