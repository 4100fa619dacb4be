"""Async client for the Shopify Admin REST API."""

from shopify_admin.client import OAuthClient, PrivateAppClient, ShopifyClient
from shopify_admin.core.deps import get_shopify_client
from shopify_admin.oauth import build_install_url, verify_request
from shopify_admin.schemas import AccessTokenResponse, ShopifyErrorResponse
from shopify_admin.webhooks import verify_webhook

__all__ = [
    "AccessTokenResponse",
    "OAuthClient",
    "PrivateAppClient",
    "ShopifyClient",
    "ShopifyErrorResponse",
    "build_install_url",
    "get_shopify_client",
    "verify_request",
    "verify_webhook",
]
