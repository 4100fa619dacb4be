"""Shared client construction from settings."""

from functools import lru_cache
from typing import Any

from shopify_admin.client import OAuthClient, PrivateAppClient, ShopifyClient
from shopify_admin.core.config import Settings, settings


def client_config(config: Settings) -> dict[str, Any]:
    """Map settings onto the credential keys the clients understand."""
    return {
        "domain": config.shopify_domain,
        "apikey": config.shopify_api_key,
        "apisecret": config.shopify_api_secret,
        "password": config.shopify_password,
        "access_token": config.shopify_access_token,
    }


def build_client(config: Settings) -> ShopifyClient:
    """Build the client matching the configured credentials.

    A password selects a private app client; anything else is an OAuth app,
    already authorised when an access token is configured.
    """
    values = client_config(config)
    if values["password"]:
        if not values["domain"]:
            raise ValueError("SHOPIFY_DOMAIN must be set for private app credentials")
        return PrivateAppClient(values["domain"], values["apikey"], values["password"])
    return OAuthClient.from_config(values)


@lru_cache
def get_shopify_client() -> ShopifyClient:
    """Get the shared client instance."""
    return build_client(settings)
