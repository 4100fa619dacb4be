"""Pydantic schemas for the Shopify Admin client."""

from shopify_admin.schemas.shopify import AccessTokenResponse, ShopifyErrorResponse, ShopifySchema

__all__ = [
    "AccessTokenResponse",
    "ShopifyErrorResponse",
    "ShopifySchema",
]
