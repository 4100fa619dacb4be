"""Pydantic schemas for Shopify Admin API responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ShopifySchema(BaseModel):
    """Base for Admin API payloads; Shopify may add fields at any time."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ShopifyErrorResponse(ShopifySchema):
    """A failed Admin API call, returned instead of raised by private app clients."""

    error: str
    method: str
    url: str
    status: int
    response: Any = None


class AccessTokenResponse(ShopifySchema):
    """Result of exchanging an OAuth authorization code."""

    access_token: str
    scope: str | None = None
