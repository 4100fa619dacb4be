"""Shopify Admin REST API clients using httpx."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any, Self
from urllib.parse import quote

import httpx

from shopify_admin import oauth
from shopify_admin.core.config import settings
from shopify_admin.core.logging_config import (
    generate_request_id,
    request_id_var,
    shop_domain_var,
)
from shopify_admin.schemas.shopify import AccessTokenResponse, ShopifyErrorResponse

logger = logging.getLogger(__name__)

ShopifyResult = dict[str, Any] | ShopifyErrorResponse


def _admin_root() -> str:
    """Path of the Admin API root, versioned when an API version is configured."""
    if settings.shopify_api_version:
        return f"/admin/api/{settings.shopify_api_version}/"
    return "/admin/"


def _envelope(key: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Wrap a payload under its resource key unless the caller already did."""
    if key in data:
        return {key: data[key]}
    return {key: dict(data)}


def _redact_url(url: httpx.URL) -> str:
    """Render a URL without the credentials embedded in its userinfo."""
    if not url.userinfo:
        return str(url)
    return str(url).replace(url.userinfo.decode("ascii") + "@", "", 1)


def _decode(response: httpx.Response) -> dict[str, Any]:
    if not response.content:
        return {}
    data: dict[str, Any] = response.json()
    return data


class ShopifyClient(ABC):
    """Async client for the Shopify Admin REST API.

    Subclasses decide how credentials go into the base URL and whether
    HTTP error responses are raised or returned.
    """

    # Return a ShopifyErrorResponse for 4xx/5xx responses instead of raising.
    return_errors: bool = False

    def __init__(self, domain: str | None = None, api_key: str | None = None) -> None:
        self.domain = domain
        self.api_key = api_key
        self.base_url: str | None = None
        self.headers: dict[str, str] = {"Content-Type": "application/json"}
        self.timeout = settings.shopify_timeout

    def set_url(self, url: str) -> Self:
        """Point the client at an explicit base URL."""
        self.base_url = url
        return self

    def set_domain(self, domain: str) -> Self:
        """Switch to another shop and rebuild the base URL."""
        self.domain = domain
        self._build_url()
        return self

    @abstractmethod
    def _build_url(self) -> None:
        """Derive base_url (and auth headers) from the current credentials."""

    async def make_request(
        self,
        method: str,
        path: str,
        data: Mapping[str, Any] | None = None,
    ) -> ShopifyResult:
        """Send a request to Shopify, encoding the data as JSON.

        GET requests carry ``data`` as query parameters; every other verb sends
        it as the JSON body. ``path`` is resolved against the admin base URL
        unless it is absolute.
        """
        if self.base_url is None:
            raise ValueError("Shop domain must be set before making requests")

        method = method.upper()
        kwargs: dict[str, Any] = {}
        if data:
            if method == "GET":
                kwargs["params"] = dict(data)
            else:
                kwargs["json"] = dict(data)

        request_token = request_id_var.set(request_id_var.get() or generate_request_id())
        shop_token = shop_domain_var.set(self.domain or "")
        try:
            logger.debug("Shopify %s %s for %s", method, path, self.domain)
            async with httpx.AsyncClient(
                base_url=self.base_url, headers=self.headers, timeout=self.timeout
            ) as client:
                response = await client.request(method, path, **kwargs)

            try:
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "Shopify %s %s failed for %s: %s",
                    method,
                    path,
                    self.domain,
                    exc.response.status_code,
                )
                if not self.return_errors:
                    raise
                return self._error_response(exc.response)

            try:
                return _decode(response)
            except ValueError:
                logger.warning(
                    "Shopify %s %s returned a non-JSON body for %s", method, path, self.domain
                )
                if not self.return_errors:
                    raise
                return self._error_response(response, error="Invalid JSON response")
        finally:
            shop_domain_var.reset(shop_token)
            request_id_var.reset(request_token)

    def _error_response(
        self, response: httpx.Response, error: str | None = None
    ) -> ShopifyErrorResponse:
        try:
            body: Any = _decode(response)
        except ValueError:
            body = response.text
        return ShopifyErrorResponse(
            error=error or f"{response.status_code} {response.reason_phrase}",
            method=response.request.method,
            url=_redact_url(response.request.url),
            status=response.status_code,
            response=body,
        )

    # Products

    async def get_products_count(self) -> ShopifyResult:
        """Return the number of products in the shop."""
        return await self.make_request("GET", "products/count.json")

    async def get_products(self, params: Mapping[str, Any] | None = None) -> ShopifyResult:
        """Return a list of products filtered by ``params``."""
        return await self.make_request("GET", "products.json", params)

    async def search_products(self, query: Mapping[str, Any]) -> ShopifyResult:
        """Return products matching the given field filters (title, vendor, ...)."""
        return await self.make_request("GET", "products.json", query)

    async def get_product_by_id(self, product_id: int | str) -> ShopifyResult:
        """Return a single product object, unwrapped from its envelope."""
        result = await self.make_request("GET", f"products/{product_id}.json")
        if isinstance(result, ShopifyErrorResponse):
            return result
        product: dict[str, Any] = result["product"]
        return product

    async def create_product(self, data: Mapping[str, Any]) -> ShopifyResult:
        return await self.make_request("POST", "products.json", _envelope("product", data))

    async def update_product(
        self, product_id: int | str, data: Mapping[str, Any]
    ) -> ShopifyResult:
        return await self.make_request(
            "PUT", f"products/{product_id}.json", _envelope("product", data)
        )

    async def delete_product(self, product_id: int | str) -> ShopifyResult:
        return await self.make_request("DELETE", f"products/{product_id}.json")

    # Variants

    async def create_variant(
        self, product_id: int | str, data: Mapping[str, Any]
    ) -> ShopifyResult:
        """Create a variant on the given product."""
        return await self.make_request(
            "POST", f"products/{product_id}/variants.json", _envelope("variant", data)
        )

    async def update_variant(
        self, variant_id: int | str, data: Mapping[str, Any]
    ) -> ShopifyResult:
        """Update a variant; the variant id is always written into the body."""
        body = _envelope("variant", data)
        body["variant"] = {**body["variant"], "id": variant_id}
        return await self.make_request("PUT", f"variants/{variant_id}.json", body)

    async def delete_variant(
        self, product_id: int | str, variant_id: int | str
    ) -> ShopifyResult:
        return await self.make_request(
            "DELETE", f"products/{product_id}/variants/{variant_id}.json"
        )

    # Webhooks

    async def get_webhooks(self) -> ShopifyResult:
        return await self.make_request("GET", "webhooks.json")

    async def create_webhook(self, data: Mapping[str, Any]) -> ShopifyResult:
        """Register a webhook, e.g. ``{"topic": "orders/create", "address": ..., "format": "json"}``."""
        return await self.make_request("POST", "webhooks.json", _envelope("webhook", data))

    async def update_webhook(
        self, webhook_id: int | str, data: Mapping[str, Any]
    ) -> ShopifyResult:
        return await self.make_request(
            "PUT", f"webhooks/{webhook_id}.json", _envelope("webhook", data)
        )

    async def delete_webhook(self, webhook_id: int | str) -> ShopifyResult:
        return await self.make_request("DELETE", f"webhooks/{webhook_id}.json")

    # Customers, orders, shop

    async def get_all_customers(self) -> ShopifyResult:
        return await self.make_request("GET", "customers.json")

    async def create_order(self, data: Mapping[str, Any]) -> ShopifyResult:
        return await self.make_request("POST", "orders.json", _envelope("order", data))

    async def get_orders(self, params: Mapping[str, Any] | None = None) -> ShopifyResult:
        return await self.make_request("GET", "orders.json", params)

    async def get_order(self, order_id: int | str) -> ShopifyResult:
        return await self.make_request("GET", f"orders/{order_id}.json")

    async def get_shop(self) -> ShopifyResult:
        """Return the shop's general settings."""
        return await self.make_request("GET", "shop.json")


class PrivateAppClient(ShopifyClient):
    """Client for private apps authenticating with an API key and password.

    Error responses come back as ``ShopifyErrorResponse`` objects.
    """

    return_errors = True

    def __init__(self, domain: str, api_key: str, password: str) -> None:
        super().__init__(domain, api_key)
        self.password = password
        self._build_url()

    def _build_url(self) -> None:
        self.set_url(
            f"https://{quote(self.api_key or '', safe='')}:{quote(self.password, safe='')}"
            f"@{self.domain}{_admin_root()}"
        )


class OAuthClient(ShopifyClient):
    """Client for public apps installed through Shopify OAuth.

    Before an access token is set the client can only build install URLs,
    verify callbacks and exchange the authorization code. Error responses
    raise ``httpx.HTTPStatusError``.
    """

    def __init__(
        self,
        domain: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
        access_token: str | None = None,
    ) -> None:
        super().__init__(domain, api_key)
        self.api_secret = api_secret
        self.access_token: str | None = None
        self.granted_scopes: str | None = None

        if access_token is not None and domain is not None:
            self.set_access_token(access_token)
        elif domain is not None:
            self._build_url()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "OAuthClient":
        """Build a client from a ``domain/apikey/apisecret/access_token`` mapping.

        Blank values are treated as missing.
        """
        return cls(
            domain=config.get("domain") or None,
            api_key=config.get("apikey") or None,
            api_secret=config.get("apisecret") or None,
            access_token=config.get("access_token") or None,
        )

    def set_access_token(self, token: str) -> Self:
        """Store the OAuth access token and rebuild the base URL around it."""
        self.access_token = token
        self._build_url()
        return self

    def _build_url(self) -> None:
        if self.domain is None:
            return
        if self.access_token is not None:
            self.headers["X-Shopify-Access-Token"] = self.access_token
            self.set_url(
                f"https://{quote(self.api_key or '', safe='')}:{quote(self.access_token, safe='')}"
                f"@{self.domain}{_admin_root()}"
            )
        else:
            self.headers.pop("X-Shopify-Access-Token", None)
            self.set_url(f"https://{self.domain}{_admin_root()}")

    def install_url(
        self,
        permissions: Iterable[str],
        redirect: str | None = None,
        state: str | None = None,
    ) -> str:
        """Return the URL a merchant visits to install the app."""
        if not self.domain or not self.api_key:
            raise ValueError("Shop domain and API key must be set to build an install URL")
        return oauth.build_install_url(
            self.domain, self.api_key, permissions, redirect=redirect, state=state
        )

    def verify_request(
        self,
        match: str | None,
        params: Mapping[str, Any],
        now: float | None = None,
    ) -> bool:
        """Verify a request Shopify signed with this app's secret."""
        return oauth.verify_request(match, params, self.api_secret, now=now)

    async def get_access_token(self, code: str = "") -> str | None:
        """Exchange an authorization code for a permanent access token.

        The token is stored on the client, so later calls are authorised.
        Returns None when Shopify's response carries no token.
        """
        data = {
            "client_id": self.api_key,
            "client_secret": self.api_secret,
            "code": code,
        }
        result = await self.make_request(
            "POST", f"https://{self.domain}/admin/oauth/access_token", data
        )
        if isinstance(result, ShopifyErrorResponse) or "access_token" not in result:
            logger.warning("No access token returned for %s", self.domain)
            return None

        grant = AccessTokenResponse.model_validate(result)
        self.granted_scopes = grant.scope
        self.set_access_token(grant.access_token)
        return self.access_token
