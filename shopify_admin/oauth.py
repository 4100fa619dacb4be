"""Shopify OAuth helpers for install URLs, HMAC verification and token exchange."""

import hashlib
import hmac
import time
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import urlencode

TIMESTAMP_TOLERANCE_SECONDS = 3600

# Query params that carry the signature itself and are never signed.
SIGNATURE_PARAMS = frozenset({"hmac", "signature"})


def build_install_url(
    domain: str,
    api_key: str,
    permissions: Iterable[str],
    redirect: str | None = None,
    state: str | None = None,
) -> str:
    """Build the Shopify OAuth authorization URL for installing the app.

    Args:
        domain: The shop domain (e.g. mystore.myshopify.com).
        api_key: The app's API key (OAuth client id).
        permissions: Access scopes to request, e.g. ``["read_products"]``.
        redirect: Optional callback URL Shopify redirects to after approval.
        state: Optional nonce echoed back on the callback.

    Returns:
        The full authorization URL to redirect the merchant to.
    """
    params = {
        "client_id": api_key,
        "scope": ",".join(permissions),
    }
    if redirect:
        params["redirect_uri"] = redirect
    if state:
        params["state"] = state
    return f"https://{domain}/admin/oauth/authorize?{urlencode(params, safe=',')}"


def sign_params(params: Mapping[str, Any], secret: str) -> str:
    """Compute the hex HMAC-SHA256 Shopify expects over sorted query params."""
    message = urlencode(
        [(k, v) for k, v in sorted(params.items()) if k not in SIGNATURE_PARAMS]
    )
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_request(
    match: str | None,
    params: Mapping[str, Any],
    secret: str | None,
    now: float | None = None,
) -> bool:
    """Verify the signature on a request Shopify redirected back to the app.

    Args:
        match: The signature Shopify supplied (the ``hmac`` query param).
        params: All query parameters of the request.
        secret: The app's API secret.
        now: Verification time as a Unix timestamp; defaults to the current time.

    Returns:
        True if the request is fresh and correctly signed.

    Raises:
        ValueError: If no API secret is configured.
    """
    if match is None:
        return False

    if not secret:
        raise ValueError("Shopify API secret must be set to verify requests")

    try:
        timestamp = int(params["timestamp"])
    except (KeyError, TypeError, ValueError):
        return False

    current = time.time() if now is None else now
    if abs(current - timestamp) >= TIMESTAMP_TOLERANCE_SECONDS:
        return False

    # compare_digest rejects non-ASCII str input.
    expected = sign_params(params, secret).encode("utf-8")
    return hmac.compare_digest(expected, str(match).encode("utf-8"))
