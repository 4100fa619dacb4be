"""HMAC verification for webhooks delivered to addresses registered via the Admin API."""

import base64
import hashlib
import hmac
from collections.abc import Mapping

HMAC_HEADER = "X-Shopify-Hmac-Sha256"
TOPIC_HEADER = "X-Shopify-Topic"
SHOP_DOMAIN_HEADER = "X-Shopify-Shop-Domain"


def sign_webhook(data: bytes, secret: str) -> str:
    """Compute the base64-encoded HMAC-SHA256 of a webhook body."""
    digest = hmac.new(secret.encode("utf-8"), data, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_webhook(data: bytes, hmac_header: str | None, secret: str) -> bool:
    """Verify a Shopify webhook's HMAC-SHA256 signature.

    Args:
        data: The raw request body bytes.
        hmac_header: The X-Shopify-Hmac-Sha256 header value.
        secret: The app's API secret.

    Returns:
        True if the signature is valid.
    """
    if not hmac_header:
        return False
    expected = sign_webhook(data, secret).encode("utf-8")
    return hmac.compare_digest(expected, hmac_header.encode("utf-8"))


def verify_webhook_headers(headers: Mapping[str, str], data: bytes, secret: str) -> bool:
    """Verify a webhook given its raw header mapping (header names are case-insensitive)."""
    lowered = {k.lower(): v for k, v in headers.items()}
    return verify_webhook(data, lowered.get(HMAC_HEADER.lower()), secret)
