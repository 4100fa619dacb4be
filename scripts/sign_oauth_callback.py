"""HMAC signing helper for simulating Shopify OAuth callbacks.

Takes ``key=value`` query params as arguments, adds a current ``timestamp``
(unless one is given) and prints the query string with a valid ``hmac``
computed using SHOPIFY_API_SECRET from the environment (or .env file).

Usage:
    uv run python -m scripts.sign_oauth_callback code=abc123 shop=my-store.myshopify.com

    # Full curl example:
    QUERY=$(uv run python -m scripts.sign_oauth_callback code=abc shop=my-store.myshopify.com)
    curl "http://localhost:8000/shopify/callback?$QUERY"
"""

import sys
import time
from urllib.parse import urlencode

from shopify_admin.core.config import settings
from shopify_admin.oauth import sign_params


def parse_params(args: list[str]) -> dict[str, str]:
    """Parse ``key=value`` arguments into a params dict."""
    params: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {arg!r}")
        params[key] = value
    return params


def main() -> None:
    secret = settings.shopify_api_secret
    if not secret:
        print("ERROR: SHOPIFY_API_SECRET is not set in .env", file=sys.stderr)
        sys.exit(1)

    try:
        params = parse_params(sys.argv[1:])
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    params.setdefault("timestamp", str(int(time.time())))
    params["hmac"] = sign_params(params, secret)
    print(urlencode(sorted(params.items())), end="")


if __name__ == "__main__":
    main()
