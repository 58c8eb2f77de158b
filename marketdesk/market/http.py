"""Blocking HTTP helpers for the market-data providers.

Provider calls run on worker threads (``asyncio.to_thread``); everything in
this module is synchronous and raises the provider error taxonomy instead of
``requests`` exceptions.
"""

from collections.abc import Callable
from typing import Any

import requests

from marketdesk.config import settings
from marketdesk.exceptions import DecodeError, TransportError

SessionFactory = Callable[[], requests.Session]

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
}


def get(
    session: requests.Session,
    provider: str,
    url: str,
    params: dict[str, Any] | None = None,
    **kwargs: Any,
) -> requests.Response:
    """GET ``url``, mapping network failures and non-2xx statuses to TransportError."""
    kwargs.setdefault("timeout", settings.http_timeout_seconds)
    try:
        response = session.get(url, params=params, **kwargs)
    except requests.exceptions.RequestException as exc:
        raise TransportError(provider, f"request to {url} failed: {exc}") from exc

    if not response.ok:
        raise TransportError(provider, f"{url} returned {response.status_code}")
    return response


def get_json(
    session: requests.Session,
    provider: str,
    url: str,
    params: dict[str, Any] | None = None,
    **kwargs: Any,
) -> Any:
    response = get(session, provider, url, params=params, **kwargs)
    try:
        return response.json()
    except ValueError as exc:
        raise DecodeError(provider, f"invalid JSON from {url}: {exc}") from exc
