"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and the "check status, then parse" step.
- Every caller gets a typed `FetchError` instead of inspecting raw
  responses or httpx exceptions.
- Easy to test: pass a client built on `httpx.MockTransport`.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.errors import NetworkError, NotFoundError, ParseError

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so every API client behaves the same.
    - `transport` lets tests swap the network for a mock.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    error_message: str = "Request failed",
    params: dict[str, Any] | None = None,
) -> Any:
    """GET `url` and return the decoded JSON body.

    Raises:
    - `NotFoundError` on any non-2xx status, message "<error_message> (<status>)".
    - `NetworkError` when the request fails before a usable response exists
      (transport errors, too many redirects, undecodable content encoding).
    - `ParseError` when the body is not valid JSON.

    No retries: a failure is reported to the caller as is.
    """

    logger.debug("GET %s", url)
    try:
        response = await client.get(url, params=params)
    except httpx.RequestError as exc:
        raise NetworkError(f"{error_message}: {exc.__class__.__name__} ({url})") from exc

    if not response.is_success:
        raise NotFoundError(response.status_code, f"{error_message} ({response.status_code})")

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ParseError(f"Invalid JSON from {url}") from exc
