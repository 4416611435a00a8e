"""REST Countries v2 client.

The upstream API is asymmetric and this client keeps it that way:
- `/name/<name>` answers with a collection; the first element is the match.
- `/alpha/<code>` answers with the bare country object.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client, fetch_json
from core.config import AppSettings
from core.domain.errors import NotFoundError, ParseError
from core.domain.models import Country
from core.interfaces.source import CountrySource

logger = logging.getLogger(__name__)


def _to_country(payload: Any, *, url: str) -> Country:
    if not isinstance(payload, dict):
        raise ParseError(f"Expected a country object from {url}")
    try:
        return Country.model_validate(payload)
    except ValidationError as exc:
        raise ParseError(f"Unexpected country payload from {url}: {exc.error_count()} error(s)") from exc


class RestCountriesClient(CountrySource):
    """Fetches countries by name (primary) and by code (related).

    The client can own its `httpx.AsyncClient` (use `async with`) or reuse
    one passed in by the caller.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._base_url = self._settings.countries_base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "RestCountriesClient":
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("RestCountriesClient must be used with 'async with' or given a client")
        return self._client

    async def fetch_by_name(self, name: str) -> Country:
        url = f"{self._base_url}/name/{quote(name.strip())}"
        payload = await fetch_json(self._require_client(), url, error_message="Country not found")

        if not isinstance(payload, list):
            raise ParseError(f"Expected a list of countries from {url}")
        if not payload:
            raise NotFoundError(404, "Country not found (404)")

        country = _to_country(payload[0], url=url)
        logger.debug("Resolved %r to %s (%s)", name, country.name, country.alpha3_code)
        return country

    async def fetch_by_code(self, code: str) -> Country:
        url = f"{self._base_url}/alpha/{quote(code.strip())}"
        payload = await fetch_json(self._require_client(), url, error_message="Neighbour not found")
        return _to_country(payload, url=url)
