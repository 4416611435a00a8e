"""Reverse geocoding: coordinates -> country.

Uses the BigDataCloud client endpoint, which needs no API key:
`<base>/reverse-geocode-client?latitude=..&longitude=..&localityLanguage=en`.
"""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client, fetch_json
from core.config import AppSettings
from core.domain.errors import NotFoundError, ParseError
from core.domain.models import Location
from core.interfaces.source import ReverseGeocoderPort


def validate_coordinates(latitude: float, longitude: float) -> None:
    if not -90.0 <= latitude <= 90.0:
        raise ValueError(f"latitude out of range: {latitude}")
    if not -180.0 <= longitude <= 180.0:
        raise ValueError(f"longitude out of range: {longitude}")


class ReverseGeocoder(ReverseGeocoderPort):
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._base_url = self._settings.geocode_base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "ReverseGeocoder":
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def locate(self, latitude: float, longitude: float) -> Location:
        validate_coordinates(latitude, longitude)
        if self._client is None:
            raise RuntimeError("ReverseGeocoder must be used with 'async with' or given a client")

        url = f"{self._base_url}/reverse-geocode-client"
        payload = await fetch_json(
            self._client,
            url,
            error_message="Problem with geocoding",
            params={"latitude": latitude, "longitude": longitude, "localityLanguage": "en"},
        )
        if not isinstance(payload, dict):
            raise ParseError(f"Expected a geocoding object from {url}")

        country_name = payload.get("countryName")
        if not isinstance(country_name, str) or not country_name.strip():
            raise NotFoundError(404, f"No country found at ({latitude}, {longitude})")

        city = payload.get("city") or payload.get("locality") or None
        country_code = payload.get("countryCode") or None
        return Location(
            latitude=latitude,
            longitude=longitude,
            city=city if isinstance(city, str) else None,
            country_name=country_name.strip(),
            country_code=country_code if isinstance(country_code, str) else None,
        )
