"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import asyncio
import copy

import pytest

from core.domain.errors import FetchError, NotFoundError
from core.domain.models import Country, Location


def _country_payload(
    name: str,
    alpha3: str,
    *,
    region: str = "Europe",
    population: int = 10_000_000,
    language: str = "English",
    currency: str | None = "Euro",
    borders: list[str] | None = None,
) -> dict:
    payload = {
        "name": name,
        "alpha2Code": alpha3[:2],
        "alpha3Code": alpha3,
        "capital": f"{name} City",
        "region": region,
        "population": population,
        "flag": f"https://flagcdn.com/{alpha3.lower()}.svg",
        "languages": [{"iso639_1": "xx", "name": language, "nativeName": language}],
        "topLevelDomain": [".xx"],
    }
    if currency is not None:
        payload["currencies"] = [{"code": "EUR", "name": currency, "symbol": "€"}]
    if borders is not None:
        payload["borders"] = borders
    return payload


@pytest.fixture
def country_payloads() -> dict[str, dict]:
    """REST Countries v2 style payloads keyed by alpha-3 code."""

    return {
        "ESP": _country_payload(
            "Spain",
            "ESP",
            population=47_351_567,
            language="Spanish",
            borders=["AND", "FRA", "GIB", "PRT", "MAR"],
        ),
        "PRT": _country_payload(
            "Portugal",
            "PRT",
            population=10_305_564,
            language="Portuguese",
            borders=["ESP"],
        ),
        "FRA": _country_payload("France", "FRA", population=67_391_582, language="French", borders=["ESP"]),
        "AND": _country_payload("Andorra", "AND", population=77_265, language="Catalan", borders=["ESP", "FRA"]),
        "GIB": _country_payload(
            "Gibraltar",
            "GIB",
            population=33_691,
            currency="Gibraltar pound",
            borders=["ESP"],
        ),
        "MAR": _country_payload(
            "Morocco",
            "MAR",
            region="Africa",
            population=36_910_558,
            language="Arabic",
            currency="Moroccan dirham",
            borders=["DZA", "ESH", "ESP"],
        ),
        "ISL": _country_payload("Iceland", "ISL", population=366_425, language="Icelandic", currency="Icelandic króna"),
    }


@pytest.fixture
def countries(country_payloads) -> dict[str, Country]:
    return {code: Country.model_validate(payload) for code, payload in country_payloads.items()}


class RecordingSink:
    """Presentation sink that records every call in order."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def render(self, entity: Country, variant: str | None = None) -> None:
        self.events.append(("render", entity.name, variant))

    def render_error(self, message: str) -> None:
        self.events.append(("error", message))

    def reveal(self) -> None:
        self.events.append(("reveal",))

    @property
    def rendered(self) -> list[str]:
        return [e[1] for e in self.events if e[0] == "render"]

    @property
    def errors(self) -> list[str]:
        return [e[1] for e in self.events if e[0] == "error"]

    @property
    def reveals(self) -> int:
        return sum(1 for e in self.events if e[0] == "reveal")


class FakeCountrySource:
    """In-memory `CountrySource` with per-code latency and failures."""

    def __init__(
        self,
        countries: dict[str, Country],
        *,
        failing: dict[str, Exception] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self._by_code = dict(countries)
        self._by_name = {c.name.lower(): c for c in countries.values()}
        self._failing = failing or {}
        self._delays = delays or {}
        self.name_calls: list[str] = []
        self.code_calls: list[str] = []
        self.events: list[str] = []

    async def __aenter__(self) -> "FakeCountrySource":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def fetch_by_name(self, name: str) -> Country:
        self.name_calls.append(name)
        country = self._by_name.get(name.lower())
        if country is None:
            raise NotFoundError(404, "Country not found (404)")
        return country

    async def fetch_by_code(self, code: str) -> Country:
        self.code_calls.append(code)
        self.events.append(f"start:{code}")
        await asyncio.sleep(self._delays.get(code, 0.0))
        self.events.append(f"end:{code}")
        if code in self._failing:
            raise self._failing[code]
        country = self._by_code.get(code)
        if country is None:
            raise NotFoundError(404, "Neighbour not found (404)")
        return country


class FakeGeocoder:
    def __init__(self, location: Location | None = None, error: FetchError | None = None) -> None:
        self._location = location
        self._error = error
        self.calls: list[tuple[float, float]] = []

    async def __aenter__(self) -> "FakeGeocoder":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    async def locate(self, latitude: float, longitude: float) -> Location:
        self.calls.append((latitude, longitude))
        if self._error is not None:
            raise self._error
        assert self._location is not None
        return self._location


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_sink():
    return RecordingSink


@pytest.fixture
def make_source(countries):
    """Factory: `make_source(failing=..., delays=..., overrides=...)`."""

    def _make(*, failing=None, delays=None, overrides=None) -> FakeCountrySource:
        data = copy.copy(countries)
        data.update(overrides or {})
        return FakeCountrySource(data, failing=failing, delays=delays)

    return _make


@pytest.fixture
def make_geocoder():
    return FakeGeocoder
