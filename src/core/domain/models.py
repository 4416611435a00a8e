"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edge: a REST Countries payload either becomes a
  `Country` or the fetch fails with a `ParseError`.
- Frozen models: once fetched, an entity is never mutated.

These models describe *what* the information is, not *how* it is obtained.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.domain.modes import FanOutMode


class CountryLanguage(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    native_name: str | None = Field(default=None, alias="nativeName")


class CountryCurrency(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    code: str | None = None
    name: str | None = None
    symbol: str | None = None


class Country(BaseModel):
    """A country as returned by the REST Countries v2 API.

    `borders` is optional on purpose: the API omits the key entirely for
    islands and other countries without land neighbours.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Common English name.")
    alpha2_code: str | None = Field(default=None, alias="alpha2Code")
    alpha3_code: str | None = Field(
        default=None,
        alias="alpha3Code",
        description="ISO 3166-1 alpha-3 code, the key used for related lookups.",
    )
    capital: str | None = None
    region: str = Field(default="", description="Continent-level region.")
    population: int = Field(default=0, ge=0)
    flag: str | None = Field(default=None, description="URL of the flag image.")
    languages: list[CountryLanguage] = Field(default_factory=list)
    currencies: list[CountryCurrency] | None = None
    borders: list[str] | None = Field(
        default=None,
        description="Codes of bordering countries, in API order.",
    )

    @property
    def related_keys(self) -> list[str] | None:
        return self.borders

    @property
    def primary_language_name(self) -> str | None:
        return self.languages[0].name if self.languages else None

    @property
    def primary_currency_name(self) -> str | None:
        if not self.currencies:
            return None
        return self.currencies[0].name

    @property
    def flag_image_url(self) -> str | None:
        return self.flag

    @property
    def population_millions(self) -> float:
        return round(self.population / 1_000_000, 1)


class Location(BaseModel):
    """Result of reverse geocoding a pair of coordinates."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    city: str | None = None
    country_name: str = Field(..., min_length=1)
    country_code: str | None = None

    def describe(self) -> str:
        if self.city:
            return f"{self.city}, {self.country_name}"
        return self.country_name


class FetchSuccess(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    key: str
    entity: Country


class FetchFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    key: str
    reason: str


FetchOutcome = Annotated[Union[FetchSuccess, FetchFailure], Field(discriminator="kind")]


class OrchestrationResult(BaseModel):
    """Summary of one fan-out call.

    `outcomes` holds the related-key outcomes in the order they reached the
    presentation sink. `error` is set only when the call failed as a whole
    (primary lookup failed, or no neighbours under the `error` policy).
    """

    primary_key: str
    mode: FanOutMode
    primary: Country | None = None
    outcomes: list[FetchOutcome] = Field(default_factory=list)
    error: str | None = None
    elapsed_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def succeeded(self) -> list[FetchSuccess]:
        return [o for o in self.outcomes if isinstance(o, FetchSuccess)]

    @property
    def failed(self) -> list[FetchFailure]:
        return [o for o in self.outcomes if isinstance(o, FetchFailure)]
