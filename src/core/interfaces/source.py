"""Contracts for entity sources.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The orchestration depends on these shapes, not on httpx, so tests can
  plug in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Country, Location


@runtime_checkable
class CountrySource(Protocol):
    """Minimal contract for a country lookup backend.

    The two methods mirror two different upstream endpoints with different
    response shapes; implementations must not unify them.
    """

    async def fetch_by_name(self, name: str) -> Country:
        """Primary lookup: resolve a country by its name."""

        ...

    async def fetch_by_code(self, code: str) -> Country:
        """Related lookup: resolve a country by its alpha code."""

        ...


@runtime_checkable
class ReverseGeocoderPort(Protocol):
    async def locate(self, latitude: float, longitude: float) -> Location:
        ...
