"""Typed fetch errors.

Every adapter translates transport details (httpx exceptions, raw status
codes, JSON decoding problems) into one of these, so callers only ever
handle `FetchError`.
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class for any failure while obtaining an entity."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(FetchError):
    """The upstream API answered with a non-2xx status (or an empty match)."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class ParseError(FetchError):
    """The body could not be decoded into the expected shape."""


class NetworkError(FetchError):
    """Transport-level failure before any status was obtained."""


class NoRelatedEntitiesError(FetchError):
    """The primary entity carries no related keys and the policy forbids it."""

    def __init__(self, message: str = "No neighbours found") -> None:
        super().__init__(message)
