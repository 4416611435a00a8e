"""Contract for presentation sinks.

A sink is handed to the orchestration explicitly; nothing in the core
touches a global output container.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Country


@runtime_checkable
class PresentationSink(Protocol):
    def render(self, entity: Country, variant: str | None = None) -> None:
        """Render one entity card. `variant` is a style tag (e.g. "neighbour")."""

        ...

    def render_error(self, message: str) -> None:
        """Render a human readable failure message."""

        ...

    def reveal(self) -> None:
        """Make the result container visible once processing completes."""

        ...
