"""Execution modes and policies for the neighbour fan-out.

Kept in the domain layer so the CLI, the settings and the services share a
single source of truth without circular imports.
"""

from __future__ import annotations

from enum import Enum


class FanOutMode(str, Enum):
    """How related entities are fetched once the primary is known."""

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"

    def label(self) -> str:
        """Human readable label for tables and logging."""

        return "Sequential" if self is FanOutMode.SEQUENTIAL else "Parallel"


class EmptyRelatedPolicy(str, Enum):
    """What to do when the primary entity has no related keys.

    - `ignore`: render only the primary and finish successfully.
    - `error`: report "No neighbours found" as a fatal failure.
    """

    IGNORE = "ignore"
    ERROR = "error"
