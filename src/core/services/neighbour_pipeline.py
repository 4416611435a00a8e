"""Neighbour fan-out orchestration.

Fetch a primary country by name, then fetch every bordering country by
code, either one after another or all at once, and forward every success
and failure to a presentation sink. Side effects (printing, HTML) stay in
the sink; this module only decides order and fault isolation.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from core.domain.errors import FetchError, NoRelatedEntitiesError, NotFoundError
from core.domain.models import (
    Country,
    FetchFailure,
    FetchOutcome,
    FetchSuccess,
    Location,
    OrchestrationResult,
)
from core.domain.modes import EmptyRelatedPolicy, FanOutMode
from core.interfaces.sink import PresentationSink
from core.interfaces.source import CountrySource, ReverseGeocoderPort

logger = logging.getLogger(__name__)

NEIGHBOUR_VARIANT = "neighbour"


@dataclass
class WhereAmIResult:
    """Output of a reverse-geocoded lookup."""

    location: Location | None
    result: OrchestrationResult


@dataclass
class ModeComparison:
    sequential: OrchestrationResult
    parallel: OrchestrationResult

    @property
    def speedup(self) -> float | None:
        """How many times faster parallel was (None when it took no time)."""

        if self.parallel.elapsed_seconds <= 0:
            return None
        return self.sequential.elapsed_seconds / self.parallel.elapsed_seconds


def _render_success(sink: PresentationSink, key: str, country: Country) -> FetchSuccess:
    sink.render(country, NEIGHBOUR_VARIANT)
    return FetchSuccess(key=key, entity=country)


async def fetch_neighbours_sequential(
    *,
    source: CountrySource,
    sink: PresentationSink,
    keys: Iterable[str],
) -> list[FetchOutcome]:
    """Fetch related countries one at a time, in input order.

    A failing key is reported and skipped; the next fetch is only issued
    after the previous one has settled.
    """

    outcomes: list[FetchOutcome] = []
    for key in keys:
        try:
            country = await source.fetch_by_code(key)
        except FetchError as exc:
            logger.warning("Error fetching neighbour (%s): %s", key, exc.message)
            sink.render_error(f"Something went wrong with neighbour ({key}): {exc.message}")
            outcomes.append(FetchFailure(key=key, reason=exc.message))
            continue
        outcomes.append(_render_success(sink, key, country))
    return outcomes


async def fetch_neighbours_parallel(
    *,
    source: CountrySource,
    sink: PresentationSink,
    keys: Iterable[str],
) -> list[FetchOutcome]:
    """Fetch related countries concurrently and wait for all of them to settle.

    `gather(return_exceptions=True)` never short-circuits: a failing
    neighbour cannot cancel or hide its siblings. Outcomes are rendered
    once everything has settled.
    """

    keys = list(keys)
    results = await asyncio.gather(
        *(source.fetch_by_code(key) for key in keys),
        return_exceptions=True,
    )

    outcomes: list[FetchOutcome] = []
    for key, result in zip(keys, results):
        if isinstance(result, FetchError):
            logger.warning("Neighbour not found (%s): %s", key, result.message)
            sink.render_error(f"Neighbour not found ({key}): {result.message}")
            outcomes.append(FetchFailure(key=key, reason=result.message))
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes.append(_render_success(sink, key, result))
    return outcomes


async def orchestrate(
    *,
    source: CountrySource,
    sink: PresentationSink,
    primary_key: str,
    mode: FanOutMode = FanOutMode.SEQUENTIAL,
    empty_policy: EmptyRelatedPolicy = EmptyRelatedPolicy.IGNORE,
) -> OrchestrationResult:
    """Fetch a country and its neighbours, rendering everything into `sink`.

    - A primary failure is fatal: reported once, no neighbour is fetched.
    - A neighbour failure is isolated: reported, siblings continue.
    - `sink.reveal()` fires exactly once, whatever happened.
    """

    started = time.perf_counter()
    primary: Country | None = None
    outcomes: list[FetchOutcome] = []
    error: str | None = None

    try:
        if not primary_key.strip():
            raise NotFoundError(404, "Country not found (404)")
        primary = await source.fetch_by_name(primary_key)
        sink.render(primary)

        keys = primary.related_keys
        if not keys:
            if empty_policy is EmptyRelatedPolicy.ERROR:
                raise NoRelatedEntitiesError()
            logger.info("%s has no neighbours", primary.name)
        elif mode is FanOutMode.PARALLEL:
            outcomes = await fetch_neighbours_parallel(source=source, sink=sink, keys=keys)
        else:
            outcomes = await fetch_neighbours_sequential(source=source, sink=sink, keys=keys)
    except FetchError as exc:
        error = exc.message
        logger.error("%s: %s", primary_key, exc.message)
        sink.render_error(exc.message)
    finally:
        sink.reveal()

    elapsed = time.perf_counter() - started
    logger.info("%s fan-out for %r took %.3fs", mode.value, primary_key, elapsed)

    return OrchestrationResult(
        primary_key=primary_key,
        mode=mode,
        primary=primary,
        outcomes=outcomes,
        error=error,
        elapsed_seconds=elapsed,
    )


async def where_am_i(
    *,
    geocoder: ReverseGeocoderPort,
    source: CountrySource,
    sink: PresentationSink,
    latitude: float,
    longitude: float,
    mode: FanOutMode = FanOutMode.SEQUENTIAL,
    empty_policy: EmptyRelatedPolicy = EmptyRelatedPolicy.IGNORE,
) -> WhereAmIResult:
    """Reverse-geocode the coordinates, then fan out from the country found.

    A geocoding failure is treated like a primary failure.
    """

    try:
        location = await geocoder.locate(latitude, longitude)
    except FetchError as exc:
        logger.error("Geocoding (%s, %s) failed: %s", latitude, longitude, exc.message)
        sink.render_error(exc.message)
        sink.reveal()
        return WhereAmIResult(
            location=None,
            result=OrchestrationResult(
                primary_key=f"{latitude},{longitude}",
                mode=mode,
                error=exc.message,
            ),
        )

    logger.info("You are in %s", location.describe())
    result = await orchestrate(
        source=source,
        sink=sink,
        primary_key=location.country_name,
        mode=mode,
        empty_policy=empty_policy,
    )
    return WhereAmIResult(location=location, result=result)


async def compare_modes(
    *,
    source: CountrySource,
    sink_factory: Callable[[FanOutMode], PresentationSink],
    primary_key: str,
    empty_policy: EmptyRelatedPolicy = EmptyRelatedPolicy.IGNORE,
) -> ModeComparison:
    """Run the same lookup sequentially, then in parallel, on separate sinks."""

    results: dict[FanOutMode, OrchestrationResult] = {}
    for mode in (FanOutMode.SEQUENTIAL, FanOutMode.PARALLEL):
        results[mode] = await orchestrate(
            source=source,
            sink=sink_factory(mode),
            primary_key=primary_key,
            mode=mode,
            empty_policy=empty_policy,
        )
    return ModeComparison(
        sequential=results[FanOutMode.SEQUENTIAL],
        parallel=results[FanOutMode.PARALLEL],
    )
