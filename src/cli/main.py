"""Command line entry point (Typer).

The CLI only wires settings, adapters and sinks together; the fan-out
logic lives in `core.services.neighbour_pipeline`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.html_renderer import HtmlSink
from adapters.json_exporter import export_result_json
from adapters.rest_countries import RestCountriesClient
from adapters.reverse_geocoder import ReverseGeocoder
from cli.doctor import app as doctor_app
from cli.ui_components import ConsoleSink, TeeSink, build_comparison_table, print_banner
from core.config import AppSettings
from core.domain.models import OrchestrationResult
from core.domain.modes import EmptyRelatedPolicy, FanOutMode
from core.interfaces.sink import PresentationSink
from core.services.neighbour_pipeline import (
    WhereAmIResult,
    compare_modes,
    orchestrate,
    where_am_i,
)

app = typer.Typer(
    no_args_is_help=True,
    help="Fetch a country and its neighbours, sequentially or in parallel.",
)
app.add_typer(doctor_app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _open_source(settings: AppSettings) -> RestCountriesClient:
    return RestCountriesClient(settings)


def _open_geocoder(settings: AppSettings) -> ReverseGeocoder:
    return ReverseGeocoder(settings)


def _build_sink(html: Path | None) -> tuple[PresentationSink, HtmlSink | None]:
    console_sink = ConsoleSink(_console)
    if html is None:
        return console_sink, None
    html_sink = HtmlSink()
    return TeeSink(console_sink, html_sink), html_sink


def _write_outputs(
    result: OrchestrationResult,
    html_sink: HtmlSink | None,
    html: Path | None,
    json_path: Path | None,
) -> None:
    if html_sink is not None and html is not None:
        out = html_sink.export_html(html)
        _console.print(f"[green]HTML written to:[/green] {out}")
    if json_path is not None:
        out = export_result_json(result=result, output_path=json_path)
        _console.print(f"[green]JSON written to:[/green] {out}")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings
    if not no_banner and ctx.invoked_subcommand != "doctor":
        print_banner(_console)


@app.command()
def country(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Country name, e.g. 'portugal'."),
    mode: Optional[FanOutMode] = typer.Option(None, "--mode", "-m", case_sensitive=False),
    empty_policy: Optional[EmptyRelatedPolicy] = typer.Option(
        None,
        "--empty-policy",
        case_sensitive=False,
        help="Treat a country without neighbours as an error or not.",
    ),
    html: Optional[Path] = typer.Option(None, "--html", help="Also write the cards to an HTML file."),
    json_path: Optional[Path] = typer.Option(None, "--json", help="Write the result as JSON."),
) -> None:
    """Fetch a country by name and all of its neighbours."""

    settings: AppSettings = ctx.obj
    sink, html_sink = _build_sink(html)

    async def _run() -> OrchestrationResult:
        async with _open_source(settings) as source:
            return await orchestrate(
                source=source,
                sink=sink,
                primary_key=name,
                mode=mode or settings.default_mode,
                empty_policy=empty_policy or settings.empty_related_policy,
            )

    result = asyncio.run(_run())
    _write_outputs(result, html_sink, html, json_path)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command(name="where-am-i")
def where_am_i_command(
    ctx: typer.Context,
    lat: float = typer.Option(..., "--lat", min=-90.0, max=90.0, help="Latitude."),
    lng: float = typer.Option(..., "--lng", min=-180.0, max=180.0, help="Longitude."),
    mode: Optional[FanOutMode] = typer.Option(None, "--mode", "-m", case_sensitive=False),
    empty_policy: Optional[EmptyRelatedPolicy] = typer.Option(None, "--empty-policy", case_sensitive=False),
    html: Optional[Path] = typer.Option(None, "--html"),
    json_path: Optional[Path] = typer.Option(None, "--json"),
) -> None:
    """Reverse-geocode coordinates, then show that country and its neighbours."""

    settings: AppSettings = ctx.obj
    sink, html_sink = _build_sink(html)

    async def _run() -> WhereAmIResult:
        async with _open_geocoder(settings) as geocoder, _open_source(settings) as source:
            return await where_am_i(
                geocoder=geocoder,
                source=source,
                sink=sink,
                latitude=lat,
                longitude=lng,
                mode=mode or settings.default_mode,
                empty_policy=empty_policy or settings.empty_related_policy,
            )

    outcome = asyncio.run(_run())
    if outcome.location is not None:
        _console.print(f"You are in [bold]{outcome.location.describe()}[/bold]")
    _write_outputs(outcome.result, html_sink, html, json_path)
    if not outcome.result.ok:
        raise typer.Exit(code=1)


@app.command()
def compare(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Country name, e.g. 'germany'."),
    empty_policy: Optional[EmptyRelatedPolicy] = typer.Option(None, "--empty-policy", case_sensitive=False),
) -> None:
    """Run the same lookup sequentially and in parallel, and compare timings."""

    settings: AppSettings = ctx.obj

    def _sink_for(mode: FanOutMode) -> PresentationSink:
        return ConsoleSink(_console, title=mode.label())

    async def _run():
        async with _open_source(settings) as source:
            return await compare_modes(
                source=source,
                sink_factory=_sink_for,
                primary_key=name,
                empty_policy=empty_policy or settings.empty_related_policy,
            )

    comparison = asyncio.run(_run())
    _console.print(build_comparison_table(comparison))
    if not (comparison.sequential.ok and comparison.parallel.ok):
        raise typer.Exit(code=1)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
