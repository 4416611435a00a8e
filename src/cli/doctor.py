"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client, fetch_json
from core.config import AppSettings, get_user_env_file, read_user_env_vars, write_user_env_vars
from core.domain.errors import FetchError
from core.domain.modes import EmptyRelatedPolicy, FanOutMode

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_json_endpoint(settings: AppSettings, url: str) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            await fetch_json(client, url, error_message="Unexpected status")
        return True, "OK"
    except FetchError as exc:
        return False, exc.message


@app.command()
def run() -> None:
    """Show the effective configuration and check API connectivity."""

    settings = AppSettings()

    table = Table(title="Neighbours Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Countries API", "OK", settings.countries_base_url)
    table.add_row("Geocoding API", "OK", settings.geocode_base_url)
    table.add_row("Default mode", "OK", settings.default_mode.value)
    table.add_row("Empty neighbours", "OK", settings.empty_related_policy.value)
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    user_env = get_user_env_file()
    stored = read_user_env_vars(user_env)
    table.add_row(
        "User config",
        "OK" if stored else "OPTIONAL",
        f"{user_env} (" + (", ".join(sorted(stored)) or "empty") + ")",
    )

    # Connectivity (best-effort)
    countries_url = f"{settings.countries_base_url.rstrip('/')}/alpha/PRT"
    ok_countries, detail_countries = asyncio.run(_check_json_endpoint(settings, countries_url))
    table.add_row("Countries connectivity", "OK" if ok_countries else "FAIL", detail_countries)

    geocode_url = (
        f"{settings.geocode_base_url.rstrip('/')}/reverse-geocode-client"
        "?latitude=38.72&longitude=-9.14&localityLanguage=en"
    )
    ok_geocode, detail_geocode = asyncio.run(_check_json_endpoint(settings, geocode_url))
    table.add_row("Geocoding connectivity", "OK" if ok_geocode else "FAIL", detail_geocode)

    _console.print(table)

    if not ok_countries:
        _console.print(
            "\n[yellow]Note:[/yellow] Set NEIGHBOURS_COUNTRIES_BASE_URL if you use a mirror of REST Countries."
        )


@app.command()
def configure() -> None:
    """Interactive setup (stores defaults in the user config .env)."""

    settings = AppSettings()

    mode = typer.prompt(
        "Default mode (sequential/parallel)",
        default=settings.default_mode.value,
        show_default=True,
    ).strip().lower()
    policy = typer.prompt(
        "Country without neighbours (ignore/error)",
        default=settings.empty_related_policy.value,
        show_default=True,
    ).strip().lower()
    base_url = typer.prompt(
        "Countries API base URL",
        default=settings.countries_base_url,
        show_default=True,
    ).strip()

    if mode not in {m.value for m in FanOutMode}:
        raise typer.BadParameter(f"unknown mode: {mode}")
    if policy not in {p.value for p in EmptyRelatedPolicy}:
        raise typer.BadParameter(f"unknown policy: {policy}")
    if not base_url:
        raise typer.BadParameter("base URL is required")

    env_path = write_user_env_vars(
        {
            "NEIGHBOURS_DEFAULT_MODE": mode,
            "NEIGHBOURS_EMPTY_RELATED_POLICY": policy,
            "NEIGHBOURS_COUNTRIES_BASE_URL": base_url,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
