"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse the same panels, tables and sinks.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from core.domain.models import Country
from core.interfaces.sink import PresentationSink
from core.services.neighbour_pipeline import ModeComparison


def print_banner(console: Console) -> None:
    """Print the welcome banner."""

    title = Text("NEIGHBOURS", style="bold cyan")
    subtitle = Text("Countries • Borders • Sequential vs parallel", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_country_panel(country: Country, variant: str | None = None) -> Panel:
    body = Text()
    body.append(f"{country.region}\n", style="dim")
    body.append(f"👫 {country.population_millions:.1f}M people\n")
    body.append(f"🗣️ {country.primary_language_name or 'Unknown'}\n")
    body.append(f"💰 {country.primary_currency_name or 'Unknown'}")

    is_neighbour = variant == "neighbour"
    title = Text(country.name, style="bold" if not is_neighbour else "")
    subtitle = country.alpha3_code or None
    return Panel(
        body,
        title=title,
        subtitle=subtitle,
        border_style="magenta" if is_neighbour else "bright_green",
        width=40 if is_neighbour else 48,
    )


def build_comparison_table(comparison: ModeComparison) -> Table:
    table = Table(title="Sequential vs parallel")
    table.add_column("Mode", style="cyan", no_wrap=True)
    table.add_column("Neighbours", style="green")
    table.add_column("Failed", style="red")
    table.add_column("Elapsed", style="white")

    for result in (comparison.sequential, comparison.parallel):
        table.add_row(
            result.mode.label(),
            str(len(result.succeeded)),
            str(len(result.failed)),
            f"{result.elapsed_seconds:.3f}s",
        )

    if comparison.speedup is not None:
        table.caption = f"Parallel was {comparison.speedup:.1f}x faster"
    return table


class ConsoleSink(PresentationSink):
    """Prints each card as a Rich panel as soon as it is rendered."""

    def __init__(self, console: Console, title: str | None = None) -> None:
        self._console = console
        self._title = title
        self.rendered = 0
        self.errors = 0
        if title:
            console.print(Rule(title, style="cyan"))

    def render(self, entity: Country, variant: str | None = None) -> None:
        self.rendered += 1
        self._console.print(build_country_panel(entity, variant))

    def render_error(self, message: str) -> None:
        self.errors += 1
        self._console.print(Text(message, style="red"))

    def reveal(self) -> None:
        summary = f"{self.rendered} rendered, {self.errors} error(s)"
        self._console.print(Rule(summary, style="dim"))


class TeeSink(PresentationSink):
    """Forwards every call to several sinks (console + HTML, for instance)."""

    def __init__(self, *sinks: PresentationSink) -> None:
        self._sinks = sinks

    def render(self, entity: Country, variant: str | None = None) -> None:
        for sink in self._sinks:
            sink.render(entity, variant)

    def render_error(self, message: str) -> None:
        for sink in self._sinks:
            sink.render_error(message)

    def reveal(self) -> None:
        for sink in self._sinks:
            sink.reveal()
