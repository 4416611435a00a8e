"""HTML rendering of countries.

Why it lives in adapters:
- HTML is an infrastructure detail (Jinja2).
- The core only knows the `PresentationSink` contract and `Country`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import escape

from core.domain.models import Country
from core.interfaces.sink import PresentationSink


_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


_ENV = Environment(
    loader=FileSystemLoader(str(_TEMPLATES_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_country_card(country: Country, variant: str | None = None) -> str:
    """Render one `<article class="country ...">` fragment."""

    template = _ENV.get_template("country.html")
    return template.render(country=country, variant=variant or "")


class HtmlSink(PresentationSink):
    """Collects country cards and error text into a hidden container.

    Mirrors a DOM container: fragments are appended in arrival order and the
    container only becomes visible (opacity 1) after `reveal()`.
    """

    def __init__(self, title: str = "Countries") -> None:
        self.title = title
        self.fragments: list[str] = []
        self.errors: list[str] = []
        self.revealed = False

    def render(self, entity: Country, variant: str | None = None) -> None:
        self.fragments.append(render_country_card(entity, variant))

    def render_error(self, message: str) -> None:
        self.errors.append(message)
        self.fragments.append(str(escape(message)))

    def reveal(self) -> None:
        self.revealed = True

    def render_container(self) -> str:
        template = _ENV.get_template("container.html")
        return template.render(fragments=self.fragments, revealed=self.revealed)

    def render_page(self) -> str:
        """Render a self-contained HTML document around the container."""

        generated_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        template = _ENV.get_template("page.html")
        return template.render(
            title=self.title,
            container=self.render_container(),
            generated_at=generated_at,
        )

    def export_html(self, output_path: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render_page(), encoding="utf-8")
        return output_path
