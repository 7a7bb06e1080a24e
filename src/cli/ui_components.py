"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles entre `list`, `show` y `browse`.

Los renderers de estado (`ListStateRenderer`, `ViewStateRenderer`) se pasan
como `on_change` a los resolvers: reciben cada transición Loading/Ready/Failed
y vuelven a pintar.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from core.domain.models import CountrySummary, CountryView
from core.domain.routes import country_route
from core.domain.state import Failed, Loading, Ready

EMPTY_RESULTS_MESSAGE = "No countries match your search."

LIGHT_THEME = Theme(
    {
        "witw.title": "bold black on white",
        "witw.label": "bold",
        "witw.value": "grey30",
        "witw.link": "blue underline",
        "witw.error": "bold red",
        "witw.empty": "bold grey30",
        "witw.border": "grey50",
    }
)
DARK_THEME = Theme(
    {
        "witw.title": "bold white on grey23",
        "witw.label": "bold white",
        "witw.value": "grey85",
        "witw.link": "cyan underline",
        "witw.error": "bold bright_red",
        "witw.empty": "bold grey85",
        "witw.border": "grey62",
    }
)


class ConsoleThemeMirror:
    """Aplica el tema claro u oscuro sobre una `Console` de rich."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._pushed = False
        self.dark = False

    def __call__(self, dark: bool) -> None:
        if self._pushed:
            self._console.pop_theme()
        self._console.push_theme(DARK_THEME if dark else LIGHT_THEME)
        self._pushed = True
        self.dark = dark


def mode_label(dark: bool) -> str:
    """Texto del botón de cambio: ofrece el modo contrario al actual."""

    return "Light Mode" if dark else "Dark Mode"


def print_banner(console: Console, *, dark: bool) -> None:
    title = Text("Where in the world?", style="witw.title")
    subtitle = Text(f"[t] {mode_label(dark)}", style="witw.value")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="witw.border", padding=(1, 4)))


def build_countries_table(countries: Sequence[CountrySummary]) -> Table:
    table = Table(title=f"Countries ({len(countries)})", border_style="witw.border")
    table.add_column("Country", style="witw.label", no_wrap=True)
    table.add_column("Population", style="witw.value", justify="right")
    table.add_column("Region", style="witw.value")
    table.add_column("Capital", style="witw.value")
    table.add_column("Route", style="witw.link")
    for c in countries:
        table.add_row(
            c.common_name,
            f"{c.population:,}",
            c.region,
            c.capital_label,
            country_route(c.common_name),
        )
    return table


def build_detail_panel(view: CountryView) -> Panel:
    detail = view.detail

    rows = Table.grid(padding=(0, 2))
    rows.add_column(style="witw.label", no_wrap=True)
    rows.add_column(style="witw.value")
    rows.add_row("Native Name:", detail.native_name_label)
    rows.add_row("Population:", f"{detail.population:,}")
    rows.add_row("Region:", detail.region_label)
    if detail.subregion:
        rows.add_row("Subregion:", detail.subregion)
    rows.add_row("Capital:", detail.capital_label)
    rows.add_row("Top Level Domain:", detail.top_level_domain_label)
    rows.add_row("Currencies:", detail.currencies_label)
    rows.add_row("Languages:", detail.languages_label)
    if detail.flag_url:
        rows.add_row("Flag:", detail.flag_url)

    borders = Text()
    if view.borders:
        for i, border in enumerate(view.borders, start=1):
            borders.append(f"{i}. {border.common_name} ", style="witw.label")
            borders.append(f"{country_route(border.common_name)}\n", style="witw.link")
    else:
        borders.append("No border countries", style="witw.value")

    body = Table.grid()
    body.add_row(rows)
    body.add_row(Text("\nBorder Countries:", style="witw.label"))
    body.add_row(borders)
    return Panel(body, title=Text(detail.common_name, style="witw.title"), border_style="witw.border")


class _StatusRenderer(ABC):
    """Spinner mientras carga, texto de error en `Failed`, `render_ready` en `Ready`."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._status: Status | None = None

    def _start(self) -> None:
        if self._status is None:
            self._status = self._console.status("Loading...")
            self._status.start()

    def _stop(self) -> None:
        if self._status is not None:
            self._status.stop()
            self._status = None

    def __call__(self, state: object) -> None:
        if isinstance(state, Loading):
            self._start()
            return
        self._stop()
        if isinstance(state, Failed):
            self._console.print(Text(state.reason, style="witw.error"))
        elif isinstance(state, Ready):
            self.render_ready(state.value)

    @abstractmethod
    def render_ready(self, value: Any) -> None: ...


class ListStateRenderer(_StatusRenderer):
    def render_ready(self, value: Sequence[CountrySummary]) -> None:
        if not value:
            self._console.print(Text(EMPTY_RESULTS_MESSAGE, style="witw.empty"))
            return
        self._console.print(build_countries_table(value))


class ViewStateRenderer(_StatusRenderer):
    def render_ready(self, value: CountryView) -> None:
        self._console.print(build_detail_panel(value))
