"""CLI principal (Typer).

Comandos:
- `list`: listado por modo ALL / NAME / REGION.
- `show`: ficha de un país con sus vecinos.
- `browse`: sesión interactiva (búsqueda, región, fichas, tema).
- `theme`: consulta o alterna el modo oscuro persistido.
- `doctor`: diagnóstico de entorno y configuración.

La CLI solo pinta: toda la lógica de datos vive en `core.services`.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Prompt

from adapters.json_exporter import export_countries_json, export_view_json
from adapters.local_storage import LocalStorage
from adapters.rest_countries import RestCountriesSource
from cli import doctor
from cli.ui_components import (
    ConsoleThemeMirror,
    ListStateRenderer,
    ViewStateRenderer,
    mode_label,
    print_banner,
)
from core.config import LOG_LEVELS, AppSettings
from core.domain.models import REGIONS, QueryState
from core.domain.routes import route_segment
from core.domain.state import Failed, Ready
from core.services.browser import CountryBrowser
from core.services.detail_resolver import DetailResolver
from core.services.query_resolver import QueryResolver
from core.services.theme import ThemePreference

app = typer.Typer(no_args_is_help=True, help="Browse, search and inspect the countries of the world.")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_theme(settings: AppSettings) -> ThemePreference:
    storage = LocalStorage(settings.resolved_storage_path())
    return ThemePreference(storage, apply=ConsoleThemeMirror(_console))


def _canonical_region(value: str) -> str:
    for region in REGIONS:
        if region.casefold() == value.strip().casefold():
            return region
    raise typer.BadParameter(f"Unknown region '{value}'. Choose one of: {', '.join(REGIONS)}")


def _validate_log_level(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"Unknown log level '{value}'. Choose one of: {', '.join(LOG_LEVELS)}")
    return level


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        callback=_validate_log_level,
        help=f"Logging level ({', '.join(LOG_LEVELS)}). Defaults to WITW_LOG_LEVEL.",
    ),
) -> None:
    if log_level is None:
        try:
            log_level = AppSettings().log_level
        except ValidationError as exc:
            _console.print(f"[red]Invalid configuration:[/red] {escape(str(exc))}")
            raise typer.Exit(code=2) from exc
    configure_logging(log_level)


@app.command(name="list")
def list_countries(
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Search countries by name."),
    region: Optional[str] = typer.Option(None, "--region", "-r", help=f"Filter by region ({', '.join(REGIONS)})."),
    exact: bool = typer.Option(False, "--exact", help="Match the full country name only."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Also export the list as JSON."),
) -> None:
    """List countries (all, by name search, or by region)."""

    if search and region:
        raise typer.BadParameter("Use either --search or --region, not both.")

    settings = AppSettings()
    _load_theme(settings)

    if region:
        query = QueryState.by_region(_canonical_region(region))
    elif search:
        query = QueryState.by_name(search)
    else:
        query = QueryState.all_countries()

    resolver = QueryResolver(
        RestCountriesSource(settings),
        settings,
        on_change=ListStateRenderer(_console),
    )
    state = asyncio.run(resolver.resolve(query, full_text=exact))

    if isinstance(state, Failed):
        raise typer.Exit(code=1)
    if json_out and isinstance(state, Ready):
        path = export_countries_json(countries=state.value, output_path=json_out)
        _console.print(f"[green]Saved JSON to:[/green] {path}")


@app.command()
def show(
    name: str = typer.Argument(..., help="Country common name, or a /country/<name> route."),
    json_out: Optional[Path] = typer.Option(None, "--json-out", help="Also export the country as JSON."),
) -> None:
    """Show a country's details and its border countries."""

    settings = AppSettings()
    _load_theme(settings)

    resolver = DetailResolver(
        RestCountriesSource(settings),
        settings,
        on_change=ViewStateRenderer(_console),
    )
    segment = route_segment(name)
    if segment is None:
        state = asyncio.run(resolver.select(name))
    else:
        state = asyncio.run(resolver.resolve_route(segment))

    if isinstance(state, Failed):
        raise typer.Exit(code=1)
    if json_out and isinstance(state, Ready):
        path = export_view_json(view=state.value, output_path=json_out)
        _console.print(f"[green]Saved JSON to:[/green] {path}")


@app.command()
def theme(
    toggle: bool = typer.Option(False, "--toggle", help="Switch between light and dark mode."),
) -> None:
    """Show (or toggle) the persisted dark-mode preference."""

    preference = _load_theme(AppSettings())
    if toggle:
        preference.toggle()
    state = "dark" if preference.is_dark else "light"
    _console.print(f"Current mode: [witw.label]{state}[/witw.label] (switch: {mode_label(preference.is_dark)})")


async def _ask(prompt: str, **kwargs: object) -> str:
    # Prompt bloqueante en un hilo: el loop sigue libre.
    return await asyncio.to_thread(Prompt.ask, escape(prompt), console=_console, **kwargs)


async def _open_country(details: DetailResolver, target: str) -> None:
    segment = route_segment(target)
    if segment is None:
        state = await details.select(target)
    else:
        state = await details.resolve_route(segment)

    while isinstance(state, Ready) and state.value.borders:
        pick = await _ask("Open border country # (enter to go back)", default="")
        if not pick.strip():
            return
        if not pick.strip().isdigit() or not 1 <= int(pick) <= len(state.value.borders):
            _console.print("[witw.error]Invalid choice.[/witw.error]")
            continue
        border = state.value.borders[int(pick) - 1]
        state = await details.select(border.common_name)


async def _browse(settings: AppSettings) -> None:
    preference = _load_theme(settings)
    source = RestCountriesSource(settings)
    browser = CountryBrowser(
        QueryResolver(source, settings, on_change=ListStateRenderer(_console)),
        settings,
    )
    details = DetailResolver(source, settings, on_change=ViewStateRenderer(_console))

    print_banner(_console, dark=preference.is_dark)
    await browser.refresh()

    while True:
        action = await _ask(
            "[s]earch, [r]egion, [o]pen country, [t]oggle theme, [q]uit",
            choices=["s", "r", "o", "t", "q"],
            default="s",
        )
        if action == "q":
            return
        if action == "s":
            text = await _ask("Search for a country...", default="")
            await browser.set_search_text(text)
        elif action == "r":
            region = await _ask("Filter by region", choices=list(REGIONS), default=REGIONS[0])
            await browser.set_region(region)
        elif action == "o":
            target = await _ask("Country name or /country/<name> route")
            if target.strip():
                await _open_country(details, target.strip())
        elif action == "t":
            preference.toggle()
            print_banner(_console, dark=preference.is_dark)


@app.command()
def browse() -> None:
    """Interactive session: search, filter by region, open countries."""

    asyncio.run(_browse(AppSettings()))


def run() -> None:
    app()
