"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.rest_countries import RestCountriesSource
from core.config import AppSettings, write_user_env_vars
from core.domain.errors import DataError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    try:
        records = await RestCountriesSource(settings).fetch_by_name("France", full_text=True)
        return True, f"{len(records)} record(s) for 'France'"
    except DataError as exc:
        return False, str(exc)


def _check_storage(settings: AppSettings) -> tuple[bool, str]:
    path = settings.resolved_storage_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return False, str(exc)
    return True, str(path)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="Where in the world? Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("API base_url", "OK", settings.api_base_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Result cap", "OK", f"{settings.result_cap} (ALL/NAME)")
    region_cap = settings.region_result_cap
    table.add_row("Region cap", "OK", "uncapped" if region_cap is None else str(region_cap))
    table.add_row(
        "Border failures",
        "OK",
        "show country without borders" if settings.borders_degrade_on_error else "fail the detail view",
    )

    ok_storage, detail_storage = _check_storage(settings)
    table.add_row("Preference storage", "OK" if ok_storage else "FAIL", detail_storage)

    # Connectivity (best-effort)
    ok_api, detail_api = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    _console.print(table)

    if not ok_api:
        _console.print(
            "\n[yellow]Note:[/yellow] check WITW_API_BASE_URL or run `doctor configure`."
        )


@app.command()
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    current = AppSettings()

    base_url = typer.prompt("API base URL", default=current.api_base_url, show_default=True).strip()
    timeout = typer.prompt(
        "HTTP timeout (seconds)",
        default=current.http_timeout_seconds,
        type=float,
        show_default=True,
    )
    region_cap = typer.prompt(
        "Region result cap (0 = uncapped)",
        default=current.region_result_cap or 0,
        type=int,
        show_default=True,
    )

    if not base_url:
        raise typer.BadParameter("base_url is required")
    if timeout <= 0:
        raise typer.BadParameter("timeout must be greater than zero")
    if region_cap < 0:
        raise typer.BadParameter("region cap cannot be negative")

    env_path = write_user_env_vars(
        {
            "WITW_API_BASE_URL": base_url,
            "WITW_HTTP_TIMEOUT_SECONDS": f"{timeout:g}",
            "WITW_REGION_RESULT_CAP": str(region_cap) if region_cap else "",
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
