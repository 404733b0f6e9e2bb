"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import HttpxTransport
from cli.ui_components import print_banner
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.domain.errors import InvalidURL
from core.domain.models import RequestDescriptor
from core.services.json_client import JsonClient
from core.services.request_builder import build_url

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(settings: AppSettings, url: str) -> tuple[bool, str]:
    descriptor = RequestDescriptor(base_url=url, timeout=settings.http_timeout_seconds)
    async with HttpxTransport(settings=settings) as transport:
        result = await JsonClient(transport).perform(descriptor, Any)
    if result.ok:
        return True, "HTTP 2xx, JSON body"
    return False, str(result.error)


def _validated_url(value: str) -> str:
    try:
        return build_url(value.strip())
    except InvalidURL as exc:
        raise typer.BadParameter(exc.reason) from exc


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    print_banner(_console)

    table = Table(title="jsonwire Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("User config", "OK" if get_user_env_file().exists() else "OPTIONAL", str(get_user_env_file()))
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Default retries", "OK", str(settings.default_retries))
    if settings.api_token:
        table.add_row("API token", "OK", "Bearer token configured")
    else:
        table.add_row("API token", "OPTIONAL", "No token set -> purchase endpoints will be rejected")

    try:
        base_url = build_url(settings.base_url)
    except InvalidURL as exc:
        table.add_row("Base URL", "FAIL", exc.reason)
        _console.print(table)
        raise typer.Exit(code=1)
    table.add_row("Base URL", "OK", base_url)

    ok_http, detail_http = asyncio.run(_check_http(settings, base_url))
    table.add_row("HTTP connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)
    if not ok_http:
        raise typer.Exit(code=1)


@app.command(name="set-base-url")
def set_base_url(url: str = typer.Argument(..., help="Absolute http(s) URL.")) -> None:
    """Persist the default base URL in the user config .env."""

    env_path = write_user_env_vars({"JSONWIRE_BASE_URL": _validated_url(url)})
    _console.print(f"[green]Saved base URL to:[/green] {env_path}")


@app.command()
def setup() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()
    base_url = typer.prompt("Base URL", default=settings.base_url, show_default=True)
    token = typer.prompt("API token (empty to skip)", default="", show_default=False, hide_input=True)

    values = {"JSONWIRE_BASE_URL": _validated_url(base_url)}
    if token.strip():
        values["JSONWIRE_API_TOKEN"] = token.strip()

    env_path = write_user_env_vars(values)
    _console.print(f"[green]Saved config to:[/green] {env_path}")
