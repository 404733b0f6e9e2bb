"""CLI principal (Typer).

Comandos:
- `call`: ejecuta un descriptor arbitrario e imprime el JSON decodificado
  (`--json` para salida plana, también en errores).
- `posts` / `products`: atajos sobre los endpoints declarativos.
- `doctor`: diagnóstico de configuración y conectividad.

Códigos de salida: 0 éxito, 1 fallo de la taxonomía, 2 entrada CLI inválida.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Awaitable, Callable, List, NoReturn, Optional, TypeVar

import typer
from pydantic import ValidationError
from rich.console import Console

from adapters.endpoints import PostsService, ProductsService
from adapters.http_client import HttpxTransport
from adapters.json_exporter import export_result_json, to_jsonable
from cli import doctor
from cli.ui_components import build_error_panel, build_posts_table, build_products_table
from core.config import AppSettings
from core.domain.errors import NetworkError
from core.domain.models import HttpMethod, RequestDescriptor
from core.logging import init_logging
from core.services.json_client import JsonClient

T = TypeVar("T")

app = typer.Typer(no_args_is_help=True, help="Single-request JSON client.")
posts_app = typer.Typer(no_args_is_help=True, help="Posts endpoints (JSONPlaceholder style).")
products_app = typer.Typer(no_args_is_help=True, help="Products endpoints (FakeStore style).")
app.add_typer(posts_app, name="posts")
app.add_typer(products_app, name="products")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


def run_with_client(settings: AppSettings, work: Callable[[JsonClient], Awaitable[T]]) -> T:
    """Abre un transporte httpx, ejecuta `work` y lo cierra."""

    async def runner() -> T:
        async with HttpxTransport(settings=settings) as transport:
            return await work(JsonClient(transport))

    return asyncio.run(runner())


def _fail(error: NetworkError) -> NoReturn:
    _err_console.print(build_error_panel(error))
    raise typer.Exit(code=1)


def _parse_pairs(values: List[str], sep: str, option: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for raw in values:
        if sep not in raw:
            raise typer.BadParameter(f"expected KEY{sep}VALUE, got {raw!r}", param_hint=option)
        key, value = raw.split(sep, 1)
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"empty key in {raw!r}", param_hint=option)
        pairs.append((key, value.strip() if sep == ":" else value))
    return pairs


def _emit(value: Any, output: Optional[Path]) -> None:
    if output is not None:
        path = export_result_json(value=value, output_path=output)
        _console.print(f"[green]Saved to:[/green] {path}")
        return
    _console.print_json(data=to_jsonable(value))


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
) -> None:
    settings = AppSettings()
    try:
        init_logging(log_level or settings.log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc


@app.command()
def call(
    path: str = typer.Argument("", help="Path relative to the base URL."),
    base_url: Optional[str] = typer.Option(None, "--base-url", "-b", help="Overrides JSONWIRE_BASE_URL."),
    method: HttpMethod = typer.Option(HttpMethod.GET, "--method", "-X", case_sensitive=False),
    query: List[str] = typer.Option([], "--query", "-q", help="Query item as key=value (repeatable)."),
    header: List[str] = typer.Option([], "--header", "-H", help="Header as 'Name: value' (repeatable)."),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON request body."),
    retries: Optional[int] = typer.Option(None, "--retries", min=0, help="Extra attempts on failure."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-attempt timeout (seconds)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the decoded JSON to a file."),
    as_json: bool = typer.Option(False, "--json", help="Plain JSON on stdout, errors included."),
) -> None:
    """Perform one request and print the decoded JSON body."""

    settings = AppSettings()

    payload: Any = None
    if data is not None:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError as exc:
            raise typer.BadParameter(f"invalid JSON: {exc}", param_hint="--data") from exc

    try:
        descriptor = RequestDescriptor(
            base_url=base_url or settings.base_url,
            path=path,
            method=method,
            query_items=_parse_pairs(query, "=", "--query"),
            headers=dict(_parse_pairs(header, ":", "--header")),
            payload=payload,
            timeout=timeout,
            retries=settings.default_retries if retries is None else retries,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    result = run_with_client(settings, lambda client: client.perform(descriptor, Any))
    if as_json and output is None:
        plain = to_jsonable(result.value) if result.ok else result.error.to_dict()
        typer.echo(json.dumps(plain, ensure_ascii=False, indent=2))
        if not result.ok:
            raise typer.Exit(code=1)
        return
    if not result.ok:
        _fail(result.error)
    _emit(result.value, output)


@posts_app.command("list")
def posts_list(output: Optional[Path] = typer.Option(None, "--output", "-o")) -> None:
    """List all posts."""

    settings = AppSettings()
    try:
        posts = run_with_client(settings, lambda client: PostsService(client, settings).fetch_posts())
    except NetworkError as exc:
        _fail(exc)
    if output is not None:
        _emit(posts, output)
        return
    _console.print(build_posts_table(posts))


@posts_app.command("show")
def posts_show(post_id: int = typer.Argument(..., min=1)) -> None:
    """Show one post."""

    settings = AppSettings()
    try:
        post = run_with_client(settings, lambda client: PostsService(client, settings).fetch_post(post_id))
    except NetworkError as exc:
        _fail(exc)
    _emit(post, None)


@products_app.command("list")
def products_list(
    sort: Optional[str] = typer.Option(None, "--sort", help="asc or desc."),
    limit: Optional[int] = typer.Option(None, "--limit", min=1),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """List products."""

    settings = AppSettings()
    try:
        products = run_with_client(
            settings,
            lambda client: ProductsService(client, settings).all_products(sort=sort, limit=limit),
        )
    except NetworkError as exc:
        _fail(exc)
    if output is not None:
        _emit(products, output)
        return
    _console.print(build_products_table(products))


@products_app.command("show")
def products_show(product_id: int = typer.Argument(..., min=1)) -> None:
    """Show one product."""

    settings = AppSettings()
    try:
        product = run_with_client(settings, lambda client: ProductsService(client, settings).product(product_id))
    except NetworkError as exc:
        _fail(exc)
    _emit(product, None)


def run() -> None:
    app()
