"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from adapters.endpoints import Post, Product
from core.domain.errors import NetworkError


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("jsonwire", style="bold cyan")
    subtitle = Text("Descriptor • Transporte • Resultado tipado", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_error_panel(error: NetworkError) -> Panel:
    """Panel para presentar un error de la taxonomía."""

    details = error.to_dict()
    body = Text()
    body.append(f"{details.pop('message')}\n", style="bold")
    details.pop("kind", None)
    for key, value in details.items():
        body.append(f"\n{key}: ", style="dim")
        body.append(str(value))
    title = Text(error.kind.value, style="bold red")
    return Panel(body, title=title, border_style="red")


def build_posts_table(posts: Iterable[Post]) -> Table:
    table = Table(title="Posts")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("User", style="white")
    table.add_column("Title", style="magenta")
    for post in posts:
        table.add_row(str(post.id or "-"), str(post.user_id), post.title)
    return table


def build_products_table(products: Iterable[Product]) -> Table:
    table = Table(title="Products")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Price", style="green", justify="right")
    for product in products:
        table.add_row(str(product.id or "-"), product.title, product.category, f"{product.price:.2f}")
    return table
