"""Logging bootstrap.

The core client never logs: failures are returned to the caller. Adapters and
the CLI use named stdlib loggers, and this module wires them to a Rich handler
so debug output shares the console with the rest of the CLI.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name not in _LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")
    return logging.getLevelName(name)


def init_logging(level: str | int = "WARNING", *, console: Console | None = None) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    resolved = resolve_level(level)
    root.setLevel(resolved)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    # httpx/httpcore son muy verbosos en DEBUG.
    if resolved <= logging.DEBUG:
        logging.getLogger("httpcore").setLevel(logging.INFO)
