"""`python -m main` desde `src/`: mismo comando que el script `jsonwire`."""

from __future__ import annotations

import sys

# Terminales cp1252 en Windows no pueden imprimir la salida JSON en UTF-8.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run

if __name__ == "__main__":
    run()
