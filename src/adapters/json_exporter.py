"""Exportación JSON de un resultado decodificado.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines.
- Permite guardar la respuesta ya validada sin volver a pedirla.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter


def to_jsonable(value: Any) -> Any:
    """Convierte modelos Pydantic (o listas de ellos) a tipos JSON nativos."""

    return TypeAdapter(Any).dump_python(value, mode="json", by_alias=True)


def export_result_json(*, value: Any, output_path: Path) -> Path:
    """Exporta `value` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(to_jsonable(value), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
