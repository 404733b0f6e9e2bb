"""Construcción de la petición a partir de un `RequestDescriptor`.

Funciones puras (sin I/O): componen la URL absoluta, serializan el cuerpo y
fijan las cabeceras. Cualquier fallo aquí ocurre antes de tocar la red.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from pydantic import BaseModel

from core.domain.errors import EncodingFailed, InvalidURL
from core.domain.models import HttpMethod, RequestDescriptor, TransportRequest

JSON_CONTENT_TYPE = "application/json"

_ALLOWED_SCHEMES = ("http", "https")
_FORBIDDEN_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")
# RFC 3986 pchar + "/" + "%" (las secuencias ya escapadas se conservan).
_PATH_SAFE = "/:@!$&'()*+,;=-._~%"


def _join_path(base_path: str, path: str) -> str:
    if not path:
        return base_path
    return f"{base_path.rstrip('/')}/{path.lstrip('/')}"


def build_url(
    base_url: str,
    path: str = "",
    query_items: Iterable[tuple[str, str]] = (),
) -> str:
    """Compone `base_url` + `path` + `query_items` en una URL absoluta.

    Reglas:
    - Solo http/https con host; puerto (si existe) numérico y en rango.
    - Espacios o caracteres de control en base/path invalidan la URL.
    - Los query items se codifican con percent-encoding y se añaden, en orden,
      tras la query que ya tuviera `base_url`.
    """

    attempted = _join_path(base_url, path) if base_url else path
    if not base_url or not base_url.strip():
        raise InvalidURL(attempted, "empty base URL")
    if _FORBIDDEN_CHARS_RE.search(base_url) or _FORBIDDEN_CHARS_RE.search(path):
        raise InvalidURL(attempted, "contains whitespace or control characters")

    try:
        parts = urlsplit(base_url)
        parts.port  # urlsplit valida el puerto de forma perezosa
    except ValueError as exc:
        raise InvalidURL(attempted, str(exc)) from exc

    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise InvalidURL(attempted, f"unsupported scheme {parts.scheme!r}")
    if not parts.hostname:
        raise InvalidURL(attempted, "missing host")

    full_path = _join_path(parts.path, quote(path, safe=_PATH_SAFE))
    extra_query = urlencode(list(query_items), quote_via=quote)
    query = "&".join(q for q in (parts.query, extra_query) if q)

    return urlunsplit((parts.scheme, parts.netloc, full_path, query, parts.fragment))


def encode_payload(value: Any) -> bytes:
    """Serializa un valor estructurado a JSON (UTF-8).

    Modelos Pydantic usan sus alias; el resto pasa por `json.dumps`. Datos
    cíclicos o tipos no serializables terminan en `EncodingFailed`.
    """

    try:
        if isinstance(value, BaseModel):
            return value.model_dump_json(by_alias=True).encode("utf-8")
        return json.dumps(value, ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EncodingFailed(f"request body could not be serialized: {exc}") from exc


def _has_header(headers: dict[str, str], name: str) -> bool:
    wanted = name.lower()
    return any(key.lower() == wanted for key in headers)


def build_request(descriptor: RequestDescriptor) -> TransportRequest:
    """Traduce el descriptor a la petición que verá el transporte."""

    url = build_url(descriptor.base_url, descriptor.path, descriptor.query_items)

    body: bytes | None = None
    if descriptor.method is not HttpMethod.GET:
        if descriptor.body is not None:
            body = descriptor.body
        elif descriptor.payload is not None:
            body = encode_payload(descriptor.payload)

    headers = dict(descriptor.headers)
    if body is not None and not _has_header(headers, "Content-Type"):
        headers["Content-Type"] = JSON_CONTENT_TYPE

    return TransportRequest(
        method=descriptor.method,
        url=url,
        headers=headers,
        body=body,
        timeout=descriptor.timeout,
    )
