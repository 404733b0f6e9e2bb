"""Taxonomía cerrada de errores del cliente JSON.

Por qué una jerarquía de excepciones:
- Cada causa distinguible tiene su propia clase; el caller puede usar
  `except InvalidURL` o inspeccionar `error.kind`.
- Los errores desconocidos del transporte se envuelven en `TransportFailed`
  y nunca se filtran como excepciones opacas.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Identificador estable de cada tipo de fallo."""

    INVALID_URL = "invalid_url"
    ENCODING_FAILED = "encoding_failed"
    TRANSPORT_FAILED = "transport_failed"
    CANCELLED = "cancelled"
    UNSUCCESSFUL_STATUS = "unsuccessful_status"
    DECODING_FAILED = "decoding_failed"


def _body_preview(body: bytes | None, max_chars: int = 500) -> str | None:
    if not body:
        return None
    text = body.decode("utf-8", errors="replace")
    if len(text) <= max_chars:
        return text
    return text[: max_chars - 1] + "…"


class NetworkError(Exception):
    """Base de la taxonomía. Nunca se instancia directamente."""

    kind: ErrorKind

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"kind": self.kind.value, "message": str(self)}
        if self.__cause__ is not None:
            out["cause"] = repr(self.__cause__)
        return out


class InvalidURL(NetworkError):
    kind = ErrorKind.INVALID_URL

    def __init__(self, url: str, reason: str = "malformed URL") -> None:
        super().__init__(f"Invalid URL {url!r}: {reason}")
        self.url = url
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "url": self.url}


class EncodingFailed(NetworkError):
    kind = ErrorKind.ENCODING_FAILED

    def __init__(self, message: str = "request body could not be serialized") -> None:
        super().__init__(message)


class TransportFailed(NetworkError):
    """Fallo de conectividad, timeout o error interno del transporte."""

    kind = ErrorKind.TRANSPORT_FAILED

    def __init__(self, reason: str = "transport", message: str | None = None) -> None:
        super().__init__(message or f"Transport failed ({reason})")
        self.reason = reason

    @property
    def timed_out(self) -> bool:
        return self.reason == "timeout"

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "reason": self.reason}


class Cancelled(NetworkError):
    kind = ErrorKind.CANCELLED

    def __init__(self) -> None:
        super().__init__("Request cancelled")


class UnsuccessfulStatus(NetworkError):
    kind = ErrorKind.UNSUCCESSFUL_STATUS

    def __init__(self, status_code: int, body: bytes | None = None) -> None:
        super().__init__(f"Unsuccessful HTTP status {status_code}")
        self.status_code = status_code
        self.body = body or None

    def to_dict(self) -> dict[str, Any]:
        out = {**super().to_dict(), "status_code": self.status_code}
        preview = _body_preview(self.body)
        if preview is not None:
            out["body"] = preview
        return out


class DecodingFailed(NetworkError):
    kind = ErrorKind.DECODING_FAILED

    def __init__(self, message: str, body: bytes | None = None) -> None:
        super().__init__(f"Response decoding failed: {message}")
        self.message = message
        self.body = body or None

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        preview = _body_preview(self.body)
        if preview is not None:
            out["body"] = preview
        return out
