"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta en el borde: un `RequestDescriptor` mal formado falla al
  construirse, no en mitad de una petición.
- Los modelos describen *qué* se pide, no *cómo* viaja por la red.

Nota:
- Ningún modelo vive más allá de una llamada; no hay caché ni sesión.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict

from core.domain.errors import NetworkError

T = TypeVar("T")


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class RequestDescriptor(BaseModel):
    """Descripción inmutable de una llamada HTTP antes de emitirla.

    Reglas:
    - `body` son bytes opacos que se adjuntan tal cual.
    - `payload` es un valor estructurado que se serializa a JSON al ejecutar;
      si la serialización falla, la llamada termina en `EncodingFailed`.
    - En GET se descartan `body` y `payload`: un GET nunca lleva cuerpo.
    - `headers` se guarda como tupla de pares; tras construirse, nada es mutable.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_url: str = Field(
        ...,
        description="URL base absoluta (esquema + host, opcionalmente con path).",
    )
    path: str = Field(
        default="",
        description="Path relativo que se concatena a `base_url`.",
    )
    method: HttpMethod = Field(default=HttpMethod.GET)
    query_items: tuple[tuple[str, str], ...] = Field(
        default=(),
        description="Pares clave/valor en orden; se permiten claves repetidas.",
    )
    headers: tuple[tuple[str, str], ...] = Field(
        default=(),
        description="Cabeceras como pares congelados; acepta un mapping al construir.",
    )
    body: bytes | None = Field(default=None)
    payload: Any = Field(default=None)
    timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout por intento (segundos).",
    )
    retries: int = Field(
        default=0,
        ge=0,
        description="Reintentos explícitos: se harán hasta `retries + 1` intentos.",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_body_for_get(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        method = data.get("method", HttpMethod.GET)
        if isinstance(method, str) and method.upper() == HttpMethod.GET.value:
            data = {k: v for k, v in data.items() if k not in ("body", "payload")}
        return data

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, HttpMethod):
            return value.upper()
        return value

    @field_validator("query_items", mode="before")
    @classmethod
    def _normalize_query_items(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, Mapping):
            value = value.items()
        return tuple((str(k), str(v)) for k, v in value)

    @field_validator("headers", mode="before")
    @classmethod
    def _normalize_headers(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, Mapping):
            value = value.items()
        # Una clave repetida se queda con el último valor, como en un dict.
        return tuple(dict((str(k), str(v)) for k, v in value).items())

    @model_validator(mode="after")
    def _check_body_sources(self) -> "RequestDescriptor":
        if self.body is not None and self.payload is not None:
            raise ValueError("`body` and `payload` are mutually exclusive")
        return self


class TransportRequest(BaseModel):
    """Petición ya construida: exactamente lo que recibe el transporte."""

    model_config = ConfigDict(frozen=True)

    method: HttpMethod
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes | None = None
    timeout: float | None = None


class RawResponse(BaseModel):
    """Resultado a nivel de transporte. Se consume y se descarta."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=0, le=999)
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code <= 299


class NoReply(BaseModel):
    """Destino de decodificación para respuestas 2xx sin cuerpo útil."""


@dataclass(frozen=True)
class TypedResult(Generic[T]):
    """Valor decodificado o un único error de la taxonomía."""

    value: T | None = None
    error: NetworkError | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T, *, attempts: int = 1) -> "TypedResult[T]":
        return cls(value=value, attempts=attempts)

    @classmethod
    def failure(cls, error: NetworkError, *, attempts: int = 0) -> "TypedResult[T]":
        return cls(error=error, attempts=attempts)
