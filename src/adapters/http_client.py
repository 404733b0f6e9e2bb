"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y logging del transporte.
- Implementa `core.interfaces.transport.Transport`, así el Core nunca importa
  httpx y los tests pueden sustituirlo por un doble.
"""

from __future__ import annotations

import logging
from types import TracebackType

import httpx

from core.config import AppSettings
from core.domain.models import RawResponse, TransportRequest

logger = logging.getLogger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - `transport` permite inyectar `httpx.MockTransport` en tests.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """Transporte real sobre `httpx.AsyncClient`.

    - Los status 4xx/5xx se devuelven como respuesta; el Core decide.
    - `httpx.TimeoutException` -> `TimeoutError`; `httpx.ConnectError` ->
      `ConnectionError`. El resto de errores de httpx suben tal cual y el
      cliente los envuelve en `TransportFailed`.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        settings: AppSettings | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._owns_client = client is None

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(self._settings)
        return self._client

    async def send(self, request: TransportRequest) -> RawResponse:
        client = self._ensure_client()
        timeout = request.timeout if request.timeout is not None else httpx.USE_CLIENT_DEFAULT

        logger.debug("%s %s", request.method.value, request.url)
        try:
            resp = await client.request(
                request.method.value,
                request.url,
                headers=request.headers,
                content=request.body,
                timeout=timeout,
            )
        except httpx.TimeoutException as exc:
            raise TimeoutError(str(exc) or "request timed out") from exc
        except httpx.ConnectError as exc:
            raise ConnectionError(str(exc)) from exc

        logger.debug(
            "%s %s -> %s (%d bytes)",
            request.method.value,
            request.url,
            resp.status_code,
            len(resp.content),
        )
        return RawResponse(
            status_code=resp.status_code,
            headers={k.lower(): v for k, v in resp.headers.items()},
            body=resp.content,
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        self._ensure_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
