"""Cliente JSON de una sola petición.

This module is the whole reusable contract: a `RequestDescriptor` goes in,
one `TypedResult` comes out. The client holds no mutable state, so a single
instance can be shared by any number of concurrent calls; every piece of
per-call state (request, response, attempt counter) lives on the stack of
`perform`.
"""

from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

from core.domain.errors import (
    Cancelled,
    DecodingFailed,
    EncodingFailed,
    InvalidURL,
    NetworkError,
    TransportFailed,
    UnsuccessfulStatus,
)
from core.domain.models import NoReply, RawResponse, RequestDescriptor, TransportRequest, TypedResult
from core.interfaces.transport import Transport
from core.services.request_builder import build_request

T = TypeVar("T")


@lru_cache(maxsize=256)
def _cached_type_adapter(decode_as: Any) -> TypeAdapter[Any]:
    return TypeAdapter(decode_as)


def _type_adapter(decode_as: Any) -> TypeAdapter[Any]:
    try:
        hash(decode_as)
    except TypeError:
        # p.ej. Annotated con metadatos no hashables: sin caché.
        return TypeAdapter(decode_as)
    return _cached_type_adapter(decode_as)


def decode(body: bytes, decode_as: type[T]) -> T:
    """Decodifica `body` como JSON en la forma `decode_as`.

    JSON truncado, tipos incorrectos o campos ausentes terminan en
    `DecodingFailed`; nunca se devuelve un valor parcial.
    """

    if decode_as is NoReply:
        return NoReply()  # type: ignore[return-value]
    try:
        return _type_adapter(decode_as).validate_json(body)
    except ValueError as exc:
        raise DecodingFailed(str(exc), body=body) from exc


class JsonClient:
    """Ejecuta un `RequestDescriptor` y devuelve un `TypedResult`.

    El transporte se inyecta explícitamente (no hay cliente global).
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def perform(self, descriptor: RequestDescriptor, decode_as: type[T]) -> TypedResult[T]:
        """Run the pipeline and return the decoded value or one taxonomy error.

        URL and body problems are reported before any transport call and are
        never retried. Transport, status and decode failures are retried up to
        `descriptor.retries` extra times; the last failure wins. Cancellation
        ends the call immediately as `Cancelled`.

        The `CancelledError` is absorbed into that result: the calling task
        is not cancelled and keeps running after `perform` returns. Code that
        chains several calls, or wraps one in `asyncio.timeout()`, must check
        for `Cancelled` itself; the outer timeout will not raise
        `TimeoutError`.
        """

        try:
            request = build_request(descriptor)
        except (InvalidURL, EncodingFailed) as exc:
            return TypedResult.failure(exc)

        attempts = 0
        last_error: NetworkError | None = None
        for _ in range(descriptor.retries + 1):
            attempts += 1
            try:
                value = await self._attempt(request, decode_as)
            except Cancelled as exc:
                return TypedResult.failure(exc, attempts=attempts)
            except NetworkError as exc:
                last_error = exc
                continue
            return TypedResult.success(value, attempts=attempts)

        assert last_error is not None
        return TypedResult.failure(last_error, attempts=attempts)

    async def fetch(self, descriptor: RequestDescriptor, decode_as: type[T]) -> T:
        """Igual que `perform`, pero lanza el error de la taxonomía."""

        result = await self.perform(descriptor, decode_as)
        return result.unwrap()

    async def _attempt(self, request: TransportRequest, decode_as: type[T]) -> T:
        response = await self._send(request)
        if not response.is_success:
            raise UnsuccessfulStatus(response.status_code, body=response.body)
        return decode(response.body, decode_as)

    async def _send(self, request: TransportRequest) -> RawResponse:
        try:
            if request.timeout is None:
                return await self._transport.send(request)
            return await asyncio.wait_for(self._transport.send(request), timeout=request.timeout)
        except asyncio.CancelledError as exc:
            raise Cancelled() from exc
        except (TimeoutError, asyncio.TimeoutError) as exc:
            raise TransportFailed("timeout", f"Request to {request.url} timed out") from exc
        except ConnectionError as exc:
            raise TransportFailed("connection", f"Could not connect to {request.url}: {exc}") from exc
        except NetworkError:
            raise
        except Exception as exc:
            raise TransportFailed("transport", f"Transport error for {request.url}: {exc!r}") from exc
