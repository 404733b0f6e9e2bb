"""Contrato del transporte HTTP.

Por qué Protocol:
- Define un contrato estructural (duck typing) sin herencia rígida.
- Permite sustituir httpx por un doble de test que registre invocaciones
  sin acoplar el Core a una librería concreta.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import RawResponse, TransportRequest


@runtime_checkable
class Transport(Protocol):
    """Contrato mínimo para mover bytes por la red.

    Reglas de diseño:
    - `send` es asíncrono; es el único punto de suspensión de una llamada.
    - Un fallo de transporte se lanza como excepción. Un timeout se lanza como
      `TimeoutError`; la cancelación se propaga como `asyncio.CancelledError`.
    - Cualquier status HTTP (incluido 4xx/5xx) es una respuesta, no un fallo.
    """

    async def send(self, request: TransportRequest) -> RawResponse:
        """Emite la petición y devuelve la respuesta cruda."""

        ...
