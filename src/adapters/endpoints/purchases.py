"""Endpoints del servicio de compras (autenticado con Bearer token).

Notas:
- Todas las variantes comparten un timeout de 20s.
- `CancelOrder` puede responder 2xx sin cuerpo: se decodifica como `NoReply`.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from adapters.endpoints.products import Product
from core.config import AppSettings
from core.domain.models import HttpMethod, NoReply, RequestDescriptor
from core.services.json_client import JsonClient

REQUEST_TIMEOUT_SECONDS = 20.0


class PurchaseRequest(BaseModel):
    products: list[str] = Field(..., min_length=1)
    cost: int = Field(..., ge=0)


class PurchaseResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    product_name: str = Field(..., alias="productName")


@dataclass(frozen=True)
class PurchaseProduct:
    request: PurchaseRequest


@dataclass(frozen=True)
class GetProduct:
    product_id: str


@dataclass(frozen=True)
class CancelOrder:
    order_id: str


PurchaseEndpoint = PurchaseProduct | GetProduct | CancelOrder


def describe(endpoint: PurchaseEndpoint, *, base_url: str, token: str | None = None) -> RequestDescriptor:
    headers: dict[str, str] = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    if isinstance(endpoint, PurchaseProduct):
        method, path, payload = HttpMethod.POST, "/purchase", endpoint.request
    elif isinstance(endpoint, GetProduct):
        method, path, payload = HttpMethod.GET, f"/products/{endpoint.product_id}", None
    elif isinstance(endpoint, CancelOrder):
        method, path, payload = HttpMethod.POST, f"/products/{endpoint.order_id}/cancel", None
    else:
        raise TypeError(f"Unknown purchase endpoint: {endpoint!r}")

    return RequestDescriptor(
        base_url=base_url,
        path=path,
        method=method,
        headers=headers,
        payload=payload,
        timeout=REQUEST_TIMEOUT_SECONDS,
    )


class PurchaseService:
    """Servicio de compras; el cliente se inyecta para poder testearlo."""

    def __init__(self, client: JsonClient, settings: AppSettings | None = None) -> None:
        self._client = client
        self._settings = settings or AppSettings()

    def _describe(self, endpoint: PurchaseEndpoint) -> RequestDescriptor:
        return describe(
            endpoint,
            base_url=self._settings.purchases_base_url,
            token=self._settings.api_token,
        )

    async def purchase_product(self, request: PurchaseRequest) -> PurchaseResponse:
        return await self._client.fetch(self._describe(PurchaseProduct(request=request)), PurchaseResponse)

    async def get_product(self, product_id: str) -> Product:
        return await self._client.fetch(self._describe(GetProduct(product_id=product_id)), Product)

    async def cancel_order(self, order_id: str) -> NoReply:
        return await self._client.fetch(self._describe(CancelOrder(order_id=order_id)), NoReply)
