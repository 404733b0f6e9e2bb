"""Endpoints del catálogo de productos (API estilo FakeStore).

`AllProducts` admite `sort`/`limit` como query items
(p.ej. `/products?sort=asc&limit=10`).
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel
from pydantic.config import ConfigDict

from core.config import AppSettings
from core.domain.models import RequestDescriptor
from core.services.json_client import JsonClient


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    title: str
    price: float
    description: str
    image: str
    category: str


@dataclass(frozen=True)
class AllProducts:
    sort: str | None = None
    limit: int | None = None

    def query_items(self) -> list[tuple[str, str]]:
        items: list[tuple[str, str]] = []
        if self.sort is not None:
            items.append(("sort", self.sort))
        if self.limit is not None:
            items.append(("limit", str(self.limit)))
        return items


@dataclass(frozen=True)
class ProductById:
    product_id: int


ProductsEndpoint = AllProducts | ProductById


def describe(
    endpoint: ProductsEndpoint,
    *,
    base_url: str,
    timeout: float | None = None,
    retries: int = 0,
) -> RequestDescriptor:
    if isinstance(endpoint, AllProducts):
        return RequestDescriptor(
            base_url=base_url,
            path="/products",
            query_items=endpoint.query_items(),
            timeout=timeout,
            retries=retries,
        )
    if isinstance(endpoint, ProductById):
        return RequestDescriptor(
            base_url=base_url,
            path=f"/products/{endpoint.product_id}",
            timeout=timeout,
            retries=retries,
        )
    raise TypeError(f"Unknown products endpoint: {endpoint!r}")


class ProductsService:
    def __init__(self, client: JsonClient, settings: AppSettings | None = None) -> None:
        self._client = client
        self._settings = settings or AppSettings()

    async def all_products(self, *, sort: str | None = None, limit: int | None = None) -> list[Product]:
        descriptor = describe(
            AllProducts(sort=sort, limit=limit),
            base_url=self._settings.products_base_url,
            retries=self._settings.default_retries,
        )
        return await self._client.fetch(descriptor, list[Product])

    async def product(self, product_id: int) -> Product:
        descriptor = describe(
            ProductById(product_id=product_id),
            base_url=self._settings.products_base_url,
            retries=self._settings.default_retries,
        )
        return await self._client.fetch(descriptor, Product)
