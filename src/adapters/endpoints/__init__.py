"""Endpoints declarativos (variantes etiquetadas -> `RequestDescriptor`).

Por qué un paquete:
- Agrupa módulos por servicio remoto (posts, productos, compras).
- Cada módulo expone variantes inmutables, una función pura `describe` y un
  servicio fino sobre `core.services.json_client.JsonClient`.
"""

from adapters.endpoints.posts import FetchOnePost, FetchPosts, Post, PostsService, SendPost
from adapters.endpoints.products import AllProducts, Product, ProductById, ProductsService
from adapters.endpoints.purchases import (
	CancelOrder,
	GetProduct,
	PurchaseProduct,
	PurchaseRequest,
	PurchaseResponse,
	PurchaseService,
)

__all__ = [
	"AllProducts",
	"CancelOrder",
	"FetchOnePost",
	"FetchPosts",
	"GetProduct",
	"Post",
	"PostsService",
	"Product",
	"ProductById",
	"ProductsService",
	"PurchaseProduct",
	"PurchaseRequest",
	"PurchaseResponse",
	"PurchaseService",
	"SendPost",
]
