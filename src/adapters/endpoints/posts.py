"""Endpoints de posts (API estilo JSONPlaceholder).

- `GET /posts`, `GET /posts/<id>` y `POST /posts`.
- La base URL sale de `AppSettings.base_url` salvo que se pase otra.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.config import AppSettings
from core.domain.models import HttpMethod, RequestDescriptor
from core.services.json_client import JsonClient


class Post(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    user_id: int = Field(..., alias="userId")
    id: int | None = None
    title: str
    body: str


@dataclass(frozen=True)
class FetchPosts:
    path: str = "/posts"


@dataclass(frozen=True)
class FetchOnePost:
    post_id: int = 1
    path: str = "/posts"


@dataclass(frozen=True)
class SendPost:
    post: Post
    path: str = "/posts"


PostsEndpoint = FetchPosts | FetchOnePost | SendPost


def describe(
    endpoint: PostsEndpoint,
    *,
    base_url: str,
    timeout: float | None = None,
    retries: int = 0,
) -> RequestDescriptor:
    common = {"base_url": base_url, "timeout": timeout, "retries": retries}
    if isinstance(endpoint, FetchPosts):
        return RequestDescriptor(path=endpoint.path, **common)
    if isinstance(endpoint, FetchOnePost):
        return RequestDescriptor(path=f"{endpoint.path}/{endpoint.post_id}", **common)
    if isinstance(endpoint, SendPost):
        return RequestDescriptor(
            path=endpoint.path,
            method=HttpMethod.POST,
            payload=endpoint.post,
            **common,
        )
    raise TypeError(f"Unknown posts endpoint: {endpoint!r}")


class PostsService:
    def __init__(self, client: JsonClient, settings: AppSettings | None = None) -> None:
        self._client = client
        self._settings = settings or AppSettings()

    def _describe(self, endpoint: PostsEndpoint) -> RequestDescriptor:
        return describe(
            endpoint,
            base_url=self._settings.base_url,
            retries=self._settings.default_retries,
        )

    async def fetch_posts(self) -> list[Post]:
        return await self._client.fetch(self._describe(FetchPosts()), list[Post])

    async def fetch_post(self, post_id: int) -> Post:
        return await self._client.fetch(self._describe(FetchOnePost(post_id=post_id)), Post)

    async def send_post(self, post: Post) -> Post:
        return await self._client.fetch(self._describe(SendPost(post=post)), Post)
