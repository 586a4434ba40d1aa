from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from . import endpoints
from .auth_provider import CredentialStore
from .errors import DecodeError
from .executor import RequestExecutor
from .model import (
    Comment,
    CommentBlock,
    CommentsResponse,
    Post,
    PostsResponse,
    ShowcaseResponse,
    SubscriptionLevel,
    SubscriptionsResponse,
    Target,
)
from .options import ClientOptions, CommentOrder, TargetType, build_http_client
from .token_refresher import TokenRefresher

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _parse(model: Type[M], body: Any) -> M:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise DecodeError(e) from e


def _parse_list(model: Type[M], body: Any) -> List[M]:
    data = body.get("data") if isinstance(body, dict) else None
    try:
        return TypeAdapter(List[model]).validate_python(data)
    except ValidationError as e:
        raise DecodeError(e) from e


class ApiClient:
    """
    Async Boosty API client.

    Credentials are configured with set_bearer_token() or
    set_refresh_token_and_device_id(). Every endpoint goes through the shared
    RequestExecutor, which refreshes an expired access token at most once per
    call when a refresh token is configured.

    Usage:
        async with ApiClient() as client:
            await client.set_bearer_token("...")
            post = await client.get_post("blog", "post-id")
            for item in post.extract_content():
                ...
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
        options: Optional[ClientOptions] = None,
    ):
        if options is None:
            options = ClientOptions()
        if base_url is not None:
            options = ClientOptions(**{**options.model_dump(), "base_url": base_url})
        self.options = options

        self._owns_http = http is None
        self._http = http if http is not None else build_http_client(options)
        self._store = CredentialStore()
        self._refresher = TokenRefresher(self._http, options)
        self._executor = RequestExecutor(self._http, self._store, self._refresher, options)

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    @property
    def credentials(self) -> CredentialStore:
        return self._store

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    # Credentials ---------------------------------------------------------------

    async def set_bearer_token(self, access_token: str) -> None:
        """Use a static bearer token; disables any refresh-token flow."""
        await self._store.set_bearer(access_token)

    async def set_refresh_token_and_device_id(self, refresh_token: str, device_id: str) -> None:
        """
        Use the refresh flow. No token is fetched here; the first request that
        comes back unauthorized triggers the refresh.
        """
        await self._store.set_refresh_pair(refresh_token, device_id)

    async def clear_credentials(self) -> None:
        await self._store.clear()

    def headers_as_map(self) -> Dict[str, str]:
        """Default headers sent with every request, without Authorization."""
        return {k.lower(): v for k, v in self.options.default_headers().items()}

    # Posts ---------------------------------------------------------------------

    async def get_post(self, blog_name: str, post_id: str) -> Post:
        body = await self._executor.execute(endpoints.post(blog_name, post_id))
        return _parse(Post, body)

    async def get_posts(self, blog_name: str, limit: int, offset: Optional[str] = None) -> List[Post]:
        return (await self.get_posts_response(blog_name, limit, offset)).data

    async def get_posts_response(
        self, blog_name: str, limit: int, offset: Optional[str] = None
    ) -> PostsResponse:
        body = await self._executor.execute(endpoints.posts(blog_name, limit, offset))
        return _parse(PostsResponse, body)

    # Comments ------------------------------------------------------------------

    async def get_comments(
        self,
        blog_name: str,
        post_id: str,
        limit: Optional[int] = None,
        reply_limit: Optional[int] = None,
        order: Optional[CommentOrder] = None,
        offset: Optional[int] = None,
    ) -> CommentsResponse:
        body = await self._executor.execute(
            endpoints.comments(blog_name, post_id, limit, reply_limit, order, offset)
        )
        return _parse(CommentsResponse, body)

    async def create_comment(
        self,
        blog_name: str,
        post_id: str,
        blocks: Sequence[CommentBlock],
        reply_id: Optional[int] = None,
    ) -> Comment:
        payload = [b.to_payload() for b in blocks]
        body = await self._executor.execute(endpoints.create_comment(blog_name, post_id, payload, reply_id))
        return _parse(Comment, body)

    # Showcase ------------------------------------------------------------------

    async def get_showcase(
        self,
        blog_name: str,
        limit: Optional[int] = None,
        only_visible: Optional[bool] = None,
        offset: Optional[int] = None,
    ) -> ShowcaseResponse:
        body = await self._executor.execute(endpoints.showcase(blog_name, limit, only_visible, offset))
        return _parse(ShowcaseResponse, body)

    async def change_showcase_status(self, blog_name: str, enabled: bool) -> None:
        await self._executor.execute(endpoints.showcase_status(blog_name, enabled))

    # Subscriptions -------------------------------------------------------------

    async def get_blog_subscription_levels(
        self, blog_name: str, show_free_level: Optional[bool] = None
    ) -> List[SubscriptionLevel]:
        body = await self._executor.execute(endpoints.subscription_levels(blog_name, show_free_level))
        return _parse_list(SubscriptionLevel, body)

    async def get_user_subscriptions(
        self, limit: Optional[int] = None, with_follow: Optional[bool] = None
    ) -> SubscriptionsResponse:
        body = await self._executor.execute(endpoints.user_subscriptions(limit, with_follow))
        return _parse(SubscriptionsResponse, body)

    # Targets -------------------------------------------------------------------

    async def get_blog_targets(self, blog_name: str) -> List[Target]:
        body = await self._executor.execute(endpoints.blog_targets(blog_name))
        return _parse_list(Target, body)

    async def create_blog_target(
        self, blog_name: str, description: str, target_sum: float, target_type: TargetType
    ) -> Target:
        body = await self._executor.execute(
            endpoints.create_target(blog_name, description, target_sum, target_type)
        )
        return _parse(Target, body)

    async def update_blog_target(self, target_id: int, description: str, target_sum: float) -> Target:
        body = await self._executor.execute(endpoints.update_target(target_id, description, target_sum))
        return _parse(Target, body)

    async def delete_blog_target(self, target_id: int) -> None:
        await self._executor.execute(endpoints.delete_target(target_id))
