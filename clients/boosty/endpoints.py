from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .options import CommentOrder, TargetType


# Request templates -------------------------------------------------------------


@dataclass(frozen=True)
class RequestTemplate:
    """
    Unauthenticated description of one API call.

    path is relative to /<api_version>/. endpoint is a low-cardinality label
    for logs and metrics. expiry_marker, when set, inspects a decoded 2xx body
    and returns True if the payload says the content is not available to the
    current token.
    """

    method: str
    path: str
    endpoint: str
    params: Dict[str, Any] = field(default_factory=dict)
    json: Any = None
    form: Optional[Dict[str, Any]] = None
    expiry_marker: Optional[Callable[[Any], bool]] = None


def _params(**kwargs: Any) -> Dict[str, Any]:
    return {k: v.value if hasattr(v, "value") else v for k, v in kwargs.items() if v is not None}


# Not-available markers ---------------------------------------------------------


def post_not_available(body: Any) -> bool:
    if not isinstance(body, dict):
        return False
    return not body.get("hasAccess", False) or not body.get("data")


def any_post_not_available(body: Any) -> bool:
    if not isinstance(body, dict):
        return False
    posts = body.get("data") or []
    return any(post_not_available(p) for p in posts)


# Builders ----------------------------------------------------------------------


def post(blog_name: str, post_id: str) -> RequestTemplate:
    return RequestTemplate(
        method="GET",
        path=f"blog/{blog_name}/post/{post_id}",
        endpoint="post",
        expiry_marker=post_not_available,
    )


def posts(blog_name: str, limit: int, offset: Optional[str] = None) -> RequestTemplate:
    return RequestTemplate(
        method="GET",
        path=f"blog/{blog_name}/post/",
        endpoint="posts",
        params=_params(limit=limit, offset=offset),
        expiry_marker=any_post_not_available,
    )


def comments(
    blog_name: str,
    post_id: str,
    limit: Optional[int] = None,
    reply_limit: Optional[int] = None,
    order: Optional[CommentOrder] = None,
    offset: Optional[int] = None,
) -> RequestTemplate:
    return RequestTemplate(
        method="GET",
        path=f"blog/{blog_name}/post/{post_id}/comment/",
        endpoint="comments",
        params=_params(limit=limit, reply_limit=reply_limit, order=order, offset=offset),
    )


def create_comment(
    blog_name: str,
    post_id: str,
    blocks: List[Dict[str, Any]],
    reply_id: Optional[int] = None,
) -> RequestTemplate:
    form: Dict[str, Any] = {"data": json.dumps(blocks, ensure_ascii=False)}
    if reply_id is not None:
        form["reply_id"] = reply_id
    return RequestTemplate(
        method="POST",
        path=f"blog/{blog_name}/post/{post_id}/comment/",
        endpoint="create_comment",
        form=form,
    )


def showcase(
    blog_name: str,
    limit: Optional[int] = None,
    only_visible: Optional[bool] = None,
    offset: Optional[int] = None,
) -> RequestTemplate:
    return RequestTemplate(
        method="GET",
        path=f"blog/{blog_name}/showcase/",
        endpoint="showcase",
        params=_params(offset=offset, limit=limit, only_visible=only_visible),
    )


def showcase_status(blog_name: str, enabled: bool) -> RequestTemplate:
    return RequestTemplate(
        method="PUT",
        path=f"blog/{blog_name}/showcase/status/",
        endpoint="showcase_status",
        form={"is_enabled": "true" if enabled else "false"},
    )


def subscription_levels(blog_name: str, show_free_level: Optional[bool] = None) -> RequestTemplate:
    return RequestTemplate(
        method="GET",
        path=f"blog/{blog_name}/subscription_level/",
        endpoint="subscription_levels",
        params=_params(show_free_level=show_free_level),
    )


def user_subscriptions(limit: Optional[int] = None, with_follow: Optional[bool] = None) -> RequestTemplate:
    return RequestTemplate(
        method="GET",
        path="user/subscriptions",
        endpoint="user_subscriptions",
        params=_params(limit=limit, with_follow=with_follow),
    )


def blog_targets(blog_name: str) -> RequestTemplate:
    return RequestTemplate(method="GET", path=f"target/{blog_name}/", endpoint="targets")


def create_target(
    blog_name: str, description: str, target_sum: float, target_type: TargetType
) -> RequestTemplate:
    return RequestTemplate(
        method="POST",
        path=f"target/{TargetType(target_type).value}",
        endpoint="create_target",
        form={
            "blog_url": blog_name,
            "description": description,
            "target_sum": target_sum,
        },
    )


def update_target(target_id: int, description: str, target_sum: float) -> RequestTemplate:
    return RequestTemplate(
        method="PUT",
        path=f"target/{target_id}",
        endpoint="update_target",
        form={"description": description, "target_sum": target_sum},
    )


def delete_target(target_id: int) -> RequestTemplate:
    return RequestTemplate(method="DELETE", path=f"target/{target_id}", endpoint="delete_target")
