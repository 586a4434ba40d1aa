from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs

import httpx

from clients.boosty import ApiClient

BASE_URL = "https://boosty.test"
TOKEN_PATH = "/oauth/token/"


def api_path(path: str) -> str:
    return f"/v1/{path}"


def reply(status: int = 200, json_body: Any = None, text: Optional[str] = None) -> Callable[[httpx.Request], httpx.Response]:
    def _build(request: httpx.Request) -> httpx.Response:
        if text is not None:
            return httpx.Response(status, text=text, headers={"content-type": "application/json"})
        if json_body is not None:
            return httpx.Response(status, json=json_body)
        return httpx.Response(status)

    return _build


def form_of(request: httpx.Request) -> Dict[str, str]:
    parsed = parse_qs(request.content.decode("utf-8"), keep_blank_values=True)
    return {k: v[0] for k, v in parsed.items()}


class FakeBoosty:
    """
    Route table for httpx.MockTransport.

    Each (method, path) holds a queue of responders; the last responder keeps
    answering once the queue is drained. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Callable[[httpx.Request], httpx.Response]]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *responders: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes.setdefault((method, path), []).extend(responders)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"error": "no route"})
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        return responder(request)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def client(self) -> ApiClient:
        return ApiClient(base_url=BASE_URL, http=self.http())


def oauth_reply(access: str, refresh: str = "rotated", expires_in: int = 3600):
    return reply(200, {"access_token": access, "refresh_token": refresh, "expires_in": expires_in})


def post_payload(
    post_id: str = "p1",
    title: str = "Title",
    has_access: bool = True,
    data: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    if data is None:
        data = [
            {"type": "text", "content": json.dumps(["hello", "unstyled", []]), "modificator": ""},
            {"type": "image", "url": "https://images.test/1.jpg", "id": "img-1", "width": 10, "height": 10},
        ]
    return {
        "id": post_id,
        "int_id": 1001,
        "title": title,
        "hasAccess": has_access,
        "data": data,
        "teaser": [],
        "price": 300,
        "createdAt": 1_697_000_000,
        "publishTime": 1_697_000_000,
        "user": {
            "id": 7,
            "name": "author",
            "blogUrl": "blog",
            "avatarUrl": "",
            "hasAvatar": False,
            "flags": {"showPostDonations": False},
        },
        "tags": [{"id": 1, "title": "music"}],
        "count": {"comments": 2, "likes": 5, "reactions": {"heart": 3, "like": 2}},
        "currencyPrices": {"RUB": 300, "USD": 3.5},
    }


def comment_payload(int_id: int = 10091879, name: str = "user1") -> Dict[str, Any]:
    return {
        "id": f"c-{int_id}",
        "intId": int_id,
        "post": {"id": "p1"},
        "author": {"id": 5, "name": name, "hasAvatar": False, "avatarUrl": ""},
        "createdAt": 1_697_000_100,
        "isDeleted": False,
        "isBlocked": False,
        "isUpdated": False,
        "replyCount": 0,
        "replies": {"data": [], "extra": {"isFirst": True, "isLast": True}},
        "data": [
            {"type": "text", "content": json.dumps(["nice post", "unstyled", []]), "modificator": ""},
            {"type": "text", "content": "", "modificator": "BLOCK_END"},
        ],
        "reactions": {"like": 1},
        "reactionCounters": [{"type": "like", "count": 1}],
    }
