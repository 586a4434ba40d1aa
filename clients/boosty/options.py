from __future__ import annotations

import os
from enum import Enum
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field, field_validator


DEFAULT_API_URL = os.getenv("BOOSTY_API_URL", "https://api.boosty.to")
DEFAULT_TIMEOUT = float(os.getenv("BOOSTY_TIMEOUT", "30"))
DEFAULT_USER_AGENT = os.getenv(
    "BOOSTY_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/110.0.0.0 Safari/537.36",
)
DEFAULT_DEVICE_OS = os.getenv("BOOSTY_DEVICE_OS", "web")


class CommentOrder(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class TargetType(str, Enum):
    MONEY = "money"
    SUBSCRIBERS = "subscribers"


class ProxyConfig(BaseModel):
    http: Optional[str] = None
    https: Optional[str] = None


class ClientOptions(BaseModel):
    base_url: str = DEFAULT_API_URL
    api_version: str = "v1"
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    device_os: str = DEFAULT_DEVICE_OS
    proxy: Optional[ProxyConfig] = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def _http_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v

    @field_validator("api_version")
    @classmethod
    def _bare_version(cls, v: str) -> str:
        v = v.strip("/")
        if not v:
            raise ValueError("api_version cannot be empty")
        return v

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientOptions":
        """
        Build options from BOOSTY_* environment variables, read at call time
        (so a .env loaded after import is honoured). Keyword overrides win.
        """
        values: Dict[str, Any] = {
            "base_url": os.getenv("BOOSTY_API_URL", DEFAULT_API_URL),
            "timeout": float(os.getenv("BOOSTY_TIMEOUT", str(DEFAULT_TIMEOUT))),
            "user_agent": os.getenv("BOOSTY_USER_AGENT", DEFAULT_USER_AGENT),
            "device_os": os.getenv("BOOSTY_DEVICE_OS", DEFAULT_DEVICE_OS),
        }
        http_proxy = os.getenv("BOOSTY_HTTP_PROXY")
        https_proxy = os.getenv("BOOSTY_HTTPS_PROXY")
        if http_proxy or https_proxy:
            values["proxy"] = ProxyConfig(http=http_proxy, https=https_proxy)
        values.update(overrides)
        return cls(**values)

    def api_url(self, path: str) -> str:
        return f"{self.base_url}/{self.api_version}/{path.lstrip('/')}"

    def token_url(self) -> str:
        return f"{self.base_url}/oauth/token/"

    def default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
            "Cache-Control": "no-cache",
            "DNT": "1",
        }
        headers.update(self.extra_headers)
        return headers


def build_http_client(options: ClientOptions) -> httpx.AsyncClient:
    mounts: Dict[str, httpx.AsyncBaseTransport] = {}
    proxy = options.proxy
    if proxy and (proxy.http or proxy.https):
        if proxy.http:
            mounts["http://"] = httpx.AsyncHTTPTransport(proxy=proxy.http)
        if proxy.https:
            mounts["https://"] = httpx.AsyncHTTPTransport(proxy=proxy.https)

    return httpx.AsyncClient(
        timeout=options.timeout,
        mounts=mounts if mounts else None,
    )
