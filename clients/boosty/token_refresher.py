from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import BaseModel, ValidationError

from . import metrics
from .errors import AuthDecodeError, AuthNetworkError, InvalidCredentialsError
from .options import ClientOptions

logger = logging.getLogger(__name__)


class RefreshedTokens(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class TokenRefresher:
    """
    Exchanges a refresh token + device id for a new access token.

    The refresher does not touch the credential store; the executor installs
    the result.
    """

    def __init__(self, http: httpx.AsyncClient, options: ClientOptions):
        self._http = http
        self._options = options

    async def refresh(self, refresh_token: str, device_id: str) -> RefreshedTokens:
        form = {
            "device_id": device_id,
            "device_os": self._options.device_os,
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }
        headers = self._options.default_headers()

        logger.debug("Refreshing access token for device %s", device_id)
        try:
            resp = await self._http.post(self._options.token_url(), data=form, headers=headers)
        except httpx.TransportError as e:
            metrics.inc_refresh("network")
            raise AuthNetworkError(e) from e

        if resp.status_code != 200:
            metrics.inc_refresh("rejected")
            raise InvalidCredentialsError(resp.status_code, resp.text)

        try:
            tokens = RefreshedTokens.model_validate_json(resp.content)
        except ValidationError as e:
            metrics.inc_refresh("decode")
            raise AuthDecodeError(e) from e

        metrics.inc_refresh("ok")
        return tokens
