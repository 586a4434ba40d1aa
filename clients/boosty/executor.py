"""
Authenticated request execution.

Every call goes through the same protocol:

  1. attach the current access token (if any) and send
  2. classify the response into a RequestOutcome
  3. on AuthExpired with a refresh pair: refresh once, re-send once, and
     take the second outcome as final
  4. map the outcome to a return value or an ApiError

Only the auth-expiry case is retried and never more than once per call.
Transient network and 5xx failures are surfaced to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

from . import metrics
from .auth_provider import CredentialStore, RefreshPair
from .endpoints import RequestTemplate
from .errors import (
    AuthError,
    AuthFailedError,
    DecodeError,
    InvalidStateError,
    NetworkError,
    RequestRejectedError,
    UnauthorizedError,
    UnavailableError,
)
from .options import ClientOptions
from .token_refresher import TokenRefresher

logger = logging.getLogger(__name__)


# Outcomes ----------------------------------------------------------------------


@dataclass(frozen=True)
class Success:
    body: Any


@dataclass(frozen=True)
class AuthExpired:
    body: Any = None
    # True when signalled by a "not available" payload rather than HTTP 401
    soft: bool = False


@dataclass(frozen=True)
class ClientError:
    status: int
    body: Any


@dataclass(frozen=True)
class ServerError:
    status: int


@dataclass(frozen=True)
class Transport:
    cause: httpx.TransportError


@dataclass(frozen=True)
class Undecodable:
    cause: ValueError


RequestOutcome = Union[Success, AuthExpired, ClientError, ServerError, Transport, Undecodable]


def _decode_body(response: httpx.Response) -> Any:
    if not response.content.strip():
        return None
    return response.json()


def _error_body(response: httpx.Response) -> Any:
    try:
        return _decode_body(response)
    except ValueError:
        return response.text


def classify(response: httpx.Response, template: RequestTemplate) -> RequestOutcome:
    status = response.status_code
    if status == 401:
        return AuthExpired(body=_error_body(response))
    if 400 <= status < 500:
        return ClientError(status=status, body=_error_body(response))
    if status >= 500:
        return ServerError(status=status)
    if not 200 <= status < 300:
        return ClientError(status=status, body=_error_body(response))

    try:
        body = _decode_body(response)
    except ValueError as e:
        return Undecodable(cause=e)

    if template.expiry_marker is not None and template.expiry_marker(body):
        return AuthExpired(body=body, soft=True)
    return Success(body=body)


# Executor ----------------------------------------------------------------------


class RequestExecutor:
    def __init__(
        self,
        http: httpx.AsyncClient,
        store: CredentialStore,
        refresher: TokenRefresher,
        options: ClientOptions,
    ):
        self._http = http
        self._store = store
        self._refresher = refresher
        self._options = options

    def build_headers(self, access_token: Optional[str]) -> Dict[str, str]:
        headers = self._options.default_headers()
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        return headers

    async def execute(self, template: RequestTemplate) -> Any:
        """
        Run template with credentials attached and return the decoded JSON body
        (None for an empty body). Raises an ApiError subclass on failure.
        """
        metrics.inc_request(template.endpoint)

        token = await self._store.current_access_token()
        outcome = await self._attempt(template, token)

        if isinstance(outcome, AuthExpired):
            outcome = await self._refresh_and_retry(template, token, outcome)

        return self._resolve(template, outcome)

    async def _attempt(self, template: RequestTemplate, access_token: Optional[str]) -> RequestOutcome:
        url = self._options.api_url(template.path)
        logger.debug("%s %s (endpoint=%s)", template.method, url, template.endpoint)

        with metrics.measure_attempt(template.endpoint):
            try:
                response = await self._http.request(
                    template.method,
                    url,
                    params=template.params or None,
                    json=template.json,
                    data=template.form,
                    headers=self.build_headers(access_token),
                )
            except httpx.TransportError as e:
                outcome: RequestOutcome = Transport(cause=e)
            else:
                outcome = classify(response, template)

        metrics.inc_attempt(template.endpoint, type(outcome).__name__)
        return outcome

    async def _refresh_and_retry(
        self, template: RequestTemplate, stale_token: Optional[str], expired: AuthExpired
    ) -> RequestOutcome:
        credentials = await self._store.snapshot()
        if not isinstance(credentials, RefreshPair):
            if expired.soft:
                # Nothing to refresh; hand back the restricted payload as-is.
                return Success(body=expired.body)
            raise UnauthorizedError(template.endpoint)

        fresh_token = await self._refresh(template, stale_token)

        # Exactly one re-send; its outcome is final.
        outcome = await self._attempt(template, fresh_token)

        if isinstance(outcome, AuthExpired) and outcome.soft:
            return Success(body=outcome.body)
        return outcome

    async def _refresh(self, template: RequestTemplate, stale_token: Optional[str]) -> str:
        """
        Refresh credentials unless another caller already replaced stale_token
        while we waited for the refresh lock.
        """
        async with self._store.refresh_lock:
            credentials = await self._store.snapshot()
            if not isinstance(credentials, RefreshPair):
                raise UnauthorizedError(template.endpoint)
            if credentials.access_token is not None and credentials.access_token != stale_token:
                logger.debug("Access token already refreshed by a concurrent request")
                return credentials.access_token

            try:
                tokens = await self._refresher.refresh(credentials.refresh_token, credentials.device_id)
            except AuthError as e:
                logger.warning("Token refresh failed: %s", e)
                raise AuthFailedError(e) from e

            try:
                await self._store.install_refreshed_token(tokens.access_token, tokens.refresh_token)
            except InvalidStateError as e:
                # Credentials were replaced while the refresh was in flight
                logger.warning("Discarding refreshed token: %s", e)
                raise UnauthorizedError(template.endpoint) from e
            logger.info("Access token refreshed")
            return tokens.access_token

    def _resolve(self, template: RequestTemplate, outcome: RequestOutcome) -> Any:
        if isinstance(outcome, Success):
            return outcome.body
        if isinstance(outcome, AuthExpired):
            raise UnauthorizedError(template.endpoint)
        if isinstance(outcome, ClientError):
            raise RequestRejectedError(outcome.status, outcome.body, template.endpoint)
        if isinstance(outcome, ServerError):
            raise UnavailableError(outcome.status, template.endpoint)
        if isinstance(outcome, Transport):
            raise NetworkError(outcome.cause) from outcome.cause
        raise DecodeError(outcome.cause) from outcome.cause
