from __future__ import annotations

import asyncio
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from .errors import InvalidStateError


class NoCredentials(BaseModel):
    model_config = ConfigDict(frozen=True)


class BearerToken(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str


class RefreshPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    refresh_token: str
    device_id: str
    # Filled by the first successful refresh
    access_token: Optional[str] = None


Credentials = Union[NoCredentials, BearerToken, RefreshPair]


class CredentialStore:
    """
    Holds the authentication state shared by every in-flight request.

    State is one immutable Credentials value, swapped wholesale under an
    asyncio.Lock. refresh_lock is held by whoever is currently refreshing so
    that at most one refresh call is in flight per store.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.refresh_lock = asyncio.Lock()
        self._state: Credentials = NoCredentials()

    async def set_bearer(self, token: str) -> None:
        async with self._lock:
            self._state = BearerToken(token=token)

    async def set_refresh_pair(self, refresh_token: str, device_id: str) -> None:
        async with self._lock:
            self._state = RefreshPair(refresh_token=refresh_token, device_id=device_id)

    async def clear(self) -> None:
        async with self._lock:
            self._state = NoCredentials()

    async def snapshot(self) -> Credentials:
        async with self._lock:
            return self._state

    async def current_access_token(self) -> Optional[str]:
        async with self._lock:
            state = self._state
            if isinstance(state, BearerToken):
                return state.token
            if isinstance(state, RefreshPair):
                return state.access_token
            return None

    async def install_refreshed_token(
        self, access_token: str, refresh_token: Optional[str] = None
    ) -> None:
        async with self._lock:
            state = self._state
            if not isinstance(state, RefreshPair):
                raise InvalidStateError(
                    f"Cannot install a refreshed token while in {type(state).__name__} state"
                )
            update = {"access_token": access_token}
            if refresh_token:
                update["refresh_token"] = refresh_token
            self._state = state.model_copy(update=update)
