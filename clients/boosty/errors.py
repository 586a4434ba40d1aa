from __future__ import annotations

from typing import Any, Optional


class BoostyError(Exception):
    """Base class for every error raised by the Boosty client."""


class InvalidStateError(BoostyError):
    """Credential store operation not allowed in its current state."""


# Auth errors -------------------------------------------------------------------


class AuthError(BoostyError):
    """Failure while talking to the token endpoint."""


class InvalidCredentialsError(AuthError):
    def __init__(self, status: int, body: str = ""):
        self.status = status
        self.body = body
        super().__init__(f"Refresh tokens failed: HTTP {status}")


class AuthNetworkError(AuthError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Send refresh tokens request failed: {cause}")


class AuthDecodeError(AuthError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Parse refresh token response failed: {cause}")


# API errors --------------------------------------------------------------------


class ApiError(BoostyError):
    """Failure while calling a Boosty API endpoint."""


class UnauthorizedError(ApiError):
    def __init__(self, endpoint: Optional[str] = None):
        self.endpoint = endpoint
        msg = "Unauthorized (401): invalid or missing token"
        if endpoint:
            msg += f" for '{endpoint}'"
        super().__init__(msg)


class AuthFailedError(ApiError):
    def __init__(self, cause: AuthError):
        self.cause = cause
        super().__init__(f"Authentication error: {cause}")


class RequestRejectedError(ApiError):
    def __init__(self, status: int, body: Any = None, endpoint: Optional[str] = None):
        self.status = status
        self.body = body
        self.endpoint = endpoint
        super().__init__(f"Unexpected HTTP status {status} when calling endpoint '{endpoint}'")


class UnavailableError(ApiError):
    def __init__(self, status: int, endpoint: Optional[str] = None):
        self.status = status
        self.endpoint = endpoint
        super().__init__(f"Server error {status} when calling endpoint '{endpoint}'")


class NetworkError(ApiError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"HTTP request error when calling API: {cause}")


class DecodeError(ApiError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to parse response JSON: {cause}")
