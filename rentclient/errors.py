from __future__ import annotations

import httpx


def _friendly_error_message(status_code: int, wait_seconds: int | None = None) -> str:
    if status_code == 401:
        return "Authentication failed. Your session may have expired."
    if status_code == 403:
        return "You don't have permission to perform this action."
    if status_code == 404:
        return "The requested resource was not found."
    if status_code == 422:
        return "The server rejected the submitted data."
    if status_code == 429:
        wait = 0 if wait_seconds is None else wait_seconds
        return f"Rate limit exceeded. Please wait {wait} seconds."
    if status_code >= 500:
        return "The rental API is experiencing issues. Please try again later."
    return f"Rental API request failed with status {status_code}."


def response_payload(response: httpx.Response) -> dict:
    try:
        payload = response.json()
    except ValueError:
        return {"raw": response.text}
    if isinstance(payload, dict):
        return payload
    return {"detail": payload}


class ApiError(RuntimeError):
    """A non-success outcome of a rental API call.

    ``payload`` is the server's error body (or ``{"raw": text}`` when the body
    is not JSON) so callers can render field-level messages themselves.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: dict | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}
        self.response = response

    @classmethod
    def from_response(cls, response: httpx.Response, **kwargs) -> "ApiError":
        message = _friendly_error_message(response.status_code, kwargs.get("wait_seconds"))
        return cls(
            message,
            status_code=response.status_code,
            payload=response_payload(response),
            response=response,
            **kwargs,
        )


class AuthenticationExpiredError(ApiError):
    pass


class SessionInvalidError(ApiError):
    def __init__(
        self,
        message: str = "Session is no longer valid; please log in again.",
        **kwargs,
    ) -> None:
        kwargs.setdefault("status_code", 401)
        super().__init__(message, **kwargs)


class ValidationRejectedError(ApiError):
    def __init__(self, message: str, *, request_context: dict | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.request_context = request_context or {}


class RateLimitedError(ApiError):
    is_rate_limit = True

    def __init__(self, message: str, *, wait_seconds: int | None = None, **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.wait_seconds = wait_seconds


class NetworkUnavailableError(ApiError):
    def __init__(
        self,
        message: str = "No response received from server. Please try again.",
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)


class TokenRequestError(ApiError):
    pass


class InvalidCredentialsError(ApiError):
    def __init__(self, message: str = "Invalid username or password", **kwargs) -> None:
        kwargs.setdefault("status_code", 401)
        super().__init__(message, **kwargs)
