import httpx

from auth.models import PendingRequest
from rentclient.errors import (
    ApiError,
    AuthenticationExpiredError,
    RateLimitedError,
    ValidationRejectedError,
    response_payload,
)
from rentclient.http import WAIT_SECONDS_EXTENSION, error_for_response

PENDING = PendingRequest(method="GET", url="/users/profile")


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(
        status_code,
        request=httpx.Request("GET", "http://localhost:8002/api/users/profile"),
        **kwargs,
    )


def test_401_message() -> None:
    error = error_for_response(_response(401, json={"detail": "unauthorized"}), PENDING)

    assert isinstance(error, AuthenticationExpiredError)
    assert str(error) == "Authentication failed. Your session may have expired."
    assert error.payload == {"detail": "unauthorized"}


def test_403_message() -> None:
    error = error_for_response(_response(403, json={"detail": "forbidden"}), PENDING)

    assert type(error) is ApiError
    assert error.status_code == 403
    assert str(error) == "You don't have permission to perform this action."


def test_404_message() -> None:
    error = error_for_response(_response(404, json={"detail": "not found"}), PENDING)

    assert str(error) == "The requested resource was not found."


def test_422_message_keeps_request_context() -> None:
    pending = PendingRequest(method="PUT", url="/users/profile", json={"email": "bad"})

    error = error_for_response(_response(422, json={"email": ["Enter a valid email."]}), pending)

    assert isinstance(error, ValidationRejectedError)
    assert str(error) == "The server rejected the submitted data."
    assert error.payload == {"email": ["Enter a valid email."]}
    assert error.request_context == {
        "method": "PUT",
        "url": "/users/profile",
        "body": {"email": "bad"},
    }


def test_429_message() -> None:
    response = _response(429, json={"detail": "ratelimited"})
    response.extensions[WAIT_SECONDS_EXTENSION] = 45

    error = error_for_response(response, PENDING)

    assert isinstance(error, RateLimitedError)
    assert error.is_rate_limit is True
    assert error.wait_seconds == 45
    assert str(error) == "Rate limit exceeded. Please wait 45 seconds."


def test_500_message() -> None:
    error = error_for_response(_response(500, text="upstream unavailable"), PENDING)

    assert str(error) == "The rental API is experiencing issues. Please try again later."
    assert error.payload == {"raw": "upstream unavailable"}


def test_unmapped_status_message() -> None:
    error = error_for_response(_response(409, json=["duplicate"]), PENDING)

    assert str(error) == "Rental API request failed with status 409."
    assert error.payload == {"detail": ["duplicate"]}


def test_response_payload_passthrough() -> None:
    assert response_payload(_response(400, json={"field": "bad"})) == {"field": "bad"}
