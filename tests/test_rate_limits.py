import time

import httpx
import pytest

from rentclient.http import (
    WAIT_SECONDS_EXTENSION,
    _seconds_until_reset,
    _wait_seconds,
    handle_rate_limits,
)


@pytest.mark.asyncio
async def test_rate_limit_429_records_wait_seconds() -> None:
    request = httpx.Request("GET", "http://localhost:8002/api/properties/")
    response = httpx.Response(
        429,
        request=request,
        headers={"x-ratelimit-remaining": "0", "retry-after": "45"},
        json={"detail": "Request was throttled."},
    )

    await handle_rate_limits(response)

    assert response.extensions[WAIT_SECONDS_EXTENSION] == 45


@pytest.mark.asyncio
async def test_rate_limit_reset_epoch_header() -> None:
    request = httpx.Request("GET", "http://localhost:8002/api/properties/")
    response = httpx.Response(
        429,
        request=request,
        headers={"x-ratelimit-reset": str(int(time.time()) + 120)},
        json={"detail": "Request was throttled."},
    )

    await handle_rate_limits(response)

    assert 115 <= response.extensions[WAIT_SECONDS_EXTENSION] <= 120


@pytest.mark.asyncio
async def test_rate_limit_remaining_zero_on_success() -> None:
    request = httpx.Request("GET", "http://localhost:8002/api/properties/")
    response = httpx.Response(
        200,
        request=request,
        headers={
            "x-ratelimit-remaining": "0",
            "x-ratelimit-reset": str(int(time.time()) + 30),
        },
        json={"ok": True},
    )

    await handle_rate_limits(response)

    assert WAIT_SECONDS_EXTENSION not in response.extensions


@pytest.mark.asyncio
async def test_rate_limit_missing_headers() -> None:
    request = httpx.Request("GET", "http://localhost:8002/api/properties/")
    response = httpx.Response(429, request=request, json={"detail": "slow down"})

    await handle_rate_limits(response)

    assert response.extensions[WAIT_SECONDS_EXTENSION] is None


def test_seconds_until_reset_in_past() -> None:
    assert _seconds_until_reset("100", now=200) == 0


def test_seconds_until_reset_invalid() -> None:
    assert _seconds_until_reset("soon") is None
    assert _seconds_until_reset(None) is None


def test_wait_seconds_prefers_retry_after() -> None:
    response = httpx.Response(
        429,
        headers={"retry-after": "10", "x-ratelimit-reset": "1000"},
    )

    assert _wait_seconds(response, now=0) == 10


def test_wait_seconds_falls_back_to_reset_header() -> None:
    response = httpx.Response(
        429,
        headers={"retry-after": "Wed, 21 Oct 2026 07:28:00 GMT", "x-ratelimit-reset": "1000"},
    )

    assert _wait_seconds(response, now=990) == 10
