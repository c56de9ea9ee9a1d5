from __future__ import annotations

import httpx

from auth.models import TokenPairResponse
from rentclient.constants import DEFAULT_BASE_URL, TOKEN_PAIR_PATH, TOKEN_REFRESH_PATH
from rentclient.errors import NetworkUnavailableError, TokenRequestError, response_payload


async def _token_request(
    path: str,
    payload: dict[str, str],
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> dict:
    own_client = client is None
    http_client = client or httpx.AsyncClient(base_url=base_url)

    try:
        response = await http_client.post(path, json=payload)
        response.raise_for_status()
    except httpx.HTTPStatusError as error:
        raise TokenRequestError(
            f"Token request failed with status {error.response.status_code}: {error.response.text}",
            status_code=error.response.status_code,
            payload=response_payload(error.response),
            response=error.response,
        ) from error
    except httpx.TransportError as error:
        raise NetworkUnavailableError() from error
    finally:
        if own_client:
            await http_client.aclose()

    try:
        body = response.json()
    except ValueError as error:
        raise TokenRequestError(
            "Token response was not valid JSON.",
            status_code=response.status_code,
            response=response,
        ) from error
    if not isinstance(body, dict):
        raise TokenRequestError(
            "Token response must be a JSON object.",
            status_code=response.status_code,
            response=response,
        )
    return body


async def obtain_token_pair(
    username: str,
    password: str,
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> TokenPairResponse:
    body = await _token_request(
        TOKEN_PAIR_PATH,
        {"username": username, "password": password},
        client=client,
        base_url=base_url,
    )
    try:
        return TokenPairResponse.from_payload(body)
    except ValueError as error:
        raise TokenRequestError(
            "Invalid authentication response from server",
            payload=body,
        ) from error


async def refresh_access_token(
    refresh_token: str,
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    body = await _token_request(
        TOKEN_REFRESH_PATH,
        {"refresh": refresh_token},
        client=client,
        base_url=base_url,
    )
    access = body.get("access")
    if not isinstance(access, str) or not access:
        raise TokenRequestError("Token refresh response missing access.", payload=body)
    return access
