from __future__ import annotations

import asyncio
import logging
import time

import httpx

from auth import token_client
from auth.credential_store import SyncedCredentialStore
from auth.models import PendingRequest

from .constants import (
    ACCESS_TOKEN_DAYS,
    ACCESS_TOKEN_KEY,
    APP_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_CONTENT_TYPE,
    HTTP_METHODS,
    LOGGER,
    REFRESH_TOKEN_KEY,
    SESSION_COOKIE_KEY,
)
from .errors import (
    ApiError,
    AuthenticationExpiredError,
    NetworkUnavailableError,
    RateLimitedError,
    SessionInvalidError,
    ValidationRejectedError,
)
from .navigation import Navigator

WAIT_SECONDS_EXTENSION = "rentclient_wait_seconds"


def _seconds_until_reset(reset_header: str | None, *, now: float | None = None) -> int | None:
    if reset_header is None:
        return None
    try:
        reset_epoch = int(reset_header)
    except ValueError:
        return None

    current = time.time() if now is None else now
    return max(0, reset_epoch - int(current))


def _wait_seconds(response: httpx.Response, *, now: float | None = None) -> int | None:
    retry_after = response.headers.get("retry-after")
    if retry_after is not None:
        try:
            return max(0, int(retry_after))
        except ValueError:
            pass
    return _seconds_until_reset(response.headers.get("x-ratelimit-reset"), now=now)


async def handle_rate_limits(response: httpx.Response) -> None:
    remaining = response.headers.get("x-ratelimit-remaining")
    wait_seconds = _wait_seconds(response)
    endpoint = str(response.request.url)

    if remaining is not None or wait_seconds is not None:
        LOGGER.debug(
            "Rate limit state endpoint=%s remaining=%s wait=%s",
            endpoint,
            remaining,
            wait_seconds,
        )

    if response.status_code == 429:
        response.extensions[WAIT_SECONDS_EXTENSION] = wait_seconds
        LOGGER.warning(
            "Rate limited endpoint=%s remaining=%s wait=%s",
            endpoint,
            remaining,
            wait_seconds,
        )


def _bearer_token(request: httpx.Request) -> str | None:
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token


def error_for_response(response: httpx.Response, pending: PendingRequest) -> ApiError:
    status_code = response.status_code
    if status_code == 401:
        return AuthenticationExpiredError.from_response(response)
    if status_code == 422:
        error = ValidationRejectedError.from_response(
            response,
            request_context=pending.context(),
        )
        LOGGER.warning(
            "Validation rejected %s %s payload=%s",
            pending.method,
            pending.url,
            error.payload,
        )
        return error
    if status_code == 429:
        return RateLimitedError.from_response(
            response,
            wait_seconds=response.extensions.get(WAIT_SECONDS_EXTENSION),
        )
    return ApiError.from_response(response)


class CredentialedClient:
    """HTTP client for the rental API that owns the credential lifecycle.

    Every request carries the stored bearer token. A 401 on the first attempt
    exchanges the refresh token for a new access token and resends the request
    once; if the refresh fails the credentials are wiped and the navigator is
    sent to the login page.
    """

    def __init__(
        self,
        store: SyncedCredentialStore,
        *,
        base_url: str = DEFAULT_BASE_URL,
        navigator: Navigator | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
        debug: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.store = store
        self.navigator = navigator or Navigator()
        self.base_url = base_url
        self.content_type = content_type
        self._debug = debug
        self._logger = logger or LOGGER
        self._refresh_task: asyncio.Future | None = None

        client_kwargs = {"headers": {"User-Agent": f"rentclient/{APP_VERSION}"}}
        if timeout is not None:
            client_kwargs["timeout"] = timeout

        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            event_hooks={
                "request": [self._attach_credentials, self._log_request],
                "response": [handle_rate_limits, self._log_response],
            },
            **client_kwargs,
        )
        # token endpoints bypass the credential hooks
        self.token_http = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            **client_kwargs,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def __aenter__(self) -> "CredentialedClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()
        await self.token_http.aclose()

    # -- credentials -------------------------------------------------------------

    async def set_auth_tokens(self, access: str, refresh: str, remember_me: bool = False) -> None:
        await self.store.set_auth_tokens(access, refresh, remember_me)

    async def clear_auth_tokens(self) -> None:
        await self.store.clear_auth_tokens()
        self._client.cookies.delete(SESSION_COOKIE_KEY)

    # -- requests ----------------------------------------------------------------

    async def send(
        self,
        method: str,
        url: str,
        *,
        params=None,
        json=None,
        data=None,
        files=None,
        headers=None,
    ) -> httpx.Response:
        if method.lower() not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        pending = PendingRequest(
            method=method.upper(),
            url=url,
            headers=dict(headers or {}),
            params=params,
            json=json,
            data=data,
            files=files,
        )
        response = await self._dispatch(pending)

        if response.status_code == 401 and not pending.is_retry:
            self._logger.info(
                "Access token rejected for %s %s; refreshing",
                pending.method,
                pending.url,
            )
            await response.aclose()
            access = await self._access_for_retry(_bearer_token(response.request))
            pending = pending.retried(access)
            response = await self._dispatch(pending)

        if response.status_code >= 400:
            raise error_for_response(response, pending)
        return response

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.send("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.send("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self.send("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs) -> httpx.Response:
        return await self.send("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self.send("DELETE", url, **kwargs)

    def _build_request(self, pending: PendingRequest) -> httpx.Request:
        headers = httpx.Headers({"Content-Type": self.content_type})
        headers.update(pending.headers)
        if pending.is_form_payload:
            # httpx must compute the multipart boundary itself
            del headers["Content-Type"]

        return self._client.build_request(
            pending.method,
            pending.url,
            params=pending.params,
            json=pending.json,
            data=pending.data,
            files=pending.files,
            headers=headers,
        )

    async def _dispatch(self, pending: PendingRequest) -> httpx.Response:
        request = self._build_request(pending)
        try:
            return await self._client.send(request)
        except httpx.TransportError as error:
            self._logger.warning(
                "No response for %s %s: %s",
                pending.method,
                pending.url,
                error,
            )
            raise NetworkUnavailableError() from error

    # -- refresh -----------------------------------------------------------------

    async def _access_for_retry(self, sent_token: str | None) -> str:
        """Pick the token for the retry, refreshing only if nobody already has."""
        current = await self.store.get(ACCESS_TOKEN_KEY)
        if sent_token is not None and current != sent_token:
            if current is None:
                # credentials were cleared while this request was in flight
                raise SessionInvalidError()
            self._logger.info("Access token was already refreshed; retrying with stored token")
            return current
        return await self._refresh_once()

    async def _refresh_once(self) -> str:
        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.ensure_future(self._refresh_credentials())
            self._refresh_task = task
        return await asyncio.shield(task)

    async def _refresh_credentials(self) -> str:
        refresh_token = await self.store.get(REFRESH_TOKEN_KEY)
        if not refresh_token:
            await self._force_logout()
            raise SessionInvalidError("No refresh token available.")

        self._logger.info("Attempting to refresh access token")
        try:
            access = await token_client.refresh_access_token(refresh_token, client=self.token_http)
        except ApiError as error:
            await self._force_logout()
            raise SessionInvalidError(
                status_code=error.status_code,
                payload=error.payload,
                response=error.response,
            ) from error

        await self.store.set(ACCESS_TOKEN_KEY, access, max_age_days=ACCESS_TOKEN_DAYS[0])
        return access

    async def _force_logout(self) -> None:
        self._logger.warning("Token refresh failed; clearing credentials")
        await self.clear_auth_tokens()
        await self.store.clear_profile_cache()
        self.navigator.redirect_to_login()

    # -- event hooks -------------------------------------------------------------

    async def _attach_credentials(self, request: httpx.Request) -> None:
        pair = await self.store.load_pair()
        if pair is None:
            self._logger.debug("No auth token available for request: %s", request.url)
            return
        request.headers["Authorization"] = f"Bearer {pair.access_token}"

    async def _log_request(self, request: httpx.Request) -> None:
        if not self._debug:
            return
        self._logger.info("Rental API request %s %s", request.method, request.url)

    async def _log_response(self, response: httpx.Response) -> None:
        if not self._debug:
            return
        self._logger.info(
            "Rental API response %s %s -> %s",
            response.request.method,
            response.request.url,
            response.status_code,
        )
        if response.status_code >= 400:
            body = await response.aread()
            text = body.decode("utf-8", errors="replace")
            if len(text) > 1000:
                text = text[:1000] + "...<truncated>"
            self._logger.warning("Rental API error body: %s", text)
