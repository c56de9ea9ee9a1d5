from __future__ import annotations

import json
import os
import tempfile
import time
from abc import ABC, abstractmethod
from http.cookiejar import Cookie
from pathlib import Path

import httpx

from auth.models import CredentialPair
from rentclient.constants import (
    ACCESS_TOKEN_DAYS,
    ACCESS_TOKEN_KEY,
    LOGGER,
    PROFILE_CACHE_KEYS,
    REFRESH_TOKEN_DAYS,
    REFRESH_TOKEN_KEY,
    SESSION_COOKIE_KEY,
)

SECONDS_PER_DAY = 24 * 60 * 60


class CredentialStore(ABC):
    """String key/value storage for tokens and cached profile fields.

    ``max_age_days`` is honoured only by stores that carry expiry metadata;
    the others accept and ignore it.
    """

    name = "store"

    @abstractmethod
    async def get(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: str, *, max_age_days: int | None = None) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryCredentialStore(CredentialStore):
    name = "memory"

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str, *, max_age_days: int | None = None) -> None:
        self._values[key] = value

    async def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileCredentialStore(CredentialStore):
    name = "file"

    def __init__(self, path: str | Path = ".credentials.json") -> None:
        self._path = Path(path)

    async def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    async def set(self, key: str, value: str, *, max_age_days: int | None = None) -> None:
        values = self._read_all()
        if values.get(key) == value:
            return
        values[key] = value
        self._write_all(values)

    async def delete(self, key: str) -> None:
        values = self._read_all()
        if key not in values:
            return
        del values[key]
        self._write_all(values)

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}

        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise RuntimeError("Credential store file is invalid; expected top-level JSON object.")
        return raw

    def _write_all(self, payload: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f"{self._path.name}.",
            suffix=".tmp",
            dir=self._path.parent,
        )
        tmp_path = Path(tmp_name)

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, sort_keys=True)
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()


class CookieCredentialStore(CredentialStore):
    name = "cookie"

    def __init__(
        self,
        cookies: httpx.Cookies | None = None,
        *,
        domain: str = "",
        path: str = "/",
        clock=time.time,
    ) -> None:
        self.cookies = cookies if cookies is not None else httpx.Cookies()
        self._domain = domain
        self._path = path
        self._clock = clock

    async def get(self, key: str) -> str | None:
        cookie = self._find(key)
        if cookie is None:
            return None
        if cookie.is_expired(self._clock()):
            self.cookies.jar.clear(cookie.domain, cookie.path, cookie.name)
            return None
        return cookie.value

    async def set(self, key: str, value: str, *, max_age_days: int | None = None) -> None:
        expires = None
        if max_age_days is not None:
            expires = int(self._clock() + max_age_days * SECONDS_PER_DAY)

        cookie = Cookie(
            version=0,
            name=key,
            value=value,
            port=None,
            port_specified=False,
            domain=self._domain,
            domain_specified=bool(self._domain),
            domain_initial_dot=self._domain.startswith("."),
            path=self._path,
            path_specified=True,
            secure=False,
            expires=expires,
            discard=expires is None,
            comment=None,
            comment_url=None,
            rest={"SameSite": "Lax"},
            rfc2109=False,
        )
        self.cookies.jar.set_cookie(cookie)

    async def delete(self, key: str) -> None:
        self.cookies.delete(key, path=self._path)

    def expires_at(self, key: str) -> float | None:
        cookie = self._find(key)
        if cookie is None:
            return None
        return cookie.expires

    def _find(self, key: str) -> Cookie | None:
        for cookie in self.cookies.jar:
            if cookie.name == key and cookie.path == self._path:
                return cookie
        return None


class SyncedCredentialStore(CredentialStore):
    """Read-through, write-both composition of two peer stores.

    Neither store is authoritative: reads prefer ``primary`` and fall back to
    ``secondary``; writes and deletes go to both.
    """

    name = "synced"

    def __init__(self, primary: CredentialStore, secondary: CredentialStore) -> None:
        self.primary = primary
        self.secondary = secondary

    async def get(self, key: str) -> str | None:
        value = await self.primary.get(key)
        if value is not None:
            return value
        return await self.secondary.get(key)

    async def set(self, key: str, value: str, *, max_age_days: int | None = None) -> None:
        await self.primary.set(key, value, max_age_days=max_age_days)
        await self.secondary.set(key, value, max_age_days=max_age_days)

    async def delete(self, key: str) -> None:
        await self.primary.delete(key)
        await self.secondary.delete(key)

    async def load_pair(self) -> CredentialPair | None:
        """Return the stored credentials, mirroring them into whichever store lacks them."""
        access = await self.primary.get(ACCESS_TOKEN_KEY)
        if access is None:
            access = await self.secondary.get(ACCESS_TOKEN_KEY)
            if access is None:
                return None

            LOGGER.info(
                "Syncing access token from %s store to %s store",
                self.secondary.name,
                self.primary.name,
            )
            await self.primary.set(ACCESS_TOKEN_KEY, access)
            refresh = await self.secondary.get(REFRESH_TOKEN_KEY)
            if refresh:
                await self.primary.set(REFRESH_TOKEN_KEY, refresh)
            return CredentialPair(access_token=access, refresh_token=refresh)

        refresh = await self.primary.get(REFRESH_TOKEN_KEY)
        if await self.secondary.get(ACCESS_TOKEN_KEY) is None:
            LOGGER.info(
                "Syncing access token from %s store to %s store",
                self.primary.name,
                self.secondary.name,
            )
            await self.secondary.set(
                ACCESS_TOKEN_KEY, access, max_age_days=ACCESS_TOKEN_DAYS[0]
            )
            if refresh:
                await self.secondary.set(
                    REFRESH_TOKEN_KEY, refresh, max_age_days=REFRESH_TOKEN_DAYS[0]
                )
        return CredentialPair(access_token=access, refresh_token=refresh)

    async def set_auth_tokens(self, access: str, refresh: str, remember_me: bool = False) -> None:
        access_days = ACCESS_TOKEN_DAYS[int(remember_me)]
        refresh_days = REFRESH_TOKEN_DAYS[int(remember_me)]
        LOGGER.info(
            "Setting tokens with expiration: access=%s days, refresh=%s days",
            access_days,
            refresh_days,
        )

        await self.primary.set(ACCESS_TOKEN_KEY, access)
        await self.primary.set(REFRESH_TOKEN_KEY, refresh)
        await self.secondary.set(ACCESS_TOKEN_KEY, access, max_age_days=access_days)
        await self.secondary.set(REFRESH_TOKEN_KEY, refresh, max_age_days=refresh_days)

    async def clear_auth_tokens(self) -> None:
        await self.delete(ACCESS_TOKEN_KEY)
        await self.delete(REFRESH_TOKEN_KEY)
        await self.secondary.delete(SESSION_COOKIE_KEY)

    async def clear_profile_cache(self) -> None:
        for key in PROFILE_CACHE_KEYS:
            await self.primary.delete(key)
