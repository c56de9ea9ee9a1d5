from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass
class CredentialPair:
    access_token: str
    refresh_token: str | None = None


@dataclass
class TokenPairResponse:
    access: str
    refresh: str

    @classmethod
    def from_payload(cls, payload: dict) -> "TokenPairResponse":
        access = payload.get("access")
        refresh = payload.get("refresh")

        if not isinstance(access, str) or not access:
            raise ValueError("Token response missing access.")
        if not isinstance(refresh, str) or not refresh:
            raise ValueError("Token response missing refresh.")

        return cls(access=access, refresh=refresh)


@dataclass(frozen=True)
class PendingRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: Any = None
    json: Any = None
    data: Any = None
    files: Any = None
    attempt: int = 0

    @property
    def is_retry(self) -> bool:
        return self.attempt > 0

    @property
    def is_form_payload(self) -> bool:
        return self.files is not None or self.data is not None

    def retried(self, access_token: str) -> "PendingRequest":
        headers = {**self.headers, "Authorization": f"Bearer {access_token}"}
        return replace(self, headers=headers, attempt=1)

    def context(self) -> dict:
        body = self.json if self.json is not None else self.data
        return {"method": self.method, "url": self.url, "body": body}
