from __future__ import annotations

import asyncio
import json
import sys
from urllib.parse import urlparse

import httpx

from auth.credential_store import (
    CookieCredentialStore,
    FileCredentialStore,
    SyncedCredentialStore,
)
from rentclient.constants import LOGGER
from rentclient.env import ClientSettings, load_env, load_settings, setup_logging
from rentclient.errors import ApiError
from rentclient.http import CredentialedClient
from rentclient.navigation import Navigator
from rentclient.services import account
from rentclient.services.admin import AdminService


def build_store(settings: ClientSettings) -> SyncedCredentialStore:
    return SyncedCredentialStore(
        FileCredentialStore(settings.token_store_path),
        CookieCredentialStore(domain=urlparse(settings.base_url).hostname or ""),
    )


def create_client(
    settings: ClientSettings | None = None,
    *,
    navigator: Navigator | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CredentialedClient:
    if settings is None:
        load_env()
        settings = load_settings()
    setup_logging(settings.debug)

    LOGGER.info("Using rental API at %s", settings.base_url)
    return CredentialedClient(
        build_store(settings),
        base_url=settings.base_url,
        navigator=navigator,
        transport=transport,
        timeout=settings.timeout,
        debug=settings.debug,
    )


def create_admin_service(
    client: CredentialedClient, settings: ClientSettings | None = None
) -> AdminService:
    if settings is None:
        settings = load_settings()
    return AdminService(client, demo_mode=settings.demo_mode)


async def show_profile(client: CredentialedClient) -> int:
    async with client:
        if not await account.is_authenticated(client):
            print("Not logged in.")
            return 1
        try:
            profile = await account.get_current_user(client)
        except ApiError as error:
            print(f"Could not load profile: {error}", file=sys.stderr)
            return 1
    print(json.dumps(profile, indent=2, sort_keys=True))
    return 0


def main() -> None:
    raise SystemExit(asyncio.run(show_profile(create_client())))


if __name__ == "__main__":
    main()
