from __future__ import annotations

from auth import token_client
from rentclient.constants import LOGGER, SESSION_COOKIE_KEY
from rentclient.errors import (
    ApiError,
    InvalidCredentialsError,
    SessionInvalidError,
    TokenRequestError,
)
from rentclient.http import CredentialedClient

REQUIRED_REGISTRATION_FIELDS = ("username", "email", "password")


def full_name(profile: dict) -> str:
    first = profile.get("first_name") or ""
    last = profile.get("last_name") or ""
    return f"{first} {last}".strip()


async def remember_profile(client: CredentialedClient, profile: dict) -> None:
    """Mirror display fields of ``profile`` into the durable store."""
    store = client.store.primary
    username = profile.get("username")
    if not username:
        return
    await store.set("username", username)
    if profile.get("role"):
        await store.set("userRole", profile["role"])
    name = full_name(profile)
    if name:
        await store.set("fullName", name)


async def login(
    client: CredentialedClient,
    username_or_email: str,
    password: str,
    remember_me: bool = False,
) -> dict:
    try:
        tokens = await token_client.obtain_token_pair(
            username_or_email,
            password,
            client=client.token_http,
        )
    except TokenRequestError as error:
        if error.status_code == 401:
            raise InvalidCredentialsError(payload=error.payload) from error
        raise

    await client.set_auth_tokens(tokens.access, tokens.refresh, remember_me)

    try:
        return await get_current_user(client)
    except SessionInvalidError:
        raise
    except ApiError as error:
        LOGGER.warning("Could not fetch profile after login: %s", error)
        await client.store.primary.set("username", username_or_email)
        email = username_or_email
        if "@" not in email:
            email = f"{username_or_email}@example.com"
        return {"username": username_or_email, "email": email, "role": "tenant"}


async def register(client: CredentialedClient, user_data: dict) -> dict:
    missing = [field for field in REQUIRED_REGISTRATION_FIELDS if not user_data.get(field)]
    if missing:
        raise ValueError(
            "Missing required fields: username, email, and password are required"
        )
    response = await client.post("/users/register", json=user_data)
    return response.json()


async def logout(client: CredentialedClient) -> None:
    await client.clear_auth_tokens()
    await client.store.clear_profile_cache()


async def get_current_user(client: CredentialedClient) -> dict:
    response = await client.get("/users/profile")
    profile = response.json()
    if isinstance(profile, dict):
        await remember_profile(client, profile)
    return profile


async def _complete_social_login(client: CredentialedClient, payload: dict) -> dict:
    # unknown users get a role-selection prompt instead of tokens
    if payload.get("user_exists") is False:
        return payload

    access = payload.get("access_token")
    refresh = payload.get("refresh_token")
    if not access or not refresh:
        raise ApiError("Invalid response from server", payload=payload)

    await client.set_auth_tokens(access, refresh, True)
    user = payload.get("user") or {}
    await remember_profile(client, user)
    return user


async def login_with_google(client: CredentialedClient, credential: str, role: str | None = None) -> dict:
    body = {"credential": credential}
    if role:
        body["role"] = role
    response = await client.post("/users/auth/google", json=body)
    return await _complete_social_login(client, response.json())


async def init_twitter_auth(client: CredentialedClient) -> dict:
    response = await client.get("/users/auth/twitter/init")
    return response.json()


async def login_with_twitter(
    client: CredentialedClient,
    oauth_token: str,
    oauth_verifier: str,
    role: str | None = None,
) -> dict:
    body = {"oauth_token": oauth_token, "oauth_verifier": oauth_verifier}
    if role:
        body["role"] = role
    response = await client.post("/users/auth/twitter/callback", json=body)
    return await _complete_social_login(client, response.json())


async def is_authenticated(client: CredentialedClient) -> bool:
    pair = await client.store.load_pair()
    if pair is not None:
        return True
    if client.cookies.get(SESSION_COOKIE_KEY):
        return True
    return await client.store.secondary.get(SESSION_COOKIE_KEY) is not None


async def change_password(client: CredentialedClient, old_password: str, new_password: str) -> dict:
    response = await client.post(
        "/users/change-password",
        json={"old_password": old_password, "new_password": new_password},
    )
    return response.json()


async def update_profile(client: CredentialedClient, profile_data: dict) -> dict:
    response = await client.put("/users/profile", json=profile_data)
    return response.json()
