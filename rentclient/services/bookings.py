from __future__ import annotations

import json
from datetime import datetime, timezone

from rentclient.constants import ACCESS_TOKEN_KEY, LOGGER
from rentclient.http import CredentialedClient

from .common import page_params, require_items


def _guest_cache_key(booking_id) -> str:
    return f"guest_booking_{booking_id}"


async def _cache_guest_booking(client: CredentialedClient, booking: dict) -> None:
    await client.store.primary.set(_guest_cache_key(booking["id"]), json.dumps(booking))


async def _cached_guest_email(client: CredentialedClient, booking_id) -> str | None:
    raw = await client.store.primary.get(_guest_cache_key(booking_id))
    if raw is None:
        return None
    try:
        cached = json.loads(raw)
    except ValueError:
        LOGGER.warning("Ignoring unreadable guest booking cache for %s", booking_id)
        return None
    return cached.get("guest_email")


async def create_booking(client: CredentialedClient, booking_data: dict) -> dict:
    response = await client.post("/bookings/", json=booking_data)
    return response.json()


async def create_guest_booking(client: CredentialedClient, booking_data: dict) -> dict:
    response = await client.post("/bookings/guest", json=booking_data)
    booking = response.json()
    if isinstance(booking, dict) and booking.get("id") is not None:
        guest_email = booking_data.get("guest_email") or (booking_data.get("user_info") or {}).get(
            "email"
        )
        await _cache_guest_booking(
            client,
            {
                **booking,
                "guest_email": guest_email,
                "cached_at": datetime.now(timezone.utc).isoformat(),
            },
        )
    return booking


async def get_booking(client: CredentialedClient, booking_id, guest_email: str | None = None) -> dict:
    """Fetch a booking, via the guest-access endpoint when nobody is logged in."""
    if await client.store.get(ACCESS_TOKEN_KEY):
        response = await client.get(f"/bookings/{booking_id}")
        return response.json()

    email = guest_email or await _cached_guest_email(client, booking_id)
    if not email:
        raise ValueError("Guest email is required to access booking details")

    response = await client.post(
        f"/bookings/{booking_id}/guest-access",
        json={"guest_email": email},
    )
    booking = response.json()
    if isinstance(booking, dict):
        await _cache_guest_booking(client, {"guest_email": email, **booking, "id": booking_id})
    return booking


async def list_tenant_bookings(
    client: CredentialedClient,
    filters: dict | None = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    response = await client.get("/bookings/tenant", params=page_params(filters, page, page_size))
    return require_items(response.json())


async def list_owner_bookings(
    client: CredentialedClient,
    filters: dict | None = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    response = await client.get("/bookings/owner", params=page_params(filters, page, page_size))
    payload = require_items(response.json())

    items = []
    for booking in payload["items"]:
        if not booking.get("tenant"):
            booking = {
                **booking,
                "tenant": {
                    "id": None,
                    "username": booking.get("guest_name") or "Guest",
                    "first_name": "",
                    "last_name": "",
                },
            }
        items.append(booking)
    return {**payload, "items": items}


async def cancel_booking(client: CredentialedClient, booking_id) -> dict:
    response = await client.put(f"/bookings/{booking_id}", json={"status": "cancelled"})
    return response.json()
