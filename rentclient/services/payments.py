from __future__ import annotations

from rentclient.http import CredentialedClient

from .common import page_params


async def get_public_key(client: CredentialedClient) -> str:
    response = await client.get("/payments/public-key")
    return response.json()["publishable_key"]


async def create_payment_intent(
    client: CredentialedClient,
    booking_id,
    setup_future_usage: str | None = None,
) -> dict:
    response = await client.post(
        "/payments/intents",
        json={"booking_id": booking_id, "setup_future_usage": setup_future_usage},
    )
    return response.json()


async def confirm_payment(
    client: CredentialedClient,
    payment_intent_id: str,
    payment_method_id: str,
    save_payment_method: bool = False,
) -> dict:
    response = await client.post(
        "/payments/confirm",
        json={
            "payment_intent_id": payment_intent_id,
            "payment_method_id": payment_method_id,
            "save_payment_method": save_payment_method,
        },
    )
    return response.json()


async def saved_payment_methods(client: CredentialedClient) -> list:
    response = await client.get("/payments/methods")
    return response.json()


async def get_payment(client: CredentialedClient, payment_id) -> dict:
    response = await client.get(f"/payments/{payment_id}")
    return response.json()


async def booking_payments(
    client: CredentialedClient,
    booking_id,
    filters: dict | None = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    response = await client.get(
        f"/payments/booking/{booking_id}",
        params=page_params(filters, page, page_size),
    )
    return response.json()


async def landlord_payments(
    client: CredentialedClient,
    filters: dict | None = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    response = await client.get("/payments/landlord", params=page_params(filters, page, page_size))
    payload = response.json()
    if not isinstance(payload, dict) or payload.get("items") is None:
        return {"total": 0, "page": page, "page_size": page_size, "items": []}
    return payload
