from __future__ import annotations

from rentclient.http import CredentialedClient

DEFAULT_SUCCESS_MESSAGE = (
    "Your message has been sent successfully! Our team will get back to you soon."
)

FIELD_NAMES = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "phone": "phone",
    "subject": "subject",
    "message": "message",
}


async def send_contact_message(client: CredentialedClient, contact_data: dict) -> dict:
    body = {backend: contact_data.get(form) for form, backend in FIELD_NAMES.items()}
    response = await client.post("/contact/", json=body)
    payload = response.json() if response.content else {}
    return {
        "success": True,
        "message": payload.get("message") or DEFAULT_SUCCESS_MESSAGE,
    }
