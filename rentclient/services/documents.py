from __future__ import annotations

from rentclient.http import CredentialedClient


async def upload_document(
    client: CredentialedClient,
    property_id,
    filename: str,
    content: bytes,
    document_type: str,
    description: str | None = None,
) -> dict:
    if not document_type:
        raise ValueError("Document type is required")

    fields = {"document_type": document_type}
    if description:
        fields["description"] = description

    response = await client.post(
        f"/properties/documents/{property_id}",
        files={"document": (filename, content)},
        data=fields,
    )
    return response.json()


async def property_documents(client: CredentialedClient, property_id) -> list:
    response = await client.get(f"/properties/documents/{property_id}")
    return response.json()


async def get_document(client: CredentialedClient, property_id, document_id) -> dict:
    response = await client.get(f"/properties/documents/{property_id}/{document_id}")
    return response.json()


async def pending_documents(client: CredentialedClient) -> list:
    response = await client.get("/admin/documents/pending")
    return response.json()


async def approve_document(client: CredentialedClient, document_id) -> dict:
    response = await client.put(f"/admin/documents/{document_id}/approve")
    return response.json()


async def reject_document(client: CredentialedClient, document_id, rejection_reason: str) -> dict:
    response = await client.put(
        f"/admin/documents/{document_id}/reject",
        json={"rejection_reason": rejection_reason},
    )
    return response.json()


async def send_feedback(client: CredentialedClient, document_id, feedback: str) -> dict:
    response = await client.put(
        f"/admin/documents/{document_id}/feedback",
        json={"feedback": feedback},
    )
    return response.json()


async def mark_feedback_read(client: CredentialedClient, property_id, document_id) -> dict:
    response = await client.put(
        f"/properties/documents/{property_id}/{document_id}/mark-feedback-read"
    )
    return response.json()


async def add_feedback_message(client: CredentialedClient, property_id, document_id, message: str) -> dict:
    response = await client.post(
        f"/properties/documents/{property_id}/{document_id}/feedback",
        json={"message": message, "sender_type": "landlord"},
    )
    return response.json()


async def add_admin_feedback_message(client: CredentialedClient, document_id, message: str) -> dict:
    response = await client.post(
        f"/admin/documents/{document_id}/feedback-thread",
        json={"message": message, "sender_type": "admin"},
    )
    return response.json()
