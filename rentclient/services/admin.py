from __future__ import annotations

import math

from rentclient.constants import LOGGER
from rentclient.errors import ApiError, SessionInvalidError
from rentclient.http import CredentialedClient

from .common import page_params

STATUS_QUERY = {
    "active": {"is_active": "true"},
    "inactive": {"is_active": "false"},
    "pending": {"pending": "true"},
}

DEMO_USERS = [
    {
        "id": "U12345",
        "name": "John Doe",
        "email": "john.doe@example.com",
        "role": "tenant",
        "status": "active",
    },
    {
        "id": "U12346",
        "name": "Jane Smith",
        "email": "jane.smith@example.com",
        "role": "landlord",
        "status": "active",
    },
    {
        "id": "U12347",
        "name": "Robert Johnson",
        "email": "robert.j@example.com",
        "role": "landlord",
        "status": "pending",
    },
]

DEMO_PROPERTIES = [
    {"id": "P1001", "title": "Modern Apartment", "city": "Casablanca", "status": "approved"},
    {"id": "P1002", "title": "Beach Villa", "city": "Agadir", "status": "pending"},
]

DEMO_BOOKINGS = [
    {"id": "B5001", "property_id": "P1001", "status": "confirmed", "total_price": "450.00"},
]

DEMO_PAYMENTS = [
    {"id": "PAY9001", "booking_id": "B5001", "status": "completed", "amount": "450.00"},
]


def _paginate(records: list[dict], page: int, page_size: int) -> dict:
    start = (page - 1) * page_size
    return {
        "items": records[start : start + page_size],
        "total": len(records),
        "page": page,
        "page_size": page_size,
    }


def user_query(filters: dict | None, page: int = 1, page_size: int = 10) -> dict:
    filters = dict(filters or {})
    status = filters.pop("status", None)
    params = page_params(filters, page, page_size)
    if status:
        status = status.lower()
        params.update(STATUS_QUERY.get(status, {}))
        params["status_display"] = status
    return params


def _user_row(user: dict, status_display: str | None) -> dict:
    if status_display:
        status = status_display
    elif "is_active" in user:
        status = "active" if user["is_active"] else "inactive"
    else:
        status = "unknown"

    if user.get("role") == "agent" and not user.get("is_active") and status_display == "pending":
        status = "pending"

    first, last = user.get("first_name"), user.get("last_name")
    name = f"{first} {last}" if first and last else user.get("username")
    return {
        "id": user.get("id"),
        "username": user.get("username"),
        "email": user.get("email"),
        "name": name,
        "first_name": first,
        "last_name": last,
        "role": user.get("role"),
        "status": status,
        "is_active": user.get("is_active", True),
        "joinDate": user.get("date_joined"),
        "date_joined": user.get("date_joined"),
        "properties": user.get("properties_count") or 0,
        "bookings": user.get("bookings_count") or 0,
    }


class AdminService:
    """Admin moderation endpoints.

    With ``demo_mode`` enabled, listing calls that fail fall back to a small
    set of sample records instead of raising.
    """

    def __init__(self, client: CredentialedClient, *, demo_mode: bool = False) -> None:
        self.client = client
        self.demo_mode = demo_mode

    def _demo(self, label: str, error: ApiError, records: list[dict], page: int, page_size: int) -> dict:
        if not self.demo_mode or isinstance(error, SessionInvalidError):
            raise error
        LOGGER.warning("Falling back to demo %s after error: %s", label, error)
        return _paginate(records, page, page_size)

    async def _listing(self, path: str, label: str, records: list[dict], params: dict) -> dict:
        try:
            response = await self.client.get(path, params=params)
        except ApiError as error:
            return self._demo(label, error, records, params["page"], params["page_size"])
        return response.json()

    async def users(self, filters: dict | None = None, page: int = 1, page_size: int = 10) -> dict:
        params = user_query(filters, page, page_size)
        try:
            response = await self.client.get("/admin/users/", params=params)
            return response.json()
        except SessionInvalidError:
            raise
        except ApiError as error:
            LOGGER.warning("Admin users endpoint failed (%s), trying /users/", error)

        try:
            response = await self.client.get("/users/", params=params)
        except ApiError as error:
            return self._demo("users", error, DEMO_USERS, page, page_size)

        users = response.json() or []
        rows = [_user_row(user, params.get("status_display")) for user in users]
        return {
            "items": rows,
            "total": len(rows),
            "page": page,
            "page_size": page_size,
            "total_pages": math.ceil(len(rows) / page_size) or 1,
        }

    async def properties(self, filters: dict | None = None, page: int = 1, page_size: int = 10) -> dict:
        return await self._listing(
            "/admin/properties/",
            "properties",
            DEMO_PROPERTIES,
            page_params(filters, page, page_size),
        )

    async def property(self, property_id) -> dict:
        try:
            response = await self.client.get(f"/admin/properties/{property_id}")
        except ApiError as error:
            if error.status_code not in (404, 405):
                raise
            response = await self.client.get(f"/properties/{property_id}")
        return response.json()

    async def approve_property(self, property_id) -> dict:
        response = await self.client.put(f"/admin/properties/{property_id}/approve/")
        return response.json()

    async def reject_property(self, property_id) -> dict:
        response = await self.client.put(f"/admin/properties/{property_id}/reject/")
        return response.json()

    async def delete_property(self, property_id) -> dict:
        response = await self.client.delete(f"/admin/properties/{property_id}/")
        if not response.content:
            return {}
        return response.json()

    async def bookings(self, filters: dict | None = None, page: int = 1, page_size: int = 10) -> dict:
        return await self._listing(
            "/admin/bookings",
            "bookings",
            DEMO_BOOKINGS,
            page_params(filters, page, page_size),
        )

    async def payments(self, filters: dict | None = None, page: int = 1, page_size: int = 10) -> dict:
        return await self._listing(
            "/admin/payments",
            "payments",
            DEMO_PAYMENTS,
            page_params(filters, page, page_size),
        )

    async def dashboard_stats(self) -> dict:
        try:
            response = await self.client.get("/admin/stats/")
            return response.json()
        except SessionInvalidError:
            raise
        except ApiError as error:
            LOGGER.warning("Admin stats unavailable (%s); computing from listings", error)

        try:
            return await self._computed_stats()
        except SessionInvalidError:
            raise
        except ApiError as error:
            if not self.demo_mode:
                raise
            LOGGER.warning("Falling back to empty demo stats after error: %s", error)
            return _stats(0, 0, 0, 0.0)

    async def _computed_stats(self) -> dict:
        totals = []
        for path in ("/admin/users/", "/admin/properties/", "/admin/bookings/"):
            response = await self.client.get(path, params={"page": 1, "page_size": 1})
            totals.append(response.json().get("total") or 0)

        response = await self.client.get(
            "/admin/payments/",
            params={"page": 1, "page_size": 100, "status": "completed"},
        )
        payments = response.json().get("items") or []
        revenue = sum(float(payment.get("amount") or 0) for payment in payments)
        return _stats(*totals, revenue)


def _stats(users: int, properties: int, bookings: int, revenue: float) -> dict:
    return {
        "users": {"total": users},
        "properties": {"total": properties},
        "bookings": {"total": bookings},
        "revenue": {"total": revenue, "formatted": f"${revenue:,.2f}"},
    }
