from __future__ import annotations

from rentclient.http import CredentialedClient


def _title_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" "))


def search_params(search: dict | None, page: int | None = None, page_size: int | None = None) -> dict:
    search = search or {}
    params: dict = {
        "page": page or search.get("page") or 1,
        "page_size": page_size or search.get("page_size") or 10,
    }
    if search.get("query"):
        params["query"] = search["query"]
    if search.get("city"):
        params["city"] = _title_case(search["city"])
    if search.get("property_type"):
        kind = search["property_type"]
        params["property_type"] = kind[:1].upper() + kind[1:].lower()
    if search.get("bedrooms"):
        params["bedrooms"] = search["bedrooms"]
    if search.get("price_range"):
        params["price_range"] = search["price_range"]
    elif search.get("min_price") not in (None, ""):
        max_price = search.get("max_price") or "any"
        params["price_range"] = f"{search['min_price']}-{max_price}"
    return params


async def search_properties(
    client: CredentialedClient,
    search: dict | None = None,
    page: int | None = None,
    page_size: int | None = None,
) -> dict:
    response = await client.get("/properties/", params=search_params(search, page, page_size))
    return response.json()


async def featured_properties(client: CredentialedClient, limit: int = 6) -> list:
    response = await client.get("/properties/", params={"page": 1, "page_size": limit})
    return response.json().get("results", [])


async def landlord_properties(
    client: CredentialedClient,
    filters: dict | None = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    params = {**(filters or {}), "owner": "current", "include_all_statuses": "true"}
    params.update(page=page, page_size=page_size)
    response = await client.get("/properties/", params=params)
    payload = response.json()

    username = await client.store.primary.get("username")
    if not username:
        return payload
    results = [
        item
        for item in payload.get("results", [])
        if (item.get("owner") or {}).get("username") == username
    ]
    return {**payload, "results": results, "count": len(results)}


async def get_property(client: CredentialedClient, property_id) -> dict:
    response = await client.get(f"/properties/{property_id}")
    return response.json()


async def create_property(client: CredentialedClient, property_data: dict) -> dict:
    response = await client.post("/properties/", json=property_data)
    return response.json()


async def update_property(client: CredentialedClient, property_id, property_data: dict) -> dict:
    response = await client.put(f"/properties/{property_id}", json=property_data)
    return response.json()


async def delete_property(client: CredentialedClient, property_id) -> dict:
    response = await client.delete(f"/properties/{property_id}")
    if not response.content:
        return {}
    return response.json()


async def upload_property_image(
    client: CredentialedClient,
    property_id,
    filename: str,
    content: bytes,
    *,
    caption: str | None = None,
    is_primary: bool | None = None,
) -> dict:
    data = {}
    if caption:
        data["caption"] = caption
    if is_primary is not None:
        data["is_primary"] = "true" if is_primary else "false"
    response = await client.post(
        f"/properties/{property_id}/images",
        files={"image": (filename, content)},
        data=data,
    )
    return response.json()
