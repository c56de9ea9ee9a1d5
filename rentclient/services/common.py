from __future__ import annotations


def page_params(filters: dict | None, page: int = 1, page_size: int = 10) -> dict:
    """Pagination query with empty filter values dropped."""
    params: dict = {"page": page, "page_size": page_size}
    for key, value in (filters or {}).items():
        if value is None or value == "":
            continue
        params[key] = value
    return params


def require_items(payload) -> dict:
    if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
        raise ValueError("Invalid response format from server")
    return payload
