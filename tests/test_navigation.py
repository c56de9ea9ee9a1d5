import pytest

from rentclient.navigation import (
    Navigator,
    home_route_for,
    normalize_role,
    role_from_path,
)


@pytest.mark.parametrize(
    ("role", "expected"),
    [
        ("admin", "/dashboard/admin"),
        ("landlord", "/dashboard/landlord"),
        ("agent", "/dashboard/landlord"),
        ("tenant", "/dashboard/user"),
        ("Landlord ", "/dashboard/landlord"),
        ("superuser", "/dashboard/user"),
        (None, "/dashboard/user"),
    ],
)
def test_home_route_for(role, expected) -> None:
    assert home_route_for(role) == expected


def test_normalize_role_maps_agent_alias() -> None:
    assert normalize_role("AGENT") == "landlord"


def test_role_from_path() -> None:
    assert role_from_path("/dashboard/admin/users") == "admin"
    assert role_from_path("/dashboard/landlord") == "landlord"
    assert role_from_path("/dashboard/administrator") == "tenant"
    assert role_from_path(None) == "tenant"


def test_navigator_records_history_and_calls_back() -> None:
    seen: list[str] = []
    navigator = Navigator(on_navigate=seen.append)

    navigator.redirect_home("agent")
    navigator.redirect_to_login()

    assert navigator.history == ["/dashboard/landlord", "/login"]
    assert navigator.current_path == "/login"
    assert seen == navigator.history


def test_navigator_starts_empty() -> None:
    assert Navigator().current_path is None
