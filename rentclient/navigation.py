from __future__ import annotations

from .constants import LOGGER, LOGIN_PATH

TENANT = "tenant"
LANDLORD = "landlord"
ADMIN = "admin"

ROLE_ALIASES = {"agent": LANDLORD}

ROLE_HOME_ROUTES = {
    ADMIN: "/dashboard/admin",
    LANDLORD: "/dashboard/landlord",
    TENANT: "/dashboard/user",
}


def normalize_role(role: str | None) -> str:
    if not role:
        return TENANT
    role = role.strip().lower()
    role = ROLE_ALIASES.get(role, role)
    if role not in ROLE_HOME_ROUTES:
        return TENANT
    return role


def home_route_for(role: str | None) -> str:
    return ROLE_HOME_ROUTES[normalize_role(role)]


def role_from_path(path: str | None) -> str:
    if not path:
        return TENANT
    for role, route in ROLE_HOME_ROUTES.items():
        if path == route or path.startswith(f"{route}/"):
            return role
    return TENANT


class Navigator:
    """Records navigations and forwards them to an optional callback.

    The client only ever calls :meth:`redirect_to_login`; the UI layer decides
    what a navigation actually does by passing ``on_navigate``.
    """

    def __init__(self, on_navigate=None) -> None:
        self._on_navigate = on_navigate
        self.history: list[str] = []

    @property
    def current_path(self) -> str | None:
        return self.history[-1] if self.history else None

    def navigate(self, path: str) -> None:
        LOGGER.info("Navigating to %s", path)
        self.history.append(path)
        if self._on_navigate is not None:
            self._on_navigate(path)

    def redirect_to_login(self) -> None:
        self.navigate(LOGIN_PATH)

    def redirect_home(self, role: str | None) -> None:
        self.navigate(home_route_for(role))
