from __future__ import annotations

import logging

HTTP_METHODS = {
    "get",
    "post",
    "put",
    "patch",
    "delete",
}

LOGGER = logging.getLogger("rentclient.api")
APP_VERSION = "0.1.0"

DEFAULT_BASE_URL = "http://localhost:8002/api"
DEFAULT_CONTENT_TYPE = "application/json"
DEFAULT_TOKEN_STORE_PATH = ".credentials.json"

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"
SESSION_COOKIE_KEY = "jwt"
PROFILE_CACHE_KEYS = ("username", "fullName", "userRole")

# (default, remember_me) lifetimes in days
ACCESS_TOKEN_DAYS = (1, 7)
REFRESH_TOKEN_DAYS = (7, 30)

TOKEN_PAIR_PATH = "/token/pair"
TOKEN_REFRESH_PATH = "/token/refresh"
LOGIN_PATH = "/login"
