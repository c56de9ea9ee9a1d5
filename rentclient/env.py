from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from .constants import DEFAULT_BASE_URL, DEFAULT_TOKEN_STORE_PATH, LOGGER


_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


@dataclass
class ClientSettings:
    base_url: str
    timeout: float | None
    token_store_path: str
    debug: bool
    demo_mode: bool


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_float(key: str) -> float | None:
    raw = os.getenv(key, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a numeric value.")


def load_env() -> None:
    env_path = Path(__file__).resolve().parent.parent / ".env"
    if not env_path.exists():
        return
    from dotenv import load_dotenv

    load_dotenv(env_path, override=False)


def resolve_base_url() -> str:
    raw = os.getenv("RENTAL_API_URL", "").strip() or DEFAULT_BASE_URL
    try:
        _URL_ADAPTER.validate_python(raw)
    except ValidationError as error:
        raise RuntimeError(
            f"RENTAL_API_URL must be a valid http(s) URL, got {raw!r}."
        ) from error
    return raw.rstrip("/")


def load_settings() -> ClientSettings:
    timeout = _get_env_float("RENTAL_API_TIMEOUT")
    if timeout is not None and timeout <= 0:
        raise RuntimeError("RENTAL_API_TIMEOUT must be greater than zero.")

    return ClientSettings(
        base_url=resolve_base_url(),
        timeout=timeout,
        token_store_path=os.getenv("RENTAL_TOKEN_STORE_PATH", "").strip()
        or DEFAULT_TOKEN_STORE_PATH,
        debug=is_truthy(os.getenv("RENTAL_API_DEBUG", "1")),
        demo_mode=is_truthy(os.getenv("RENTAL_DEMO_MODE")),
    )


def setup_logging(debug_enabled: bool) -> bool:
    if debug_enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return debug_enabled
