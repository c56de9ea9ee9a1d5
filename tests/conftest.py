import pytest

from auth.credential_store import (
    CookieCredentialStore,
    MemoryCredentialStore,
    SyncedCredentialStore,
)
from rentclient.navigation import Navigator
from tests.backend_helpers import NOW


@pytest.fixture
def durable_store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def cookie_store() -> CookieCredentialStore:
    return CookieCredentialStore(clock=lambda: NOW)


@pytest.fixture
def store(durable_store, cookie_store) -> SyncedCredentialStore:
    return SyncedCredentialStore(durable_store, cookie_store)


@pytest.fixture
def navigator() -> Navigator:
    return Navigator()
