"""Pytest fixtures."""

import os

os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from virtual_backend.client import QueryCache, VirtualClient  # noqa: E402
from virtual_backend.db.store import Store  # noqa: E402
from virtual_backend.main import create_app  # noqa: E402
from virtual_backend.services.dispatcher import Dispatcher  # noqa: E402

USER_EMAIL = "user@example.com"
MARIA_EMAIL = "maria@example.com"
ADMIN_EMAIL = "admin@example.com"
PASSWORD = "password"


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def dispatcher():
    """A dispatcher with its own freshly seeded store."""
    return Dispatcher()


@pytest.fixture
def token_for(dispatcher):
    """Sign in a seed user and return the bearer token."""

    def _token_for(email: str, password: str = PASSWORD) -> str:
        envelope = dispatcher.sign_in(email, password)
        assert envelope.ok, envelope.error
        return envelope.data["session"]["access_token"]

    return _token_for


@pytest.fixture
def user_token(token_for):
    return token_for(USER_EMAIL)


@pytest.fixture
def maria_token(token_for):
    return token_for(MARIA_EMAIL)


@pytest.fixture
def admin_token(token_for):
    return token_for(ADMIN_EMAIL)


@pytest.fixture
def client(dispatcher):
    """HTTP test client bound to the test dispatcher."""
    with TestClient(create_app(dispatcher)) as c:
        yield c


@pytest.fixture
def cache():
    return QueryCache()


@pytest.fixture
def vclient(dispatcher, cache):
    return VirtualClient(dispatcher, cache=cache)
