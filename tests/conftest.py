import os

os.environ.setdefault("APP_ENV", "test")

import pytest
import pytest_asyncio

from meeting_client.infrastructure.http.client import AuthenticatedHttpClient
from meeting_client.infrastructure.storage.memory_store import InMemoryCredentialStore
from tests.factories.backend import FakeBackend
from tests.factories.token import create_fake_token

BASE_URL = "http://api.test"


@pytest.fixture
def backend():
    """Scriptable in-process backend served through httpx.MockTransport."""
    return FakeBackend()


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def tokens():
    return create_fake_token()


@pytest_asyncio.fixture
async def http_client(backend, credential_store):
    client = AuthenticatedHttpClient(
        BASE_URL,
        credential_store,
        refresh_timeout=1.0,
        transport=backend.transport,
    )
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def signed_in_client(http_client, tokens):
    await http_client.set_token(tokens["access_token"], tokens["refresh_token"])
    return http_client
