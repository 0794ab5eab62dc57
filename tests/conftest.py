"""
Shared fixtures for the auth pipeline tests.
"""

import time
from types import SimpleNamespace

import jwt as pyjwt
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from sfmanager.api.app import create_app
from sfmanager.auth import (
    MembershipStore,
    RequestAuthenticator,
    RoleAggregator,
    TokenCodec,
    UserLookup,
)
from sfmanager.config import Settings
from sfmanager.storage import create_local_storage

SECRET = "test-signing-secret-for-sfmanager-0123456789"
FOUNDER_PASSWORD = "correct-horse-battery"


def make_token(payload: dict, secret: str = SECRET, expires_in: int = 3600) -> str:
    """Sign an arbitrary payload, bypassing TokenCodec."""
    return pyjwt.encode(
        {"exp": int(time.time()) + expires_in, **payload},
        secret,
        algorithm="HS256",
    )


# =============================================================================
# Pipeline components
# =============================================================================


@pytest.fixture
def storage():
    return create_local_storage()


@pytest.fixture
def codec():
    return TokenCodec(SECRET)


@pytest.fixture
def users(storage):
    return UserLookup(storage.metadata)


@pytest.fixture
def roles(storage):
    return RoleAggregator(storage.metadata)


@pytest.fixture
def memberships(storage):
    return MembershipStore(storage.metadata)


@pytest.fixture
def authenticator(codec, users, roles):
    return RequestAuthenticator(codec, users, roles)


async def _seed(users: UserLookup, memberships: MembershipStore) -> SimpleNamespace:
    founder = await users.create("founder@example.com", FOUNDER_PASSWORD, "Founder")
    other = await users.create("other@example.com", FOUNDER_PASSWORD, "Other")
    loner = await users.create("loner@example.com", FOUNDER_PASSWORD)

    startup_a = await memberships.create_startup(founder.id, "Alpha")
    startup_b = await memberships.create_startup(other.id, "Beta")
    developer = await memberships.create_role(startup_b.id, "Backend Developer", "developer")
    await memberships.join_role(founder.id, developer.id)

    return SimpleNamespace(
        founder=founder,
        other=other,
        loner=loner,
        startup_a=startup_a,
        startup_b=startup_b,
        developer=developer,
    )


@pytest_asyncio.fixture
async def seeded(users, memberships):
    """
    founder owns Alpha and holds "developer" in Beta (owned by other).
    loner has no startups and no roles.
    """
    return await _seed(users, memberships)


# =============================================================================
# HTTP
# =============================================================================


@pytest.fixture
def settings():
    return Settings(_env_file=None, jwt_secret=SECRET, environment="test")


@pytest.fixture
def app(settings, storage):
    return create_app(settings, storage)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client
