from datetime import datetime, timedelta, timezone

import pytest

from api import create_app
from models.identity_store import IdentityStore
from models.token_registry import RefreshTokenRegistry
from models.user import User
from utils.authorization import AuthorizationGate
from utils.security import SigningService
from utils.tokens import TokenLifecycleManager

ACCESS_SECRET = "unit-access-secret-for-automation-only-0001"
REFRESH_SECRET = "unit-refresh-secret-for-automation-only-0002"


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def signer(clock):
    return SigningService(ACCESS_SECRET, REFRESH_SECRET, clock=clock)


@pytest.fixture
def registry():
    return RefreshTokenRegistry()


@pytest.fixture
def identity_store():
    return IdentityStore(
        users=[
            User(id="1", username="alice", role="user"),
            User(id="2", username="bob", role="admin"),
            User(id="3", username="mallory", role="user", active=False),
        ]
    )


@pytest.fixture
def manager(signer, registry):
    return TokenLifecycleManager(signer, registry)


@pytest.fixture
def gate(signer, identity_store):
    return AuthorizationGate(signer, identity_store)


@pytest.fixture
def app(clock):
    return create_app("testing", clock=clock)


@pytest.fixture
def client(app):
    return app.test_client()
