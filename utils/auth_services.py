"""
Per-app wiring of the token lifecycle components.

create_app builds one AuthServices from the Flask config and keeps it on
app.extensions["auth"]; blueprints and decorators reach it through
current_auth(). Nothing here is module-level state, so every app (and every
test) gets its own stores.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from flask import current_app

from models.identity_store import IdentityStore
from models.token_registry import RefreshTokenRegistry
from models.user import User
from utils.authorization import AuthorizationGate
from utils.clock import Clock
from utils.security import SigningService
from utils.tokens import TokenLifecycleManager

EXTENSION_KEY = "auth"


@dataclass
class AuthServices:
    identity_store: IdentityStore
    registry: RefreshTokenRegistry
    signer: SigningService
    manager: TokenLifecycleManager
    gate: AuthorizationGate

    @classmethod
    def from_config(cls, config: Mapping[str, Any], clock: Clock | None = None) -> "AuthServices":
        access_secret = config.get("ACCESS_TOKEN_SECRET")
        refresh_secret = config.get("REFRESH_TOKEN_SECRET")
        if not access_secret or not refresh_secret:
            raise RuntimeError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must both be set")

        signer = SigningService(
            access_secret,
            refresh_secret,
            clock=clock,
            access_ttl=config["ACCESS_TOKEN_EXPIRES"],
            refresh_ttl=config["REFRESH_TOKEN_EXPIRES"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            issuer=config.get("JWT_ISSUER"),
        )
        identity_store = IdentityStore(users=[User(**u) for u in config.get("SEED_USERS", [])])
        registry = RefreshTokenRegistry()
        return cls(
            identity_store=identity_store,
            registry=registry,
            signer=signer,
            manager=TokenLifecycleManager(signer, registry),
            gate=AuthorizationGate(signer, identity_store),
        )


def current_auth() -> AuthServices:
    return current_app.extensions[EXTENSION_KEY]
