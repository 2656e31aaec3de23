"""
Token lifecycle manager: issue, refresh (rotate) and revoke access/refresh
token pairs.

A refresh token is usable only while it is registered AND its signature and
expiry check out. Rotation swaps the old registry entry for the new one in a
single atomic step, so a replayed refresh token fails with UnknownToken once
the legitimate holder has rotated it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta

from models.token_registry import RefreshTokenRegistry
from utils.exceptions import TokenExpired, TokenError, TokenNotFound, UnknownToken
from utils.security import SigningService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int = 0

    def to_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": "bearer",
            "expires_in": self.expires_in,
        }


class TokenLifecycleManager:

    def __init__(self, signer: SigningService, registry: RefreshTokenRegistry):
        self.signer = signer
        self.registry = registry

    def _pair(self, user_id: str, access_ttl: timedelta | None, refresh_ttl: timedelta | None):
        access_ttl = access_ttl or self.signer.access_ttl
        access_token = self.signer.sign_access(user_id, ttl=access_ttl)
        refresh_token = self.signer.sign_refresh(user_id, ttl=refresh_ttl)
        return access_token, refresh_token, int(access_ttl.total_seconds())

    def issue(
        self,
        user_id: str,
        access_ttl: timedelta | None = None,
        refresh_ttl: timedelta | None = None,
    ) -> TokenPair:
        """
        Sign a fresh access/refresh pair and register the refresh token.
        The caller has already authenticated user_id.
        """
        access_token, refresh_token, expires_in = self._pair(user_id, access_ttl, refresh_ttl)
        self.registry.insert(refresh_token, user_id, expires_at=self.signer.expires_at(refresh_token))
        logger.info("Issued token pair for user_id=%s", user_id)
        return TokenPair(access_token, refresh_token, expires_in)

    def refresh(self, presented: str) -> TokenPair:
        """
        Exchange a live refresh token for a new pair.
        Raises UnknownToken, InvalidSignature or TokenExpired.
        """
        try:
            self.registry.lookup(presented)
        except TokenNotFound:
            logger.warning("Refresh rejected: %s", UnknownToken.kind.value)
            raise UnknownToken()

        try:
            claims = self.signer.verify_refresh(presented)
        except TokenExpired:
            # expired entries are pruned on use
            self.registry.revoke(presented)
            logger.warning("Refresh rejected: %s", TokenExpired.kind.value)
            raise
        except TokenError as exc:
            logger.warning("Refresh rejected: %s", exc.kind.value)
            raise

        user_id = claims.subject
        access_token, new_refresh, expires_in = self._pair(user_id, None, None)
        try:
            self.registry.rotate(presented, new_refresh, user_id, expires_at=self.signer.expires_at(new_refresh))
        except TokenNotFound:
            # lost the race to a concurrent refresh of the same token
            logger.warning("Refresh rejected: %s (concurrent rotation)", UnknownToken.kind.value)
            raise UnknownToken()

        logger.info("Rotated refresh token for user_id=%s", user_id)
        return TokenPair(access_token, new_refresh, expires_in)

    def revoke(self, refresh_token: str) -> None:
        """Logout. Idempotent; already issued access tokens live until they expire."""
        if self.registry.revoke(refresh_token):
            logger.info("Revoked refresh token")
        else:
            logger.debug("Revoke of unknown refresh token ignored")

    def prune_expired(self) -> int:
        return self.registry.prune_expired(self.signer.clock.now())
