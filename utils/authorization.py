from __future__ import annotations

import logging

from models.identity_store import IdentityStore
from models.user import User
from utils.exceptions import TokenError, Unauthorized
from utils.security import SigningService

logger = logging.getLogger(__name__)


class AuthorizationGate:
    """
    Turns a presented access token into the User it belongs to.

    Every failure (bad signature, expired, malformed, unknown or inactive
    user) surfaces as the same opaque Unauthorized, so callers of protected
    resources cannot probe which check failed.
    """

    def __init__(self, signer: SigningService, identity_store: IdentityStore):
        self.signer = signer
        self.identity_store = identity_store

    def authorize(self, token: str) -> User:
        try:
            claims = self.signer.verify_access(token)
        except TokenError as exc:
            logger.debug("Access token rejected: %s", exc.kind.value)
            raise Unauthorized() from None

        user = self.identity_store.get_user(claims.subject)
        if user is None or not user.active:
            logger.debug("Access token subject not usable: user_id=%s", claims.subject)
            raise Unauthorized()
        return user
