"""
security helpers:
- JWT creation/verification via PyJWT (HS256)
- JTI generation for token identifiers
- separate secrets for access and refresh tokens, so a leaked access key
  cannot forge refresh tokens and vice versa

Expiry is checked against an injected Clock rather than by PyJWT itself,
which keeps verification a pure function of (claims, secret, clock).
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from utils.clock import Clock, SystemClock
from utils.exceptions import InvalidSignature, TokenExpired

ACCESS = "access"
REFRESH = "refresh"

DEFAULT_ACCESS_TTL = timedelta(minutes=15)
DEFAULT_REFRESH_TTL = timedelta(days=7)

_REQUIRED_CLAIMS = ["sub", "iat", "exp", "jti", "type"]


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    issued_at: datetime
    expires_at: datetime
    jti: str
    token_type: str


class SigningService:
    """Signs and verifies access/refresh JWTs."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        *,
        clock: Clock | None = None,
        access_ttl: timedelta = DEFAULT_ACCESS_TTL,
        refresh_ttl: timedelta = DEFAULT_REFRESH_TTL,
        algorithm: str = "HS256",
        issuer: str | None = None,
    ):
        if not access_secret or not refresh_secret:
            raise ValueError("access and refresh secrets are both required")
        if access_secret == refresh_secret:
            raise ValueError("access and refresh tokens must use distinct secrets")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.clock = clock or SystemClock()
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm
        self.issuer = issuer

    def _sign(self, subject: str, token_type: str, secret: str, ttl: timedelta) -> str:
        now = self.clock.now()
        payload: Dict[str, Any] = {
            "sub": str(subject),
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
            "jti": generate_jti(),
            "type": token_type,
        }
        if self.issuer:
            payload["iss"] = self.issuer
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def sign_access(self, user_id: str, ttl: timedelta | None = None) -> str:
        return self._sign(user_id, ACCESS, self.access_secret, ttl or self.access_ttl)

    def sign_refresh(self, user_id: str, ttl: timedelta | None = None) -> str:
        return self._sign(user_id, REFRESH, self.refresh_secret, ttl or self.refresh_ttl)

    def verify(self, token: str, secret: str, expected_type: str | None = None) -> TokenClaims:
        """
        Decode and validate a JWT.
        Raises InvalidSignature for a bad signature, malformed token, missing
        claims or wrong type; TokenExpired when the signature is good but exp
        has passed.
        """
        options = {
            "verify_exp": False,
            "verify_iat": False,
            "verify_nbf": False,
            "require": _REQUIRED_CLAIMS,
        }
        try:
            decoded = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options=options,
                issuer=self.issuer,
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidSignature(f"Invalid token: {exc}") from exc

        if expected_type and decoded.get("type") != expected_type:
            raise InvalidSignature("Wrong token type")

        try:
            expires_at = datetime.fromtimestamp(int(decoded["exp"]), tz=timezone.utc)
            issued_at = datetime.fromtimestamp(int(decoded["iat"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidSignature("Invalid token: bad timestamp claims") from exc

        if expires_at <= self.clock.now():
            raise TokenExpired()

        return TokenClaims(
            subject=str(decoded["sub"]),
            issued_at=issued_at,
            expires_at=expires_at,
            jti=str(decoded["jti"]),
            token_type=str(decoded["type"]),
        )

    def expires_at(self, token: str) -> datetime:
        """exp of a token this service just signed; does not verify anything"""
        decoded = jwt.decode(token, options={"verify_signature": False})
        return datetime.fromtimestamp(int(decoded["exp"]), tz=timezone.utc)

    def verify_access(self, token: str) -> TokenClaims:
        return self.verify(token, self.access_secret, expected_type=ACCESS)

    def verify_refresh(self, token: str) -> TokenClaims:
        return self.verify(token, self.refresh_secret, expected_type=REFRESH)
