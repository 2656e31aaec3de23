"""
RefreshTokenRecord: server-side record of a live refresh token so it can be
rotated and revoked.
Fields:
- token (key) - the signed refresh token string
- user_id
- expires_at - copy of the token's exp, used only for lazy pruning
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RefreshTokenRecord:
    token: str
    user_id: str
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now

    def __repr__(self):
        return f"<RefreshTokenRecord user_id={self.user_id} expires_at={self.expires_at}>"
