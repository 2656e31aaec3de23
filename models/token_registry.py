"""
Refresh token registry: the set of live refresh tokens, keyed by the token
string. Registry membership is the authority on whether a refresh token can
still be used; a token absent from here is dead regardless of its signature.

Each operation maps onto a single atomic storage primitive, so concurrent
callers never observe a half-done rotation.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from models.kv_storage import KeyValueStorage, MemoryStorage
from models.refresh_token import RefreshTokenRecord
from utils.exceptions import DuplicateToken, TokenNotFound

logger = logging.getLogger(__name__)


class RefreshTokenRegistry:

    def __init__(self, storage: KeyValueStorage | None = None):
        self.storage = storage if storage is not None else MemoryStorage()

    def insert(self, token: str, user_id: str, expires_at: Optional[datetime] = None) -> RefreshTokenRecord:
        record = RefreshTokenRecord(token=token, user_id=user_id, expires_at=expires_at)
        if not self.storage.set_if_absent(token, record):
            raise DuplicateToken()
        return record

    def lookup(self, token: str) -> str:
        record = self.storage.get(token)
        if record is None:
            raise TokenNotFound()
        return record.user_id

    def get_record(self, token: str) -> Optional[RefreshTokenRecord]:
        return self.storage.get(token)

    def rotate(
        self,
        old_token: str,
        new_token: str,
        user_id: str,
        expires_at: Optional[datetime] = None,
    ) -> RefreshTokenRecord:
        record = RefreshTokenRecord(token=new_token, user_id=user_id, expires_at=expires_at)
        try:
            replaced = self.storage.replace(old_token, new_token, record)
        except KeyError:
            raise DuplicateToken()
        if not replaced:
            raise TokenNotFound()
        return record

    def revoke(self, token: str) -> bool:
        """Remove token if present. Revoking twice is not an error."""
        return self.storage.delete(token) is not None

    def prune_expired(self, now: datetime) -> int:
        removed = 0
        for token, record in self.storage.items():
            if record.is_expired(now) and self.storage.delete(token) is not None:
                removed += 1
        if removed:
            logger.info("Pruned %d expired refresh token(s)", removed)
        return removed

    def __contains__(self, token: str) -> bool:
        return token in self.storage

    def __len__(self) -> int:
        return len(self.storage)
