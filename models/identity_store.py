from __future__ import annotations

import logging
from typing import Iterable, Optional

from models.kv_storage import KeyValueStorage, MemoryStorage
from models.user import User

logger = logging.getLogger(__name__)


class IdentityStore:
    """
    Maps a user id to its User record.
    The token manager and the authorization gate only read from it; users are
    added at bootstrap (see create_app) or by whatever owns registration.
    """

    def __init__(self, storage: KeyValueStorage | None = None, users: Iterable[User] = ()):
        self.storage = storage if storage is not None else MemoryStorage()
        for user in users:
            self.add(user)

    def add(self, user: User) -> User:
        if not self.storage.set_if_absent(user.id, user):
            raise ValueError(f"user {user.id} already exists")
        logger.info("Registered user id=%s username=%s", user.id, user.username)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        if not isinstance(user_id, str):
            return None
        return self.storage.get(user_id)

    def find_by_username(self, username: str) -> Optional[User]:
        for _, user in self.storage.items():
            if user.username == username:
                return user
        return None

    def __len__(self):
        return len(self.storage)
