from models.identity_store import IdentityStore
from models.kv_storage import KeyValueStorage, MemoryStorage
from models.refresh_token import RefreshTokenRecord
from models.token_registry import RefreshTokenRegistry
from models.user import User

__all__ = [
    "IdentityStore",
    "KeyValueStorage",
    "MemoryStorage",
    "RefreshTokenRecord",
    "RefreshTokenRegistry",
    "User",
]
