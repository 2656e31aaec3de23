from datetime import datetime, timedelta, timezone

import pytest

from models.kv_storage import MemoryStorage
from models.token_registry import RefreshTokenRegistry
from utils.exceptions import DuplicateToken, TokenNotFound

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_insert_and_lookup(registry):
    registry.insert("r1", "1")

    assert registry.lookup("r1") == "1"
    assert "r1" in registry
    assert len(registry) == 1


def test_insert_duplicate_fails(registry):
    registry.insert("r1", "1")
    with pytest.raises(DuplicateToken):
        registry.insert("r1", "2")
    assert registry.lookup("r1") == "1"


def test_lookup_missing(registry):
    with pytest.raises(TokenNotFound):
        registry.lookup("nope")


def test_rotate_replaces_old_with_new(registry):
    registry.insert("r1", "1")
    record = registry.rotate("r1", "r2", "1")

    assert record.token == "r2"
    assert "r1" not in registry
    assert registry.lookup("r2") == "1"
    assert len(registry) == 1


def test_rotate_missing_old_changes_nothing(registry):
    registry.insert("other", "2")
    with pytest.raises(TokenNotFound):
        registry.rotate("r1", "r2", "1")
    assert "r2" not in registry
    assert len(registry) == 1


def test_rotate_onto_existing_token_keeps_old(registry):
    registry.insert("r1", "1")
    registry.insert("r2", "2")
    with pytest.raises(DuplicateToken):
        registry.rotate("r1", "r2", "1")
    assert registry.lookup("r1") == "1"
    assert registry.lookup("r2") == "2"


def test_revoke_is_idempotent(registry):
    registry.insert("r1", "1")

    assert registry.revoke("r1") is True
    assert registry.revoke("r1") is False
    assert registry.revoke("never-issued") is False
    assert "r1" not in registry


def test_prune_expired_only_drops_expired_records(registry):
    registry.insert("old", "1", expires_at=NOW - timedelta(seconds=1))
    registry.insert("edge", "1", expires_at=NOW)
    registry.insert("fresh", "1", expires_at=NOW + timedelta(days=1))
    registry.insert("no-expiry", "1")

    assert registry.prune_expired(NOW) == 2
    assert sorted(k for k, _ in registry.storage.items()) == ["fresh", "no-expiry"]


def test_shared_storage_is_visible_to_second_registry():
    storage = MemoryStorage()
    RefreshTokenRegistry(storage).insert("r1", "1")
    assert RefreshTokenRegistry(storage).lookup("r1") == "1"
