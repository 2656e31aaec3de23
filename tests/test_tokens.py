"""Tests for the token lifecycle manager: issue, rotate, revoke."""
import threading
from datetime import timedelta

import pytest

from utils.exceptions import ErrorKind, InvalidSignature, TokenExpired, UnknownToken
from utils.security import SigningService

from tests.conftest import ACCESS_SECRET


class TestIssue:

    def test_issue_registers_refresh_token(self, manager, registry, signer):
        pair = manager.issue("1")

        assert registry.lookup(pair.refresh_token) == "1"
        assert signer.verify_access(pair.access_token).subject == "1"
        assert signer.verify_refresh(pair.refresh_token).subject == "1"
        assert pair.expires_in == 15 * 60

    def test_issue_records_expiry_for_pruning(self, manager, registry, clock):
        pair = manager.issue("1")
        assert registry.get_record(pair.refresh_token).expires_at == clock.now() + timedelta(days=7)

    def test_issue_with_custom_ttls(self, manager, signer):
        pair = manager.issue("1", access_ttl=timedelta(minutes=1), refresh_ttl=timedelta(hours=1))

        access = signer.verify_access(pair.access_token)
        refresh = signer.verify_refresh(pair.refresh_token)
        assert access.expires_at - access.issued_at == timedelta(minutes=1)
        assert refresh.expires_at - refresh.issued_at == timedelta(hours=1)
        assert pair.expires_in == 60

    def test_to_dict_wire_form(self, manager):
        body = manager.issue("1").to_dict()
        assert set(body) == {"access_token", "refresh_token", "token_type", "expires_in"}
        assert body["token_type"] == "bearer"


class TestRefresh:

    def test_refresh_rotates(self, manager, registry, signer):
        first = manager.issue("1")
        second = manager.refresh(first.refresh_token)

        assert second.refresh_token != first.refresh_token
        assert second.access_token != first.access_token
        assert first.refresh_token not in registry
        assert registry.lookup(second.refresh_token) == "1"
        assert signer.verify_access(second.access_token).subject == "1"

    def test_refresh_token_is_single_use(self, manager):
        pair = manager.issue("1")
        manager.refresh(pair.refresh_token)

        with pytest.raises(UnknownToken) as exc:
            manager.refresh(pair.refresh_token)
        assert exc.value.kind is ErrorKind.UNKNOWN_TOKEN

    def test_unregistered_but_validly_signed_token(self, manager, signer):
        with pytest.raises(UnknownToken):
            manager.refresh(signer.sign_refresh("1"))

    def test_expired_refresh_token(self, manager, registry, clock):
        pair = manager.issue("1")
        clock.advance(days=7, seconds=1)

        with pytest.raises(TokenExpired):
            manager.refresh(pair.refresh_token)
        # pruned on use; the next attempt no longer finds it
        assert pair.refresh_token not in registry
        with pytest.raises(UnknownToken):
            manager.refresh(pair.refresh_token)

    def test_foreign_secret_fails_even_when_registered(self, manager, registry, clock):
        forger = SigningService(ACCESS_SECRET, "attacker-refresh-secret-0000000000000000", clock=clock)
        forged = forger.sign_refresh("2")
        registry.insert(forged, "2")

        with pytest.raises(InvalidSignature) as exc:
            manager.refresh(forged)
        assert exc.value.kind is ErrorKind.INVALID_TOKEN
        # a signature failure does not consume the entry
        assert forged in registry

    def test_tampered_token_fails_even_when_registered(self, manager, registry):
        pair = manager.issue("1")
        header, payload, signature = pair.refresh_token.split(".")
        flipped = ("A" if signature[0] != "A" else "B") + signature[1:]
        tampered = ".".join([header, payload, flipped])
        registry.insert(tampered, "1")

        with pytest.raises(InvalidSignature):
            manager.refresh(tampered)

    def test_access_token_cannot_be_used_to_refresh(self, manager, registry):
        pair = manager.issue("1")
        registry.insert(pair.access_token, "1")
        with pytest.raises(InvalidSignature):
            manager.refresh(pair.access_token)


class TestRevoke:

    def test_revoke_then_refresh(self, manager):
        pair = manager.issue("1")
        manager.revoke(pair.refresh_token)

        with pytest.raises(UnknownToken):
            manager.refresh(pair.refresh_token)

    def test_double_revoke_is_not_an_error(self, manager):
        pair = manager.issue("1")
        manager.revoke(pair.refresh_token)
        manager.revoke(pair.refresh_token)
        manager.revoke("never-issued")

    def test_revoke_leaves_access_token_valid(self, manager, signer):
        pair = manager.issue("1")
        manager.revoke(pair.refresh_token)
        assert signer.verify_access(pair.access_token).subject == "1"


def test_prune_expired(manager, registry, clock):
    manager.issue("1", refresh_ttl=timedelta(hours=1))
    keep = manager.issue("1")
    clock.advance(hours=2)

    assert manager.prune_expired() == 1
    assert len(registry) == 1
    assert keep.refresh_token in registry


def test_full_lifecycle_scenario(manager):
    first = manager.issue("1")
    second = manager.refresh(first.refresh_token)

    with pytest.raises(UnknownToken):
        manager.refresh(first.refresh_token)

    third = manager.refresh(second.refresh_token)
    manager.revoke(third.refresh_token)

    with pytest.raises(UnknownToken):
        manager.refresh(third.refresh_token)


def test_concurrent_refresh_has_exactly_one_winner(manager, registry):
    pair = manager.issue("1")
    workers = 16
    barrier = threading.Barrier(workers)
    successes, failures, errors = [], [], []
    lock = threading.Lock()

    def attempt():
        barrier.wait()
        try:
            result = manager.refresh(pair.refresh_token)
        except UnknownToken:
            with lock:
                failures.append(1)
        except Exception as exc:  # noqa: BLE001 - surfaced by the assertion below
            with lock:
                errors.append(exc)
        else:
            with lock:
                successes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert len(successes) == 1
    assert len(failures) == workers - 1
    # the winner's replacement is live; nothing was lost
    assert len(registry) == 1
    assert registry.lookup(successes[0].refresh_token) == "1"
