from __future__ import annotations

import dataclasses
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from identity_service.domain.contracts import NewAccount
from identity_service.domain.errors import DuplicateEmail, DuplicateUsername


def _candidate(username: str = "alice", email: str = "alice@example.com") -> NewAccount:
    return NewAccount(
        username=username,
        email=email,
        password_hash="$2b$04$notarealhashbutopaquetothestore",
        updated_at=datetime.now(timezone.utc),
    )


def test_create_assigns_increasing_ids(store):
    first = store.create(_candidate("alice", "alice@example.com"))
    second = store.create(_candidate("bob", "bob@example.com"))

    assert first.id == 1
    assert second.id == 2
    assert first.is_active is True
    assert first.created_at.tzinfo is not None
    assert len(store) == 2


def test_updated_at_never_precedes_created_at(store):
    stale = dataclasses.replace(
        _candidate(), updated_at=datetime(2000, 1, 1, tzinfo=timezone.utc)
    )

    account = store.create(stale)

    assert account.updated_at >= account.created_at


def test_failed_create_does_not_consume_an_id(store):
    store.create(_candidate("alice", "alice@example.com"))
    with pytest.raises(DuplicateEmail):
        store.create(_candidate("other", "alice@example.com"))

    assert store.create(_candidate("bob", "bob@example.com")).id == 2


def test_duplicate_email_rejected(store):
    store.create(_candidate("alice", "alice@example.com"))
    with pytest.raises(DuplicateEmail):
        store.create(_candidate("alice2", "alice@example.com"))


def test_duplicate_username_rejected(store):
    store.create(_candidate("alice", "alice@example.com"))
    with pytest.raises(DuplicateUsername):
        store.create(_candidate("alice", "other@example.com"))


def test_email_collision_reported_before_username(store):
    store.create(_candidate("alice", "alice@example.com"))
    with pytest.raises(DuplicateEmail):
        store.create(_candidate("alice", "alice@example.com"))


def test_lookups_return_none_when_absent(store):
    assert store.find_by_email("nobody@example.com") is None
    assert store.find_by_username("nobody") is None
    assert store.find_by_id(42) is None


def test_lookups_find_created_account(store):
    account = store.create(_candidate())

    assert store.find_by_email("alice@example.com") == account
    assert store.find_by_username("alice") == account
    assert store.find_by_id(account.id) == account


def test_list_all_strips_password_material(store):
    for idx in range(5):
        store.create(_candidate(f"user{idx}", f"user{idx}@example.com"))

    listed = store.list_all()

    assert [account.username for account in listed] == [f"user{idx}" for idx in range(5)]
    for account in listed:
        fields = {field.name for field in dataclasses.fields(account)}
        assert "password_hash" not in fields
        assert "password" not in fields
        assert "password_hash" not in account.as_dict()


def test_set_active_refreshes_updated_at(store):
    account = store.create(_candidate())

    updated = store.set_active(account.id, False)

    assert updated is not None
    assert updated.is_active is False
    assert updated.created_at == account.created_at
    assert updated.updated_at >= account.updated_at
    assert store.find_by_id(account.id).is_active is False
    assert store.set_active(999, False) is None


def test_concurrent_creates_with_same_email_insert_once(store):
    def attempt(idx: int):
        try:
            return store.create(_candidate(f"user{idx}", "race@example.com"))
        except DuplicateEmail:
            return None

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(32)))

    created = [result for result in results if result is not None]
    assert len(created) == 1
    assert len(store) == 1
