"""
Credential store tests - persistence, CRUD and index addressing.

Run:
    pytest test_store.py
"""

import json

import pytest

from passkeep.vault import (
    CredentialEntry,
    CredentialStore,
    MemoryBackend,
    SQLiteBackend,
    ValidationError,
    STORAGE_KEY,
)

# ── Sample data ────────────────────────────────────────────────────

A = CredentialEntry("a.com", "u", "p1")
B = CredentialEntry("b.com", "v", "p2")
C = CredentialEntry("c.com", "", "p3")

CORRUPT_BLOBS = [
    b"",
    b"not json at all",
    b"{\"website\": \"a.com\"",
    b"\xff\xfe\x00garbage",
    b"{\"website\": \"a.com\", \"username\": \"u\", \"password\": \"p\"}",
    b"42",
    b"null",
    b"\"passwords\"",
]


def seeded(*entries):
    store = CredentialStore(backend=MemoryBackend())
    store.save(list(entries))
    return store


# ── Load / save ────────────────────────────────────────────────────

def test_load_missing_key_is_empty(store):
    assert store.load() == []


@pytest.mark.parametrize("blob", CORRUPT_BLOBS)
def test_load_corrupt_data_is_empty(blob):
    store = CredentialStore(backend=MemoryBackend({STORAGE_KEY: blob}))
    assert store.load() == []


def test_load_deeply_nested_data_is_empty():
    # Valid JSON, nested past the decoder recursion limit
    store = CredentialStore(backend=MemoryBackend({STORAGE_KEY: b"[" * 100000 + b"]" * 100000}))
    assert store.load() == []

    store.add(A)
    assert store.load() == [A]


def test_load_skips_malformed_items():
    blob = json.dumps([
        {"website": "a.com", "username": "u", "password": "p1"},
        "just a string",
        {"website": 5, "password": "x"},
        {"website": "b.com", "password": "p2"},
    ]).encode()
    store = CredentialStore(backend=MemoryBackend({STORAGE_KEY: blob}))

    entries = store.load()
    assert entries == [CredentialEntry("a.com", "u", "p1"), CredentialEntry("b.com", "", "p2")]


def test_save_then_load_round_trip(store):
    entries = [A, B, C, CredentialEntry("a.com", "dup", "same-site")]
    store.save(entries)
    assert store.load() == entries


def test_persisted_layout(backend, store):
    store.save([A])
    assert json.loads(backend.get(STORAGE_KEY)) == [
        {"website": "a.com", "username": "u", "password": "p1"}
    ]


def test_save_replaces_prior_value(store):
    store.save([A, B])
    store.save([C])
    assert store.load() == [C]


def test_custom_key(backend):
    store = CredentialStore(backend=backend, key="other")
    store.save([A])
    assert backend.get(STORAGE_KEY) is None
    assert backend.get("other") is not None


# ── Add ────────────────────────────────────────────────────────────

def test_add_to_empty_store(store):
    store.add(CredentialEntry(website="a.com", username="u", password="p"))
    assert store.load() == [CredentialEntry("a.com", "u", "p")]


def test_add_appends_last(store):
    store.save([A, B])
    store.add(C)
    assert store.load()[-1] == C
    assert store.count() == 3


def test_add_allows_duplicate_websites(store):
    store.add(A)
    store.add(A)
    assert store.load() == [A, A]


@pytest.mark.parametrize("entry", [
    CredentialEntry("", "u", "p"),
    CredentialEntry("a.com", "u", ""),
    CredentialEntry("", "", ""),
])
def test_add_rejects_missing_required_fields(store, entry):
    store.save([A])
    with pytest.raises(ValidationError):
        store.add(entry)
    assert store.load() == [A]


def test_add_stores_a_copy(store):
    entry = CredentialEntry("a.com", "u", "p")
    store.add(entry)
    entry.password = "changed"
    assert store.entry_at(0).password == "p"


# ── Update ─────────────────────────────────────────────────────────

def test_update_password_only_changes_password():
    store = seeded(A, B)
    store.update_password_at(1, "new")
    assert store.load() == [A, CredentialEntry("b.com", "v", "new")]


def test_update_empty_password_rejected():
    store = seeded(A, B)
    with pytest.raises(ValidationError):
        store.update_password_at(0, "")
    assert store.load() == [A, B]


@pytest.mark.parametrize("index", [-1, 2, 99])
def test_update_out_of_range(index):
    store = seeded(A, B)
    with pytest.raises(IndexError):
        store.update_password_at(index, "new")
    assert store.load() == [A, B]


# ── Delete ─────────────────────────────────────────────────────────

def test_delete_first():
    store = seeded(CredentialEntry("a.com", "u", "p1"), CredentialEntry("b.com", "v", "p2"))
    store.delete_at(0)
    assert store.load() == [CredentialEntry("b.com", "v", "p2")]


@pytest.mark.parametrize("index", [0, 1, 2])
def test_delete_preserves_relative_order(index):
    original = [A, B, C]
    store = seeded(*original)
    store.delete_at(index)

    expected = original[:index] + original[index + 1:]
    assert store.load() == expected
    assert store.count() == len(original) - 1


@pytest.mark.parametrize("index", [-1, 3, True])
def test_delete_out_of_range(index):
    store = seeded(A, B, C)
    with pytest.raises(IndexError):
        store.delete_at(index)
    assert store.count() == 3


# ── Read accessor ──────────────────────────────────────────────────

def test_entry_at():
    store = seeded(A, B)
    assert store.entry_at(1) == B


def test_entry_at_empty_store(store):
    with pytest.raises(IndexError):
        store.entry_at(0)


def test_entry_repr_hides_password():
    assert "p1" not in repr(A)
    assert "<hidden>" in repr(A)


# ── Change notification ────────────────────────────────────────────

def test_every_mutation_emits_entries_changed(store):
    events = []
    store.entries_changed.connect(lambda: events.append(store.count()))

    store.add(A)
    store.add(B)
    store.update_password_at(0, "x")
    store.delete_at(1)

    assert events == [1, 2, 2, 1]


def test_rejected_mutation_does_not_emit(store):
    events = []
    store.entries_changed.connect(lambda: events.append(True))

    with pytest.raises(ValidationError):
        store.add(CredentialEntry("", "", ""))
    assert events == []


# ── SQLite backend ─────────────────────────────────────────────────

def test_sqlite_backend_persists_across_instances(tmp_path):
    db = tmp_path / "nested" / "vault.db"
    first = CredentialStore(backend=SQLiteBackend(db))
    first.add(A)
    first.add(B)

    second = CredentialStore(backend=SQLiteBackend(db))
    assert second.load() == [A, B]


def test_sqlite_backend_get_set_delete(tmp_path):
    backend = SQLiteBackend(tmp_path / "kv.db")
    assert backend.get("k") is None

    backend.set("k", b"one")
    backend.set("k", b"two")
    assert backend.get("k") == b"two"

    backend.delete("k")
    assert backend.get("k") is None
