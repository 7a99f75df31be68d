"""Unit tests for fhir_session.storage.memory.InMemoryStore.

Tests cover the Store interface (put / get) plus extras
(clear, __contains__, __len__, __repr__) and concurrent access.
"""
from __future__ import annotations

import threading

import pytest

from fhir_session.storage.base import Store
from fhir_session.storage.memory import InMemoryStore


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store() -> InMemoryStore:
    return InMemoryStore()


# ---------------------------------------------------------------------------
# put / get
# ---------------------------------------------------------------------------


class TestInMemoryStorePutGet:
    def test_is_store(self, store: InMemoryStore) -> None:
        assert isinstance(store, Store)

    def test_put_and_get(self, store: InMemoryStore) -> None:
        store.put("s1", b'{"k":"v"}')
        assert store.get("s1") == b'{"k":"v"}'

    def test_put_overwrites(self, store: InMemoryStore) -> None:
        store.put("s1", b"original")
        store.put("s1", b"updated")
        assert store.get("s1") == b"updated"

    def test_get_missing_returns_none(self, store: InMemoryStore) -> None:
        assert store.get("ghost") is None

    def test_empty_value_distinct_from_missing(self, store: InMemoryStore) -> None:
        store.put("s1", b"")
        assert store.get("s1") == b""
        assert store.get("s1") is not None

    def test_put_copies_bytearray(self, store: InMemoryStore) -> None:
        buf = bytearray(b"abc")
        store.put("s1", buf)  # type: ignore[arg-type]
        buf[0] = ord("x")
        assert store.get("s1") == b"abc"


# ---------------------------------------------------------------------------
# Extras
# ---------------------------------------------------------------------------


class TestInMemoryStoreExtras:
    def test_initial_data_copied(self) -> None:
        data = {"a": b"1"}
        store = InMemoryStore(initial_data=data)
        store.put("b", b"2")
        assert "b" not in data
        assert store.get("a") == b"1"

    def test_len_and_contains(self, store: InMemoryStore) -> None:
        store.put("a", b"")
        store.put("b", b"")
        assert len(store) == 2
        assert "a" in store
        assert "c" not in store

    def test_clear(self, store: InMemoryStore) -> None:
        store.put("a", b"1")
        store.clear()
        assert len(store) == 0

    def test_repr(self, store: InMemoryStore) -> None:
        store.put("a", b"1")
        assert repr(store) == "InMemoryStore(entries=1)"

    def test_concurrent_puts(self, store: InMemoryStore) -> None:
        def writer(offset: int) -> None:
            for i in range(200):
                store.put(f"k{offset}-{i}", b"x")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(store) == 800
