"""In-memory session store.

Stores payloads in a plain Python dict guarded by ``threading.Lock``.  All
data is lost when the process exits.  This store is primarily useful for
tests and local prototyping.

Classes
-------
- InMemoryStore  — dict-backed ephemeral store
"""
from __future__ import annotations

import threading

from fhir_session.storage.base import Store


class InMemoryStore(Store):
    """Ephemeral, in-process store backed by a Python dict.

    A ``threading.Lock`` guards every access so that one instance can be
    shared by concurrent request handlers.

    Parameters
    ----------
    initial_data:
        Optional pre-populated mapping of keys to payloads.  A shallow copy
        is taken so the caller's dict is not mutated.
    """

    def __init__(self, initial_data: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = {
            key: bytes(value) for key, value in (initial_data or {}).items()
        }
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Store interface
    # ------------------------------------------------------------------

    def put(self, key: str, value: bytes) -> None:
        """Store ``value`` under ``key``, overwriting if present."""
        with self._lock:
            self._data[key] = bytes(value)

    def get(self, key: str) -> bytes | None:
        """Return the payload for ``key``, or None if absent."""
        with self._lock:
            return self._data.get(key)

    # ------------------------------------------------------------------
    # Extras
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Remove all stored entries."""
        with self._lock:
            self._data.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __repr__(self) -> str:
        return f"InMemoryStore(entries={len(self)})"
