"""Abstract base class for session stores.

The session manager needs only two operations from its backing store:
write a value under a key, and read it back.  Values are opaque bytes
(the encoded session document, or an empty placeholder).

Classes
-------
- Store  — abstract key/value capability consumed by SessionManager
"""
from __future__ import annotations

from abc import ABC, abstractmethod


class Store(ABC):
    """Key/value capability for raw session payloads.

    Implementations decide durability and concurrency guarantees.  The
    session manager performs an unguarded read-then-write when saving, so
    a store shared between threads or processes must be safe for
    concurrent access; concurrent saves of the same key are last-write-wins.

    Backend failures should be raised as the backend's own exceptions.
    They reach the caller unchanged.
    """

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Persist ``value`` under ``key``, overwriting any existing value.

        Parameters
        ----------
        key:
            Session identifier used as the storage key.
        value:
            Payload to persist.  May be empty.
        """

    @abstractmethod
    def get(self, key: str) -> bytes | None:
        """Return the value stored under ``key``.

        Parameters
        ----------
        key:
            Session identifier to look up.

        Returns
        -------
        bytes | None
            The stored payload (possibly ``b""``), or ``None`` if there is
            no entry for ``key``.
        """
