"""Session store subpackage.

Public surface
--------------
- Store          — abstract key/value capability
- InMemoryStore  — in-process dict (useful for testing)
"""
from __future__ import annotations

from fhir_session.storage.base import Store
from fhir_session.storage.memory import InMemoryStore

__all__ = [
    "InMemoryStore",
    "Store",
]
