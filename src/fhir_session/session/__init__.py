"""Session management subpackage.

Provides the session record, its persisted codec, and the manager that
ties sessions to cookies and a backing store.

Public surface
--------------
- Session                — session record (typed launch fields + value bag)
- OAuthToken             — OAuth2 token stored on a session
- SessionSerializer      — JSON/YAML codec with schema versioning
- SessionManager         — new / retrieve / save sessions
- SessionError and subclasses — error taxonomy
"""
from __future__ import annotations

from fhir_session.session.errors import (
    CookieError,
    EmptySessionIDError,
    InvalidCookieError,
    MalformedPayloadError,
    NoCookieError,
    SessionError,
    SessionExpiredError,
    SessionNotFoundError,
)
from fhir_session.session.state import OAuthToken, Session
from fhir_session.session.serializer import SessionSerializer
from fhir_session.session.manager import SessionManager

__all__ = [
    "CookieError",
    "EmptySessionIDError",
    "InvalidCookieError",
    "MalformedPayloadError",
    "NoCookieError",
    "OAuthToken",
    "Session",
    "SessionError",
    "SessionExpiredError",
    "SessionManager",
    "SessionNotFoundError",
    "SessionSerializer",
]
