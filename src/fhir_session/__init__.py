"""fhir-session — cookie-identified server-side sessions for SMART-on-FHIR apps.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import fhir_session
>>> fhir_session.__version__
'0.1.0'
"""
from __future__ import annotations

# Errors
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

# Session core
from fhir_session.session.state import OAuthToken, Session
from fhir_session.session.serializer import SessionSerializer
from fhir_session.session.manager import SessionManager, default_session_id

# Cookies and configuration
from fhir_session.cookies import CookieSigner, SessionCookie, parse_cookie_header
from fhir_session.config import SessionConfig

# Stores
from fhir_session.storage.base import Store
from fhir_session.storage.memory import InMemoryStore

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Errors
    "CookieError",
    "EmptySessionIDError",
    "InvalidCookieError",
    "MalformedPayloadError",
    "NoCookieError",
    "SessionError",
    "SessionExpiredError",
    "SessionNotFoundError",
    # Session core
    "OAuthToken",
    "Session",
    "SessionManager",
    "SessionSerializer",
    "default_session_id",
    # Cookies and configuration
    "CookieSigner",
    "SessionConfig",
    "SessionCookie",
    "parse_cookie_header",
    # Stores
    "InMemoryStore",
    "Store",
]
