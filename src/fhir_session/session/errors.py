"""Session error taxonomy.

Every error raised by the session manager derives from ``SessionError`` so
callers can branch on the specific kind or catch the whole family.  Errors
raised by a ``Store`` implementation are never wrapped and pass through
unchanged.

Classes
-------
- SessionError           — base class
- SessionNotFoundError   — no Store entry for the id
- MalformedPayloadError  — stored bytes could not be decoded
- SessionExpiredError    — session or signed cookie is past its expiry
- CookieError            — base for unusable session cookies
- NoCookieError          — request carried no session cookie
- EmptySessionIDError    — session cookie (or generated id) is empty
- InvalidCookieError     — signed cookie failed verification
"""
from __future__ import annotations


class SessionError(Exception):
    """Base class for all session manager errors."""


class SessionNotFoundError(SessionError, KeyError):
    """Raised when no session exists in the store for ``session_id``."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session {session_id!r} not found.")


class MalformedPayloadError(SessionError, ValueError):
    """Raised when a stored payload is not a valid session document."""

    def __init__(self, session_id: str, reason: str) -> None:
        self.session_id = session_id
        self.reason = reason
        super().__init__(f"Malformed payload for session {session_id!r}: {reason}")


class SessionExpiredError(SessionError):
    """Raised when a session (or the cookie naming it) has expired."""

    def __init__(self, session_id: str = "") -> None:
        self.session_id = session_id
        if session_id:
            message = f"Session {session_id!r} has expired."
        else:
            message = "Session cookie has expired."
        super().__init__(message)


class CookieError(SessionError):
    """The request did not present a usable session cookie."""


class NoCookieError(CookieError):
    """Raised when the request carries no session cookie."""

    def __init__(self, cookie_name: str) -> None:
        self.cookie_name = cookie_name
        super().__init__(f"Request has no {cookie_name!r} cookie.")


class EmptySessionIDError(CookieError):
    """Raised when the session cookie or a generated session id is empty."""

    def __init__(self, message: str = "Session cookie value is empty.") -> None:
        super().__init__(message)


class InvalidCookieError(CookieError):
    """Raised when a signed session cookie fails signature verification."""
