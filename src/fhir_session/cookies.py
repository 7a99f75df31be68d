"""Session cookie handling.

Builds the ``Set-Cookie`` value issued for a new session, parses incoming
``Cookie`` headers, and optionally signs the session id so that a client
cannot forge or extend a session cookie.

Signing uses itsdangerous' ``TimestampSigner``: the cookie value becomes
``<session id>.<timestamp>.<signature>``.  The embedded timestamp lets the
server reject cookies older than the session duration even when the
browser ignores ``Expires``.

Classes
-------
- SessionCookie  — cookie issued for a session
- CookieSigner   — HMAC signing of session ids

Functions
---------
- parse_cookie_header  — ``Cookie`` header to a name/value dict
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime
from http import cookies as http_cookies
from typing import Callable

from itsdangerous import BadSignature, SignatureExpired, TimestampSigner
from starlette.requests import cookie_parser

from fhir_session.session.errors import InvalidCookieError, SessionExpiredError

DEFAULT_COOKIE_NAME = "session"
_DEFAULT_SALT = "fhir-session.cookie"


@dataclass(frozen=True)
class SessionCookie:
    """A cookie naming a session.

    The manager returns this alongside a newly created session; the HTTP
    layer is responsible for sending it (``to_header``) and, if needed,
    threading ``{name: value}`` through to later ``retrieve`` calls in the
    same request.

    Parameters
    ----------
    name:
        Cookie name.  Defaults to ``"session"``.
    value:
        Cookie value: the session id, signed when a secret is configured.
    expires:
        Absolute expiry time sent as the ``Expires`` attribute.
    path:
        ``Path`` attribute.
    secure / http_only / same_site:
        Optional attributes.  Off by default.
    """

    name: str
    value: str
    expires: datetime
    path: str = "/"
    secure: bool = False
    http_only: bool = False
    same_site: str | None = None

    def to_header(self) -> str:
        """Render the value of a ``Set-Cookie`` response header."""
        jar: http_cookies.SimpleCookie = http_cookies.SimpleCookie()
        jar[self.name] = self.value
        morsel = jar[self.name]
        morsel["expires"] = format_datetime(
            self.expires.astimezone(timezone.utc), usegmt=True
        )
        if self.path:
            morsel["path"] = self.path
        if self.secure:
            morsel["secure"] = True
        if self.http_only:
            morsel["httponly"] = True
        if self.same_site:
            morsel["samesite"] = self.same_site.capitalize()
        return morsel.OutputString()

    def max_age(self, now: datetime | None = None) -> int:
        """Seconds until the cookie expires, clamped at zero."""
        now = now or datetime.now(timezone.utc)
        return max(0, int((self.expires - now).total_seconds()))

    def as_request_cookies(self) -> dict[str, str]:
        """Return the cookie as a request-side ``{name: value}`` mapping."""
        return {self.name: self.value}


def parse_cookie_header(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` request header into a name/value dict.

    Each ``;``-separated pair is parsed on its own, so a malformed cookie
    set by another application does not hide the ones after it.
    """
    return cookie_parser(header)


class _ClockedTimestampSigner(TimestampSigner):
    """TimestampSigner that reads time from an injected clock."""

    def __init__(self, secret_key: str, *, salt: str, clock: Callable[[], datetime]) -> None:
        super().__init__(secret_key, salt=salt)
        self._clock = clock

    def get_timestamp(self) -> int:
        return int(self._clock().timestamp())


class CookieSigner:
    """Sign and verify session ids carried in cookies.

    Parameters
    ----------
    secret:
        HMAC key.  Must be non-empty.
    salt:
        Namespace for the signature so the same secret can safely sign
        other values elsewhere in the application.
    clock:
        Source of the current time.  Defaults to UTC now.
    """

    def __init__(
        self,
        secret: str,
        salt: str = _DEFAULT_SALT,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("CookieSigner requires a non-empty secret.")
        self._signer = _ClockedTimestampSigner(
            secret, salt=salt, clock=clock or (lambda: datetime.now(timezone.utc))
        )

    def sign(self, session_id: str) -> str:
        """Return the signed, timestamped cookie value for ``session_id``."""
        return self._signer.sign(session_id).decode("utf-8")

    def unsign(self, value: str, max_age: int | None = None) -> str:
        """Verify ``value`` and return the session id it carries.

        Parameters
        ----------
        value:
            Cookie value produced by ``sign``.
        max_age:
            Reject signatures older than this many seconds.

        Raises
        ------
        SessionExpiredError
            If the signature is valid but older than ``max_age``.
        InvalidCookieError
            If the value was not signed with this secret or was tampered with.
        """
        try:
            return self._signer.unsign(value, max_age=max_age).decode("utf-8")
        except SignatureExpired as exc:
            raise SessionExpiredError() from exc
        except BadSignature as exc:
            raise InvalidCookieError("Session cookie signature is invalid.") from exc
