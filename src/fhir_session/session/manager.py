"""Session lifecycle management.

Provides ``SessionManager``, which creates sessions, issues the cookie that
names them, and loads and updates them through a pluggable ``Store``.

The public operations (``new``, ``retrieve``, ``save``) deal with cookies;
``_create`` and ``_find`` contain the store logic and know nothing about
HTTP.

Classes
-------
- SessionManager  — create / retrieve / save sessions over a Store
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Mapping

from fhir_session.config import SessionConfig
from fhir_session.cookies import (
    DEFAULT_COOKIE_NAME,
    CookieSigner,
    SessionCookie,
    parse_cookie_header,
)
from fhir_session.session.errors import (
    EmptySessionIDError,
    NoCookieError,
    SessionExpiredError,
    SessionNotFoundError,
)
from fhir_session.session.serializer import SessionSerializer
from fhir_session.session.state import Session
from fhir_session.storage.base import Store

logger = logging.getLogger(__name__)

IdentifierGenerator = Callable[[], str]
Clock = Callable[[], datetime]


def default_session_id() -> str:
    """Return a random, URL-safe session id with 256 bits of entropy."""
    return secrets.token_urlsafe(32)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Create, retrieve, and save cookie-identified sessions.

    The manager holds no mutable state of its own, so one instance can
    serve concurrent requests as long as the store is safe for concurrent
    use.  ``save`` reads then writes without a lock: concurrent saves of
    the same session are last-write-wins.  Store errors are never retried.

    Parameters
    ----------
    store:
        Backing key/value store.
    secret:
        Cookie signing key.  When empty or None the cookie carries the raw
        session id.
    id_generator:
        Zero-argument callable returning a fresh, unique session id.
        Defaults to ``default_session_id``.
    duration:
        Session lifetime.  Default: one hour.
    serializer:
        Payload codec.  Defaults to a JSON ``SessionSerializer``.
    clock:
        Source of the current time (timezone-aware).  Defaults to UTC now.
    cookie_name:
        Name of the session cookie.  Default: ``"session"``.
    enforce_expiry:
        When True (default), ``retrieve`` and ``save`` reject sessions whose
        stored ``expires_at`` has passed.
    cookie_path, secure, http_only, same_site:
        Attributes copied onto every issued ``SessionCookie``.
    """

    def __init__(
        self,
        store: Store,
        secret: str | None = None,
        id_generator: IdentifierGenerator | None = None,
        duration: timedelta = timedelta(hours=1),
        *,
        serializer: SessionSerializer | None = None,
        clock: Clock | None = None,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        enforce_expiry: bool = True,
        cookie_path: str = "/",
        secure: bool = False,
        http_only: bool = False,
        same_site: str | None = None,
    ) -> None:
        if duration <= timedelta(0):
            raise ValueError("duration must be positive")
        self._store = store
        self._id_generator = id_generator or default_session_id
        self._duration = duration
        self._serializer = serializer or SessionSerializer()
        self._clock = clock or _utcnow
        self._signer = CookieSigner(secret, clock=self._clock) if secret else None
        self.cookie_name = cookie_name
        self.enforce_expiry = enforce_expiry
        self._cookie_path = cookie_path
        self._secure = secure
        self._http_only = http_only
        self._same_site = same_site

    @classmethod
    def from_config(
        cls,
        store: Store,
        config: SessionConfig,
        id_generator: IdentifierGenerator | None = None,
        clock: Clock | None = None,
    ) -> SessionManager:
        """Build a manager from a ``SessionConfig``."""
        return cls(
            store,
            secret=config.secret,
            id_generator=id_generator,
            duration=config.duration,
            serializer=SessionSerializer(format=config.serialization_format),
            clock=clock,
            cookie_name=config.cookie_name,
            enforce_expiry=config.enforce_expiry,
            cookie_path=config.cookie_path,
            secure=config.secure,
            http_only=config.http_only,
            same_site=config.same_site,
        )

    @property
    def duration(self) -> timedelta:
        return self._duration

    @property
    def signs_cookies(self) -> bool:
        return self._signer is not None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def new(self) -> tuple[Session, SessionCookie]:
        """Create a session and the cookie that names it.

        Nothing is written to any request or response.  The caller sends
        ``cookie.to_header()`` as ``Set-Cookie`` and, if later code in the
        same request needs the session, passes
        ``cookie.as_request_cookies()`` to ``retrieve``.

        Returns
        -------
        tuple[Session, SessionCookie]
            The new session (no payload yet) and its cookie.

        Raises
        ------
        EmptySessionIDError
            If the id generator returned an empty string.
        Exception
            Any error raised by the store's ``put``.
        """
        expires_at = self._clock() + self._duration
        session = self._create(expires_at)
        cookie = SessionCookie(
            name=self.cookie_name,
            value=self._cookie_value(session.id),
            expires=expires_at,
            path=self._cookie_path,
            secure=self._secure,
            http_only=self._http_only,
            same_site=self._same_site,
        )
        return session, cookie

    def retrieve(self, cookies: Mapping[str, str] | str) -> Session:
        """Return the session named by the request's session cookie.

        Parameters
        ----------
        cookies:
            The request's cookies as a name/value mapping, or the raw
            ``Cookie`` header.

        Returns
        -------
        Session
            The stored session.

        Raises
        ------
        NoCookieError
            If the request has no session cookie.
        EmptySessionIDError
            If the session cookie is empty.
        InvalidCookieError
            If cookie signing is enabled and the signature does not verify.
        SessionExpiredError
            If the signed cookie or the stored session has expired.
        SessionNotFoundError
            If the store has no entry for the session id.
        MalformedPayloadError
            If the stored payload cannot be decoded.
        """
        if isinstance(cookies, str):
            cookies = parse_cookie_header(cookies)
        value = cookies.get(self.cookie_name)
        if value is None:
            raise NoCookieError(self.cookie_name)
        if value == "":
            raise EmptySessionIDError()
        session_id = self._session_id_from_cookie(value)
        session = self._find(session_id)
        logger.debug("SessionManager: retrieved session %r", session_id)
        return session

    def save(self, session: Session) -> None:
        """Overwrite the stored payload of an existing session.

        Parameters
        ----------
        session:
            The session to persist.  Its ``id`` must already be in the store.

        Raises
        ------
        SessionNotFoundError
            If no entry exists for ``session.id``.  The store is unchanged.
        SessionExpiredError
            If the stored session has expired.
        MalformedPayloadError
            If the currently stored payload cannot be decoded.

        Notes
        -----
        The stored ``expires_at`` is set by ``new`` and is kept across
        saves; the value on ``session`` is ignored once the store has one.
        """
        stored = self._find(session.id)
        if stored.expires_at is not None and session.expires_at != stored.expires_at:
            session = session.model_copy(update={"expires_at": stored.expires_at})
        self._store.put(session.id, self._serializer.encode(session))
        logger.debug("SessionManager: saved session %r", session.id)

    # ------------------------------------------------------------------
    # Store logic
    # ------------------------------------------------------------------

    def _create(self, expires_at: datetime) -> Session:
        """Generate an id and write a placeholder record under it.

        The placeholder carries only the id and ``expires_at``; it decodes
        to a session with no payload.
        """
        session_id = self._id_generator()
        if not session_id:
            raise EmptySessionIDError("Session id generator returned an empty id.")
        session = Session(id=session_id, expires_at=expires_at)
        self._store.put(session_id, self._serializer.encode(session))
        logger.debug("SessionManager: created session %r", session_id)
        return session

    def _find(self, session_id: str) -> Session:
        """Load and decode the session stored under ``session_id``.

        Raises
        ------
        SessionNotFoundError
            If the store has no entry for ``session_id``.
        SessionExpiredError
            If expiry is enforced and the stored session has expired.
        MalformedPayloadError
            If the stored payload cannot be decoded.
        """
        raw = self._store.get(session_id)
        if raw is None:
            raise SessionNotFoundError(session_id)
        session = self._serializer.decode(session_id, raw)
        if self.enforce_expiry and session.is_expired(self._clock()):
            raise SessionExpiredError(session_id)
        return session

    # ------------------------------------------------------------------
    # Cookie values
    # ------------------------------------------------------------------

    def _cookie_value(self, session_id: str) -> str:
        if self._signer is None:
            return session_id
        return self._signer.sign(session_id)

    def _session_id_from_cookie(self, value: str) -> str:
        if self._signer is None:
            return value
        session_id = self._signer.unsign(
            value, max_age=int(self._duration.total_seconds())
        )
        if not session_id:
            raise EmptySessionIDError()
        return session_id
