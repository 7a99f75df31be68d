"""Session domain models.

Both types are Pydantic BaseModel subclasses so that the persisted record
is validated on load and serialised with a stable JSON shape.

Classes
-------
- OAuthToken  — OAuth2 token issued by the FHIR authorization server
- Session     — one telehealth launch session
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Tokens are treated as expired slightly early so that a request started
# just before expiry does not reach the FHIR server with a dead token.
_TOKEN_EXPIRY_DELTA = timedelta(seconds=10)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class OAuthToken(BaseModel):
    """An OAuth2 bearer token as returned by the FHIR token endpoint.

    Parameters
    ----------
    access_token:
        The token presented to the FHIR server.
    token_type:
        Token type, usually ``"Bearer"``.  Empty means Bearer.
    refresh_token:
        Token used to obtain a new access token once this one expires.
    expiry:
        Absolute expiry time.  ``None`` means the token does not expire.
    """

    access_token: str
    token_type: str = ""
    refresh_token: str = ""
    expiry: datetime | None = None

    @field_validator("expiry")
    @classmethod
    def require_timezone(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def is_valid(self, now: datetime | None = None) -> bool:
        """Return True if the token is non-empty and not about to expire."""
        if not self.access_token:
            return False
        if self.expiry is None:
            return True
        now = now or _utcnow()
        return self.expiry - _TOKEN_EXPIRY_DELTA > now

    def authorization_header(self) -> str:
        """Return the value for an ``Authorization`` request header."""
        token_type = self.token_type or "Bearer"
        # Servers commonly reply with "bearer"; normalise the well-known types.
        if token_type.lower() == "bearer":
            token_type = "Bearer"
        return f"{token_type} {self.access_token}"


class Session(BaseModel):
    """A single server-side session.

    The typed fields hold the SMART-on-FHIR launch context; ``values`` is a
    free-form bag for whatever application code needs to keep per session.

    Parameters
    ----------
    id:
        Session identifier.  Used as the store key and carried in the
        session cookie.  Cannot be changed after construction.
    fhir_url:
        Base URL of the FHIR server the session was launched against.
    launch_id:
        SMART launch identifier correlating the session with the EHR launch.
    fhir_token:
        OAuth2 token for the FHIR server, if authorization has completed.
    expires_at:
        When the session expires (UTC).
    values:
        Application key/value pairs.  Values must be JSON-compatible.
    """

    id: str = Field(frozen=True, min_length=1)
    fhir_url: str = ""
    launch_id: str = ""
    fhir_token: OAuthToken | None = None
    expires_at: datetime | None = None
    values: dict[str, Any] = Field(default_factory=dict)

    model_config = {"validate_assignment": True}

    @field_validator("expires_at")
    @classmethod
    def require_timezone(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    # ------------------------------------------------------------------
    # Value bag
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    def pop(self, key: str, default: Any = None) -> Any:
        return self.values.pop(key, default)

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True if ``expires_at`` is set and lies in the past."""
        if self.expires_at is None:
            return False
        return (now or _utcnow()) > self.expires_at

    def is_empty(self) -> bool:
        """Return True if no payload has been attached yet."""
        return (
            not self.fhir_url
            and not self.launch_id
            and self.fhir_token is None
            and not self.values
        )
