"""Session manager configuration.

Classes
-------
- SessionConfig  — settings consumed by ``SessionManager.from_config``
"""
from __future__ import annotations

import os
from datetime import timedelta
from typing import Literal, Mapping

from pydantic import BaseModel, field_validator

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


class SessionConfig(BaseModel):
    """Configuration parameters for ``SessionManager``.

    Parameters
    ----------
    secret:
        Key used to sign session cookies.  Empty disables signing and the
        cookie carries the raw session id.
    duration:
        Session lifetime.  Default: one hour.
    cookie_name:
        Name of the session cookie.  Default: ``"session"``.
    cookie_path:
        ``Path`` attribute of the session cookie.
    secure:
        Set the ``Secure`` attribute.
    http_only:
        Set the ``HttpOnly`` attribute.
    same_site:
        ``SameSite`` attribute, or None to omit it.
    enforce_expiry:
        Reject sessions whose stored ``expires_at`` has passed.
    serialization_format:
        Persisted payload format, ``"json"`` or ``"yaml"``.
    """

    secret: str = ""
    duration: timedelta = timedelta(hours=1)
    cookie_name: str = "session"
    cookie_path: str = "/"
    secure: bool = False
    http_only: bool = False
    same_site: Literal["lax", "strict", "none"] | None = None
    enforce_expiry: bool = True
    serialization_format: Literal["json", "yaml"] = "json"

    model_config = {"frozen": True}

    @field_validator("duration")
    @classmethod
    def positive_duration(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("duration must be positive")
        return value

    @field_validator("cookie_name")
    @classmethod
    def non_empty_name(cls, value: str) -> str:
        if not value:
            raise ValueError("cookie_name must not be empty")
        return value

    @classmethod
    def from_env(
        cls,
        prefix: str = "FHIR_SESSION_",
        environ: Mapping[str, str] | None = None,
    ) -> SessionConfig:
        """Build a config from environment variables.

        Recognised variables (after ``prefix``): ``SECRET``,
        ``DURATION_SECONDS``, ``COOKIE_NAME``, ``COOKIE_PATH``, ``SECURE``,
        ``HTTP_ONLY``, ``SAME_SITE``, ``ENFORCE_EXPIRY``, ``FORMAT``.
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        fields: dict[str, object] = {}

        def lookup(name: str) -> str | None:
            return env.get(f"{prefix}{name}")

        if (secret := lookup("SECRET")) is not None:
            fields["secret"] = secret
        if (seconds := lookup("DURATION_SECONDS")) is not None:
            fields["duration"] = timedelta(seconds=float(seconds))
        if (name := lookup("COOKIE_NAME")) is not None:
            fields["cookie_name"] = name
        if (path := lookup("COOKIE_PATH")) is not None:
            fields["cookie_path"] = path
        for var, field in (
            ("SECURE", "secure"),
            ("HTTP_ONLY", "http_only"),
            ("ENFORCE_EXPIRY", "enforce_expiry"),
        ):
            if (raw := lookup(var)) is not None:
                fields[field] = raw.strip().lower() in _TRUE_VALUES
        if (same_site := lookup("SAME_SITE")) is not None:
            fields["same_site"] = same_site.strip().lower() or None
        if (fmt := lookup("FORMAT")) is not None:
            fields["serialization_format"] = fmt.strip().lower()

        return cls.model_validate(fields)
