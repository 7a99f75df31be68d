"""Unit tests for fhir_session.session.state."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from fhir_session.session.state import OAuthToken, Session

_NOW = datetime(2026, 10, 16, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# OAuthToken
# ---------------------------------------------------------------------------


class TestOAuthToken:
    def test_valid_without_expiry(self) -> None:
        assert OAuthToken(access_token="at").is_valid(_NOW)

    def test_invalid_when_empty(self) -> None:
        assert not OAuthToken(access_token="").is_valid(_NOW)

    def test_invalid_inside_expiry_window(self) -> None:
        token = OAuthToken(access_token="at", expiry=_NOW + timedelta(seconds=5))
        assert not token.is_valid(_NOW)

    def test_valid_before_expiry_window(self) -> None:
        token = OAuthToken(access_token="at", expiry=_NOW + timedelta(minutes=5))
        assert token.is_valid(_NOW)

    def test_naive_expiry_treated_as_utc(self) -> None:
        token = OAuthToken(access_token="at", expiry=datetime(2026, 10, 16, 13, 0))
        assert token.expiry is not None
        assert token.expiry.tzinfo is not None
        assert token.is_valid(_NOW)

    def test_authorization_header_defaults_to_bearer(self) -> None:
        assert OAuthToken(access_token="at").authorization_header() == "Bearer at"

    def test_authorization_header_normalises_bearer(self) -> None:
        token = OAuthToken(access_token="at", token_type="bearer")
        assert token.authorization_header() == "Bearer at"

    def test_authorization_header_custom_type(self) -> None:
        token = OAuthToken(access_token="at", token_type="MAC")
        assert token.authorization_header() == "MAC at"


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class TestSession:
    def test_defaults(self) -> None:
        session = Session(id="s1")
        assert session.fhir_url == ""
        assert session.launch_id == ""
        assert session.fhir_token is None
        assert session.expires_at is None
        assert session.values == {}

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Session(id="")

    def test_id_is_immutable(self) -> None:
        session = Session(id="s1")
        with pytest.raises(ValidationError):
            session.id = "s2"  # type: ignore[misc]

    def test_value_bag(self) -> None:
        session = Session(id="s1")
        session.set("patient", "Patient/123")
        assert session.get("patient") == "Patient/123"
        assert session.get("missing", "default") == "default"
        assert session.pop("patient") == "Patient/123"
        assert session.pop("patient") is None

    def test_is_empty(self) -> None:
        session = Session(id="s1", expires_at=_NOW)
        assert session.is_empty()
        session.launch_id = "launch-1"
        assert not session.is_empty()

    def test_value_makes_session_non_empty(self) -> None:
        session = Session(id="s1")
        session.set("k", "v")
        assert not session.is_empty()

    def test_is_expired(self) -> None:
        session = Session(id="s1", expires_at=_NOW)
        assert not session.is_expired(_NOW)
        assert session.is_expired(_NOW + timedelta(seconds=1))

    def test_never_expires_without_expires_at(self) -> None:
        assert not Session(id="s1").is_expired(_NOW + timedelta(days=365))

    def test_naive_expires_at_treated_as_utc(self) -> None:
        session = Session(id="s1", expires_at=datetime(2026, 10, 16, 12, 0))
        assert session.expires_at == _NOW

    def test_token_refresh_replaces_fields(self) -> None:
        token = OAuthToken(access_token="old", refresh_token="r")
        token.access_token = "new"
        assert token.authorization_header() == "Bearer new"
