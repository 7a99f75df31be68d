"""Test that the quickstart API works for fhir-session."""
from __future__ import annotations


def test_quickstart_import() -> None:
    import fhir_session

    assert fhir_session.__version__ == "0.1.0"


def test_quickstart_new_and_retrieve() -> None:
    from fhir_session import InMemoryStore, SessionManager

    manager = SessionManager(InMemoryStore(), secret="change-me")
    session, cookie = manager.new()
    assert manager.retrieve(cookie.to_header().split(";")[0]).id == session.id


def test_quickstart_save_launch_context() -> None:
    from fhir_session import InMemoryStore, OAuthToken, SessionManager

    manager = SessionManager(InMemoryStore())
    session, cookie = manager.new()
    session.fhir_url = "https://fhir.example.org/r4"
    session.launch_id = "launch-1"
    session.fhir_token = OAuthToken(access_token="token")
    session.set("patient", "Patient/123")
    manager.save(session)

    restored = manager.retrieve(cookie.as_request_cookies())
    assert restored.fhir_token is not None
    assert restored.fhir_token.authorization_header() == "Bearer token"
    assert restored.get("patient") == "Patient/123"


def test_quickstart_errors_share_base() -> None:
    from fhir_session import InMemoryStore, SessionError, SessionManager

    manager = SessionManager(InMemoryStore())
    for cookies in ({}, {"session": ""}, {"session": "unknown"}):
        try:
            manager.retrieve(cookies)
        except SessionError:
            continue
        raise AssertionError(f"retrieve({cookies!r}) did not raise")
