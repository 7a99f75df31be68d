#!/usr/bin/env python3
"""Example: Quickstart — fhir-session

Minimal working example: start a session for a SMART launch, attach the
launch context and FHIR token, then load it back from the cookie the
browser would send on its next request.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install fhir-session
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import fhir_session
from fhir_session import InMemoryStore, OAuthToken, SessionConfig, SessionManager


def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    print(f"fhir-session version: {fhir_session.__version__}")

    # Step 1: Build a manager over an in-memory store
    config = SessionConfig(secret="change-me", duration=timedelta(minutes=30))
    manager = SessionManager.from_config(InMemoryStore(), config)

    # Step 2: Start a session on the launch request
    session, cookie = manager.new()
    print(f"Set-Cookie: {cookie.to_header()}")

    # Step 3: Record the launch context once authorization completes
    session.fhir_url = "https://fhir.example.org/r4"
    session.launch_id = "launch-001"
    session.fhir_token = OAuthToken(
        access_token="access-token",
        token_type="Bearer",
        refresh_token="refresh-token",
        expiry=datetime.now(timezone.utc) + timedelta(minutes=5),
    )
    session.set("patient", "Patient/123")
    manager.save(session)

    # Step 4: A later request presents the cookie
    request_header = f"{cookie.name}={cookie.value}"
    restored = manager.retrieve(request_header)
    print(f"\nRestored session: {restored.id}")
    print(f"  FHIR server: {restored.fhir_url}")
    print(f"  Launch:      {restored.launch_id}")
    print(f"  Patient:     {restored.get('patient')}")
    if restored.fhir_token is not None:
        print(f"  Token valid: {restored.fhir_token.is_valid()}")


if __name__ == "__main__":
    main()
