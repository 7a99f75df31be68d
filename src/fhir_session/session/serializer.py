"""Session serialization with schema versioning.

Converts a ``Session`` to and from the byte payload kept in a ``Store``.
JSON is the default persisted format; YAML is available for stores that
are meant to be human-edited.  Schema version is embedded in every
document so that future readers can perform migrations.

An empty payload is the placeholder written when a session is created,
and decodes to a session with no payload attached.

Classes
-------
- SessionSerializer  — encode/decode Session to JSON or YAML bytes
"""
from __future__ import annotations

import json
from typing import Any, Literal

import yaml
from pydantic import ValidationError

from fhir_session.session.errors import MalformedPayloadError
from fhir_session.session.state import Session

SCHEMA_VERSION = "1.0"
_SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({SCHEMA_VERSION})

SerializationFormat = Literal["json", "yaml"]


class SessionSerializer:
    """Encode and decode ``Session`` objects.

    Encoding is deterministic: keys are sorted and JSON output uses compact
    separators, so equal sessions always produce identical bytes.

    Parameters
    ----------
    format:
        ``"json"`` (default) or ``"yaml"``.
    """

    def __init__(self, format: SerializationFormat = "json") -> None:
        if format not in ("json", "yaml"):
            raise ValueError(f"Unsupported serialization format {format!r}.")
        self.format = format

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encode(self, session: Session) -> bytes:
        """Serialise ``session`` to the persisted record format.

        Parameters
        ----------
        session:
            The session to serialise.

        Returns
        -------
        bytes
            UTF-8 encoded document including ``schema_version``.
        """
        data: dict[str, Any] = {"schema_version": SCHEMA_VERSION}
        data.update(session.model_dump(mode="json"))
        if self.format == "yaml":
            text = yaml.safe_dump(
                data, default_flow_style=False, allow_unicode=True, sort_keys=True
            )
        else:
            text = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return text.encode("utf-8")

    def decode(self, session_id: str, raw: bytes) -> Session:
        """Deserialise the payload stored for ``session_id``.

        Parameters
        ----------
        session_id:
            The store key the payload was read from.
        raw:
            Bytes previously produced by ``encode``, or ``b""`` for a
            freshly created session.

        Returns
        -------
        Session
            The reconstructed session.

        Raises
        ------
        MalformedPayloadError
            If ``raw`` is not a valid session document, uses an unsupported
            schema version, or names a different session id.
        """
        if not raw:
            return Session(id=session_id)

        data = self._load(session_id, raw)
        if not isinstance(data, dict):
            raise MalformedPayloadError(
                session_id, f"expected an object, got {type(data).__name__}"
            )

        version = str(data.pop("schema_version", ""))
        if version not in _SUPPORTED_SCHEMA_VERSIONS:
            supported = ", ".join(sorted(_SUPPORTED_SCHEMA_VERSIONS))
            raise MalformedPayloadError(
                session_id,
                f"unsupported schema version {version!r} (supported: {supported})",
            )

        stored_id = data.setdefault("id", session_id)
        if stored_id != session_id:
            raise MalformedPayloadError(
                session_id, f"payload belongs to session {stored_id!r}"
            )

        try:
            return Session.model_validate(data)
        except ValidationError as exc:
            raise MalformedPayloadError(session_id, str(exc)) from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self, session_id: str, raw: bytes) -> object:
        try:
            text = bytes(raw).decode("utf-8")
            if self.format == "yaml":
                return yaml.safe_load(text)
            return json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as exc:
            raise MalformedPayloadError(session_id, str(exc)) from exc
