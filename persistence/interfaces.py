from __future__ import annotations

import hashlib
import re
import uuid
from typing import Any, Protocol

from errors import InvalidDocumentName

DOCUMENT_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,127}$")


class VersionedDocumentStore(Protocol):
    """
    A named JSON document persisted as one blob, with an opaque version token
    (ETag) per stored generation.

    The conditional write is the only synchronization primitive callers rely
    on: the backend must evaluate the version precondition and replace the
    bytes as one atomic step.
    """

    def read_with_version(self, name: str) -> tuple[Any, str]:
        """Return (document, version). Raises DocumentNotFound if absent."""
        ...

    def write_if_version(self, name: str, doc: Any, expected_version: str) -> str:
        """Replace the document only if its current version equals `expected_version`.

        Returns the new version. Raises VersionConflict on mismatch (including
        when the document vanished since it was read).
        """
        ...

    def write_unconditional(self, name: str, doc: Any) -> str:
        """Create or replace the document regardless of its current version."""
        ...


def validate_document_name(name: str) -> str:
    if not isinstance(name, str) or not DOCUMENT_NAME_RE.match(name):
        raise InvalidDocumentName(f"Invalid document name: {name!r}")
    return name


def new_version_token(payload: bytes) -> str:
    # Content digest plus a random suffix: rewriting identical bytes still
    # yields a distinct token.
    return f"{hashlib.sha256(payload).hexdigest()[:16]}-{uuid.uuid4().hex}"
