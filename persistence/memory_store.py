from __future__ import annotations

import logging
import threading
from typing import Any

from errors import DocumentNotFound, UpstreamError, VersionConflict
from json_store import decode_document, encode_document

from .interfaces import VersionedDocumentStore, new_version_token, validate_document_name

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(VersionedDocumentStore):
    """
    Process-local store. Documents are kept as encoded bytes so every read
    hands out a fresh, independent copy.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._blobs: dict[str, tuple[bytes, str]] = {}

    def read_with_version(self, name: str) -> tuple[Any, str]:
        validate_document_name(name)
        with self._guard:
            entry = self._blobs.get(name)
        if entry is None:
            raise DocumentNotFound(f"Document {name!r} not found")
        raw, version = entry
        try:
            return decode_document(raw), version
        except ValueError as e:
            raise UpstreamError(f"Stored document {name!r} is not valid JSON") from e

    def write_if_version(self, name: str, doc: Any, expected_version: str) -> str:
        validate_document_name(name)
        payload = encode_document(doc)
        with self._guard:
            entry = self._blobs.get(name)
            current = entry[1] if entry is not None else None
            if current != expected_version:
                logger.info(
                    "MEMORY STORE CAS: version mismatch on %s (expected %s, current %s)",
                    name,
                    expected_version,
                    current,
                )
                raise VersionConflict()
            version = new_version_token(payload)
            self._blobs[name] = (payload, version)
            return version

    def write_unconditional(self, name: str, doc: Any) -> str:
        validate_document_name(name)
        payload = encode_document(doc)
        version = new_version_token(payload)
        with self._guard:
            self._blobs[name] = (payload, version)
        return version
