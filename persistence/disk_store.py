from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from errors import DocumentNotFound, UpstreamError, VersionConflict
from json_store import atomic_write_bytes, decode_document, encode_document

from .interfaces import VersionedDocumentStore, new_version_token, validate_document_name
from .locks import document_lock
from .paths import ensure_dir

logger = logging.getLogger(__name__)


class DiskDocumentStore(VersionedDocumentStore):
    """
    Stores each named document on disk under a root directory:

    - <root>/<name>.json     the document bytes
    - <root>/<name>.version  the current version token
    - <root>/<name>.lock     advisory lock file for the compare-and-swap section

    The version file is written before the document, so a crash between the
    two steps can only invalidate tokens held by other writers, never let a
    stale token succeed.
    """

    def __init__(self, root: Path):
        self._root = ensure_dir(root)

    @property
    def root(self) -> Path:
        return self._root

    def _document_path(self, name: str) -> Path:
        return self._root / f"{validate_document_name(name)}.json"

    def _version_path(self, name: str) -> Path:
        return self._root / f"{name}.version"

    def _lock_path(self, name: str) -> Path:
        return self._root / f"{name}.lock"

    def _current_version(self, name: str, raw: bytes) -> str:
        vpath = self._version_path(name)
        if vpath.exists():
            version = vpath.read_text(encoding="utf-8").strip()
            if version:
                return version
        # Document placed without a version file (e.g. copied in by hand).
        version = new_version_token(raw)
        atomic_write_bytes(vpath, version.encode("utf-8"))
        return version

    def read_with_version(self, name: str) -> tuple[Any, str]:
        path = self._document_path(name)
        with document_lock(path, self._lock_path(name)):
            try:
                raw = path.read_bytes()
                version = self._current_version(name, raw)
            except FileNotFoundError as e:
                raise DocumentNotFound(f"Document {name!r} not found") from e
            except OSError as e:
                logger.error("DISK STORE READ: failed to read %s: %r", path, e)
                raise UpstreamError(f"Failed to read document {name!r}") from e
        try:
            return decode_document(raw), version
        except ValueError as e:
            raise UpstreamError(f"Stored document {name!r} is not valid JSON") from e

    def write_if_version(self, name: str, doc: Any, expected_version: str) -> str:
        path = self._document_path(name)
        payload = encode_document(doc)
        with document_lock(path, self._lock_path(name)):
            try:
                if not path.exists():
                    raise VersionConflict(f"Document {name!r} no longer exists")
                current = self._current_version(name, path.read_bytes())
                if current != expected_version:
                    logger.info(
                        "DISK STORE CAS: version mismatch on %s (expected %s, current %s)",
                        name,
                        expected_version,
                        current,
                    )
                    raise VersionConflict()
                return self._write(name, path, payload)
            except OSError as e:
                logger.error("DISK STORE WRITE: failed to write %s: %r", path, e)
                raise UpstreamError(f"Failed to write document {name!r}") from e

    def write_unconditional(self, name: str, doc: Any) -> str:
        path = self._document_path(name)
        payload = encode_document(doc)
        with document_lock(path, self._lock_path(name)):
            try:
                return self._write(name, path, payload)
            except OSError as e:
                logger.error("DISK STORE WRITE: failed to write %s: %r", path, e)
                raise UpstreamError(f"Failed to write document {name!r}") from e

    def _write(self, name: str, path: Path, payload: bytes) -> str:
        version = new_version_token(payload)
        atomic_write_bytes(self._version_path(name), version.encode("utf-8"))
        atomic_write_bytes(path, payload)
        return version
