from __future__ import annotations

from .disk_store import DiskDocumentStore
from .factory import build_document_store
from .interfaces import VersionedDocumentStore, validate_document_name
from .memory_store import InMemoryDocumentStore

__all__ = [
    "VersionedDocumentStore",
    "DiskDocumentStore",
    "InMemoryDocumentStore",
    "build_document_store",
    "validate_document_name",
]
