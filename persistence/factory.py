from __future__ import annotations

import logging
from pathlib import Path

from settings import Settings

from .disk_store import DiskDocumentStore
from .interfaces import VersionedDocumentStore
from .memory_store import InMemoryDocumentStore
from . import paths

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("memory", "disk")


def build_document_store(settings: Settings) -> VersionedDocumentStore:
    """
    Construct the configured backend once at startup. Request handlers only
    ever see the returned store, never the environment.
    """
    backend = settings.storage_backend
    if backend == "memory":
        logger.info("DOCUMENT STORE: using in-memory backend")
        return InMemoryDocumentStore()
    if backend == "disk":
        root = Path(settings.data_dir) if settings.data_dir else paths.documents_dir(paths.data_dir())
        logger.info("DOCUMENT STORE: using disk backend at %s", root)
        return DiskDocumentStore(root)
    raise ValueError(f"Unknown STORAGE_BACKEND {backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}")
