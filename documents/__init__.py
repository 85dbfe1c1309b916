from __future__ import annotations

from .client import DocumentClient
from .mutations import DocumentOperations
from .path_resolver import UNRESOLVED, resolve
from .retry import ConflictRetryClient, RetryOutcome, RetryState
from .service import AsyncDocumentOperations

__all__ = [
    "DocumentOperations",
    "AsyncDocumentOperations",
    "ConflictRetryClient",
    "RetryOutcome",
    "RetryState",
    "DocumentClient",
    "UNRESOLVED",
    "resolve",
]
