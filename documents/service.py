from __future__ import annotations

import asyncio
from typing import Any

from .mutations import DocumentOperations


class AsyncDocumentOperations:
    """
    Async wrapper around DocumentOperations.
    Uses asyncio.to_thread to avoid blocking the event loop on storage I/O.
    """

    def __init__(self, operations: DocumentOperations) -> None:
        self._ops = operations

    async def fetch(self, name: str) -> Any:
        return await asyncio.to_thread(self._ops.fetch, name)

    async def replace(self, name: str, doc: Any) -> str:
        return await asyncio.to_thread(self._ops.replace, name, doc)

    async def append(self, name: str, path: str, value: Any) -> Any:
        return await asyncio.to_thread(self._ops.append, name, path, value)

    async def remove_by_id(self, name: str, path: str, item_id: str | int) -> Any:
        return await asyncio.to_thread(self._ops.remove_by_id, name, path, item_id)

    async def patch_field(self, name: str, path: str, value: Any) -> Any:
        return await asyncio.to_thread(self._ops.patch_field, name, path, value)
