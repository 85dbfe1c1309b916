from __future__ import annotations

import logging
from typing import Any

import httpx

from errors import (
    ERRORS_BY_CODE,
    DocumentError,
    DocumentNotFound,
    InvalidRequest,
    UpstreamError,
    VersionConflict,
)

from .retry import DEFAULT_MAX_RETRIES, ConflictRetryClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_PATH = "/api/documents"


def error_from_response(response: httpx.Response) -> DocumentError:
    """Map an HTTP error response back onto the typed error taxonomy."""
    message = f"Server error ({response.status_code})"
    code = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        if isinstance(body.get("error"), str):
            message = body["error"]
        code = body.get("code")

    cls = ERRORS_BY_CODE.get(code) if isinstance(code, str) else None
    if cls is None:
        if response.status_code == 404:
            cls = DocumentNotFound
        elif response.status_code == 409:
            cls = VersionConflict
        elif response.status_code == 400:
            cls = InvalidRequest
        else:
            cls = UpstreamError
    return cls(message)


class DocumentClient:
    """
    Client API for one named document, used by UI and business logic.

    The three mutation methods go through the ConflictRetryClient: a 409
    re-sends the whole request (the server re-reads the document each time),
    anything else fails immediately. Every mutation returns the full
    post-mutation document so callers can resync local state.

    The httpx.AsyncClient is owned by the caller (base_url set there).
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        name: str,
        *,
        base_path: str = DEFAULT_BASE_PATH,
        retry: ConflictRetryClient | None = None,
    ) -> None:
        self._http = http
        self.name = name
        self._url = f"{base_path.rstrip('/')}/{name}"
        self._retry = retry or ConflictRetryClient()

    @property
    def url(self) -> str:
        return self._url

    async def _send(self, method: str, json: Any = None, *, with_body: bool = False) -> Any:
        kwargs: dict[str, Any] = {}
        if with_body:
            kwargs["json"] = json
        try:
            response = await self._http.request(method, self._url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("DOCUMENT CLIENT: %s %s failed: %r", method, self._url, e)
            raise UpstreamError(f"{method} {self._url} failed: {e}") from e
        if response.status_code >= 300:
            raise error_from_response(response)
        return response.json()

    async def fetch_document(self) -> Any:
        return await self._send("GET")

    async def create_document(self, document: Any) -> None:
        """Unconditional PUT. Use to create a document, never to resolve conflicts."""
        await self._send("PUT", document, with_body=True)

    async def fetch_or_create(self, default: Any) -> Any:
        try:
            return await self.fetch_document()
        except DocumentNotFound:
            logger.info("DOCUMENT CLIENT: %s not found, creating it", self.name)
            await self.create_document(default)
            return default

    async def _mutate(self, method: str, body: dict[str, Any], max_retries: int) -> Any:
        async def call() -> Any:
            result = await self._send(method, body, with_body=True)
            return result.get("data") if isinstance(result, dict) else None

        return await self._retry.perform(call, max_retries)

    async def append_item(self, path: str, value: Any, max_retries: int = DEFAULT_MAX_RETRIES) -> Any:
        return await self._mutate("POST", {"path": path, "value": value}, max_retries)

    async def delete_item(self, path: str, item_id: str | int, max_retries: int = DEFAULT_MAX_RETRIES) -> Any:
        return await self._mutate("DELETE", {"path": path, "id": item_id}, max_retries)

    async def patch_item(self, path: str, value: Any, max_retries: int = DEFAULT_MAX_RETRIES) -> Any:
        return await self._mutate("PATCH", {"path": path, "value": value}, max_retries)
