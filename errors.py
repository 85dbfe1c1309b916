from __future__ import annotations


class DocumentError(Exception):
    """
    Base class for every typed failure surfaced by the document service.

    `code` is the stable machine-readable identifier carried in HTTP error
    bodies, `status_code` the HTTP status it maps to. Only conflicts are
    `retriable`; everything else is permanent for the request that caused it.
    """

    code = "DOCUMENT_ERROR"
    status_code = 500
    default_message = "Document operation failed"
    retriable = False

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DocumentNotFound(DocumentError):
    code = "DOCUMENT_NOT_FOUND"
    status_code = 404
    default_message = "Document not found"


class InvalidDocumentName(DocumentError):
    code = "INVALID_DOCUMENT_NAME"
    status_code = 400
    default_message = "Invalid document name"


class InvalidRequest(DocumentError):
    code = "INVALID_REQUEST"
    status_code = 400
    default_message = "Invalid request body"


class InvalidPath(DocumentError):
    code = "INVALID_PATH"
    status_code = 400
    default_message = "Invalid path"


class ItemNotFound(DocumentError):
    code = "ITEM_NOT_FOUND"
    status_code = 404
    default_message = "Item not found"


class VersionConflict(DocumentError):
    code = "CONFLICT"
    status_code = 409
    default_message = "Conflict, please retry"
    retriable = True


class RetriesExhausted(DocumentError):
    """Conflicts persisted past the retry bound. Never fall back to an unconditional write."""

    code = "RETRIES_EXHAUSTED"
    status_code = 409
    default_message = "Max retries exceeded"

    def __init__(self, attempts: int, message: str | None = None) -> None:
        self.attempts = attempts
        super().__init__(message or f"Max retries exceeded after {attempts} attempts")


class UpstreamError(DocumentError):
    code = "UPSTREAM_ERROR"
    status_code = 500
    default_message = "Storage backend failure"


ERRORS_BY_CODE: dict[str, type[DocumentError]] = {
    cls.code: cls
    for cls in (
        DocumentNotFound,
        InvalidDocumentName,
        InvalidRequest,
        InvalidPath,
        ItemNotFound,
        VersionConflict,
        UpstreamError,
    )
}
