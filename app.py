from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from errors import DocumentError, UpstreamError
from persistence.interfaces import VersionedDocumentStore
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


async def handle_document_error(request: Request, exc: DocumentError) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error("DOCUMENT ERROR: %s %s -> %s", request.method, request.url.path, exc.message, exc_info=exc)
    elif exc.retriable:
        logger.info("DOCUMENT CONFLICT: %s %s", request.method, request.url.path)
    return JSONResponse({"error": exc.message, "code": exc.code}, status_code=exc.status_code)


def create_app(settings: Settings | None = None, store: VersionedDocumentStore | None = None) -> FastAPI:
    load_dotenv("local.env")

    from documents.mutations import DocumentOperations
    from documents.service import AsyncDocumentOperations
    from endpoints.document_endpoints import router as documents_router
    from persistence.factory import build_document_store

    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    if store is None:
        store = build_document_store(settings)

    app = FastAPI(title="Document mutation service")
    app.state.settings = settings
    app.state.documents = AsyncDocumentOperations(DocumentOperations(store))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_credentials=False,
        allow_methods=["GET", "PUT", "POST", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.add_exception_handler(DocumentError, handle_document_error)

    if settings.debug_log_requests:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.monotonic()
            response = await call_next(request)
            logger.info(
                "REQUEST %s %s -> %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                (time.monotonic() - started) * 1000,
            )
            return response

    @app.get("/healthz")
    async def healthz():
        return JSONResponse({"ok": True})

    app.include_router(documents_router)

    return app


app = create_app()
