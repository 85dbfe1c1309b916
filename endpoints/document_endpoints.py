"""
HTTP routes for one named JSON document at /api/documents/{name}.

There is no container segment in the URL. Deployments that used to address
documents as /{container}/{name} fold the container into the document name
(for example "session-2024" instead of "session/2024"); where documents are
stored is chosen once, through Settings, not per request.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from documents.models import MutationResponse, PathValueRequest, RemoveByIdRequest, parse_body
from documents.service import AsyncDocumentOperations
from errors import InvalidRequest
from persistence.interfaces import validate_document_name

router = APIRouter(prefix="/api/documents", tags=["documents"])
logger = logging.getLogger(__name__)


def get_operations(request: Request) -> AsyncDocumentOperations:
    return request.app.state.documents


async def _json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        raise InvalidRequest("Missing request body")
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidRequest("Request body is not valid JSON") from e


def _mutation_response(doc: Any) -> JSONResponse:
    # Always the entire document, so the caller can resync without a second GET.
    return JSONResponse(MutationResponse(data=doc).model_dump(mode="json"))


@router.get("/{name}")
async def get_document(name: str, ops: AsyncDocumentOperations = Depends(get_operations)):
    validate_document_name(name)
    return JSONResponse(await ops.fetch(name))


@router.put("/{name}")
async def put_document(name: str, request: Request, ops: AsyncDocumentOperations = Depends(get_operations)):
    validate_document_name(name)
    doc = await _json_body(request)
    await ops.replace(name, doc)
    logger.info("DOCUMENT %s: replaced unconditionally", name)
    return JSONResponse({"success": True})


@router.post("/{name}")
async def append_item(name: str, request: Request, ops: AsyncDocumentOperations = Depends(get_operations)):
    validate_document_name(name)
    path, value = parse_body(PathValueRequest, await _json_body(request)).require()
    return _mutation_response(await ops.append(name, path, value))


@router.patch("/{name}")
async def patch_field(name: str, request: Request, ops: AsyncDocumentOperations = Depends(get_operations)):
    validate_document_name(name)
    path, value = parse_body(PathValueRequest, await _json_body(request)).require()
    return _mutation_response(await ops.patch_field(name, path, value))


@router.delete("/{name}")
async def remove_item(name: str, request: Request, ops: AsyncDocumentOperations = Depends(get_operations)):
    validate_document_name(name)
    path, item_id = parse_body(RemoveByIdRequest, await _json_body(request)).require()
    return _mutation_response(await ops.remove_by_id(name, path, item_id))
