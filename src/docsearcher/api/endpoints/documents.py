"""Document endpoints — Create, read, replace and delete single documents."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from docsearcher.api.deps import get_client
from docsearcher.api.responses import ERROR_RESPONSES, render
from docsearcher.backends.base.client import ServiceClient
from docsearcher.models.document import Document
from docsearcher.models.response import Acknowledgement

router = APIRouter(prefix="/document", tags=["documents"])


@router.post(
    "/new",
    response_model=Acknowledgement,
    responses=ERROR_RESPONSES,
    summary="Create Document",
    description="Store a document. An existing document with the same bucket and hash is overwritten.",
)
async def new_document(doc: Document, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.create_document(doc))


@router.put(
    "/update",
    response_model=Acknowledgement,
    responses=ERROR_RESPONSES,
    summary="Update Document",
    description="Replace every field of an existing document. Returns 404 when the document does not exist.",
)
async def update_document(doc: Document, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.update_document(doc))


@router.get(
    "/{bucket_id}/{document_id}",
    response_model=Document,
    responses=ERROR_RESPONSES,
    summary="Get Document",
)
async def get_document(bucket_id: str, document_id: str, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.get_document(bucket_id, document_id))


@router.delete(
    "/{bucket_id}/{document_id}",
    response_model=Acknowledgement,
    responses=ERROR_RESPONSES,
    summary="Delete Document",
    description="Delete a document. Deleting a document that does not exist succeeds.",
)
async def delete_document(
    bucket_id: str,
    document_id: str,
    client: ServiceClient = Depends(get_client),
) -> JSONResponse:
    return render(await client.delete_document(bucket_id, document_id))
