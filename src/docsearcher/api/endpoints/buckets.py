"""Bucket endpoints — Document collection management."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from docsearcher.api.deps import get_client, get_settings
from docsearcher.api.responses import ERROR_RESPONSES, render
from docsearcher.backends.base.client import ServiceClient
from docsearcher.config.settings import Settings
from docsearcher.models.bucket import Bucket, BucketForm
from docsearcher.models.document import DocumentCount
from docsearcher.models.query import SearchParameters
from docsearcher.models.response import Acknowledgement

router = APIRouter(prefix="/bucket", tags=["buckets"])


@router.get("/all", response_model=list[Bucket], responses=ERROR_RESPONSES, summary="List Buckets")
async def all_buckets(client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.get_all_buckets())


@router.post("/new", response_model=Acknowledgement, responses=ERROR_RESPONSES, summary="Create Bucket")
async def new_bucket(form: BucketForm, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.create_bucket(form))


@router.post(
    "/default",
    response_model=Acknowledgement,
    responses=ERROR_RESPONSES,
    summary="Create Default Bucket",
    description="Create the bucket configured as `backend.default_bucket`.",
)
async def default_bucket(
    client: ServiceClient = Depends(get_client),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    form = BucketForm(bucket_name=settings.backend.default_bucket)
    return render(await client.create_bucket(form))


@router.get("/{bucket_id}", response_model=Bucket, responses=ERROR_RESPONSES, summary="Get Bucket")
async def get_bucket(bucket_id: str, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.get_bucket(bucket_id))


@router.post(
    "/{bucket_id}/count",
    response_model=DocumentCount,
    responses=ERROR_RESPONSES,
    summary="Count Documents",
    description="Count the documents in a bucket matching the optional search parameters.",
)
async def count_documents(
    bucket_id: str,
    params: SearchParameters | None = None,
    client: ServiceClient = Depends(get_client),
) -> JSONResponse:
    return render(await client.count_documents(bucket_id, params or SearchParameters()))


@router.delete("/{bucket_id}", response_model=Acknowledgement, responses=ERROR_RESPONSES, summary="Delete Bucket")
async def delete_bucket(bucket_id: str, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.delete_bucket(bucket_id))
