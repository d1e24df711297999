"""Search endpoints — Full-text and fuzzy-hash similarity search.

Full-text search ranks by engine relevance over the document body and
path. Similarity search expects an ssdeep digest in ``query`` and ranks
by digest similarity (0-100), best match first.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from docsearcher.api.deps import get_client
from docsearcher.api.responses import ERROR_RESPONSES, render
from docsearcher.backends.base.client import ServiceClient
from docsearcher.models.document import Document
from docsearcher.models.query import SearchParameters

router = APIRouter(tags=["search"])


@router.post(
    "/search/all",
    response_model=list[Document],
    responses=ERROR_RESPONSES,
    summary="Search All Buckets",
)
async def search_all(params: SearchParameters, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.search_from_all(params))


@router.post(
    "/search/{bucket_id}",
    response_model=list[Document],
    responses=ERROR_RESPONSES,
    summary="Search Bucket",
)
async def search_target(
    bucket_id: str,
    params: SearchParameters,
    client: ServiceClient = Depends(get_client),
) -> JSONResponse:
    return render(await client.search_from_target(bucket_id, params))


@router.post(
    "/similar/all",
    response_model=list[Document],
    responses=ERROR_RESPONSES,
    summary="Similar Documents In All Buckets",
    description="Rank documents by ssdeep similarity to the digest given as `query`.",
)
async def similar_all(params: SearchParameters, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.similar_from_all(params))


@router.post(
    "/similar/{bucket_id}",
    response_model=list[Document],
    responses=ERROR_RESPONSES,
    summary="Similar Documents In Bucket",
    description="Rank documents of one bucket by ssdeep similarity to the digest given as `query`.",
)
async def similar_target(
    bucket_id: str,
    params: SearchParameters,
    client: ServiceClient = Depends(get_client),
) -> JSONResponse:
    return render(await client.similar_from_target(bucket_id, params))
