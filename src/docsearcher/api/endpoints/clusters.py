"""Cluster endpoints — Engine node listing and administration."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from docsearcher.api.deps import get_client
from docsearcher.api.responses import ERROR_RESPONSES, render
from docsearcher.backends.base.client import ServiceClient
from docsearcher.models.cluster import Cluster, ClusterForm
from docsearcher.models.response import Acknowledgement

router = APIRouter(prefix="/cluster", tags=["clusters"])


@router.get("/all", response_model=list[Cluster], responses=ERROR_RESPONSES, summary="List Clusters")
async def all_clusters(client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.get_all_clusters())


@router.post("/new", response_model=Acknowledgement, responses=ERROR_RESPONSES, summary="Create Cluster")
async def new_cluster(form: ClusterForm, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.create_cluster(form.cluster_id))


@router.get("/{cluster_id}", response_model=Cluster, responses=ERROR_RESPONSES, summary="Get Cluster")
async def get_cluster(cluster_id: str, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.get_cluster(cluster_id))


@router.delete("/{cluster_id}", response_model=Acknowledgement, responses=ERROR_RESPONSES, summary="Delete Cluster")
async def delete_cluster(cluster_id: str, client: ServiceClient = Depends(get_client)) -> JSONResponse:
    return render(await client.delete_cluster(cluster_id))
