"""Searcher router — Cluster, bucket, document, search and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from docsearcher.api.endpoints.buckets import router as buckets_router
from docsearcher.api.endpoints.clusters import router as clusters_router
from docsearcher.api.endpoints.documents import router as documents_router
from docsearcher.api.endpoints.health import router as health_router
from docsearcher.api.endpoints.search import router as search_router

router = APIRouter()
router.include_router(health_router)
router.include_router(clusters_router)
router.include_router(buckets_router)
router.include_router(documents_router)
router.include_router(search_router)
