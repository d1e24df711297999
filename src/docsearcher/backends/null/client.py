"""No-op backend — Serves the full contract without a search engine.

Reads return empty lists or a default-valued entity echoing the requested
identifier; writes are acknowledged unconditionally. Useful to run the
HTTP layer end to end without a live engine.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from docsearcher.backends.base.client import BackendHealth, ServiceClient
from docsearcher.models.bucket import Bucket, BucketForm
from docsearcher.models.cluster import Cluster
from docsearcher.models.document import Document, DocumentCount
from docsearcher.models.query import SearchParameters
from docsearcher.models.response import Acknowledgement, Outcome, acknowledged, ok


class NullServiceClient(ServiceClient):
    """Backend that delegates nowhere."""

    def __init__(self, **kwargs: Any) -> None:
        self._extra_kwargs = kwargs

    @property
    def name(self) -> str:
        return "null"

    async def health_check(self) -> BackendHealth:
        return BackendHealth(
            status="healthy",
            last_check=datetime.now(UTC).isoformat(),
            message="No search engine attached",
        )

    async def get_all_clusters(self) -> Outcome[list[Cluster]]:
        return ok([])

    async def get_cluster(self, cluster_id: str) -> Outcome[Cluster]:
        return ok(Cluster(cluster_id=cluster_id))

    async def create_cluster(self, cluster_id: str) -> Outcome[Acknowledgement]:
        return acknowledged()

    async def delete_cluster(self, cluster_id: str) -> Outcome[Acknowledgement]:
        return acknowledged()

    async def get_all_buckets(self) -> Outcome[list[Bucket]]:
        return ok([])

    async def get_bucket(self, bucket_id: str) -> Outcome[Bucket]:
        return ok(Bucket(bucket_id=bucket_id))

    async def create_bucket(self, form: BucketForm) -> Outcome[Acknowledgement]:
        return acknowledged()

    async def delete_bucket(self, bucket_id: str) -> Outcome[Acknowledgement]:
        return acknowledged()

    async def count_documents(self, bucket_id: str, params: SearchParameters) -> Outcome[DocumentCount]:
        return ok(DocumentCount(bucket_id=bucket_id, count=0))

    async def get_document(self, bucket_id: str, document_id: str) -> Outcome[Document]:
        return ok(Document(bucket_uuid=bucket_id, document_md5_hash=document_id))

    async def create_document(self, doc: Document) -> Outcome[Acknowledgement]:
        return acknowledged()

    async def update_document(self, doc: Document) -> Outcome[Acknowledgement]:
        return acknowledged()

    async def delete_document(self, bucket_id: str, document_id: str) -> Outcome[Acknowledgement]:
        return acknowledged()

    async def search_from_all(self, params: SearchParameters) -> Outcome[list[Document]]:
        return ok([])

    async def search_from_target(self, bucket_id: str, params: SearchParameters) -> Outcome[list[Document]]:
        return ok([])

    async def similar_from_all(self, params: SearchParameters) -> Outcome[list[Document]]:
        return self.check_similarity_params(params) or ok([])

    async def similar_from_target(self, bucket_id: str, params: SearchParameters) -> Outcome[list[Document]]:
        return self.check_similarity_params(params) or ok([])
