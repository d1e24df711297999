"""Base service client — The contract every backend implements.

The HTTP layer talks exclusively to ``ServiceClient``. A backend is
responsible for:
  1. Cluster, bucket and document CRUD against its engine
  2. Full-text and fuzzy-hash similarity search
  3. Mapping native results to the canonical Document/Bucket/Cluster models
  4. Classifying failures into the shared ``ErrorKind`` taxonomy
  5. Reporting health status

Every operation returns an ``Outcome``: a ``Success`` with the payload or a
``Failure``, never both. Backends are selected once at startup and hold no
per-request state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from docsearcher.core.similarity import is_valid_digest
from docsearcher.models.bucket import Bucket, BucketForm
from docsearcher.models.cluster import Cluster
from docsearcher.models.document import Document, DocumentCount
from docsearcher.models.query import SearchParameters
from docsearcher.models.response import Acknowledgement, Failure, Outcome, invalid


class BackendHealth(BaseModel):
    """Health status of a backend."""

    status: str = Field(description="Health status: healthy, degraded, unhealthy")
    latency_ms: int = Field(default=0, description="Latency of the health check in ms")
    last_check: str | None = Field(default=None, description="ISO timestamp of the health check")
    message: str | None = Field(default=None, description="Additional health message")


class ServiceClient(ABC):
    """Abstract base class for search backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique backend name (e.g., 'elasticsearch', 'null')."""

    async def initialize(self) -> None:
        """Open connections. Called once during application startup."""

    async def shutdown(self) -> None:
        """Release connections. Called once during application shutdown."""

    @abstractmethod
    async def health_check(self) -> BackendHealth:
        """Report the health of the backend."""

    # ── Clusters ─────────────────────────────────────────────────────────

    @abstractmethod
    async def get_all_clusters(self) -> Outcome[list[Cluster]]:
        """List every node the engine reports."""

    @abstractmethod
    async def get_cluster(self, cluster_id: str) -> Outcome[Cluster]:
        """Fetch one node, or NotFound."""

    @abstractmethod
    async def create_cluster(self, cluster_id: str) -> Outcome[Acknowledgement]:
        """Admit a node to the engine's voting configuration."""

    @abstractmethod
    async def delete_cluster(self, cluster_id: str) -> Outcome[Acknowledgement]:
        """Exclude a node from the engine's voting configuration."""

    # ── Buckets ──────────────────────────────────────────────────────────

    @abstractmethod
    async def get_all_buckets(self) -> Outcome[list[Bucket]]:
        """List every bucket."""

    @abstractmethod
    async def get_bucket(self, bucket_id: str) -> Outcome[Bucket]:
        """Fetch one bucket, or NotFound."""

    @abstractmethod
    async def create_bucket(self, form: BucketForm) -> Outcome[Acknowledgement]:
        """Create an empty bucket."""

    @abstractmethod
    async def delete_bucket(self, bucket_id: str) -> Outcome[Acknowledgement]:
        """Delete a bucket and every document in it."""

    @abstractmethod
    async def count_documents(self, bucket_id: str, params: SearchParameters) -> Outcome[DocumentCount]:
        """Count the documents in a bucket that match *params*."""

    # ── Documents ────────────────────────────────────────────────────────

    @abstractmethod
    async def get_document(self, bucket_id: str, document_id: str) -> Outcome[Document]:
        """Fetch one document by its natural key, or NotFound."""

    @abstractmethod
    async def create_document(self, doc: Document) -> Outcome[Acknowledgement]:
        """Store a document, overwriting any document with the same key."""

    @abstractmethod
    async def update_document(self, doc: Document) -> Outcome[Acknowledgement]:
        """Replace an existing document.

        Returns NotFound when no document has the same key.
        """

    @abstractmethod
    async def delete_document(self, bucket_id: str, document_id: str) -> Outcome[Acknowledgement]:
        """Delete a document. Deleting a missing document succeeds."""

    # ── Search ───────────────────────────────────────────────────────────

    @abstractmethod
    async def search_from_all(self, params: SearchParameters) -> Outcome[list[Document]]:
        """Full-text search across all buckets, ranked by relevance."""

    @abstractmethod
    async def search_from_target(self, bucket_id: str, params: SearchParameters) -> Outcome[list[Document]]:
        """Full-text search within one bucket, ranked by relevance."""

    @abstractmethod
    async def similar_from_all(self, params: SearchParameters) -> Outcome[list[Document]]:
        """Fuzzy-hash search across all buckets, ranked by similarity."""

    @abstractmethod
    async def similar_from_target(self, bucket_id: str, params: SearchParameters) -> Outcome[list[Document]]:
        """Fuzzy-hash search within one bucket, ranked by similarity."""

    # ── Shared validation ────────────────────────────────────────────────

    @staticmethod
    def check_similarity_params(params: SearchParameters) -> Failure | None:
        """Reject a similarity request whose query is not an ssdeep digest."""
        if not is_valid_digest(params.query):
            return invalid(f"Query '{params.query}' is not a valid ssdeep digest.")
        return None
