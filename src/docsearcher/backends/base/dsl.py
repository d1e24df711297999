"""Shared backend for engines speaking the Elasticsearch query DSL.

Elasticsearch and OpenSearch expose the same resources (indices, documents,
``_cat`` tables, voting-config exclusions) and the same query DSL, but their
client libraries differ in how request bodies are passed and which
exception classes they raise. ``DslServiceClient`` implements every
``ServiceClient`` operation once; subclasses provide the client
construction, the body-carrying requests and error classification.

Mapping rules:
  - bucket = index, document id = ``document_md5_hash``
  - ``_source`` fields are copied field by field into ``Document``;
    unknown native fields are dropped and missing ones defaulted
  - ``_index`` / ``_id`` back-fill the document key when the source lacks it
"""

from __future__ import annotations

import logging
import time
from abc import abstractmethod
from datetime import UTC, datetime
from typing import Any

from docsearcher.backends.base.client import BackendHealth, ServiceClient
from docsearcher.backends.base.exceptions import BackendUnavailableError
from docsearcher.core.query_builder import similarity_query, text_query
from docsearcher.core.similarity import rank_by_similarity
from docsearcher.models.bucket import Bucket, BucketForm
from docsearcher.models.cluster import Cluster
from docsearcher.models.document import Document, DocumentCount
from docsearcher.models.query import SearchParameters
from docsearcher.models.response import (
    Acknowledgement,
    ErrorKind,
    Failure,
    Outcome,
    acknowledged,
    fail,
    not_found,
    ok,
)

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "docsearcher-documents"
TEMPLATE_PRIORITY = 10

DOCUMENT_MAPPINGS: dict[str, Any] = {
    "properties": {
        "bucket_uuid": {"type": "keyword"},
        "bucket_path": {"type": "keyword"},
        "document_name": {"type": "text"},
        "document_path": {"type": "text"},
        "document_size": {"type": "long"},
        "document_type": {"type": "keyword"},
        "document_extension": {"type": "keyword"},
        "document_permissions": {"type": "integer"},
        "document_created": {"type": "date"},
        "document_modified": {"type": "date"},
        "document_md5_hash": {"type": "keyword"},
        "document_ssdeep_hash": {"type": "keyword"},
        "entity_data": {"type": "text"},
        "entity_keywords": {"type": "keyword"},
    }
}


def _body(response: Any) -> Any:
    """Unwrap a client response object to its JSON body."""
    return getattr(response, "body", response)


def _number(value: Any) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _integer(value: Any) -> int | None:
    number = _number(value)
    return int(number) if number is not None else None


def _error_text(exc: Exception) -> str:
    """Render an engine client exception with the native message it carries."""
    text = str(exc)
    message = getattr(exc, "message", None)
    if message and str(message) not in text:
        text = f"{text}: {message}"
    errors = getattr(exc, "errors", None)
    if errors:
        text = f"{text} (" + "; ".join(str(error) for error in errors) + ")"
    return text


class DslServiceClient(ServiceClient):
    """Base class for Elasticsearch-compatible backends.

    Args:
        hosts: Engine node URLs.
        username: Optional HTTP basic-auth username.
        password: Optional HTTP basic-auth password.
        verify_certs: Whether to verify TLS certificates.
        index_pattern: Index pattern searched by the "all" operations.
        default_bucket: Name of the bucket flagged as default.
        refresh: Refresh policy forwarded to write requests
            (``False``, ``True`` or ``"wait_for"``).
        request_timeout: Engine request timeout in seconds.
        similarity_candidates: Maximum number of candidates scored per
            similarity search.
        **kwargs: Additional keyword arguments forwarded to the engine client.
    """

    def __init__(
        self,
        hosts: list[str] | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_certs: bool = True,
        index_pattern: str = "*",
        default_bucket: str = "common_bucket",
        refresh: bool | str = False,
        request_timeout: float = 30.0,
        similarity_candidates: int = 1000,
        **kwargs: Any,
    ) -> None:
        self._hosts = hosts or ["http://localhost:9200"]
        self._username = username
        self._password = password
        self._verify_certs = verify_certs
        self._index_pattern = index_pattern
        self._default_bucket = default_bucket
        self._refresh = refresh
        self._request_timeout = request_timeout
        self._similarity_candidates = similarity_candidates
        self._extra_kwargs = kwargs
        self._client: Any = None

    # ── Engine-specific hooks ────────────────────────────────────────────

    @abstractmethod
    def _build_client(self) -> Any:
        """Construct the async engine client."""

    @abstractmethod
    def _classify_error(self, exc: Exception) -> ErrorKind:
        """Map an engine client exception to an ``ErrorKind``."""

    @abstractmethod
    async def _index(self, index: str, doc_id: str, source: dict[str, Any]) -> Any:
        """Create or overwrite a document."""

    @abstractmethod
    async def _update(self, index: str, doc_id: str, source: dict[str, Any]) -> Any:
        """Update an existing document; the engine rejects missing ones."""

    @abstractmethod
    async def _search(self, index: str, query: dict[str, Any], size: int, offset: int) -> Any:
        """Run a search request."""

    @abstractmethod
    async def _count(self, index: str, query: dict[str, Any]) -> Any:
        """Run a count request."""

    @abstractmethod
    async def _create_index(self, index: str, mappings: dict[str, Any]) -> Any:
        """Create an index with explicit mappings."""

    @abstractmethod
    async def _put_index_template(self, name: str, patterns: list[str], mappings: dict[str, Any]) -> Any:
        """Create or replace an index template applying *mappings* to *patterns*."""

    # ── Lifecycle ────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Create the engine client, verify the connection and install the document template."""
        self._client = self._build_client()
        try:
            info = _body(await self._client.info())
        except Exception as e:
            await self._client.close()
            self._client = None
            raise BackendUnavailableError(f"Failed to connect to {self.name}: {_error_text(e)}") from e

        version = info.get("version", {}).get("number", "unknown")
        cluster = info.get("cluster_name", "unknown")
        logger.info("Connected to %s cluster: %s (v%s)", self.name, cluster, version)
        await self._install_template()

    async def _install_template(self) -> None:
        """Apply ``DOCUMENT_MAPPINGS`` to indices the engine creates on first write.

        Failure is logged and startup continues; buckets made with
        ``create_bucket`` still carry the mappings.
        """
        patterns = [part.strip() for part in self._index_pattern.split(",") if part.strip()]
        try:
            await self._put_index_template(TEMPLATE_NAME, patterns, DOCUMENT_MAPPINGS)
        except Exception as e:
            logger.warning(
                "Could not install index template '%s' on %s: %s", TEMPLATE_NAME, self.name, _error_text(e)
            )
            return
        logger.info("Installed index template '%s' for %s", TEMPLATE_NAME, ", ".join(patterns))

    async def shutdown(self) -> None:
        """Close the engine client."""
        if self._client:
            await self._client.close()
            self._client = None

    async def health_check(self) -> BackendHealth:
        """Check engine cluster health."""
        if not self._client:
            return BackendHealth(status="unhealthy", message="Client not initialized")

        try:
            start = time.monotonic()
            health = _body(await self._client.cluster.health())
            latency_ms = int((time.monotonic() - start) * 1000)
        except Exception as e:
            return BackendHealth(status="unhealthy", message=str(e))

        status_map = {"green": "healthy", "yellow": "degraded", "red": "unhealthy"}
        return BackendHealth(
            status=status_map.get(health.get("status", "red"), "unhealthy"),
            latency_ms=latency_ms,
            last_check=datetime.now(UTC).isoformat(),
            message=f"Cluster: {health.get('cluster_name')}, Nodes: {health.get('number_of_nodes')}",
        )

    # ── Clusters ─────────────────────────────────────────────────────────

    async def get_all_clusters(self) -> Outcome[list[Cluster]]:
        try:
            rows = _body(await self._engine().cat.nodes(format="json"))
            clusters = [self.map_cluster(row) for row in rows]
        except Exception as e:
            return self._failure(e)
        return ok(clusters)

    async def get_cluster(self, cluster_id: str) -> Outcome[Cluster]:
        try:
            rows = _body(await self._engine().cat.nodes(format="json"))
            clusters = [self.map_cluster(row) for row in rows]
        except Exception as e:
            return self._failure(e, f"Cluster '{cluster_id}' not found.")

        for cluster in clusters:
            if cluster.cluster_id == cluster_id:
                return ok(cluster)
        return not_found(f"Cluster '{cluster_id}' not found.")

    async def create_cluster(self, cluster_id: str) -> Outcome[Acknowledgement]:
        try:
            await self._engine().cluster.delete_voting_config_exclusions(wait_for_removal=False)
        except Exception as e:
            return self._failure(e)
        logger.info("Re-admitted node '%s' to the voting configuration", cluster_id)
        return acknowledged()

    async def delete_cluster(self, cluster_id: str) -> Outcome[Acknowledgement]:
        try:
            await self._engine().cluster.post_voting_config_exclusions(node_names=cluster_id)
        except Exception as e:
            return self._failure(e, f"Cluster '{cluster_id}' not found.")
        logger.info("Excluded node '%s' from the voting configuration", cluster_id)
        return acknowledged()

    # ── Buckets ──────────────────────────────────────────────────────────

    async def get_all_buckets(self) -> Outcome[list[Bucket]]:
        try:
            rows = _body(await self._engine().cat.indices(index=self._index_pattern, format="json"))
            buckets = [self.map_bucket(row) for row in rows]
        except Exception as e:
            return self._failure(e)
        return ok(buckets)

    async def get_bucket(self, bucket_id: str) -> Outcome[Bucket]:
        message = f"Bucket '{bucket_id}' not found."
        try:
            rows = _body(await self._engine().cat.indices(index=bucket_id, format="json"))
            buckets = [self.map_bucket(row) for row in rows]
        except Exception as e:
            return self._failure(e, message)

        for bucket in buckets:
            if bucket.bucket_id == bucket_id:
                return ok(bucket)
        return not_found(message)

    async def create_bucket(self, form: BucketForm) -> Outcome[Acknowledgement]:
        try:
            await self._create_index(form.bucket_name, DOCUMENT_MAPPINGS)
        except Exception as e:
            return self._failure(e)
        logger.info("Created bucket '%s'", form.bucket_name)
        return acknowledged()

    async def delete_bucket(self, bucket_id: str) -> Outcome[Acknowledgement]:
        try:
            await self._engine().indices.delete(index=bucket_id)
        except Exception as e:
            return self._failure(e, f"Bucket '{bucket_id}' not found.")
        logger.info("Deleted bucket '%s'", bucket_id)
        return acknowledged()

    async def count_documents(self, bucket_id: str, params: SearchParameters) -> Outcome[DocumentCount]:
        try:
            response = _body(await self._count(bucket_id, text_query(params)))
        except Exception as e:
            return self._failure(e, f"Bucket '{bucket_id}' not found.")
        return ok(DocumentCount(bucket_id=bucket_id, count=int(response.get("count", 0))))

    # ── Documents ────────────────────────────────────────────────────────

    async def get_document(self, bucket_id: str, document_id: str) -> Outcome[Document]:
        message = f"Document '{document_id}' not found in bucket '{bucket_id}'."
        try:
            response = _body(await self._engine().get(index=bucket_id, id=document_id))
            if not response.get("found", True):
                return not_found(message)
            document = self.map_document(response)
        except Exception as e:
            return self._failure(e, message)
        return ok(document)

    async def create_document(self, doc: Document) -> Outcome[Acknowledgement]:
        try:
            await self._index(doc.bucket_uuid, doc.document_id, doc.to_source())
        except Exception as e:
            return self._failure(e)
        return acknowledged()

    async def update_document(self, doc: Document) -> Outcome[Acknowledgement]:
        try:
            await self._update(doc.bucket_uuid, doc.document_id, doc.to_source())
        except Exception as e:
            return self._failure(e, f"Document '{doc.document_id}' not found in bucket '{doc.bucket_uuid}'.")
        return acknowledged()

    async def delete_document(self, bucket_id: str, document_id: str) -> Outcome[Acknowledgement]:
        try:
            await self._engine().delete(index=bucket_id, id=document_id, **self._write_params())
        except Exception as e:
            if self._kind_of(e) is not ErrorKind.NOT_FOUND:
                return self._failure(e)
            logger.debug("Document '%s' already absent from '%s'", document_id, bucket_id)
        return acknowledged()

    # ── Search ───────────────────────────────────────────────────────────

    async def search_from_all(self, params: SearchParameters) -> Outcome[list[Document]]:
        return await self._text_search(self._all_index(params), params)

    async def search_from_target(self, bucket_id: str, params: SearchParameters) -> Outcome[list[Document]]:
        return await self._text_search(bucket_id, params)

    async def similar_from_all(self, params: SearchParameters) -> Outcome[list[Document]]:
        return await self._similar_search(self._all_index(params), params)

    async def similar_from_target(self, bucket_id: str, params: SearchParameters) -> Outcome[list[Document]]:
        return await self._similar_search(bucket_id, params)

    async def _text_search(self, index: str, params: SearchParameters) -> Outcome[list[Document]]:
        try:
            response = _body(
                await self._search(index, text_query(params), params.result_size, params.result_offset)
            )
            documents = self._documents_from_hits(response)
        except Exception as e:
            return self._failure(e, f"Bucket '{index}' not found.")
        return ok(documents)

    async def _similar_search(self, index: str, params: SearchParameters) -> Outcome[list[Document]]:
        invalid = self.check_similarity_params(params)
        if invalid is not None:
            return invalid

        try:
            response = _body(await self._search(index, similarity_query(params), self._similarity_candidates, 0))
            candidates = self._documents_from_hits(response)
        except Exception as e:
            return self._failure(e, f"Bucket '{index}' not found.")

        total = response.get("hits", {}).get("total")
        if isinstance(total, dict):
            total = total.get("value")
        if isinstance(total, int) and total > self._similarity_candidates:
            logger.warning(
                "Similarity search on '%s' matched %d candidates; only the first %d were scored",
                index,
                total,
                self._similarity_candidates,
            )

        ranked = rank_by_similarity(params.query, candidates, params.min_similarity)
        window = ranked[params.result_offset : params.result_offset + params.result_size]
        return ok([doc for doc, _ in window])

    # ── Schema mapping ───────────────────────────────────────────────────

    def map_document(self, raw_result: dict[str, Any]) -> Document:
        """Map an engine hit or GET response to ``Document``."""
        source = raw_result.get("_source") or {}
        data = {
            field: source[field]
            for field in Document.model_fields
            if source.get(field) is not None
        }
        data.setdefault("bucket_uuid", raw_result.get("_index", ""))
        data.setdefault("document_md5_hash", raw_result.get("_id", ""))
        return Document.model_validate(data)

    def map_bucket(self, row: dict[str, Any]) -> Bucket:
        """Map a ``_cat/indices`` row to ``Bucket``."""
        index = row.get("index", "")
        return Bucket(
            bucket_id=index,
            bucket_uuid=row.get("uuid", ""),
            bucket_path=f"/{index}",
            is_default=index == self._default_bucket,
            health=row.get("health") or "",
            status=row.get("status") or "",
            docs_count=_integer(row.get("docs.count")),
            docs_deleted=_integer(row.get("docs.deleted")),
            store_size=row.get("store.size"),
            pri_store_size=row.get("pri.store.size"),
        )

    def map_cluster(self, row: dict[str, Any]) -> Cluster:
        """Map a ``_cat/nodes`` row to ``Cluster``."""
        return Cluster(
            cluster_id=row.get("name", ""),
            ip=row.get("ip"),
            heap_percent=_integer(row.get("heap.percent")),
            ram_percent=_integer(row.get("ram.percent")),
            cpu=_integer(row.get("cpu")),
            load_1m=_number(row.get("load_1m")),
            load_5m=_number(row.get("load_5m")),
            load_15m=_number(row.get("load_15m")),
            node_role=row.get("node.role") or "",
            master=row.get("master") or "",
        )

    # ── Helpers ──────────────────────────────────────────────────────────

    def _engine(self) -> Any:
        if not self._client:
            raise BackendUnavailableError(f"{self.name} client not initialized.")
        return self._client

    def _write_params(self) -> dict[str, Any]:
        return {"refresh": self._refresh} if self._refresh else {}

    def _all_index(self, params: SearchParameters) -> str:
        return ",".join(params.buckets) if params.buckets else self._index_pattern

    def _documents_from_hits(self, response: dict[str, Any]) -> list[Document]:
        hits = response.get("hits", {}).get("hits", [])
        return [self.map_document(hit) for hit in hits]

    def _kind_of(self, exc: Exception) -> ErrorKind:
        if isinstance(exc, BackendUnavailableError):
            return ErrorKind.BACKEND_UNAVAILABLE
        return self._classify_error(exc)

    def _failure(self, exc: Exception, not_found_message: str | None = None) -> Failure:
        """Convert an engine exception into a ``Failure`` outcome."""
        kind = self._kind_of(exc)
        text = _error_text(exc)
        if kind is ErrorKind.NOT_FOUND:
            logger.debug("%s reported not found: %s", self.name, text)
            return not_found(not_found_message or text)

        logger.warning("%s request failed (%s): %s", self.name, kind.value, text)
        return fail(kind, f"{self.name} request failed: {text}")
