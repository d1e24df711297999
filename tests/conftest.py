"""Shared test fixtures and configuration."""

from __future__ import annotations

import fnmatch
import re
from types import SimpleNamespace
from typing import Any
from unittest.mock import patch

import pytest
from elasticsearch import BadRequestError, NotFoundError

from docsearcher.backends.elastic.client import ElasticsearchServiceClient
from docsearcher.config.settings import Settings
from docsearcher.models.document import Document

TEST_BUCKET = "test_bucket"
TEST_DOCUMENT_ID = "79054025255fb1a26e4bc422aef54eb4"

# ssdeep digests sharing block size 96; the "near" one differs by one character per part
QUERY_DIGEST = "96:abcdefghijklmnopqrstuvwxyz:abcdefghijklmnop"
NEAR_DIGEST = "96:abcdefghijklmnopqrstuvwxyZ:abcdefghijklmnoP"
FAR_DIGEST = "96:QRSTUVWXQRSTUVWX0123456789:QRSTUVWX"


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance backed by the null backend."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        backend={"kind": "null"},
        observability={"log_format": "console"},
    )


@pytest.fixture
def sample_document() -> Document:
    """Create the reference document used by the round-trip scenarios."""
    return Document(
        bucket_uuid=TEST_BUCKET,
        bucket_path="/tmp/test_document",
        document_name="test_document",
        document_path="/tmp/dir/",
        document_size=1024,
        document_type="document",
        document_extension=".docx",
        document_permissions=777,
        document_created="2023-09-15T00:00:00Z",
        document_modified="2023-09-15T00:00:00Z",
        document_md5_hash=TEST_DOCUMENT_ID,
        document_ssdeep_hash=QUERY_DIGEST,
        entity_data="Using skip_serializing does not skip deserializing the field.",
        entity_keywords=["document", "report"],
    )


@pytest.fixture
def sample_payload(sample_document: Document) -> dict[str, Any]:
    """Wire JSON of the reference document."""
    return sample_document.to_source()


@pytest.fixture
def similar_documents(sample_document: Document) -> list[Document]:
    """Neighbours of the reference document: one close, one unrelated, one malformed digest."""
    return [
        sample_document.model_copy(
            update={"document_md5_hash": "a" * 32, "document_ssdeep_hash": NEAR_DIGEST, "entity_keywords": []}
        ),
        sample_document.model_copy(
            update={"document_md5_hash": "b" * 32, "document_ssdeep_hash": FAR_DIGEST, "entity_keywords": []}
        ),
        sample_document.model_copy(
            update={"document_md5_hash": "c" * 32, "document_ssdeep_hash": "3a:34gh5", "entity_keywords": []}
        ),
    ]


# ── In-memory Elasticsearch ──────────────────────────────────────────────────


def _not_found(message: str) -> NotFoundError:
    return NotFoundError(message, meta=SimpleNamespace(status=404), body={"error": message})


def _bad_request(message: str) -> BadRequestError:
    return BadRequestError(message, meta=SimpleNamespace(status=400), body={"error": message})


def _tokens(value: Any) -> set[str]:
    if isinstance(value, list):
        return set().union(*(_tokens(v) for v in value)) if value else set()
    return set(re.findall(r"\w+", str(value).lower()))


def _terms(value: Any, keyword: bool) -> set[str]:
    """Indexed terms of a field: whole values for keyword fields, analyzed tokens otherwise."""
    if not keyword:
        return _tokens(value)
    values = value if isinstance(value, list) else [value]
    return {str(v) for v in values if v is not None}


def _present(value: Any) -> bool:
    return value not in (None, "", [])


def _in_range(value: Any, bounds: dict[str, Any]) -> bool:
    if value is None:
        return False
    if not isinstance(value, (int, float)):
        value = str(value)
    for op, limit in bounds.items():
        if not isinstance(value, (int, float)):
            limit = str(limit)[:19]
            value = value[:19]
        if op == "gte" and not value >= limit:
            return False
        if op == "lte" and not value <= limit:
            return False
    return True


def evaluate(query: dict[str, Any], source: dict[str, Any], properties: dict[str, Any] | None = None) -> float | None:
    """Score *source* against a query DSL subset; None means no match.

    *properties* is the index mapping. Fields it maps as ``keyword`` hold
    whole, case-sensitive terms; every other string field is analyzed into
    lowercase tokens, as dynamic mapping does.
    """
    properties = properties or {}
    (kind, body), = query.items()

    def keyword(field: str) -> bool:
        return properties.get(field, {}).get("type") == "keyword"

    def field_terms(field: str) -> set[str]:
        return _terms(source.get(field), keyword(field)) if _present(source.get(field)) else set()

    def query_terms(field: str, text: str) -> set[str]:
        return {text} if keyword(field) else _tokens(text)

    if kind == "match_all":
        return 1.0

    if kind == "term":
        (field, expected), = body.items()
        return 1.0 if str(expected) in field_terms(field) else None

    if kind == "prefix":
        (field, prefix), = body.items()
        return 1.0 if any(term.startswith(prefix) for term in field_terms(field)) else None

    if kind == "wildcard":
        (field, options), = body.items()
        pattern = options["value"] if isinstance(options, dict) else options
        return 1.0 if any(fnmatch.fnmatchcase(term, pattern) for term in field_terms(field)) else None

    if kind == "range":
        (field, bounds), = body.items()
        return 1.0 if _in_range(source.get(field), bounds) else None

    if kind == "match":
        (field, options), = body.items()
        text = options["query"] if isinstance(options, dict) else options
        hits = len(query_terms(field, text) & field_terms(field))
        return float(hits) if hits else None

    if kind == "multi_match":
        hits = sum(len(query_terms(field, body["query"]) & field_terms(field)) for field in body["fields"])
        return float(hits) if hits else None

    if kind == "bool":
        score = 0.0
        for clause in body.get("must", []):
            part = evaluate(clause, source, properties)
            if part is None:
                return None
            score += part
        for clause in body.get("filter", []):
            if evaluate(clause, source, properties) is None:
                return None
        should = [evaluate(clause, source, properties) for clause in body.get("should", [])]
        matched = [part for part in should if part is not None]
        if len(matched) < body.get("minimum_should_match", 0):
            return None
        return score + sum(matched)

    raise AssertionError(f"Unsupported query clause: {kind}")


class _FakeIndices:
    def __init__(self, engine: FakeElasticsearch) -> None:
        self._engine = engine

    async def create(self, index: str, mappings: dict[str, Any] | None = None, **kwargs: Any) -> dict[str, Any]:
        if index in self._engine.store:
            raise _bad_request(f"resource_already_exists_exception: {index}")
        self._engine.store[index] = {}
        self._engine.mappings[index] = mappings
        return {"acknowledged": True, "index": index}

    async def delete(self, index: str, **kwargs: Any) -> dict[str, Any]:
        if index not in self._engine.store:
            raise _not_found(f"no such index [{index}]")
        del self._engine.store[index]
        return {"acknowledged": True}

    async def put_index_template(
        self,
        name: str,
        index_patterns: list[str],
        template: dict[str, Any] | None = None,
        priority: int = 0,
        **kwargs: Any,
    ) -> dict[str, Any]:
        self._engine.templates[name] = {
            "index_patterns": list(index_patterns),
            "priority": priority,
            "template": template or {},
        }
        return {"acknowledged": True}


class _FakeCat:
    def __init__(self, engine: FakeElasticsearch) -> None:
        self._engine = engine

    async def indices(self, index: str = "*", format: str = "json", **kwargs: Any) -> list[dict[str, Any]]:
        return [
            {
                "health": "green",
                "status": "open",
                "index": name,
                "uuid": f"uuid-{name}",
                "docs.count": str(len(self._engine.store[name])),
                "docs.deleted": "0",
                "store.size": "1kb",
                "pri.store.size": "1kb",
            }
            for name in self._engine.resolve(index)
        ]

    async def nodes(self, format: str = "json", **kwargs: Any) -> list[dict[str, Any]]:
        return [dict(node) for node in self._engine.nodes]


class _FakeCluster:
    def __init__(self, engine: FakeElasticsearch) -> None:
        self._engine = engine

    async def health(self, **kwargs: Any) -> dict[str, Any]:
        return {"status": "green", "cluster_name": "test-cluster", "number_of_nodes": len(self._engine.nodes)}

    async def post_voting_config_exclusions(self, node_names: str, **kwargs: Any) -> None:
        if node_names not in {node["name"] for node in self._engine.nodes}:
            raise _not_found(f"no node named [{node_names}]")
        self._engine.voting_exclusions.add(node_names)

    async def delete_voting_config_exclusions(self, **kwargs: Any) -> None:
        self._engine.voting_exclusions.clear()


class FakeElasticsearch:
    """Minimal in-memory stand-in for ``AsyncElasticsearch``."""

    def __init__(self) -> None:
        self.store: dict[str, dict[str, dict[str, Any]]] = {}
        self.mappings: dict[str, Any] = {}
        self.templates: dict[str, dict[str, Any]] = {}
        self.voting_exclusions: set[str] = set()
        self.nodes: list[dict[str, Any]] = [
            {
                "ip": "172.18.0.2",
                "heap.percent": "42",
                "ram.percent": "87",
                "cpu": "3",
                "load_1m": "0.52",
                "load_5m": "0.41",
                "load_15m": "0.33",
                "node.role": "cdfhilmrstw",
                "master": "*",
                "name": "node-1",
            }
        ]
        self.indices = _FakeIndices(self)
        self.cat = _FakeCat(self)
        self.cluster = _FakeCluster(self)
        self.closed = False

    def resolve(self, index: str) -> list[str]:
        names: list[str] = []
        for part in index.split(","):
            if any(ch in part for ch in "*?"):
                names.extend(sorted(fnmatch.filter(self.store, part)))
            elif part in self.store:
                names.append(part)
            else:
                raise _not_found(f"no such index [{part}]")
        return names

    async def info(self) -> dict[str, Any]:
        return {"cluster_name": "test-cluster", "version": {"number": "8.13.0"}}

    async def close(self) -> None:
        self.closed = True

    def auto_create(self, index: str) -> None:
        """Create *index* on first write, mapped by the best matching template."""
        matching = [
            template
            for template in self.templates.values()
            if any(fnmatch.fnmatchcase(index, pattern) for pattern in template["index_patterns"])
        ]
        matching.sort(key=lambda template: template["priority"], reverse=True)
        self.store[index] = {}
        self.mappings[index] = matching[0]["template"].get("mappings") if matching else None

    async def index(self, index: str, id: str, document: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        if index not in self.store:
            self.auto_create(index)
        docs = self.store[index]
        result = "updated" if id in docs else "created"
        docs[id] = dict(document)
        return {"_index": index, "_id": id, "result": result}

    async def get(self, index: str, id: str, **kwargs: Any) -> dict[str, Any]:
        if index not in self.store:
            raise _not_found(f"no such index [{index}]")
        if id not in self.store[index]:
            raise _not_found(f"document [{id}] missing")
        return {"_index": index, "_id": id, "found": True, "_source": dict(self.store[index][id])}

    async def update(self, index: str, id: str, doc: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        if id not in self.store.get(index, {}):
            raise _not_found(f"[{id}]: document missing")
        self.store[index][id].update(doc)
        return {"_index": index, "_id": id, "result": "updated"}

    async def delete(self, index: str, id: str, **kwargs: Any) -> dict[str, Any]:
        if id not in self.store.get(index, {}):
            raise _not_found(f"[{id}]: not_found")
        del self.store[index][id]
        return {"_index": index, "_id": id, "result": "deleted"}

    async def search(
        self, index: str, query: dict[str, Any], size: int = 10, from_: int = 0, **kwargs: Any
    ) -> dict[str, Any]:
        hits = self._matching(index, query)
        return {"hits": {"total": {"value": len(hits)}, "hits": hits[from_ : from_ + size]}}

    async def count(self, index: str, query: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        return {"count": len(self._matching(index, query))}

    def _matching(self, index: str, query: dict[str, Any]) -> list[dict[str, Any]]:
        hits = []
        for name in self.resolve(index):
            properties = (self.mappings.get(name) or {}).get("properties", {})
            for doc_id, source in self.store[name].items():
                score = evaluate(query, source, properties)
                if score is not None:
                    hits.append({"_index": name, "_id": doc_id, "_score": score, "_source": dict(source)})
        hits.sort(key=lambda hit: (-hit["_score"], hit["_id"]))
        return hits


@pytest.fixture
def fake_engine() -> FakeElasticsearch:
    return FakeElasticsearch()


@pytest.fixture
async def es_backend(fake_engine: FakeElasticsearch) -> ElasticsearchServiceClient:
    """Elasticsearch backend initialized against the in-memory engine."""
    backend = ElasticsearchServiceClient(hosts=["http://localhost:9200"], default_bucket=TEST_BUCKET)
    with patch.object(backend, "_build_client", return_value=fake_engine):
        await backend.initialize()
    return backend
