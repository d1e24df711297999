"""OpenSearch backend — Document store and search on OpenSearch (v2+).

OpenSearch is an AWS-maintained fork of Elasticsearch with a compatible
query DSL. This backend uses ``opensearch-py`` (async), which passes
request bodies through ``body=``.

Install the optional dependency::

    pip install doc-searcher[opensearch]
    # or: pip install "opensearch-py[async]"
"""

from __future__ import annotations

from typing import Any

from docsearcher.backends.base.dsl import TEMPLATE_PRIORITY, DslServiceClient
from docsearcher.backends.base.exceptions import ConfigurationError
from docsearcher.models.response import ErrorKind


class OpenSearchServiceClient(DslServiceClient):
    """Service client backed by an OpenSearch cluster."""

    @property
    def name(self) -> str:
        return "opensearch"

    def _build_client(self) -> Any:
        try:
            from opensearchpy import AsyncOpenSearch
        except ImportError as e:
            raise ConfigurationError(
                "opensearch-py package is required.  Install with: pip install doc-searcher[opensearch]"
            ) from e

        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "ssl_show_warn": False,
            "timeout": self._request_timeout,
        }
        if self._username and self._password:
            client_kwargs["http_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)
        return AsyncOpenSearch(**client_kwargs)

    def _classify_error(self, exc: Exception) -> ErrorKind:
        from opensearchpy import exceptions

        if isinstance(exc, exceptions.NotFoundError):
            return ErrorKind.NOT_FOUND
        if isinstance(exc, exceptions.ConnectionError):
            return ErrorKind.BACKEND_UNAVAILABLE
        return ErrorKind.BACKEND_ERROR

    async def _index(self, index: str, doc_id: str, source: dict[str, Any]) -> Any:
        return await self._engine().index(index=index, id=doc_id, body=source, **self._write_params())

    async def _update(self, index: str, doc_id: str, source: dict[str, Any]) -> Any:
        return await self._engine().update(index=index, id=doc_id, body={"doc": source}, **self._write_params())

    async def _search(self, index: str, query: dict[str, Any], size: int, offset: int) -> Any:
        body = {"query": query, "size": size, "from": offset}
        return await self._engine().search(index=index, body=body)

    async def _count(self, index: str, query: dict[str, Any]) -> Any:
        return await self._engine().count(index=index, body={"query": query})

    async def _create_index(self, index: str, mappings: dict[str, Any]) -> Any:
        return await self._engine().indices.create(index=index, body={"mappings": mappings})

    async def _put_index_template(self, name: str, patterns: list[str], mappings: dict[str, Any]) -> Any:
        body = {"index_patterns": patterns, "priority": TEMPLATE_PRIORITY, "template": {"mappings": mappings}}
        return await self._engine().indices.put_index_template(name=name, body=body)
