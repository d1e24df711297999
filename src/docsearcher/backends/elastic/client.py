"""Elasticsearch backend — Document store and search on Elasticsearch (v8+).

Uses the official async client ``AsyncElasticsearch``. Request bodies are
passed as keyword arguments (``document=``, ``doc=``, ``query=``,
``mappings=``), which is the calling convention of the v8 client.
"""

from __future__ import annotations

from typing import Any

from elasticsearch import (
    ApiError,
    AsyncElasticsearch,
    ConnectionError,
    ConnectionTimeout,
    NotFoundError,
    SSLError,
)

from docsearcher.backends.base.dsl import TEMPLATE_PRIORITY, DslServiceClient
from docsearcher.models.response import ErrorKind


class ElasticsearchServiceClient(DslServiceClient):
    """Service client backed by an Elasticsearch cluster."""

    @property
    def name(self) -> str:
        return "elasticsearch"

    def _build_client(self) -> AsyncElasticsearch:
        client_kwargs: dict[str, Any] = {
            "hosts": self._hosts,
            "verify_certs": self._verify_certs,
            "request_timeout": self._request_timeout,
        }
        if self._username and self._password:
            client_kwargs["basic_auth"] = (self._username, self._password)

        client_kwargs.update(self._extra_kwargs)
        return AsyncElasticsearch(**client_kwargs)

    def _classify_error(self, exc: Exception) -> ErrorKind:
        if isinstance(exc, NotFoundError):
            return ErrorKind.NOT_FOUND
        if isinstance(exc, (ConnectionError, ConnectionTimeout, SSLError)):
            return ErrorKind.BACKEND_UNAVAILABLE
        if isinstance(exc, ApiError) and exc.status_code == 404:
            return ErrorKind.NOT_FOUND
        return ErrorKind.BACKEND_ERROR

    async def _index(self, index: str, doc_id: str, source: dict[str, Any]) -> Any:
        return await self._engine().index(index=index, id=doc_id, document=source, **self._write_params())

    async def _update(self, index: str, doc_id: str, source: dict[str, Any]) -> Any:
        return await self._engine().update(index=index, id=doc_id, doc=source, **self._write_params())

    async def _search(self, index: str, query: dict[str, Any], size: int, offset: int) -> Any:
        return await self._engine().search(index=index, query=query, size=size, from_=offset)

    async def _count(self, index: str, query: dict[str, Any]) -> Any:
        return await self._engine().count(index=index, query=query)

    async def _create_index(self, index: str, mappings: dict[str, Any]) -> Any:
        return await self._engine().indices.create(index=index, mappings=mappings)

    async def _put_index_template(self, name: str, patterns: list[str], mappings: dict[str, Any]) -> Any:
        return await self._engine().indices.put_index_template(
            name=name,
            index_patterns=patterns,
            priority=TEMPLATE_PRIORITY,
            template={"mappings": mappings},
        )
