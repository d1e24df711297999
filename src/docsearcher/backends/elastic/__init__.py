"""Elasticsearch backend."""

from docsearcher.backends.elastic.client import ElasticsearchServiceClient

__all__ = ["ElasticsearchServiceClient"]
