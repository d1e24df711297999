"""OpenSearch backend."""

from docsearcher.backends.opensearch.client import OpenSearchServiceClient

__all__ = ["OpenSearchServiceClient"]
