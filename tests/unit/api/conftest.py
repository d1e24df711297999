"""API test fixtures."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from docsearcher.api.app import create_app
from docsearcher.api.deps import set_client
from docsearcher.backends.elastic.client import ElasticsearchServiceClient
from docsearcher.backends.null.client import NullServiceClient
from docsearcher.config.settings import Settings


@pytest.fixture
def client(settings: Settings, es_backend: ElasticsearchServiceClient) -> Iterator[TestClient]:
    """Test client routed to the Elasticsearch backend over the in-memory engine."""
    app = create_app(settings)
    set_client(es_backend)
    yield TestClient(app)
    set_client(None)


@pytest.fixture
def null_client(settings: Settings) -> Iterator[TestClient]:
    """Test client routed to the null backend."""
    app = create_app(settings)
    set_client(NullServiceClient())
    yield TestClient(app)
    set_client(None)
