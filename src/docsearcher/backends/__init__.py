"""Backend layer — Interchangeable implementations of ``ServiceClient``.

Built-in backends:
  - elasticsearch: Elasticsearch v8+ via the official async client
  - opensearch: OpenSearch v2+ via ``opensearch-py``
  - null: no-op backend returning empty results and acknowledgements

Subclass ``ServiceClient`` to connect another search engine.
"""
