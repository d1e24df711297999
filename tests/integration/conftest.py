"""Integration test fixtures — Docker-based search engines with mock data.

Expects an engine to be running, e.g.:
    docker run -p 9200:9200 -e discovery.type=single-node \
        -e xpack.security.enabled=false elasticsearch:8.13.0

Seed data is loaded into a dedicated bucket on first use.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import pytest

from docsearcher.backends.base.dsl import DOCUMENT_MAPPINGS

SEED_BUCKET = "docsearcher-it"

MOCK_DOCUMENTS: list[dict[str, Any]] = [
    {
        "bucket_uuid": SEED_BUCKET,
        "bucket_path": "/data/shared",
        "document_name": "quarterly_report",
        "document_path": "/data/shared/finance/",
        "document_size": 20480,
        "document_type": "document",
        "document_extension": ".docx",
        "document_permissions": 644,
        "document_created": "2024-01-10T09:00:00Z",
        "document_modified": "2024-01-12T17:30:00Z",
        "document_md5_hash": "0f1e2d3c4b5a69788796a5b4c3d2e1f0",
        "document_ssdeep_hash": "96:abcdefghijklmnopqrstuvwxyz:abcdefghijklmnop",
        "entity_data": "Revenue grew in the third quarter while operating costs stayed flat.",
        "entity_keywords": ["finance", "report"],
    },
    {
        "bucket_uuid": SEED_BUCKET,
        "bucket_path": "/data/shared",
        "document_name": "quarterly_report_draft",
        "document_path": "/data/shared/finance/drafts/",
        "document_size": 19800,
        "document_type": "document",
        "document_extension": ".docx",
        "document_permissions": 600,
        "document_created": "2024-01-08T11:15:00Z",
        "document_modified": "2024-01-09T08:00:00Z",
        "document_md5_hash": "1a2b3c4d5e6f708192a3b4c5d6e7f809",
        "document_ssdeep_hash": "96:abcdefghijklmnopqrstuvwxyZ:abcdefghijklmnoP",
        "entity_data": "Draft: revenue grew in the third quarter.",
        "entity_keywords": ["draft"],
    },
    {
        "bucket_uuid": SEED_BUCKET,
        "bucket_path": "/data/shared",
        "document_name": "holiday_photo",
        "document_path": "/data/shared/photos/",
        "document_size": 3145728,
        "document_type": "image",
        "document_extension": ".jpg",
        "document_permissions": 644,
        "document_created": "2023-12-24T18:00:00Z",
        "document_modified": "2023-12-24T18:00:00Z",
        "document_md5_hash": "ffeeddccbbaa99887766554433221100",
        "document_ssdeep_hash": "3072:QRSTUVWXQRSTUVWX0123456789:QRSTUVWX",
        "entity_data": "",
        "entity_keywords": ["photo"],
    },
]


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


async def _seed(host: str, bucket: str = SEED_BUCKET) -> None:
    async with httpx.AsyncClient(base_url=host, timeout=30) as client:
        await client.delete(f"/{bucket}", params={"ignore_unavailable": "true"})

        resp = await client.put(f"/{bucket}", json={"mappings": DOCUMENT_MAPPINGS})
        resp.raise_for_status()

        for doc in MOCK_DOCUMENTS:
            resp = await client.put(f"/{bucket}/_doc/{doc['document_md5_hash']}", json=doc)
            resp.raise_for_status()

        await client.post(f"/{bucket}/_refresh")


@pytest.fixture(scope="session")
def elasticsearch_ready() -> str:
    """Ensure Elasticsearch is running and seeded."""
    host = "http://localhost:9200"
    if not _wait_for_service(host):
        pytest.skip("Elasticsearch not available at localhost:9200")
    asyncio.run(_seed(host))
    return host
