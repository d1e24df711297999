"""Document model — The unit of storage and search.

Field names are part of the wire contract and must not be renamed. A
document is identified by ``(bucket_uuid, document_md5_hash)``; every write
replaces all canonical fields at once.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class Document(BaseModel):
    """Canonical document shape returned by every backend."""

    bucket_uuid: str = Field(min_length=1, description="Identifier of the bucket holding the document")
    bucket_path: str = Field(default="", description="Filesystem path the bucket was loaded from")
    document_name: str = Field(default="", description="Original file name")
    document_path: str = Field(default="", description="Directory path of the original file")
    document_size: int = Field(default=0, ge=0, description="File size in bytes")
    document_type: str = Field(default="", description="Coarse document type (e.g. 'document')")
    document_extension: str = Field(default="", description="File extension including the dot")
    document_permissions: int = Field(default=0, description="Unix permission bits")
    document_created: datetime | None = Field(default=None, description="Creation timestamp (ISO-8601)")
    document_modified: datetime | None = Field(default=None, description="Modification timestamp (ISO-8601)")
    document_md5_hash: str = Field(min_length=1, description="Content hash, unique within a bucket")
    document_ssdeep_hash: str = Field(default="", description="ssdeep fuzzy hash of the content")
    entity_data: str = Field(default="", description="Extracted text body (indexed)")
    entity_keywords: list[str] = Field(default_factory=list, description="Unordered tags")

    @property
    def document_id(self) -> str:
        return self.document_md5_hash

    def to_source(self) -> dict[str, Any]:
        """Serialize into the JSON body stored by the search engine."""
        return self.model_dump(mode="json")


class DocumentCount(BaseModel):
    """Number of documents in a bucket matching a query."""

    bucket_id: str = Field(description="Bucket the count was taken from")
    count: int = Field(default=0, ge=0, description="Matching document count")
