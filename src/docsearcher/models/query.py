"""Search request models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

DEFAULT_SEARCH_FIELDS: tuple[str, ...] = ("entity_data", "document_path")


class SearchParameters(BaseModel):
    """Per-request search options.

    ``query`` is free text for full-text search and an ssdeep digest for
    similarity search.
    """

    query: str = Field(default="", max_length=4096, description="Free-text query or ssdeep digest")
    fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SEARCH_FIELDS),
        min_length=1,
        description="Document fields the text query is matched against",
    )
    buckets: list[str] | None = Field(
        default=None,
        description="Restrict the 'all' searches to these buckets (None = every bucket)",
    )
    document_type: str | None = Field(default=None, description="Exact document type filter")
    document_extension: str | None = Field(default=None, description="Exact extension filter")
    document_size_from: int | None = Field(default=None, ge=0, description="Minimum size in bytes")
    document_size_to: int | None = Field(default=None, ge=0, description="Maximum size in bytes")
    created_date_from: datetime | None = Field(default=None, description="Earliest creation timestamp")
    created_date_to: datetime | None = Field(default=None, description="Latest creation timestamp")
    result_size: int = Field(default=25, ge=1, le=1000, description="Maximum number of results")
    result_offset: int = Field(default=0, ge=0, description="Number of results to skip")
    min_similarity: int = Field(
        default=1,
        ge=0,
        le=100,
        description="Minimum ssdeep score (0-100) for similarity results",
    )

    @field_validator("buckets")
    @classmethod
    def _drop_empty_buckets(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        cleaned = [b for b in v if b]
        return cleaned or None
