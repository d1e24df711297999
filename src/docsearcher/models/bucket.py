"""Bucket models — Named document collections (search-engine indices)."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Bucket(BaseModel):
    """A named collection that documents belong to."""

    bucket_id: str = Field(default="", description="Bucket (index) name")
    bucket_uuid: str = Field(default="", description="Engine-assigned unique id")
    bucket_path: str = Field(default="", description="Source path metadata")
    is_default: bool = Field(default=False, description="Whether this is the configured default bucket")
    health: str = Field(default="", description="Engine health colour (green/yellow/red)")
    status: str = Field(default="", description="Open/closed state")
    docs_count: int | None = Field(default=None, description="Number of live documents")
    docs_deleted: int | None = Field(default=None, description="Number of deleted documents")
    store_size: str | None = Field(default=None, description="Total store size")
    pri_store_size: str | None = Field(default=None, description="Primary store size")


class BucketForm(BaseModel):
    """Request body for bucket creation."""

    bucket_name: str = Field(min_length=1, description="Name of the bucket to create")
