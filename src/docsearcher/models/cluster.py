"""Cluster models — Node groups reported by the search engine."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Cluster(BaseModel):
    """Identity and health metadata of one engine node."""

    cluster_id: str = Field(default="", description="Node name, unique within the engine")
    ip: str | None = Field(default=None, description="Node IP address")
    heap_percent: int | None = Field(default=None, description="JVM heap usage in percent")
    ram_percent: int | None = Field(default=None, description="RAM usage in percent")
    cpu: int | None = Field(default=None, description="CPU usage in percent")
    load_1m: float | None = Field(default=None, description="1 minute load average")
    load_5m: float | None = Field(default=None, description="5 minute load average")
    load_15m: float | None = Field(default=None, description="15 minute load average")
    node_role: str = Field(default="", description="Abbreviated node roles")
    master: str = Field(default="", description="'*' when the node is the elected master")


class ClusterForm(BaseModel):
    """Request body for cluster creation."""

    cluster_id: str = Field(min_length=1, description="Node name to (re-)admit")
