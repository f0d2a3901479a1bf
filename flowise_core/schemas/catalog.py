"""Node catalog schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NodeDescriptor(BaseModel):
    """One Flowise node type, as scraped from the Flowise documentation."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    category: str = Field(alias="categoria")
    label: str
    description: str = Field("", alias="desc")
    path_id: str = Field(alias="path")
    input_signature: str = Field("", alias="inputs")
    output_signature: str = Field("", alias="outputs")


class CatalogSnapshot(BaseModel):
    nodes: list[NodeDescriptor]
    categories: list[str]
    total_count: int
    last_updated: datetime


class CatalogStats(BaseModel):
    total_nodes: int = 0
    categories: list[str] = []
    category_counts: dict[str, int] = {}
