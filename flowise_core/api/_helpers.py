"""Shared dependencies for API routers."""

from __future__ import annotations

from fastapi import Depends, HTTPException

from flowise_core.services.node_catalog import NodeCatalog, get_node_catalog


def require_catalog(catalog: NodeCatalog | None = Depends(get_node_catalog)) -> NodeCatalog:
    if catalog is None:
        raise HTTPException(status_code=503, detail="Node catalog is not available.")
    return catalog
