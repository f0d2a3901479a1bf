"""Node catalog and node modification router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from flowise_core.api._helpers import require_catalog
from flowise_core.schemas.catalog import CatalogStats, NodeDescriptor
from flowise_core.schemas.modification import ModificationResult, ModificationSuggestion
from flowise_core.schemas.parameters import ModificationField
from flowise_core.schemas.requests import AvailableModificationsIn, ModifyIn, SuggestionsIn
from flowise_core.services.node_catalog import NodeCatalog
from flowise_core.services.node_modifier import NodeModifier

router = APIRouter()


# ── Catalog ──────────────────────────────────────────────────────────────────


@router.get("/", response_model=list[NodeDescriptor], response_model_by_alias=False)
def list_nodes(
    category: str | None = None,
    q: str | None = None,
    agent_type: str | None = None,
    catalog: NodeCatalog = Depends(require_catalog),
):
    if agent_type:
        nodes = catalog.recommended_for(agent_type)
    elif q:
        nodes = catalog.search(q)
    else:
        nodes = catalog.nodes
    if category and not (agent_type or q):
        return catalog.find_by_category(category)
    if category:
        wanted = category.lower()
        nodes = [n for n in nodes if n.category.lower() == wanted]
    return nodes


@router.get("/categories", response_model=list[str])
def list_categories(catalog: NodeCatalog = Depends(require_catalog)):
    return catalog.categories


@router.get("/stats", response_model=CatalogStats)
def catalog_stats(catalog: NodeCatalog = Depends(require_catalog)):
    return catalog.stats()


# ── Modification ─────────────────────────────────────────────────────────────


@router.post("/available-modifications", response_model=list[ModificationField])
def available_modifications(payload: AvailableModificationsIn):
    return NodeModifier().available_modifications(payload.node)


@router.post("/modify", response_model=ModificationResult)
def modify_nodes(payload: ModifyIn):
    return NodeModifier().apply_modifications(payload.graph, payload.requests, payload.context)


@router.post("/suggestions", response_model=list[ModificationSuggestion])
def modification_suggestions(payload: SuggestionsIn):
    return NodeModifier().generate_suggestions(payload.graph, payload.context)
