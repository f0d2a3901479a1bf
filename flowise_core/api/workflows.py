"""Workflow generation and validation router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from flowise_core.exceptions import ConfigGenerationError
from flowise_core.schemas.graph import GraphCheck, WorkflowGraph
from flowise_core.schemas.requests import GenerateIn, ValidateIn
from flowise_core.schemas.validation import ValidationPreview
from flowise_core.services.config_generator import ConfigGenerator
from flowise_core.services.node_catalog import NodeCatalog, get_node_catalog
from flowise_core.services.providers import ProviderRegistry, get_provider_registry
from flowise_core.validation.workflow import WorkflowValidator

router = APIRouter()


def get_config_generator() -> ConfigGenerator:
    return ConfigGenerator.from_settings()


@router.post("/generate", response_model=WorkflowGraph)
def generate_workflow(
    payload: GenerateIn,
    generator: ConfigGenerator = Depends(get_config_generator),
    providers: ProviderRegistry = Depends(get_provider_registry),
):
    if payload.provider_id:
        provider = providers.get(payload.provider_id)
        if provider is None:
            raise HTTPException(status_code=404, detail=f"Provider '{payload.provider_id}' not found.")
    else:
        provider = providers.default()
    try:
        return generator.generate(payload.agent, provider)
    except ConfigGenerationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.post("/validate-config", response_model=GraphCheck)
def validate_config(graph: WorkflowGraph):
    return ConfigGenerator.validate_config(graph)


@router.post("/validate", response_model=ValidationPreview)
def validate_workflow(
    payload: ValidateIn,
    catalog: NodeCatalog | None = Depends(get_node_catalog),
):
    return WorkflowValidator(catalog=catalog).validate(payload.graph, payload.options)
