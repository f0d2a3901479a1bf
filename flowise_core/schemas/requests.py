"""Request and response bodies for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from flowise_core.schemas.graph import AgentDefinition, GraphNode, WorkflowGraph
from flowise_core.schemas.llm_models import UsageProfile
from flowise_core.schemas.modification import ModificationContext, ModificationRequest
from flowise_core.schemas.validation import ValidationOptions


class AvailableModificationsIn(BaseModel):
    node: GraphNode


class ModifyIn(BaseModel):
    graph: WorkflowGraph
    requests: list[ModificationRequest]
    context: ModificationContext | None = None


class SuggestionsIn(BaseModel):
    graph: WorkflowGraph
    context: ModificationContext | None = None


class ConfigurationIn(BaseModel):
    configuration: dict[str, Any] = {}


class CostEstimateIn(BaseModel):
    configuration: dict[str, Any] = {}
    usage: UsageProfile


class GenerateIn(BaseModel):
    agent: AgentDefinition
    provider_id: str | None = None


class ValidateIn(BaseModel):
    graph: WorkflowGraph
    options: ValidationOptions | None = None


class ProviderOut(BaseModel):
    """Provider record without its API key."""

    id: str
    name: str
    base_url: str
    models: list[str]
    is_active: bool
    is_default: bool
    has_api_key: bool
