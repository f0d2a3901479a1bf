"""Model registry router."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from flowise_core.exceptions import ModelNotFoundError
from flowise_core.schemas.llm_models import (
    ConfigurationCheck,
    CostEstimate,
    ModelCategory,
    ModelDescriptor,
    ModelFilters,
    ModelProvider,
    OptimizationContext,
    Recommendation,
    RecommendationContext,
)
from flowise_core.schemas.requests import ConfigurationIn, CostEstimateIn
from flowise_core.services.model_registry import ModelRegistry, get_model_registry

router = APIRouter()


def _get_model_or_404(registry: ModelRegistry, model_id: str) -> ModelDescriptor:
    model = registry.get_model(model_id)
    if model is None:
        raise HTTPException(status_code=404, detail=f"Model '{model_id}' not found.")
    return model


@router.get("/", response_model=list[ModelDescriptor])
def list_models(
    provider: ModelProvider | None = None,
    category: ModelCategory | None = None,
    capabilities: list[str] = Query(default=[]),
    max_price: float | None = Query(default=None, ge=0),
    registry: ModelRegistry = Depends(get_model_registry),
):
    filters = ModelFilters(
        provider=provider,
        category=category,
        capabilities=capabilities,
        max_price=max_price,
    )
    return registry.list_models(filters)


@router.post("/recommend", response_model=list[Recommendation])
def recommend_models(
    context: RecommendationContext,
    registry: ModelRegistry = Depends(get_model_registry),
):
    return registry.recommend(context)


@router.get("/{model_id}", response_model=ModelDescriptor)
def get_model(model_id: str, registry: ModelRegistry = Depends(get_model_registry)):
    return _get_model_or_404(registry, model_id)


@router.post("/{model_id}/optimal-configuration", response_model=dict[str, Any])
def optimal_configuration(
    model_id: str,
    context: OptimizationContext,
    registry: ModelRegistry = Depends(get_model_registry),
):
    model = _get_model_or_404(registry, model_id)
    return registry.generate_optimal_configuration(model, context)


@router.post("/{model_id}/validate", response_model=ConfigurationCheck)
def validate_configuration(
    model_id: str,
    payload: ConfigurationIn,
    registry: ModelRegistry = Depends(get_model_registry),
):
    return registry.validate_configuration(model_id, payload.configuration)


@router.post("/{model_id}/estimate-cost", response_model=CostEstimate)
def estimate_cost(
    model_id: str,
    payload: CostEstimateIn,
    registry: ModelRegistry = Depends(get_model_registry),
):
    try:
        return registry.estimate_cost(model_id, payload.configuration, payload.usage)
    except ModelNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
