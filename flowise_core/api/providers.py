"""Provider router. API keys are never returned."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from flowise_core.schemas.requests import ProviderOut
from flowise_core.services.providers import ProviderRegistry, get_provider_registry

router = APIRouter()


@router.get("/", response_model=list[ProviderOut])
def list_providers(
    active_only: bool = False,
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    return [
        ProviderOut(
            id=p.id,
            name=p.name,
            base_url=p.base_url,
            models=p.models,
            is_active=p.is_active,
            is_default=p.id == registry.default_id,
            has_api_key=bool(p.api_key),
        )
        for p in registry.list(active_only=active_only)
    ]
