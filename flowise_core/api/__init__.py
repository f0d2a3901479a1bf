"""FastAPI router aggregation."""

from fastapi import APIRouter

from flowise_core.api.models import router as models_router
from flowise_core.api.nodes import router as nodes_router
from flowise_core.api.providers import router as providers_router
from flowise_core.api.workflows import router as workflows_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(nodes_router, prefix="/nodes", tags=["nodes"])
api_router.include_router(models_router, prefix="/models", tags=["models"])
api_router.include_router(providers_router, prefix="/providers", tags=["providers"])
api_router.include_router(workflows_router, prefix="/workflows", tags=["workflows"])
