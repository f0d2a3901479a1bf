"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowise_core import __version__
from flowise_core.api import api_router
from flowise_core.config import settings
from flowise_core.services.node_catalog import get_node_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure unified logging before anything else
    from flowise_core.logging_config import setup_logging
    setup_logging("Server")

    catalog = get_node_catalog()
    if catalog is None:
        logger.warning("Node catalog not loaded from %s; catalog endpoints will return 503", settings.NODE_CATALOG_PATH)
    else:
        logger.info("Node catalog: %d nodes in %d categories", len(catalog.nodes), len(catalog.categories))
        if not catalog.is_fresh():
            logger.warning("Node catalog is older than 7 days; consider refreshing it")

    yield


app = FastAPI(title="Flowise Core API", version=__version__, lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.CORS_ALLOW_ALL_ORIGINS else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(api_router)


@app.get("/health")
def health():
    catalog_ok = get_node_catalog() is not None
    return {
        "status": "ok" if catalog_ok else "degraded",
        "catalog": catalog_ok,
        "version": __version__,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("flowise_core.main:app", host="0.0.0.0", port=8000, reload=True, log_config=None)
