"""Exception types raised by the core services."""

from __future__ import annotations


class FlowiseCoreError(Exception):
    """Base class for errors raised by flowise_core."""


class ConfigGenerationError(FlowiseCoreError, ValueError):
    """A workflow graph could not be generated or imported."""


class ModelNotFoundError(FlowiseCoreError, KeyError):
    """The requested model id is not in the registry."""

    def __init__(self, model_id: str) -> None:
        super().__init__(model_id)
        self.model_id = model_id

    def __str__(self) -> str:
        return f"Model '{self.model_id}' not found"
