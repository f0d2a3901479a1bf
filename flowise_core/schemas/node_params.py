"""Typed node payloads keyed by node category.

``GraphNode.data`` stays a plain dict so unknown Flowise nodes survive a
round trip; ``parse_payload`` gives services a typed view of it.  Field names
match the Flowise data keys.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


class ChatModelParams(_Payload):
    modelName: str | None = None
    temperature: float | None = None
    maxTokens: int | None = None
    topP: float | None = None
    frequencyPenalty: float | None = None
    presencePenalty: float | None = None
    streaming: bool | None = None
    allowImageUploads: bool | None = None
    apiKey: str | None = None
    basePath: str | None = None


class LLMParams(_Payload):
    model: str | None = None
    llmModel: str | None = None
    temperature: float | None = None
    apiKey: str | None = None

    @property
    def resolved_model(self) -> str | None:
        return self.model or self.llmModel


class PromptParams(_Payload):
    template: str | None = None


class MemoryParams(_Payload):
    memoryType: str | None = None
    bufferSize: int | None = None


class ToolParams(_Payload):
    tool: str | None = None
    toolAgentflowSelectedTool: str | None = None
    apiKey: str | None = None


class DocumentStoreParams(_Payload):
    documentStore: str | None = None
    indexName: str | None = None


class EmbeddingsParams(_Payload):
    embeddingsModel: str | None = None
    model: str | None = None


class TextSplitterParams(_Payload):
    chunkSize: int | None = None
    chunkOverlap: int | None = None


class GenericParams(_Payload):
    """Fallback for categories without a typed payload."""


NodePayload = Union[
    ChatModelParams,
    LLMParams,
    PromptParams,
    MemoryParams,
    ToolParams,
    DocumentStoreParams,
    EmbeddingsParams,
    TextSplitterParams,
    GenericParams,
]

PAYLOAD_TYPES: dict[str, type[_Payload]] = {
    "Chat Models": ChatModelParams,
    "LLM": LLMParams,
    "Prompts": PromptParams,
    "Memory": MemoryParams,
    "Tools": ToolParams,
    "Document Stores": DocumentStoreParams,
    "Embeddings": EmbeddingsParams,
    "Text Splitters": TextSplitterParams,
}


def parse_payload(category: str, data: dict[str, Any]) -> NodePayload:
    """Return the typed payload for *category*, or ``GenericParams``.

    A payload that does not fit its category's model (e.g. a non-numeric
    temperature) also degrades to ``GenericParams``; callers can detect that
    with ``isinstance`` and ``category in PAYLOAD_TYPES``.
    """
    payload_cls = PAYLOAD_TYPES.get(category)
    if payload_cls is not None:
        try:
            return payload_cls.model_validate(data)
        except ValidationError as exc:
            logger.debug("Payload for category %s does not validate: %s", category, exc)
    return GenericParams.model_validate(data)
