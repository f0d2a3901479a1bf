"""Workflow graph IR, agent definitions and provider records."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AgentType(str, enum.Enum):
    CHAT = "chat"
    RAG = "rag"
    ASSISTANT = "assistant"
    WORKFLOW = "workflow"
    API = "api"
    DEFAULT = "default"


# Substrings that mark a node type as an LLM / chat-model provider node.
LLM_PROVIDER_TAGS: tuple[str, ...] = (
    "OpenAI",
    "Anthropic",
    "Gemini",
    "GoogleGenerativeAI",
    "VertexAI",
    "Z.AI",
    "Cohere",
    "Mistral",
    "Ollama",
    "Groq",
    "LLM",
    "ChatModel",
)

# Ordered (keyword, category) pairs for nodes that carry no explicit category.
_CATEGORY_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("chat input", "Inputs"),
    ("chat output", "Outputs"),
    ("text splitter", "Text Splitters"),
    ("embedding", "Embeddings"),
    ("retriever", "Retrievers"),
    ("vector store", "Vector Stores"),
    ("document loader", "Document Loaders"),
    ("document store", "Document Stores"),
    ("chain", "Chains"),
    ("memory", "Memory"),
    ("prompt", "Prompts"),
    ("agent", "Agents"),
    ("calculator", "Tools"),
    ("search", "Tools"),
    ("tool", "Tools"),
)


def is_llm_type(node_type: str) -> bool:
    lowered = (node_type or "").lower()
    # "OpenAI Embeddings" and "LLM Chain" carry a provider tag but are not models
    if "embedding" in lowered or "chain" in lowered:
        return False
    return any(tag.lower() in lowered for tag in LLM_PROVIDER_TAGS)


def infer_category(node_type: str) -> str:
    """Guess the catalog category of a node from its type string."""
    lowered = (node_type or "").lower()
    for keyword, category in _CATEGORY_KEYWORDS:
        if keyword in lowered:
            return category
    if is_llm_type(node_type):
        return "Chat Models"
    return "Unknown"


class Position(BaseModel):
    x: float = 0
    y: float = 0


class GraphNode(BaseModel):
    id: str
    type: str
    position: Position = Position()
    data: dict[str, Any] = {}

    @property
    def category(self) -> str:
        explicit = self.data.get("category")
        if isinstance(explicit, str) and explicit:
            return explicit
        return infer_category(self.type)

    @property
    def label(self) -> str:
        return str(self.data.get("label") or self.data.get("name") or self.type)


class GraphEdge(BaseModel):
    id: str
    source: str
    target: str
    sourceHandle: str | None = None
    targetHandle: str | None = None


class WorkflowGraph(BaseModel):
    name: str = ""
    description: str = ""
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]


class GraphCheck(BaseModel):
    valid: bool
    errors: list[str] = []


class AgentDefinition(BaseModel):
    """Abstract agent description supplied by the agent CRUD layer."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    description: str = ""
    type: str = AgentType.DEFAULT.value
    system_prompt: str | None = Field(None, alias="systemPrompt")
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = Field(None, alias="maxTokens")
    top_p: float | None = Field(None, alias="topP")
    frequency_penalty: float | None = Field(None, alias="frequencyPenalty")
    presence_penalty: float | None = Field(None, alias="presencePenalty")
    documents: list[str] = []
    index_name: str | None = Field(None, alias="indexName")
    top_k: int | None = Field(None, alias="topK")


class ProviderRecord(BaseModel):
    """Resolved LLM provider credentials."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    base_url: str = Field("", alias="baseUrl")
    api_key: str = Field("", alias="apiKey")
    models: list[str] = []
    is_active: bool = Field(True, alias="isActive")
