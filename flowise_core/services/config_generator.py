"""Config generator: build a Flowise workflow graph from an agent definition.

Each agent type maps to a fixed template. Node ids and canvas positions are
constants so regenerating the same agent yields the same graph.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from flowise_core.exceptions import ConfigGenerationError
from flowise_core.logging_config import log_context
from flowise_core.schemas.graph import (
    AgentDefinition,
    AgentType,
    GraphCheck,
    GraphEdge,
    GraphNode,
    Position,
    ProviderRecord,
    WorkflowGraph,
    is_llm_type,
)

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."

RAG_PROMPT_TEMPLATE = (
    "Use the following pieces of context to answer the question at the end. "
    "If you don't know the answer, just say that you don't know, don't try to make up an answer.\n"
    "\n"
    "Context: {context}\n"
    "\n"
    "Question: {question}\n"
    "\n"
    "Answer:"
)

LLM_DEFAULTS: dict[str, Any] = {
    "temperature": 0.7,
    "maxTokens": 1000,
    "topP": 1,
    "frequencyPenalty": 0,
    "presencePenalty": 0,
}

EMBEDDINGS_MODEL = "text-embedding-ada-002"
DEFAULT_TOP_K = 4
CHUNK_SIZE = 1000
CHUNK_OVERLAP = 200

# Provider id -> Flowise chat model node type
PROVIDER_NODE_TYPES: dict[str, str] = {
    "openai": "ChatOpenAI",
    "anthropic": "ChatAnthropic",
    "google": "ChatGoogleGenerativeAI",
    "z-ai": "Z.AI",
    "cohere": "ChatCohere",
    "local": "ChatOllama",
}

X_STEP = 300
Y_STEP = 200


def _node(node_id: str, node_type: str, column: float, row: float, category: str, **data: Any) -> GraphNode:
    data.setdefault("label", node_type)
    data["category"] = category
    return GraphNode(
        id=node_id,
        type=node_type,
        position=Position(x=column * X_STEP, y=row * Y_STEP),
        data=data,
    )


def _edge(edge_id: str, source: str, target: str) -> GraphEdge:
    return GraphEdge(id=edge_id, source=source, target=target)


def provider_node_type(provider: ProviderRecord) -> str:
    return PROVIDER_NODE_TYPES.get(provider.id, f"{provider.name or provider.id} LLM")


class ConfigGenerator:
    """Synthesizes workflow graphs from agent definitions."""

    def __init__(self, search_api_key: str = "", search_engine_id: str = "") -> None:
        self.search_api_key = search_api_key
        self.search_engine_id = search_engine_id

    @classmethod
    def from_settings(cls, settings=None) -> ConfigGenerator:
        if settings is None:
            from flowise_core.config import settings
        return cls(
            search_api_key=settings.GOOGLE_API_KEY,
            search_engine_id=settings.GOOGLE_SEARCH_ENGINE_ID,
        )

    # ── Generation ────────────────────────────────────────────────────────────

    def generate(self, agent: AgentDefinition, provider: ProviderRecord | None) -> WorkflowGraph:
        """Build the graph for *agent* using *provider* credentials.

        Raises ConfigGenerationError when no active provider or model is available.
        """
        if provider is None:
            raise ConfigGenerationError("No API provider configured")
        if not provider.is_active:
            raise ConfigGenerationError(f"Provider '{provider.id}' is not active")

        agent_type = (agent.type or "").lower()
        name = agent.name or "Untitled agent"
        with log_context(workflow=name):
            if agent_type == AgentType.RAG.value:
                nodes, edges = self._rag_graph(agent, provider)
            elif agent_type == AgentType.ASSISTANT.value:
                nodes, edges = self._assistant_graph(agent, provider)
            else:
                nodes, edges = self._chat_graph(agent, provider)

            graph = WorkflowGraph(
                name=name,
                description=agent.description or "Agent workflow generated by flowise-core",
                nodes=nodes,
                edges=edges,
            )
            logger.info(
                "Generated %s graph (%d nodes, %d edges) with provider %s",
                agent_type or AgentType.DEFAULT.value, len(nodes), len(edges), provider.id,
            )
            return graph

    def _llm_node(self, agent: AgentDefinition, provider: ProviderRecord, column: float, row: float) -> GraphNode:
        model_name = agent.model or (provider.models[0] if provider.models else None)
        if not model_name:
            raise ConfigGenerationError(f"Provider '{provider.id}' has no models and the agent names none")

        overrides = {
            "temperature": agent.temperature,
            "maxTokens": agent.max_tokens,
            "topP": agent.top_p,
            "frequencyPenalty": agent.frequency_penalty,
            "presencePenalty": agent.presence_penalty,
        }
        params = {key: (value if value is not None else LLM_DEFAULTS[key]) for key, value in overrides.items()}

        return _node(
            "llm",
            provider_node_type(provider),
            column,
            row,
            "Chat Models",
            label=provider.name or provider.id,
            modelName=model_name,
            apiKey=provider.api_key,
            baseUrl=provider.base_url,
            **params,
        )

    def _chat_graph(self, agent: AgentDefinition, provider: ProviderRecord) -> tuple[list[GraphNode], list[GraphEdge]]:
        nodes = [
            _node("chat-input", "Chat Input", 0, 0, "Inputs", message=""),
            _node(
                "prompt-template", "Prompt Template", 1, 0, "Prompts",
                template=agent.system_prompt or DEFAULT_SYSTEM_PROMPT,
                inputVariables=["question"],
            ),
            self._llm_node(agent, provider, 2, 0),
            _node("chat-output", "Chat Output", 3, 0, "Outputs"),
        ]
        edges = [
            _edge("e1-2", "chat-input", "prompt-template"),
            _edge("e2-3", "prompt-template", "llm"),
            _edge("e3-4", "llm", "chat-output"),
        ]
        return nodes, edges

    def _rag_graph(self, agent: AgentDefinition, provider: ProviderRecord) -> tuple[list[GraphNode], list[GraphEdge]]:
        nodes = [
            # ingestion
            _node("doc-loader", "Document Loader", 0, 0, "Document Loaders", documentPaths=list(agent.documents)),
            _node(
                "text-splitter", "Recursive Character Text Splitter", 1, 0, "Text Splitters",
                label="Text Splitter", chunkSize=CHUNK_SIZE, chunkOverlap=CHUNK_OVERLAP,
            ),
            _node(
                "embeddings", "OpenAI Embeddings", 2, 0, "Embeddings",
                label="Embeddings", apiKey=provider.api_key, baseUrl=provider.base_url, modelName=EMBEDDINGS_MODEL,
            ),
            _node("vector-store", "Vector Store", 3, 0, "Vector Stores", indexName=agent.index_name or "default"),
            # query
            _node(
                "retriever", "Vector Store Retriever", 2, 1, "Retrievers",
                label="Retriever", k=agent.top_k if agent.top_k is not None else DEFAULT_TOP_K,
            ),
            _node(
                "prompt-template", "Prompt Template", 3, 1, "Prompts",
                template=agent.system_prompt or RAG_PROMPT_TEMPLATE,
                inputVariables=["context", "question"],
            ),
            self._llm_node(agent, provider, 4, 1),
            _node("chat-input", "Chat Input", 1, 1, "Inputs", message=""),
            _node("chat-output", "Chat Output", 5, 1, "Outputs"),
        ]
        edges = [
            _edge("e1-2", "doc-loader", "text-splitter"),
            _edge("e2-3", "text-splitter", "embeddings"),
            _edge("e3-4", "embeddings", "vector-store"),
            _edge("e5-6", "chat-input", "retriever"),
            _edge("e4-6", "vector-store", "retriever"),
            _edge("e6-7", "retriever", "prompt-template"),
            _edge("e7-8", "prompt-template", "llm"),
            _edge("e8-9", "llm", "chat-output"),
        ]
        return nodes, edges

    def _assistant_graph(self, agent: AgentDefinition, provider: ProviderRecord) -> tuple[list[GraphNode], list[GraphEdge]]:
        nodes = [
            _node("chat-input", "Chat Input", 0, 0, "Inputs", message=""),
            _node("agent-executor", "Agent Executor", 1, 0, "Agents", agentName=agent.name or "Assistant"),
            self._llm_node(agent, provider, 2, 0),
            _node("calculator", "Calculator", 1, 1, "Tools", tool="Calculator"),
            _node(
                "search", "Google Search", 2, 1, "Tools",
                tool="Search", apiKey=self.search_api_key, searchEngineId=self.search_engine_id,
            ),
            _node("chat-output", "Chat Output", 3, 0, "Outputs"),
        ]
        edges = [
            _edge("e1-2", "chat-input", "agent-executor"),
            _edge("e2-3", "agent-executor", "llm"),
            _edge("e3-4", "llm", "chat-output"),
            _edge("e2-5", "agent-executor", "calculator"),
            _edge("e2-6", "agent-executor", "search"),
        ]
        return nodes, edges

    # ── Export checks ─────────────────────────────────────────────────────────

    @staticmethod
    def validate_config(graph: WorkflowGraph) -> GraphCheck:
        """Check that *graph* is ready to hand to the Flowise API."""
        errors: list[str] = []

        if not graph.name or not graph.name.strip():
            errors.append("Agent name is required")
        if not graph.nodes:
            errors.append("At least one node is required")
        if not graph.edges:
            errors.append("At least one edge is required")

        llm_nodes = [n for n in graph.nodes if is_llm_type(n.type)]
        if not llm_nodes:
            errors.append("An LLM node is required")
        elif not any(isinstance(n.data.get("apiKey"), str) and n.data["apiKey"].strip() for n in llm_nodes):
            errors.append("LLM node API key is not configured")

        return GraphCheck(valid=not errors, errors=errors)

    @staticmethod
    def export_json(graph: WorkflowGraph) -> str:
        return graph.model_dump_json(indent=2)

    @staticmethod
    def import_json(text: str) -> WorkflowGraph:
        try:
            return WorkflowGraph.model_validate_json(text)
        except ValidationError as exc:
            raise ConfigGenerationError(f"Invalid workflow JSON: {exc.error_count()} error(s)") from exc
