"""Tests for graph generation from agent definitions, export checks and JSON round trips."""

from __future__ import annotations

import pytest

from flowise_core.exceptions import ConfigGenerationError
from flowise_core.schemas.graph import AgentDefinition, ProviderRecord, WorkflowGraph
from flowise_core.services.config_generator import (
    DEFAULT_SYSTEM_PROMPT,
    RAG_PROMPT_TEMPLATE,
    ConfigGenerator,
    provider_node_type,
)


def _edges(graph):
    return [(e.source, e.target) for e in graph.edges]


class TestChatGraph:
    def test_shape(self, chat_graph):
        assert chat_graph.node_ids() == ["chat-input", "prompt-template", "llm", "chat-output"]
        assert _edges(chat_graph) == [
            ("chat-input", "prompt-template"),
            ("prompt-template", "llm"),
            ("llm", "chat-output"),
        ]

    def test_llm_node_carries_provider_credentials(self, chat_graph):
        llm = chat_graph.get_node("llm")
        assert llm.type == "ChatOpenAI"
        assert llm.category == "Chat Models"
        assert llm.data["apiKey"] == "sk-test"
        assert llm.data["baseUrl"] == "https://api.openai.com/v1/"
        assert llm.data["modelName"] == "gpt-4"

    def test_default_llm_parameters(self, chat_graph):
        data = chat_graph.get_node("llm").data
        assert data["temperature"] == 0.7
        assert data["maxTokens"] == 1000
        assert data["topP"] == 1
        assert data["frequencyPenalty"] == 0
        assert data["presencePenalty"] == 0

    def test_agent_overrides_keep_zero(self, generator, openai_provider):
        agent = AgentDefinition(name="Cold", temperature=0, maxTokens=50)
        data = generator.generate(agent, openai_provider).get_node("llm").data
        assert data["temperature"] == 0
        assert data["maxTokens"] == 50

    def test_system_prompt_used_as_template(self, chat_graph):
        assert chat_graph.get_node("prompt-template").data["template"] == "You answer support questions."

    def test_default_system_prompt(self, generator, openai_provider):
        graph = generator.generate(AgentDefinition(name="Plain"), openai_provider)
        assert graph.get_node("prompt-template").data["template"] == DEFAULT_SYSTEM_PROMPT

    def test_unknown_type_falls_back_to_chat(self, generator, openai_provider):
        graph = generator.generate(AgentDefinition(name="X", type="workflow"), openai_provider)
        assert len(graph.nodes) == 4

    def test_positions_follow_columns(self, chat_graph):
        xs = [n.position.x for n in chat_graph.nodes]
        assert xs == [0, 300, 600, 900]

    def test_deterministic(self, generator, chat_agent, openai_provider):
        first = generator.generate(chat_agent, openai_provider)
        second = generator.generate(chat_agent, openai_provider)
        assert first == second


class TestRagGraph:
    def test_shape(self, rag_graph):
        assert len(rag_graph.nodes) == 9
        assert len(rag_graph.edges) == 8
        assert ("vector-store", "retriever") in _edges(rag_graph)
        assert ("chat-input", "retriever") in _edges(rag_graph)

    def test_rag_defaults(self, rag_graph):
        assert rag_graph.get_node("prompt-template").data["template"] == RAG_PROMPT_TEMPLATE
        assert rag_graph.get_node("retriever").data["k"] == 4
        assert rag_graph.get_node("vector-store").data["indexName"] == "handbook"
        assert rag_graph.get_node("doc-loader").data["documentPaths"] == ["handbook.pdf"]
        splitter = rag_graph.get_node("text-splitter").data
        assert (splitter["chunkSize"], splitter["chunkOverlap"]) == (1000, 200)

    def test_embeddings_are_not_llm_nodes(self, rag_graph):
        assert rag_graph.get_node("embeddings").category == "Embeddings"


class TestAssistantGraph:
    def test_shape(self, assistant_graph):
        assert len(assistant_graph.nodes) == 6
        assert ("agent-executor", "calculator") in _edges(assistant_graph)
        assert ("agent-executor", "search") in _edges(assistant_graph)

    def test_search_tool_credentials(self, assistant_graph):
        search = assistant_graph.get_node("search").data
        assert search["apiKey"] == "google-key"
        assert search["searchEngineId"] == "engine-1"

    def test_agent_model_wins(self, assistant_graph):
        assert assistant_graph.get_node("llm").data["modelName"] == "gpt-4o"


class TestGenerationErrors:
    def test_missing_provider(self, generator, chat_agent):
        with pytest.raises(ConfigGenerationError, match="No API provider"):
            generator.generate(chat_agent, None)

    def test_inactive_provider(self, generator, chat_agent, openai_provider):
        inactive = openai_provider.model_copy(update={"is_active": False})
        with pytest.raises(ConfigGenerationError, match="not active"):
            generator.generate(chat_agent, inactive)

    def test_no_model_available(self, generator, chat_agent):
        provider = ProviderRecord(id="empty", name="Empty", api_key="k")
        with pytest.raises(ConfigGenerationError):
            generator.generate(chat_agent, provider)

    def test_error_is_value_error(self, generator, chat_agent):
        with pytest.raises(ValueError):
            generator.generate(chat_agent, None)


class TestProviderNodeType:
    def test_known_provider(self, openai_provider):
        assert provider_node_type(openai_provider) == "ChatOpenAI"

    def test_custom_provider(self):
        assert provider_node_type(ProviderRecord(id="acme", name="Acme")) == "Acme LLM"


class TestValidateConfig:
    def test_generated_graphs_are_valid(self, chat_graph, rag_graph, assistant_graph):
        for graph in (chat_graph, rag_graph, assistant_graph):
            check = ConfigGenerator.validate_config(graph)
            assert check.valid, check.errors

    def test_empty_graph(self):
        check = ConfigGenerator.validate_config(WorkflowGraph())
        assert check.errors == [
            "Agent name is required",
            "At least one node is required",
            "At least one edge is required",
            "An LLM node is required",
        ]

    def test_missing_api_key(self, generator, chat_agent):
        provider = ProviderRecord(id="openai", name="OpenAI", models=["gpt-4"])
        graph = generator.generate(chat_agent, provider)
        check = ConfigGenerator.validate_config(graph)
        assert not check.valid
        assert check.errors == ["LLM node API key is not configured"]


class TestJsonRoundTrip:
    def test_export_import(self, rag_graph):
        text = ConfigGenerator.export_json(rag_graph)
        assert text.startswith("{\n  ")
        assert ConfigGenerator.import_json(text) == rag_graph

    def test_import_rejects_bad_shape(self):
        with pytest.raises(ConfigGenerationError):
            ConfigGenerator.import_json('{"nodes": [{"id": 1}]}')

    def test_import_rejects_bad_json(self):
        with pytest.raises(ConfigGenerationError):
            ConfigGenerator.import_json("not json")
