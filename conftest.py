"""Root conftest: shared fixtures for all flowise_core tests."""

from __future__ import annotations

import os
import tempfile

# Keep tests away from the user's real conf.json
if not os.environ.get("FLOWISE_CORE_DIR"):
    os.environ["FLOWISE_CORE_DIR"] = tempfile.mkdtemp(prefix="flowise-core-test-")

import pytest

from flowise_core.schemas.graph import AgentDefinition, GraphEdge, GraphNode, ProviderRecord, WorkflowGraph
from flowise_core.services.config_generator import ConfigGenerator
from flowise_core.services.model_registry import ModelRegistry
from flowise_core.services.node_catalog import NodeCatalog
from flowise_core.validation.workflow import WorkflowValidator


@pytest.fixture(scope="session")
def catalog():
    from flowise_core.config import BASE_DIR

    loaded = NodeCatalog.load(BASE_DIR / "data" / "flowise_nodes.json")
    assert loaded is not None
    return loaded


@pytest.fixture
def registry():
    return ModelRegistry()


@pytest.fixture
def openai_provider():
    return ProviderRecord(
        id="openai",
        name="OpenAI",
        base_url="https://api.openai.com/v1/",
        api_key="sk-test",
        models=["gpt-4", "gpt-4o", "gpt-3.5-turbo"],
    )


@pytest.fixture
def generator():
    return ConfigGenerator(search_api_key="google-key", search_engine_id="engine-1")


@pytest.fixture
def validator(catalog):
    return WorkflowValidator(catalog=catalog, error_penalty=20, warning_penalty=5, max_paths=256)


@pytest.fixture
def chat_agent():
    return AgentDefinition(name="Support Bot", type="chat", systemPrompt="You answer support questions.")


@pytest.fixture
def rag_agent():
    return AgentDefinition(name="Docs Bot", type="rag", documents=["handbook.pdf"], indexName="handbook")


@pytest.fixture
def assistant_agent():
    return AgentDefinition(name="Helper", type="assistant", model="gpt-4o")


@pytest.fixture
def chat_graph(generator, chat_agent, openai_provider):
    return generator.generate(chat_agent, openai_provider)


@pytest.fixture
def rag_graph(generator, rag_agent, openai_provider):
    return generator.generate(rag_agent, openai_provider)


@pytest.fixture
def assistant_graph(generator, assistant_agent, openai_provider):
    return generator.generate(assistant_agent, openai_provider)


def make_graph(node_specs, edge_pairs, name="test-flow"):
    """Build a graph from ``(id, type, data)`` tuples and ``(source, target)`` pairs."""
    nodes = [GraphNode(id=nid, type=ntype, data=dict(data)) for nid, ntype, data in node_specs]
    edges = [GraphEdge(id=f"{src}->{tgt}", source=src, target=tgt) for src, tgt in edge_pairs]
    return WorkflowGraph(name=name, nodes=nodes, edges=edges)
