"""Tests for the HTTP API routers and the health endpoint."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from flowise_core.services.node_catalog import get_node_catalog
from flowise_core.services.providers import ProviderRegistry, get_provider_registry


@pytest.fixture
def providers(openai_provider):
    return ProviderRegistry([openai_provider], default_id="openai")


@pytest.fixture
def app(catalog, providers):
    from flowise_core.main import app as _app

    _app.dependency_overrides[get_node_catalog] = lambda: catalog
    _app.dependency_overrides[get_provider_registry] = lambda: providers
    yield _app
    _app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


class TestHealth:
    def test_ok(self, client, monkeypatch, catalog):
        monkeypatch.setattr("flowise_core.main.get_node_catalog", lambda: catalog)
        data = client.get("/health").json()
        assert data["status"] == "ok"
        assert data["catalog"] is True
        assert "version" in data

    def test_degraded_without_catalog(self, client, monkeypatch):
        monkeypatch.setattr("flowise_core.main.get_node_catalog", lambda: None)
        data = client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["catalog"] is False


class TestNodesApi:
    def test_list_nodes(self, client, catalog):
        resp = client.get("/api/v1/nodes/")
        assert resp.status_code == 200
        assert len(resp.json()) == len(catalog.nodes)
        assert {"category", "label", "path_id"} <= set(resp.json()[0])

    def test_filter_by_category(self, client):
        nodes = client.get("/api/v1/nodes/", params={"category": "Memory"}).json()
        assert nodes
        assert {n["category"] for n in nodes} == {"Memory"}

    @pytest.mark.parametrize("spelling", ["memory", "MEMORY", "Memory"])
    def test_filter_by_category_ignores_case(self, client, catalog, spelling):
        nodes = client.get("/api/v1/nodes/", params={"category": spelling}).json()
        assert [n["path_id"] for n in nodes] == [n.path_id for n in catalog.find_by_category("Memory")]
        assert nodes

    def test_category_combined_with_search_ignores_case(self, client):
        nodes = client.get("/api/v1/nodes/", params={"category": "chat models", "q": "openai"}).json()
        assert nodes
        assert {n["category"] for n in nodes} == {"Chat Models"}

    def test_search(self, client):
        nodes = client.get("/api/v1/nodes/", params={"q": "calculator"}).json()
        assert [n["label"] for n in nodes] == ["Calculator"]

    def test_recommended_for_agent_type(self, client):
        nodes = client.get("/api/v1/nodes/", params={"agent_type": "rag"}).json()
        assert any(n["category"] == "Embeddings" for n in nodes)

    def test_categories_and_stats(self, client, catalog):
        assert client.get("/api/v1/nodes/categories").json() == catalog.categories
        stats = client.get("/api/v1/nodes/stats").json()
        assert stats["total_nodes"] == len(catalog.nodes)

    def test_catalog_unavailable(self, app, client):
        app.dependency_overrides[get_node_catalog] = lambda: None
        resp = client.get("/api/v1/nodes/")
        assert resp.status_code == 503

    def test_available_modifications(self, client, chat_graph):
        node = chat_graph.get_node("llm").model_dump()
        fields = client.post("/api/v1/nodes/available-modifications", json={"node": node}).json()
        assert fields[0]["name"] == "modelName"
        assert fields[0]["current_value"] == "gpt-4"

    def test_modify(self, client, chat_graph):
        body = {
            "graph": chat_graph.model_dump(),
            "requests": [{"nodeId": "llm", "modifications": {"temperature": 0.1}}],
        }
        result = client.post("/api/v1/nodes/modify", json=body).json()
        assert result["success"] is True
        assert result["modified_node_ids"] == ["llm"]
        llm = next(n for n in result["modified_graph"]["nodes"] if n["id"] == "llm")
        assert llm["data"]["temperature"] == 0.1

    def test_modify_rejected(self, client, chat_graph):
        body = {
            "graph": chat_graph.model_dump(),
            "requests": [{"node_id": "llm", "modifications": {"temperature": 9}}],
        }
        result = client.post("/api/v1/nodes/modify", json=body).json()
        assert result["success"] is False
        assert result["modified_graph"] is None

    def test_suggestions(self, client, chat_graph):
        body = {"graph": chat_graph.model_dump(), "context": {"workflow_type": "CHATFLOW"}}
        suggestions = client.post("/api/v1/nodes/suggestions", json=body).json()
        assert suggestions[0]["modifications"] == {"streaming": True}


class TestModelsApi:
    def test_list_and_filter(self, client):
        assert len(client.get("/api/v1/models/").json()) >= 8
        anthropic = client.get("/api/v1/models/", params={"provider": "anthropic"}).json()
        assert {m["id"] for m in anthropic} == {"claude-3-haiku", "claude-3-sonnet"}

    def test_capability_filter_repeats(self, client):
        models = client.get("/api/v1/models/", params=[("capabilities", "vision"), ("capabilities", "advanced-reasoning")]).json()
        assert {m["id"] for m in models} == {"gpt-4o", "claude-3-sonnet"}

    def test_get_model(self, client):
        model = client.get("/api/v1/models/gpt-4o").json()
        assert model["display_name"] == "GPT-4o"
        assert "validator" not in model["parameters"][0]

    def test_get_missing_model(self, client):
        assert client.get("/api/v1/models/nope").status_code == 404

    def test_recommend(self, client):
        recs = client.post("/api/v1/models/recommend", json={"performance": "speed", "budget": "low"}).json()
        assert 0 < len(recs) <= 5

    def test_optimal_configuration(self, client):
        config = client.post("/api/v1/models/gpt-4o/optimal-configuration", json={"performance": "speed"}).json()
        assert config["temperature"] == 0.1

    def test_validate_configuration(self, client):
        check = client.post("/api/v1/models/gpt-4o/validate", json={"configuration": {"temperature": 3}}).json()
        assert check["valid"] is False

    def test_estimate_cost(self, client):
        body = {
            "configuration": {},
            "usage": {"requests_per_day": 1000, "average_input_tokens": 500, "average_output_tokens": 200, "days": 30},
        }
        estimate = client.post("/api/v1/models/gpt-4o/estimate-cost", json=body).json()
        assert estimate["total_cost"] == pytest.approx(97.5)

    def test_estimate_cost_unknown_model(self, client):
        body = {"usage": {"requests_per_day": 1, "average_input_tokens": 1, "average_output_tokens": 1, "days": 1}}
        assert client.post("/api/v1/models/nope/estimate-cost", json=body).status_code == 404

    def test_estimate_cost_negative_usage(self, client):
        body = {"usage": {"requests_per_day": -1, "average_input_tokens": 1, "average_output_tokens": 1, "days": 1}}
        assert client.post("/api/v1/models/gpt-4o/estimate-cost", json=body).status_code == 422


class TestProvidersApi:
    def test_keys_are_hidden(self, client):
        providers = client.get("/api/v1/providers/").json()
        assert providers == [{
            "id": "openai",
            "name": "OpenAI",
            "base_url": "https://api.openai.com/v1/",
            "models": ["gpt-4", "gpt-4o", "gpt-3.5-turbo"],
            "is_active": True,
            "is_default": True,
            "has_api_key": True,
        }]


class TestWorkflowsApi:
    def test_generate_with_default_provider(self, client):
        resp = client.post("/api/v1/workflows/generate", json={"agent": {"name": "Bot", "type": "chat"}})
        assert resp.status_code == 200
        assert len(resp.json()["nodes"]) == 4

    def test_generate_unknown_provider(self, client):
        body = {"agent": {"name": "Bot"}, "provider_id": "ghost"}
        assert client.post("/api/v1/workflows/generate", json=body).status_code == 404

    def test_generate_without_active_provider(self, client, providers):
        providers.update("openai", is_active=False)
        resp = client.post("/api/v1/workflows/generate", json={"agent": {"name": "Bot"}})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "No API provider configured"

    def test_generate_with_explicit_provider(self, client, providers):
        providers.add("Local", "http://localhost:11434", api_key="none", models=["llama3"])
        body = {"agent": {"name": "Bot"}, "provider_id": "local"}
        graph = client.post("/api/v1/workflows/generate", json=body).json()
        llm = next(n for n in graph["nodes"] if n["id"] == "llm")
        assert llm["data"]["modelName"] == "llama3"

    def test_validate_config(self, client, chat_graph):
        check = client.post("/api/v1/workflows/validate-config", json=chat_graph.model_dump()).json()
        assert check == {"valid": True, "errors": []}

    def test_validate(self, client, assistant_graph):
        body = {
            "graph": assistant_graph.model_dump(),
            "options": {"include_performance_analysis": True, "include_cost_analysis": True},
        }
        preview = client.post("/api/v1/workflows/validate", json=body).json()
        assert preview["validation"]["valid"] is True
        assert preview["metrics"]["node_count"] == 6
        assert preview["performance"]["bottlenecks"]
        assert preview["cost"]["cost_breakdown"]["Tools"] == 2
