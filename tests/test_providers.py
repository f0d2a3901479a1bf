"""Tests for the provider registry built from settings and conf.json."""

from __future__ import annotations

import pytest

from flowise_core.config import CoreConfig, Settings
from flowise_core.services.providers import ProviderRegistry, slugify


@pytest.fixture
def registry():
    settings = Settings(OPENAI_API_KEY="sk-openai", ZAI_API_KEY="", DEFAULT_PROVIDER="openai")
    return ProviderRegistry.from_settings(settings, CoreConfig())


class TestBuiltins:
    def test_default_providers(self, registry):
        assert [p.id for p in registry.list()] == ["openai", "z-ai"]
        assert registry.get("z-ai").base_url == "https://api.z.ai/api/paas/v4/"

    def test_default_is_openai(self, registry):
        default = registry.default()
        assert default.id == "openai"
        assert default.api_key == "sk-openai"
        assert "gpt-4" in default.models

    def test_inactive_default_is_none(self, registry):
        registry.update("openai", is_active=False)
        assert registry.default() is None
        assert [p.id for p in registry.list(active_only=True)] == ["z-ai"]

    def test_missing_default_is_none(self):
        settings = Settings(DEFAULT_PROVIDER="nowhere")
        assert ProviderRegistry.from_settings(settings, CoreConfig()).default() is None


class TestConfOverlay:
    def test_conf_providers_added(self):
        conf = CoreConfig(providers=[{"id": "local", "name": "Local", "baseUrl": "http://localhost:11434", "models": ["llama3"]}])
        registry = ProviderRegistry.from_settings(Settings(), conf)
        assert registry.get("local").models == ["llama3"]

    def test_conf_overrides_builtin(self):
        conf = CoreConfig(providers=[{"id": "openai", "name": "Proxy", "baseUrl": "http://proxy/v1/"}])
        registry = ProviderRegistry.from_settings(Settings(), conf)
        assert registry.get("openai").name == "Proxy"

    def test_malformed_entry_skipped(self, caplog):
        conf = CoreConfig(providers=[{"name": "No id"}])
        registry = ProviderRegistry.from_settings(Settings(), conf)
        assert len(registry.list()) == 2
        assert "malformed provider entry" in caplog.text


class TestMutation:
    def test_add_slugifies_name(self, registry):
        record = registry.add("My Proxy", "http://proxy/v1/", api_key="k", models=["gpt-4o"])
        assert record.id == "my-proxy"
        assert registry.get("my-proxy") is record

    def test_update(self, registry):
        updated = registry.update("z-ai", api_key="zk")
        assert updated.api_key == "zk"
        assert registry.get("z-ai").api_key == "zk"

    def test_update_unknown_field(self, registry):
        with pytest.raises(ValueError, match="Unknown provider fields"):
            registry.update("z-ai", colour="red")

    def test_update_missing_provider(self, registry):
        assert registry.update("ghost", name="x") is None

    def test_set_default_and_delete(self, registry):
        assert registry.set_default("z-ai")
        assert registry.default().id == "z-ai"
        assert not registry.set_default("ghost")
        assert registry.delete("z-ai")
        assert registry.default() is None
        assert not registry.delete("z-ai")

    def test_slugify(self):
        assert slugify("  Azure  OpenAI ") == "azure-openai"
