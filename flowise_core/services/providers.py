"""Provider registry: resolved LLM provider records for graph generation."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any

from flowise_core.schemas.graph import ProviderRecord

logger = logging.getLogger(__name__)

OPENAI_MODELS = ["gpt-4", "gpt-4-turbo", "gpt-4o", "gpt-4o-mini", "gpt-3.5-turbo"]
ZAI_MODELS = ["gpt-4", "gpt-4-turbo", "gpt-4o", "gpt-3.5-turbo"]

_UPDATABLE_FIELDS = {"name", "base_url", "api_key", "models", "is_active"}


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


class ProviderRegistry:
    """In-memory provider records, one of which is the default."""

    def __init__(self, providers: list[ProviderRecord], default_id: str) -> None:
        self._providers: dict[str, ProviderRecord] = {p.id: p for p in providers}
        self.default_id = default_id

    @classmethod
    def from_settings(cls, settings=None, conf=None) -> ProviderRegistry:
        """Built-in OpenAI and Z.AI providers plus any listed in conf.json.

        conf.json entries override built-ins with the same id.
        """
        if settings is None:
            from flowise_core.config import settings
        if conf is None:
            from flowise_core.config import load_conf

            conf = load_conf()

        providers = [
            ProviderRecord(
                id="openai",
                name="OpenAI",
                base_url="https://api.openai.com/v1/",
                api_key=settings.OPENAI_API_KEY,
                models=list(OPENAI_MODELS),
            ),
            ProviderRecord(
                id="z-ai",
                name="Z.AI",
                base_url="https://api.z.ai/api/paas/v4/",
                api_key=settings.ZAI_API_KEY,
                models=list(ZAI_MODELS),
            ),
        ]
        registry = cls(providers, settings.DEFAULT_PROVIDER)
        for raw in conf.providers:
            try:
                record = ProviderRecord.model_validate(raw)
            except ValueError:
                logger.warning("Ignoring malformed provider entry in conf.json: %r", raw)
                continue
            registry._providers[record.id] = record
        return registry

    def list(self, active_only: bool = False) -> list[ProviderRecord]:
        providers = list(self._providers.values())
        if active_only:
            providers = [p for p in providers if p.is_active]
        return providers

    def get(self, provider_id: str) -> ProviderRecord | None:
        return self._providers.get(provider_id)

    def default(self) -> ProviderRecord | None:
        """The default provider, or None when it is missing or inactive."""
        provider = self._providers.get(self.default_id)
        if provider is None or not provider.is_active:
            return None
        return provider

    def set_default(self, provider_id: str) -> bool:
        if provider_id not in self._providers:
            return False
        self.default_id = provider_id
        logger.info("Default provider set to %s", provider_id)
        return True

    def add(self, name: str, base_url: str, api_key: str = "", models: list[str] | None = None) -> ProviderRecord:
        record = ProviderRecord(
            id=slugify(name),
            name=name,
            base_url=base_url,
            api_key=api_key,
            models=list(models or []),
        )
        self._providers[record.id] = record
        logger.info("Provider %s added", record.id)
        return record

    def update(self, provider_id: str, **changes: Any) -> ProviderRecord | None:
        current = self._providers.get(provider_id)
        if current is None:
            return None
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown provider fields: {', '.join(sorted(unknown))}")
        updated = current.model_copy(update=changes)
        self._providers[provider_id] = updated
        logger.info("Provider %s updated (%s)", provider_id, ", ".join(sorted(changes)))
        return updated

    def delete(self, provider_id: str) -> bool:
        return self._providers.pop(provider_id, None) is not None


@lru_cache(maxsize=1)
def get_provider_registry() -> ProviderRegistry:
    return ProviderRegistry.from_settings()
