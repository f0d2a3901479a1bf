"""Curated LLM model table.

Prices are per 1K tokens in USD and are illustrative; deployments override
them by constructing ``ModelRegistry`` with their own descriptors.
"""

from __future__ import annotations

from flowise_core.schemas.llm_models import (
    Availability,
    Features,
    ModelCategory,
    ModelDescriptor,
    ModelProvider,
    Performance,
    Pricing,
    QualityTier,
    RateLimits,
    SpeedTier,
)
from flowise_core.schemas.parameters import ParameterSpec, ParamType

_OPENAI_REGIONS = frozenset({"us-east-1", "us-west-1", "eu-west-1", "asia-southeast-1"})
_ANTHROPIC_REGIONS = frozenset({"us-east-1", "us-west-2", "eu-central-1"})
_MAJOR_LANGUAGES = frozenset({"en", "es", "fr", "de", "it", "pt", "zh", "ja", "ko", "ru"})


# ── Parameter builders ───────────────────────────────────────────────────────

def _temperature(default: float, maximum: float = 2.0) -> ParameterSpec:
    return ParameterSpec(
        name="temperature",
        label="Temperature",
        type=ParamType.NUMBER,
        description=f"Controls response randomness (0-{maximum:g})",
        default_value=default,
        min=0,
        max=maximum,
        step=0.1,
    )


def _max_tokens(default: int, maximum: int) -> ParameterSpec:
    return ParameterSpec(
        name="maxTokens",
        label="Max Tokens",
        type=ParamType.NUMBER,
        description="Maximum number of tokens in the response",
        default_value=default,
        min=1,
        max=maximum,
        validator=lambda v: float(v).is_integer(),
    )


def _top_p() -> ParameterSpec:
    return ParameterSpec(
        name="topP",
        label="Top P",
        type=ParamType.NUMBER,
        description="Nucleus sampling (0-1)",
        default_value=1.0,
        min=0,
        max=1,
        step=0.1,
    )


def _penalty(name: str, label: str) -> ParameterSpec:
    return ParameterSpec(
        name=name,
        label=label,
        type=ParamType.NUMBER,
        description=f"{label} (-2 to 2)",
        default_value=0,
        min=-2,
        max=2,
        step=0.1,
    )


def _openai_chat_parameters(max_tokens_default: int, max_tokens_max: int) -> tuple[ParameterSpec, ...]:
    return (
        _temperature(0.7),
        _max_tokens(max_tokens_default, max_tokens_max),
        _top_p(),
        _penalty("frequencyPenalty", "Frequency Penalty"),
        _penalty("presencePenalty", "Presence Penalty"),
    )


# ── Models ───────────────────────────────────────────────────────────────────

DEFAULT_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(
        id="gpt-4o-mini",
        display_name="GPT-4o Mini",
        provider=ModelProvider.OPENAI,
        model_identifier="gpt-4o-mini",
        category=ModelCategory.CHAT,
        capabilities=frozenset({"reasoning", "coding", "multilingual", "function-calling"}),
        parameters=_openai_chat_parameters(2048, 128000),
        pricing=Pricing(input_per_k_tokens=0.00015, output_per_k_tokens=0.0006),
        performance=Performance(
            speed_tier=SpeedTier.FAST,
            quality_tier=QualityTier.HIGH,
            context_length=128000,
            supported_languages=_MAJOR_LANGUAGES,
        ),
        features=Features(streaming=True, function_calling=True, vision=True, json_mode=True, parallel_processing=True),
        availability=Availability(regions=_OPENAI_REGIONS, rate_limits=RateLimits(requests=10000, tokens=2000000)),
    ),
    ModelDescriptor(
        id="gpt-4o",
        display_name="GPT-4o",
        provider=ModelProvider.OPENAI,
        model_identifier="gpt-4o",
        category=ModelCategory.CHAT,
        capabilities=frozenset({"advanced-reasoning", "coding", "multilingual", "function-calling", "vision"}),
        parameters=_openai_chat_parameters(4096, 128000),
        pricing=Pricing(input_per_k_tokens=0.0025, output_per_k_tokens=0.01),
        performance=Performance(
            speed_tier=SpeedTier.MEDIUM,
            quality_tier=QualityTier.VERY_HIGH,
            context_length=128000,
            supported_languages=_MAJOR_LANGUAGES,
        ),
        features=Features(streaming=True, function_calling=True, vision=True, json_mode=True, parallel_processing=True),
        availability=Availability(regions=_OPENAI_REGIONS, rate_limits=RateLimits(requests=5000, tokens=1000000)),
    ),
    ModelDescriptor(
        id="gpt-3.5-turbo",
        display_name="GPT-3.5 Turbo",
        provider=ModelProvider.OPENAI,
        model_identifier="gpt-3.5-turbo",
        category=ModelCategory.CHAT,
        capabilities=frozenset({"reasoning", "coding", "multilingual"}),
        parameters=(_temperature(0.7), _max_tokens(2048, 4096)),
        pricing=Pricing(input_per_k_tokens=0.0005, output_per_k_tokens=0.0015),
        performance=Performance(
            speed_tier=SpeedTier.FAST,
            quality_tier=QualityTier.MEDIUM,
            context_length=16385,
            supported_languages=_MAJOR_LANGUAGES,
        ),
        features=Features(streaming=True, function_calling=True, json_mode=True),
        availability=Availability(
            regions=frozenset({"us-east-1", "us-west-1", "eu-west-1"}),
            rate_limits=RateLimits(requests=20000, tokens=4000000),
        ),
    ),
    ModelDescriptor(
        id="claude-3-haiku",
        display_name="Claude 3 Haiku",
        provider=ModelProvider.ANTHROPIC,
        model_identifier="claude-3-haiku-20240307",
        category=ModelCategory.CHAT,
        capabilities=frozenset({"reasoning", "coding", "multilingual", "function-calling"}),
        parameters=(_temperature(0.5, maximum=1.0), _max_tokens(1024, 4096)),
        pricing=Pricing(input_per_k_tokens=0.00025, output_per_k_tokens=0.00125),
        performance=Performance(
            speed_tier=SpeedTier.VERY_FAST,
            quality_tier=QualityTier.MEDIUM,
            context_length=200000,
            supported_languages=_MAJOR_LANGUAGES,
        ),
        features=Features(streaming=True, function_calling=True, vision=True, json_mode=True),
        availability=Availability(regions=_ANTHROPIC_REGIONS, rate_limits=RateLimits(requests=10000, tokens=2000000)),
    ),
    ModelDescriptor(
        id="claude-3-sonnet",
        display_name="Claude 3 Sonnet",
        provider=ModelProvider.ANTHROPIC,
        model_identifier="claude-3-sonnet-20240229",
        category=ModelCategory.CHAT,
        capabilities=frozenset({"advanced-reasoning", "coding", "multilingual", "function-calling", "vision"}),
        parameters=(_temperature(0.5, maximum=1.0), _max_tokens(4096, 4096)),
        pricing=Pricing(input_per_k_tokens=0.003, output_per_k_tokens=0.015),
        performance=Performance(
            speed_tier=SpeedTier.MEDIUM,
            quality_tier=QualityTier.HIGH,
            context_length=200000,
            supported_languages=_MAJOR_LANGUAGES,
        ),
        features=Features(streaming=True, function_calling=True, vision=True, json_mode=True, parallel_processing=True),
        availability=Availability(regions=_ANTHROPIC_REGIONS, rate_limits=RateLimits(requests=5000, tokens=1000000)),
    ),
    ModelDescriptor(
        id="gemini-1.5-flash",
        display_name="Gemini 1.5 Flash",
        provider=ModelProvider.GOOGLE,
        model_identifier="gemini-1.5-flash",
        category=ModelCategory.CHAT,
        capabilities=frozenset({"reasoning", "multilingual", "function-calling", "vision"}),
        parameters=(_temperature(0.7), _max_tokens(2048, 8192), _top_p()),
        pricing=Pricing(input_per_k_tokens=0.000075, output_per_k_tokens=0.0003),
        performance=Performance(
            speed_tier=SpeedTier.VERY_FAST,
            quality_tier=QualityTier.MEDIUM,
            context_length=1000000,
            supported_languages=_MAJOR_LANGUAGES,
        ),
        features=Features(streaming=True, function_calling=True, vision=True, json_mode=True),
        availability=Availability(
            regions=frozenset({"us-central1", "europe-west4", "asia-northeast1"}),
            rate_limits=RateLimits(requests=2000, tokens=4000000),
        ),
    ),
    ModelDescriptor(
        id="llama-3.1-8b",
        display_name="Llama 3.1 8B (local)",
        provider=ModelProvider.LOCAL,
        model_identifier="llama3.1:8b",
        category=ModelCategory.CHAT,
        capabilities=frozenset({"reasoning", "coding"}),
        parameters=(_temperature(0.8), _max_tokens(1024, 8192), _top_p()),
        pricing=Pricing(input_per_k_tokens=0.0, output_per_k_tokens=0.0),
        performance=Performance(
            speed_tier=SpeedTier.SLOW,
            quality_tier=QualityTier.LOW,
            context_length=131072,
            supported_languages=frozenset({"en", "de", "fr", "it", "pt", "es"}),
        ),
        features=Features(streaming=True),
    ),
    ModelDescriptor(
        id="text-embedding-3-small",
        display_name="Text Embedding 3 Small",
        provider=ModelProvider.OPENAI,
        model_identifier="text-embedding-3-small",
        category=ModelCategory.EMBEDDING,
        capabilities=frozenset({"embedding", "multilingual"}),
        parameters=(
            ParameterSpec(
                name="dimensions",
                label="Dimensions",
                type=ParamType.NUMBER,
                description="Size of the returned embedding vectors",
                default_value=1536,
                min=256,
                max=1536,
            ),
        ),
        pricing=Pricing(input_per_k_tokens=0.00002, output_per_k_tokens=0.0),
        performance=Performance(
            speed_tier=SpeedTier.VERY_FAST,
            quality_tier=QualityTier.HIGH,
            context_length=8191,
            supported_languages=_MAJOR_LANGUAGES,
        ),
        availability=Availability(regions=_OPENAI_REGIONS, rate_limits=RateLimits(requests=3000, tokens=1000000)),
    ),
)
