"""LLM model descriptors and the request/response shapes of the model registry."""

from __future__ import annotations

import enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from flowise_core.schemas.parameters import ParameterSpec


class ModelProvider(str, enum.Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    META = "meta"
    COHERE = "cohere"
    LOCAL = "local"


class ModelCategory(str, enum.Enum):
    CHAT = "chat"
    COMPLETION = "completion"
    EMBEDDING = "embedding"
    FUNCTION_CALLING = "function-calling"


class SpeedTier(str, enum.Enum):
    VERY_FAST = "very-fast"
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


class QualityTier(str, enum.Enum):
    VERY_HIGH = "very-high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Pricing(BaseModel):
    """Price per 1K tokens."""

    model_config = ConfigDict(frozen=True)

    input_per_k_tokens: float
    output_per_k_tokens: float
    currency: str = "USD"


class Performance(BaseModel):
    model_config = ConfigDict(frozen=True)

    speed_tier: SpeedTier
    quality_tier: QualityTier
    context_length: int
    supported_languages: frozenset[str] = frozenset()


class Features(BaseModel):
    model_config = ConfigDict(frozen=True)

    streaming: bool = False
    function_calling: bool = False
    vision: bool = False
    json_mode: bool = False
    parallel_processing: bool = False


class RateLimits(BaseModel):
    model_config = ConfigDict(frozen=True)

    requests: int = 0
    tokens: int = 0


class Availability(BaseModel):
    model_config = ConfigDict(frozen=True)

    regions: frozenset[str] = frozenset()
    rate_limits: RateLimits = RateLimits()


class ModelDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    provider: ModelProvider
    model_identifier: str
    category: ModelCategory
    capabilities: frozenset[str] = frozenset()
    parameters: tuple[ParameterSpec, ...] = ()
    pricing: Pricing
    performance: Performance
    features: Features = Features()
    availability: Availability = Availability()

    def get_parameter(self, name: str) -> ParameterSpec | None:
        for param in self.parameters:
            if param.name == name:
                return param
        return None


# ── Registry inputs ──────────────────────────────────────────────────────────


class ModelFilters(BaseModel):
    provider: ModelProvider | None = None
    category: ModelCategory | None = None
    capabilities: list[str] = []
    max_price: float | None = None


class OptimizationContext(BaseModel):
    use_case: str = ""
    performance: Literal["speed", "quality", "balanced"] = "balanced"
    expected_load: Literal["low", "medium", "high"] = "medium"


class RecommendationContext(OptimizationContext):
    budget: Literal["low", "medium", "high"] = "medium"
    required_capabilities: list[str] = []
    region: str | None = None


class UsageProfile(BaseModel):
    requests_per_day: float = Field(ge=0)
    average_input_tokens: float = Field(ge=0)
    average_output_tokens: float = Field(ge=0)
    days: float = Field(ge=0)


# ── Registry outputs ─────────────────────────────────────────────────────────


class ExpectedImprovement(BaseModel):
    """Percentages relative to a typical baseline model."""

    cost: int | None = None
    performance: int | None = None
    quality: int | None = None


class Recommendation(BaseModel):
    model_id: str
    reason: str
    confidence: float
    expected_improvement: ExpectedImprovement = ExpectedImprovement()
    configuration: dict[str, Any] = {}


class ConfigurationCheck(BaseModel):
    valid: bool
    errors: list[str] = []
    warnings: list[str] = []
    configuration: dict[str, Any] = {}


class CostBreakdown(BaseModel):
    input_cost: float
    output_cost: float
    currency: str


class CostOptimization(BaseModel):
    potential_savings: float = 0.0
    suggestions: list[str] = []


class CostEstimate(BaseModel):
    total_cost: float
    breakdown: CostBreakdown
    optimization: CostOptimization = CostOptimization()
