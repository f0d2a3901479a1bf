"""Model registry: filtering, scoring, recommendation and cost estimation over LLM descriptors."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Iterable

from flowise_core.exceptions import ModelNotFoundError
from flowise_core.schemas.llm_model_defs import DEFAULT_MODELS
from flowise_core.schemas.llm_models import (
    ConfigurationCheck,
    CostBreakdown,
    CostEstimate,
    CostOptimization,
    ExpectedImprovement,
    ModelDescriptor,
    ModelFilters,
    OptimizationContext,
    QualityTier,
    Recommendation,
    RecommendationContext,
    SpeedTier,
    UsageProfile,
)
from flowise_core.validation.parameters import check_parameter

logger = logging.getLogger(__name__)

QUALITY_POINTS: dict[QualityTier, int] = {
    QualityTier.VERY_HIGH: 30,
    QualityTier.HIGH: 25,
    QualityTier.MEDIUM: 15,
    QualityTier.LOW: 5,
}

SPEED_POINTS: dict[SpeedTier, int] = {
    SpeedTier.VERY_FAST: 20,
    SpeedTier.FAST: 15,
    SpeedTier.MEDIUM: 10,
    SpeedTier.SLOW: 5,
}

# Per-1K input price above which a model does not fit a low budget.
LOW_BUDGET_INPUT_PRICE = 0.001
MAX_RECOMMENDATIONS = 5
RECOMMENDATION_THRESHOLD = 0.3
# maxTokens above this is treated as avoidable spend
MAX_TOKENS_SOFT_CAP = 2048
CACHE_SUGGESTION_REQUESTS_PER_DAY = 1000


def model_score(model: ModelDescriptor) -> float:
    """Desirability used to order ``list_models`` results.

    Increases with quality tier, speed tier, feature flags and inverse price.
    """
    score = float(QUALITY_POINTS[model.performance.quality_tier])
    score += SPEED_POINTS[model.performance.speed_tier]

    features = model.features
    if features.function_calling:
        score += 10
    if features.vision:
        score += 10
    if features.streaming:
        score += 5
    if features.json_mode:
        score += 5

    combined_price = model.pricing.input_per_k_tokens + model.pricing.output_per_k_tokens
    score += 20 / (1 + combined_price * 1000)
    return score


def recommendation_score(model: ModelDescriptor, context: RecommendationContext) -> float:
    score = 0.5

    missing = [c for c in context.required_capabilities if c not in model.capabilities]
    score -= 0.2 * len(missing)

    if context.budget == "low" and model.pricing.input_per_k_tokens > LOW_BUDGET_INPUT_PRICE:
        score -= 0.3
    elif context.budget == "high" and model.performance.quality_tier == QualityTier.VERY_HIGH:
        score += 0.2

    if context.performance == "speed" and model.performance.speed_tier == SpeedTier.VERY_FAST:
        score += 0.3
    elif context.performance == "quality" and model.performance.quality_tier == QualityTier.VERY_HIGH:
        score += 0.3
    elif context.performance == "balanced":
        score += 0.1

    if context.expected_load == "high" and model.performance.speed_tier == SpeedTier.SLOW:
        score -= 0.2

    if context.region and context.region not in model.availability.regions:
        score -= 0.4

    return max(0.0, min(1.0, score))


def _expected_improvement(model: ModelDescriptor, context: RecommendationContext) -> ExpectedImprovement:
    improvement = ExpectedImprovement()
    if context.budget == "low" and model.pricing.input_per_k_tokens < LOW_BUDGET_INPUT_PRICE:
        improvement.cost = 50
    if context.performance == "speed" and model.performance.speed_tier == SpeedTier.VERY_FAST:
        improvement.performance = 60
    if context.performance == "quality" and model.performance.quality_tier == QualityTier.VERY_HIGH:
        improvement.quality = 40
    return improvement


def _recommendation_reason(model: ModelDescriptor, score: float) -> str:
    strengths = []
    if model.performance.quality_tier == QualityTier.VERY_HIGH:
        strengths.append("very high quality")
    if model.performance.speed_tier == SpeedTier.VERY_FAST:
        strengths.append("very fast responses")
    if model.pricing.input_per_k_tokens < LOW_BUDGET_INPUT_PRICE:
        strengths.append("low cost")
    if model.features.function_calling:
        strengths.append("function calling support")
    if model.features.vision:
        strengths.append("image input support")
    summary = ", ".join(strengths) if strengths else "general fit"
    return f"Recommended for: {summary} ({round(score * 100)}% compatibility)"


class ModelRegistry:
    """Read-only table of model descriptors with the operations built on it."""

    def __init__(self, models: Iterable[ModelDescriptor] = DEFAULT_MODELS) -> None:
        self._models: dict[str, ModelDescriptor] = {m.id: m for m in models}

    # ── Lookup ────────────────────────────────────────────────────────────────

    def list_models(self, filters: ModelFilters | None = None) -> list[ModelDescriptor]:
        """Models matching every given filter, most desirable first.

        ``capabilities`` requires all listed capabilities; ``max_price``
        bounds both the input and the output price.
        """
        models = list(self._models.values())
        if filters is not None:
            if filters.provider is not None:
                models = [m for m in models if m.provider == filters.provider]
            if filters.category is not None:
                models = [m for m in models if m.category == filters.category]
            if filters.capabilities:
                wanted = set(filters.capabilities)
                models = [m for m in models if wanted <= m.capabilities]
            if filters.max_price is not None:
                models = [
                    m for m in models
                    if m.pricing.input_per_k_tokens <= filters.max_price
                    and m.pricing.output_per_k_tokens <= filters.max_price
                ]
        return sorted(models, key=model_score, reverse=True)

    def get_model(self, model_id: str) -> ModelDescriptor | None:
        return self._models.get(model_id)

    def _require(self, model_id: str) -> ModelDescriptor:
        model = self._models.get(model_id)
        if model is None:
            raise ModelNotFoundError(model_id)
        return model

    # ── Recommendation ────────────────────────────────────────────────────────

    def recommend(self, context: RecommendationContext) -> list[Recommendation]:
        recommendations: list[Recommendation] = []
        for model in self._models.values():
            score = recommendation_score(model, context)
            if score <= RECOMMENDATION_THRESHOLD:
                continue
            recommendations.append(Recommendation(
                model_id=model.id,
                reason=_recommendation_reason(model, score),
                confidence=round(score, 4),
                expected_improvement=_expected_improvement(model, context),
                configuration=self.generate_optimal_configuration(model, context),
            ))

        recommendations.sort(key=lambda r: r.confidence, reverse=True)
        logger.debug(
            "Recommended %d models for use case %r",
            min(len(recommendations), MAX_RECOMMENDATIONS),
            context.use_case,
        )
        return recommendations[:MAX_RECOMMENDATIONS]

    def generate_optimal_configuration(
        self,
        model: ModelDescriptor,
        context: OptimizationContext,
    ) -> dict[str, Any]:
        use_case = context.use_case.lower()
        config: dict[str, Any] = {}

        for param in model.parameters:
            if param.name == "temperature":
                if context.performance == "speed":
                    config[param.name] = 0.1
                elif context.performance == "quality":
                    config[param.name] = 0.7
                else:
                    config[param.name] = param.default_value
            elif param.name == "maxTokens":
                if "code" in use_case or "analysis" in use_case:
                    config[param.name] = int(min(param.max or 4096, 4096))
                else:
                    config[param.name] = param.default_value
            elif param.name in ("frequencyPenalty", "presencePenalty"):
                if "creative" in use_case or "writing" in use_case:
                    config[param.name] = 0.3
                else:
                    config[param.name] = 0
            else:
                config[param.name] = param.default_value

        return config

    # ── Configuration checks ─────────────────────────────────────────────────

    def validate_configuration(self, model_id: str, configuration: dict[str, Any]) -> ConfigurationCheck:
        """Check *configuration* against the model's parameter specs.

        Missing optional parameters are filled in place with their defaults.
        """
        model = self._models.get(model_id)
        if model is None:
            return ConfigurationCheck(valid=False, errors=[f'Model "{model_id}" not found'])

        errors: list[str] = []
        warnings: list[str] = []

        for param in model.parameters:
            value = configuration.get(param.name)
            if value is None and not param.required:
                if param.default_value is not None:
                    configuration[param.name] = param.default_value
                continue
            error = check_parameter(param, value)
            if error:
                errors.append(error)

        temperature = configuration.get("temperature")
        if isinstance(temperature, (int, float)) and not isinstance(temperature, bool) and temperature > 1.5:
            warnings.append("High temperature may produce less coherent responses")
        max_tokens = configuration.get("maxTokens")
        if isinstance(max_tokens, (int, float)) and not isinstance(max_tokens, bool) and max_tokens > 8000:
            warnings.append("A high token limit increases cost and response time")

        return ConfigurationCheck(
            valid=not errors,
            errors=errors,
            warnings=warnings,
            configuration=configuration,
        )

    # ── Cost ─────────────────────────────────────────────────────────────────

    def _usage_cost(self, model: ModelDescriptor, usage: UsageProfile, output_tokens: float | None = None) -> tuple[float, float]:
        total_requests = usage.requests_per_day * usage.days
        total_input_tokens = total_requests * usage.average_input_tokens
        total_output_tokens = total_requests * (usage.average_output_tokens if output_tokens is None else output_tokens)
        input_cost = (total_input_tokens / 1000) * model.pricing.input_per_k_tokens
        output_cost = (total_output_tokens / 1000) * model.pricing.output_per_k_tokens
        return input_cost, output_cost

    def _cheaper_alternative(self, model: ModelDescriptor) -> ModelDescriptor | None:
        """Cheapest same-provider, same-category model sharing a capability."""
        candidates = [
            m for m in self._models.values()
            if m.provider == model.provider
            and m.category == model.category
            and m.pricing.input_per_k_tokens < model.pricing.input_per_k_tokens
            and m.capabilities & model.capabilities
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda m: (m.pricing.input_per_k_tokens, m.pricing.output_per_k_tokens))

    def estimate_cost(self, model_id: str, configuration: dict[str, Any], usage: UsageProfile) -> CostEstimate:
        model = self._require(model_id)
        input_cost, output_cost = self._usage_cost(model, usage)
        total_cost = input_cost + output_cost

        suggestions: list[str] = []
        savings_by_source: list[tuple[float, str]] = []

        alternative = self._cheaper_alternative(model)
        if alternative is not None:
            alt_in, alt_out = self._usage_cost(alternative, usage)
            saving = total_cost - (alt_in + alt_out)
            # output price can outweigh the input saving
            if saving > 0:
                savings_by_source.append((saving, f"Consider {alternative.display_name} to reduce costs"))

        max_tokens = configuration.get("maxTokens")
        capped = (
            isinstance(max_tokens, (int, float))
            and not isinstance(max_tokens, bool)
            and max_tokens > MAX_TOKENS_SOFT_CAP
        )
        if capped:
            cap_in, cap_out = self._usage_cost(
                model, usage, output_tokens=min(usage.average_output_tokens, MAX_TOKENS_SOFT_CAP)
            )
            saving = total_cost - (cap_in + cap_out)
            savings_by_source.append((saving, f"Reduce maxTokens to {MAX_TOKENS_SOFT_CAP} or what responses actually need"))

        potential_savings = max([0.0] + [s for s, _ in savings_by_source])
        # larger saving first
        for _, text in sorted(savings_by_source, key=lambda item: item[0], reverse=True):
            suggestions.append(text)

        temperature = configuration.get("temperature")
        if isinstance(temperature, (int, float)) and not isinstance(temperature, bool) and temperature > 1.0:
            suggestions.append("Lower the temperature for more consistent and usually shorter responses")
        if usage.requests_per_day > CACHE_SUGGESTION_REQUESTS_PER_DAY:
            suggestions.append("Cache responses to repeated requests")

        return CostEstimate(
            total_cost=total_cost,
            breakdown=CostBreakdown(
                input_cost=input_cost,
                output_cost=output_cost,
                currency=model.pricing.currency,
            ),
            optimization=CostOptimization(potential_savings=potential_savings, suggestions=suggestions),
        )


@lru_cache(maxsize=1)
def get_model_registry() -> ModelRegistry:
    return ModelRegistry()
