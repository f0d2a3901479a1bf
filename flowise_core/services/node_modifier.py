"""Node modifier: editable fields per node category, staged edits and atomic batch application."""

from __future__ import annotations

import logging
from typing import Any

from flowise_core.logging_config import log_context
from flowise_core.schemas import node_param_defs  # noqa: F401  registers category fields
from flowise_core.schemas.graph import GraphNode, WorkflowGraph
from flowise_core.schemas.modification import (
    FieldChange,
    ModificationContext,
    ModificationRequest,
    ModificationResult,
    ModificationSuggestion,
    WorkflowType,
)
from flowise_core.schemas.node_fields import get_category_fields
from flowise_core.schemas.parameters import ModificationField, ParameterSpec, ParamType
from flowise_core.validation.edges import EdgeValidator
from flowise_core.validation.parameters import check_parameter

logger = logging.getLogger(__name__)

# Model the advanced_reasoning capability upgrades gpt-3.5-turbo to
REASONING_UPGRADE_MODEL = "gpt-4"
AGENT_TEMPERATURE = 0.1
LONG_TERM_BUFFER_SIZE = 50


def _generic_spec(key: str, value: Any) -> ParameterSpec | None:
    """Spec for a scalar data key of a node without a registered category."""
    if isinstance(value, bool):
        param_type = ParamType.BOOLEAN
    elif isinstance(value, (int, float)):
        param_type = ParamType.NUMBER
    elif isinstance(value, str):
        param_type = ParamType.STRING
    else:
        return None
    return ParameterSpec(name=key, label=key, type=param_type, description=f"Parameter {key}")


class PendingModifications:
    """Modifications staged by the user, one request per node.

    Staging the same key twice keeps the last value.
    """

    def __init__(self) -> None:
        self._requests: dict[str, ModificationRequest] = {}

    def stage(self, node_id: str, key: str, value: Any) -> ModificationRequest:
        request = self._requests.get(node_id)
        if request is None:
            request = ModificationRequest(node_id=node_id)
            self._requests[node_id] = request
        request.modifications[key] = value
        return request

    def unstage(self, node_id: str, key: str | None = None) -> None:
        if key is None:
            self._requests.pop(node_id, None)
            return
        request = self._requests.get(node_id)
        if request is not None:
            request.modifications.pop(key, None)
            if not request.modifications:
                del self._requests[node_id]

    def requests(self) -> list[ModificationRequest]:
        return [r.model_copy(deep=True) for r in self._requests.values()]

    def clear(self) -> None:
        self._requests.clear()

    def __len__(self) -> int:
        return len(self._requests)


class NodeModifier:
    """Exposes editable node fields and applies modification batches."""

    # ── Field discovery ───────────────────────────────────────────────────────

    def available_modifications(self, node: GraphNode) -> list[ModificationField]:
        entry = get_category_fields(node.category)
        if entry is not None:
            fields = []
            for spec in entry.fields:
                current = node.data.get(spec.name)
                if current is None and spec.name in entry.value_aliases:
                    current = node.data.get(entry.value_aliases[spec.name])
                fields.append(ModificationField.from_spec(spec, current))
            return fields

        generic = []
        for key, value in node.data.items():
            if key in ("label", "category"):
                continue
            spec = _generic_spec(key, value)
            if spec is not None:
                generic.append(ModificationField.from_spec(spec, value))
        return generic

    def _field_spec(self, node: GraphNode, key: str) -> tuple[ParameterSpec | None, bool]:
        """Return (spec, category_is_registered) for *key* on *node*."""
        entry = get_category_fields(node.category)
        if entry is not None:
            return entry.get_field(key), True
        return _generic_spec(key, node.data.get(key)), False

    # ── Application ───────────────────────────────────────────────────────────

    def apply_modifications(
        self,
        graph: WorkflowGraph,
        requests: list[ModificationRequest],
        context: ModificationContext | None = None,
    ) -> ModificationResult:
        """Merge *requests* into *graph* as one all-or-nothing batch.

        On success the graph is updated in place and returned together with
        the ids of nodes whose data actually changed. On any error the graph
        is left untouched.
        """
        context = context or ModificationContext()
        working = graph.model_copy(deep=True)
        errors: list[str] = []
        warnings: list[str] = []
        changes: dict[str, dict[str, FieldChange]] = {}
        modified_node_ids: list[str] = []

        with log_context(workflow=graph.name):
            for request in requests:
                node = working.get_node(request.node_id)
                if node is None:
                    errors.append(f"Node '{request.node_id}' not found")
                    continue

                with log_context(node_id=node.id):
                    for key, value in request.modifications.items():
                        spec, registered = self._field_spec(node, key)
                        if spec is not None:
                            error = check_parameter(spec, value)
                            if error:
                                errors.append(f"Node '{node.id}': {error}")
                                continue
                        elif registered:
                            warnings.append(f"Node '{node.id}': '{key}' is not an editable {node.category} field")

                        old = node.data.get(key)
                        if key in node.data and old == value:
                            continue
                        node_changes = changes.setdefault(node.id, {})
                        if key in node_changes:
                            node_changes[key].new = value
                        else:
                            node_changes[key] = FieldChange(old=old, new=value)
                        node.data[key] = value
                        if node.id not in modified_node_ids:
                            modified_node_ids.append(node.id)

            if not errors:
                errors.extend(self.validate_workflow(working, context))

            if errors:
                logger.warning("Rejected modification batch of %d request(s): %s", len(requests), "; ".join(errors))
                return ModificationResult(success=False, errors=errors, warnings=warnings)

            graph.nodes = working.nodes
            logger.info("Applied modifications to %d node(s): %s", len(modified_node_ids), ", ".join(modified_node_ids))
            return ModificationResult(
                success=True,
                modified_graph=graph,
                modified_node_ids=modified_node_ids,
                changes=changes,
                warnings=warnings,
            )

    @staticmethod
    def validate_workflow(graph: WorkflowGraph, context: ModificationContext | None = None) -> list[str]:
        """Graph-level checks run on the merged graph before a batch commits."""
        errors = EdgeValidator.validate_graph_edges(graph)
        categories = {n.category for n in graph.nodes}
        workflow_type = context.workflow_type if context else None

        if workflow_type == WorkflowType.CHATFLOW and "Chat Models" not in categories:
            errors.append("CHATFLOW workflows need a Chat Models node")
        if workflow_type == WorkflowType.AGENTFLOW and not categories & {"LLM", "Chat Models"}:
            errors.append("AGENTFLOW workflows need an LLM or Chat Models node")

        for node in graph.nodes:
            if node.category == "Chat Models" and not node.data.get("modelName"):
                errors.append(f"Chat Models node '{node.id}' has no modelName")
        return errors

    # ── Suggestions ───────────────────────────────────────────────────────────

    def generate_suggestions(
        self,
        graph: WorkflowGraph,
        context: ModificationContext | None = None,
    ) -> list[ModificationSuggestion]:
        """Advisory modifications; apply them with ``apply_modifications``."""
        context = context or ModificationContext()
        capabilities = set(context.agent_capabilities)
        suggestions: list[ModificationSuggestion] = []

        for node in graph.nodes:
            data = node.data
            category = node.category

            if category == "Chat Models":
                if context.workflow_type == WorkflowType.CHATFLOW and data.get("streaming") is not True:
                    suggestions.append(ModificationSuggestion(
                        node_id=node.id,
                        modifications={"streaming": True},
                        reason="Streaming lets chat users see the answer as it is generated",
                        priority="medium",
                    ))
                if data.get("modelName") == "gpt-3.5-turbo" and "advanced_reasoning" in capabilities:
                    suggestions.append(ModificationSuggestion(
                        node_id=node.id,
                        modifications={"modelName": REASONING_UPGRADE_MODEL},
                        reason="Upgrade to a stronger model to match the agent's advanced reasoning capability",
                        priority="high",
                    ))
                temperature = data.get("temperature")
                if (
                    context.workflow_type == WorkflowType.AGENTFLOW
                    and isinstance(temperature, (int, float))
                    and not isinstance(temperature, bool)
                    and temperature > AGENT_TEMPERATURE
                ):
                    suggestions.append(ModificationSuggestion(
                        node_id=node.id,
                        modifications={"temperature": AGENT_TEMPERATURE},
                        reason="Lower temperature gives more consistent tool calls in agent flows",
                        priority="medium",
                    ))

            elif category == "Memory" and "long_term_memory" in capabilities:
                buffer_size = data.get("bufferSize")
                if not isinstance(buffer_size, int) or buffer_size < LONG_TERM_BUFFER_SIZE:
                    suggestions.append(ModificationSuggestion(
                        node_id=node.id,
                        modifications={"bufferSize": LONG_TERM_BUFFER_SIZE},
                        reason="Larger memory buffer to support long-term memory",
                        priority="low",
                    ))

            elif category == "Text Splitters":
                size, overlap = data.get("chunkSize"), data.get("chunkOverlap")
                if isinstance(size, int) and isinstance(overlap, int) and overlap >= size:
                    suggestions.append(ModificationSuggestion(
                        node_id=node.id,
                        modifications={"chunkOverlap": size // 5},
                        reason="Chunk overlap must be smaller than the chunk size",
                        priority="high",
                    ))

        logger.debug("Generated %d modification suggestion(s) for %s", len(suggestions), graph.name)
        return suggestions
