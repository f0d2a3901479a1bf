"""Workflow validation: structural checks, node configuration findings, metrics and preview.

The validator never raises on a malformed graph; every problem becomes an
``Issue`` in the report. Only a missing graph (``None``) is rejected.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from flowise_core.logging_config import log_context
from flowise_core.schemas.graph import GraphNode, WorkflowGraph
from flowise_core.schemas.node_params import (
    PAYLOAD_TYPES,
    ChatModelParams,
    DocumentStoreParams,
    GenericParams,
    LLMParams,
    MemoryParams,
    PromptParams,
    parse_payload,
)
from flowise_core.schemas.validation import (
    Bottleneck,
    CostAnalysis,
    EdgePreview,
    ExecutionPath,
    Issue,
    NodePreview,
    NodeStatus,
    NodeStatusEntry,
    OptimizationSuggestion,
    PerformanceAnalysis,
    Severity,
    ValidationOptions,
    ValidationPreview,
    ValidationReport,
    WorkflowMetrics,
)
from flowise_core.services.topology import (
    Topology,
    _reachable_node_ids,
    build_topology,
    detect_cycles,
    divergence_count,
    enumerate_paths,
    max_depth,
)
from flowise_core.validation.edges import EdgeValidator

if TYPE_CHECKING:
    from flowise_core.services.node_catalog import NodeCatalog

logger = logging.getLogger(__name__)

MODEL_CATEGORIES = frozenset({"Chat Models", "LLM"})
COMPLEX_CATEGORIES = frozenset({"LLM", "Agents", "Tools"})
MEMORY_HEAVY_CATEGORIES = frozenset({"Memory", "Document Stores", "Embeddings", "Vector Stores"})
BOTTLENECK_CATEGORIES = frozenset({"LLM", "Chat Models", "Agents", "Document Stores"})

# Rough per-node latency in seconds, used for the critical path.
CATEGORY_SECONDS: dict[str, float] = {
    "Chat Models": 2.0,
    "LLM": 2.0,
    "Document Stores": 1.25,
    "Retrievers": 1.25,
    "Vector Stores": 1.25,
    "Embeddings": 1.0,
    "Memory": 0.05,
}
DEFAULT_SECONDS = 0.25

PREMIUM_MODEL_MARKERS = ("gpt-4", "claude-3-opus", "claude-3-sonnet", "gemini-1.5-pro")
MONTHLY_COST_PER_PREMIUM_NODE = 50

MAX_BUFFER_SIZE = 100
MAX_MEMORY_NODES = 3


def _model_name(node: GraphNode) -> str:
    value = node.data.get("modelName") or node.data.get("model") or node.data.get("llmModel") or ""
    return value if isinstance(value, str) else ""


def _is_premium(node: GraphNode) -> bool:
    name = _model_name(node).lower()
    return "mini" not in name and any(marker in name for marker in PREMIUM_MODEL_MARKERS)


def _node_seconds(node: GraphNode) -> float:
    return CATEGORY_SECONDS.get(node.category, DEFAULT_SECONDS)


def _node_time_label(node: GraphNode) -> str:
    category = node.category
    if category in MODEL_CATEGORIES:
        return "1-3s"
    if category in ("Document Stores", "Retrievers", "Vector Stores"):
        return "0.5-2s"
    if category == "Memory":
        return "< 0.1s"
    return "< 0.5s"


def _node_cost_label(node: GraphNode) -> str:
    if _is_premium(node):
        return "$$$"
    if _model_name(node):
        return "$$"
    return "$"


def _format_duration(seconds: float) -> str:
    if seconds < 2:
        return "< 2 seconds"
    if seconds < 10:
        return f"{round(seconds)} seconds"
    if seconds < 60:
        return f"{round(seconds / 10) * 10} seconds"
    return f"{max(1, round(seconds / 60))} minutes"


def _bucket(score: float) -> str:
    if score < 30:
        return "low"
    if score < 70:
        return "medium"
    return "high"


class WorkflowValidator:
    """Scores and flags a workflow graph before export."""

    def __init__(
        self,
        catalog: NodeCatalog | None = None,
        error_penalty: int | None = None,
        warning_penalty: int | None = None,
        max_paths: int | None = None,
    ) -> None:
        from flowise_core.config import settings

        self.catalog = catalog
        self.error_penalty = settings.VALIDATION_ERROR_PENALTY if error_penalty is None else error_penalty
        self.warning_penalty = settings.VALIDATION_WARNING_PENALTY if warning_penalty is None else warning_penalty
        self.max_paths = settings.MAX_EXECUTION_PATHS if max_paths is None else max_paths

    def validate(self, graph: WorkflowGraph, options: ValidationOptions | None = None) -> ValidationPreview:
        if graph is None:
            raise TypeError("validate() requires a WorkflowGraph, got None")
        options = options or ValidationOptions()

        with log_context(workflow=graph.name):
            return self._validate(graph, options)

    def _validate(self, graph: WorkflowGraph, options: ValidationOptions) -> ValidationPreview:
        topo = build_topology(graph)
        errors: list[Issue] = []
        warnings: list[Issue] = []

        self._check_structure(graph, topo, errors, warnings)
        self._check_nodes(graph, errors, warnings)
        if options.strict_mode:
            self._check_edge_signatures(graph, warnings)

        nodes_by_id = {nid: graph.get_node(nid) for nid in topo.node_ids}
        paths = enumerate_paths(topo, self.max_paths)
        flow = self._execution_paths(paths)
        critical_path = max(
            paths,
            key=lambda p: sum(_node_seconds(nodes_by_id[nid]) for nid in p),
            default=[],
        )
        metrics = self._metrics(graph, topo, paths, critical_path)
        suggestions = self._suggestions(graph, metrics)

        score = 100
        score -= self.error_penalty * len(errors)
        score -= self.warning_penalty * len(warnings)
        if metrics.complexity_score > 80:
            score -= 15
        elif metrics.complexity_score > 60:
            score -= 8
        score = max(0, score)

        node_status = self._node_status(topo, errors, warnings)
        report = ValidationReport(
            valid=not errors,
            score=score,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            per_node_status=[
                NodeStatusEntry(
                    node_id=nid,
                    status=node_status[nid],
                    incoming_count=topo.incoming_count[nid],
                    outgoing_count=topo.outgoing_count[nid],
                    estimated_execution_time=_node_time_label(nodes_by_id[nid]),
                    estimated_cost=_node_cost_label(nodes_by_id[nid]),
                )
                for nid in topo.node_ids
            ],
            execution_paths=flow,
            metrics=metrics,
        )

        preview = ValidationPreview(
            validation=report,
            nodes=[
                NodePreview(
                    id=nid,
                    label=node.label,
                    type=node.type,
                    category=node.category,
                    position=node.position,
                    status=node_status[nid],
                    incoming_count=topo.incoming_count[nid],
                    outgoing_count=topo.outgoing_count[nid],
                    estimated_execution_time=_node_time_label(node),
                    estimated_cost=_node_cost_label(node),
                )
                for nid, node in nodes_by_id.items()
            ],
            edges=self._edge_previews(graph, nodes_by_id, errors, warnings),
            flow=flow,
            metrics=metrics,
        )
        if options.include_performance_analysis:
            preview.performance = self._performance(graph, topo, critical_path)
        if options.include_cost_analysis:
            preview.cost = self._cost(graph)

        logger.info(
            "Validated workflow: valid=%s score=%d errors=%d warnings=%d suggestions=%d",
            report.valid, score, len(errors), len(warnings), len(suggestions),
        )
        return preview

    # ── Structural checks ─────────────────────────────────────────────────────

    @staticmethod
    def _check_dangling_edges(graph: WorkflowGraph, errors: list[Issue]) -> None:
        for edge, end in EdgeValidator.unresolved_endpoints(graph):
            missing = edge.source if end == "source" else edge.target
            errors.append(Issue(
                id=f"invalid_{end}_{edge.id}",
                severity=Severity.ERROR,
                edge_id=edge.id,
                message=f"Edge {end} node not found",
                description=f'Edge "{edge.id}" references a {end} node that does not exist: "{missing}".',
                fix=f"Check that the {end} node exists or remove this edge.",
            ))

    def _check_structure(
        self,
        graph: WorkflowGraph,
        topo: Topology,
        errors: list[Issue],
        warnings: list[Issue],
    ) -> None:
        if not graph.nodes:
            errors.append(Issue(
                id="empty_workflow",
                severity=Severity.ERROR,
                message="Workflow has no nodes",
                description="A workflow needs at least one node to run.",
                fix="Add an input node and a model node.",
            ))
            self._check_dangling_edges(graph, errors)
            return

        seen: set[str] = set()
        for node in graph.nodes:
            if node.id in seen:
                errors.append(Issue(
                    id=f"duplicate_node_{node.id}",
                    severity=Severity.CRITICAL,
                    node_id=node.id,
                    message="Duplicate node id",
                    description=f'Node id "{node.id}" appears more than once in the workflow.',
                    fix="Remove or rename one of the duplicate nodes.",
                ))
            seen.add(node.id)

        self._check_dangling_edges(graph, errors)

        connected = {e.source for e in graph.edges} | {e.target for e in graph.edges}
        if len(topo.node_ids) > 1:
            for nid in topo.node_ids:
                if nid not in connected:
                    warnings.append(Issue(
                        id=f"isolated_node_{nid}",
                        severity=Severity.WARNING,
                        node_id=nid,
                        message="Isolated node",
                        description=f'Node "{nid}" is not connected to any other node.',
                        suggestion="Connect this node to the main flow or remove it.",
                    ))

        if not topo.root_ids:
            errors.append(Issue(
                id="missing_start_node",
                severity=Severity.ERROR,
                message="Workflow has no start node",
                description="Every node has an incoming edge, so execution has no entry point.",
                fix="Add an input node or remove the edge that feeds the first node.",
            ))
        else:
            reachable = _reachable_node_ids(topo.root_ids, topo.successors)
            for nid in topo.node_ids:
                if nid not in reachable:
                    warnings.append(Issue(
                        id=f"unreachable_node_{nid}",
                        severity=Severity.WARNING,
                        node_id=nid,
                        message="Unreachable node",
                        description=f'Node "{nid}" cannot be reached from any start node.',
                        suggestion="Connect the node to a path that starts at an input node.",
                    ))

        for index, cycle in enumerate(detect_cycles(topo)):
            errors.append(Issue(
                id=f"cycle_{index}",
                severity=Severity.ERROR,
                node_id=cycle[0],
                message="Cycle detected",
                description=f"Cycle with no defined execution order: {' → '.join(cycle)}.",
                fix="Break the cycle by removing one of its edges.",
            ))

        for node in graph.nodes:
            if node.category not in MODEL_CATEGORIES:
                continue
            credential = node.data.get("apiKey") or node.data.get("credential")
            if not isinstance(credential, str) or not credential.strip():
                errors.append(Issue(
                    id=f"missing_credentials_{node.id}",
                    severity=Severity.CRITICAL,
                    node_id=node.id,
                    message="Model credentials missing",
                    description=f'Model node "{node.label}" has no API key or credential.',
                    fix="Configure the provider API key for this node.",
                ))

    # ── Node configuration checks ─────────────────────────────────────────────

    def _check_nodes(self, graph: WorkflowGraph, errors: list[Issue], warnings: list[Issue]) -> None:
        for node in graph.nodes:
            category = node.category
            payload = parse_payload(category, node.data)

            if category in PAYLOAD_TYPES and isinstance(payload, GenericParams):
                warnings.append(Issue(
                    id=f"invalid_parameters_{node.id}",
                    severity=Severity.WARNING,
                    node_id=node.id,
                    message="Unexpected parameter types",
                    description=f'Some parameters of "{node.label}" do not have the types a {category} node expects.',
                    suggestion="Re-enter the node parameters in the editor.",
                ))
                continue

            if isinstance(payload, ChatModelParams):
                if not payload.modelName:
                    errors.append(Issue(
                        id=f"missing_model_{node.id}",
                        severity=Severity.ERROR,
                        node_id=node.id,
                        message="Model not configured",
                        description=f'Node "{node.label}" has no language model selected.',
                        fix="Select a model in the node settings.",
                    ))
                if payload.temperature is not None and not 0 <= payload.temperature <= 2:
                    warnings.append(Issue(
                        id=f"invalid_temperature_{node.id}",
                        severity=Severity.WARNING,
                        node_id=node.id,
                        message="Temperature out of range",
                        description=f"Temperature {payload.temperature:g} is outside the supported range (0-2).",
                        suggestion="Use a temperature between 0 and 1 for most tasks.",
                    ))
            elif isinstance(payload, LLMParams):
                if not payload.resolved_model:
                    errors.append(Issue(
                        id=f"missing_llm_model_{node.id}",
                        severity=Severity.ERROR,
                        node_id=node.id,
                        message="LLM model not configured",
                        description=f'Node "{node.label}" has no LLM model selected.',
                        fix="Select an LLM model in the node settings.",
                    ))
            elif isinstance(payload, PromptParams):
                if not payload.template or not payload.template.strip():
                    errors.append(Issue(
                        id=f"empty_template_{node.id}",
                        severity=Severity.ERROR,
                        node_id=node.id,
                        message="Empty prompt template",
                        description=f'Node "{node.label}" has an empty template.',
                        fix="Write a prompt in the template field.",
                    ))
            elif isinstance(payload, MemoryParams):
                if payload.bufferSize is not None and payload.bufferSize > MAX_BUFFER_SIZE:
                    warnings.append(Issue(
                        id=f"large_buffer_{node.id}",
                        severity=Severity.WARNING,
                        node_id=node.id,
                        message="Memory buffer too large",
                        description=f"A buffer of {payload.bufferSize} messages may use a lot of memory.",
                        suggestion=f"Keep the buffer at or below {MAX_BUFFER_SIZE} messages.",
                    ))
            elif isinstance(payload, DocumentStoreParams):
                if not payload.documentStore:
                    warnings.append(Issue(
                        id=f"missing_document_store_{node.id}",
                        severity=Severity.WARNING,
                        node_id=node.id,
                        message="Document store not selected",
                        description=f'Node "{node.label}" has no document store configured.',
                        suggestion="Select a document store to enable document search.",
                    ))

    def _check_edge_signatures(self, graph: WorkflowGraph, warnings: list[Issue]) -> None:
        if self.catalog is None:
            return
        node_map = {n.id: n for n in graph.nodes}
        for edge in graph.edges:
            src, tgt = node_map.get(edge.source), node_map.get(edge.target)
            if src is None or tgt is None:
                continue
            for message in EdgeValidator.validate_edge(src.type, tgt.type, self.catalog):
                warnings.append(Issue(
                    id=f"incompatible_edge_{edge.id}",
                    severity=Severity.WARNING,
                    edge_id=edge.id,
                    message="Incompatible connection",
                    description=message,
                    suggestion="Connect nodes whose output matches the target's input.",
                ))

    # ── Paths and metrics ─────────────────────────────────────────────────────

    @staticmethod
    def _execution_paths(paths: list[list[str]]) -> list[ExecutionPath]:
        if not paths:
            return []
        main_index = max(range(len(paths)), key=lambda i: (len(paths[i]), -i))
        return [
            ExecutionPath(
                id=f"path_{index}",
                type="main" if index == main_index else "alternate",
                node_ids=list(path),
                execution_order=index,
            )
            for index, path in enumerate(paths)
        ]

    def _metrics(
        self,
        graph: WorkflowGraph,
        topo: Topology,
        paths: list[list[str]],
        critical_path: list[str],
    ) -> WorkflowMetrics:
        node_count = len(graph.nodes)
        edge_count = len(graph.edges)
        depth = max_depth(topo, paths)
        parallel = divergence_count(topo)
        complex_nodes = sum(1 for n in graph.nodes if n.category in COMPLEX_CATEGORIES)

        complexity = (
            min(node_count * 5, 30)
            + min(edge_count * 3, 25)
            + min(depth * 10, 20)
            + min(parallel * 8, 15)
            + min(complex_nodes * 7, 10)
        )
        complexity = min(complexity, 100)

        seconds = node_count * 0.5 * (1 + complexity / 100)
        memory_nodes = sum(1 for n in graph.nodes if n.category in MEMORY_HEAVY_CATEGORIES)
        premium_nodes = sum(1 for n in graph.nodes if _is_premium(n))

        return WorkflowMetrics(
            node_count=node_count,
            edge_count=edge_count,
            max_depth=depth,
            parallel_paths=parallel,
            critical_path_length=len(critical_path),
            complexity_score=complexity,
            estimated_execution_time=_format_duration(seconds),
            memory_usage=_bucket(memory_nodes * 20 + complexity * 0.3),
            cost_estimate=_bucket(premium_nodes * 25 + complexity * 0.2),
        )

    @staticmethod
    def _suggestions(graph: WorkflowGraph, metrics: WorkflowMetrics) -> list[OptimizationSuggestion]:
        suggestions: list[OptimizationSuggestion] = []
        categories = Counter(n.category for n in graph.nodes)

        if metrics.complexity_score > 80:
            suggestions.append(OptimizationSuggestion(
                id="complexity_reduction",
                type="structure",
                priority="high",
                target_nodes=[n.id for n in graph.nodes],
                message="Workflow is very complex",
                description="High complexity slows execution and makes the flow harder to maintain.",
                impact="Shorter execution time and easier maintenance.",
                implementation="Split the workflow into smaller sub-flows or remove unneeded nodes.",
            ))

        for node in graph.nodes:
            if node.category != "Chat Models":
                continue
            temperature = node.data.get("temperature")
            if (
                _model_name(node).startswith("gpt-4")
                and isinstance(temperature, (int, float))
                and not isinstance(temperature, bool)
                and temperature > 0.5
            ):
                suggestions.append(OptimizationSuggestion(
                    id=f"model_optimization_{node.id}",
                    type="cost",
                    priority="medium",
                    target_nodes=[node.id],
                    message="Cost optimization opportunity",
                    description=f'Node "{node.label}" runs a GPT-4 class model at a high temperature.',
                    impact="Lower cost at similar quality.",
                    implementation="Use gpt-4o-mini or gpt-3.5-turbo, or lower the temperature, for simpler tasks.",
                ))

        memory_nodes = [n.id for n in graph.nodes if n.category == "Memory"]
        if len(memory_nodes) > MAX_MEMORY_NODES:
            suggestions.append(OptimizationSuggestion(
                id="memory_optimization",
                type="performance",
                priority="medium",
                target_nodes=memory_nodes,
                message="Several memory nodes",
                description="Multiple memory nodes can store the same conversation more than once.",
                impact="Less memory use and faster execution.",
                implementation="Consolidate them into one memory node.",
            ))

        if graph.nodes and metrics.edge_count > metrics.node_count * 2:
            suggestions.append(OptimizationSuggestion(
                id="connection_optimization",
                type="structure",
                priority="low",
                message="Many connections",
                description="The workflow has more than twice as many edges as nodes.",
                impact="A simpler flow that is easier to follow.",
                implementation="Review the connections and remove the ones that are not essential.",
            ))

        if categories["Inputs"] and categories["Chat Models"] and not categories["Memory"]:
            suggestions.append(OptimizationSuggestion(
                id="missing_memory",
                type="configuration",
                priority="low",
                message="Chat flow without memory",
                description="The model does not see earlier messages of the conversation.",
                impact="Answers that take the conversation history into account.",
                implementation="Add a Buffer Memory node and connect it to the chat model.",
            ))

        return suggestions

    # ── Preview ───────────────────────────────────────────────────────────────

    @staticmethod
    def _node_status(topo: Topology, errors: list[Issue], warnings: list[Issue]) -> dict[str, NodeStatus]:
        error_nodes = {i.node_id for i in errors if i.node_id}
        warning_nodes = {i.node_id for i in warnings if i.node_id}
        status: dict[str, NodeStatus] = {}
        for nid in topo.node_ids:
            if nid in error_nodes:
                status[nid] = NodeStatus.ERROR
            elif nid in warning_nodes:
                status[nid] = NodeStatus.WARNING
            else:
                status[nid] = NodeStatus.VALID
        return status

    @staticmethod
    def _edge_previews(
        graph: WorkflowGraph,
        nodes_by_id: dict[str, GraphNode],
        errors: list[Issue],
        warnings: list[Issue],
    ) -> list[EdgePreview]:
        error_edges = {i.edge_id for i in errors if i.edge_id}
        warning_edges = {i.edge_id for i in warnings if i.edge_id}
        previews = []
        for edge in graph.edges:
            if edge.id in error_edges:
                status = NodeStatus.ERROR
            elif edge.id in warning_edges:
                status = NodeStatus.WARNING
            else:
                status = NodeStatus.VALID
            src, tgt = nodes_by_id.get(edge.source), nodes_by_id.get(edge.target)
            data_flow = f"{src.category} → {tgt.category}" if src and tgt else "data flow"
            previews.append(EdgePreview(
                id=edge.id,
                source=edge.source,
                target=edge.target,
                status=status,
                data_flow=data_flow,
            ))
        return previews

    @staticmethod
    def _performance(graph: WorkflowGraph, topo: Topology, critical_path: list[str]) -> PerformanceAnalysis:
        bottlenecks = []
        for nid in topo.node_ids:
            node = graph.get_node(nid)
            reasons = []
            if topo.outgoing_count[nid] > 3:
                reasons.append(f"fans out to {topo.outgoing_count[nid]} nodes")
            if node.category in BOTTLENECK_CATEGORIES:
                reasons.append(f"{node.category} nodes are slow to execute")
            if reasons:
                bottlenecks.append(Bottleneck(node_id=nid, reason="; ".join(reasons)))
        return PerformanceAnalysis(bottlenecks=bottlenecks, critical_path=list(critical_path))

    @staticmethod
    def _cost(graph: WorkflowGraph) -> CostAnalysis:
        monthly = sum(MONTHLY_COST_PER_PREMIUM_NODE for n in graph.nodes if _is_premium(n))
        if monthly < 50:
            bucket = "< $50"
        elif monthly < 200:
            bucket = "$50 - $200"
        else:
            bucket = "> $200"
        breakdown = Counter(n.category for n in graph.nodes)
        return CostAnalysis(estimated_monthly_cost=bucket, cost_breakdown=dict(sorted(breakdown.items())))
