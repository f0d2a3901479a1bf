"""Edge validation: endpoint resolution and catalog signature compatibility."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from flowise_core.schemas.graph import GraphEdge, WorkflowGraph

if TYPE_CHECKING:
    from flowise_core.services.node_catalog import NodeCatalog

# Signature tokens that accept or produce anything
_WILDCARD_TOKENS = frozenset({"any", "*"})

_TOKEN_SPLIT = re.compile(r"[,|]")


class EdgeValidator:
    @staticmethod
    def signature_tokens(signature: str) -> set[str]:
        return {t.strip().lower() for t in _TOKEN_SPLIT.split(signature or "") if t.strip()}

    @staticmethod
    def is_signature_compatible(output_signature: str, input_signature: str) -> bool:
        outputs = EdgeValidator.signature_tokens(output_signature)
        inputs = EdgeValidator.signature_tokens(input_signature)
        if not outputs or not inputs:
            return True
        if outputs & _WILDCARD_TOKENS or inputs & _WILDCARD_TOKENS:
            return True
        return bool(outputs & inputs)

    @staticmethod
    def validate_edge(
        source_node_type: str,
        target_node_type: str,
        catalog: NodeCatalog | None = None,
    ) -> list[str]:
        """Validate a single edge. Returns list of error strings (empty = valid)."""
        errors: list[str] = []
        if catalog is None:
            return errors

        source_desc = catalog.resolve(source_node_type)
        target_desc = catalog.resolve(target_node_type)
        if not source_desc or not target_desc:
            # Unknown types are allowed; the catalog is a scrape, not a schema
            return errors

        if not EdgeValidator.is_signature_compatible(source_desc.output_signature, target_desc.input_signature):
            errors.append(
                f"Type mismatch: {source_node_type} outputs '{source_desc.output_signature}' "
                f"but {target_node_type} expects '{target_desc.input_signature}'"
            )
        return errors

    @staticmethod
    def unresolved_endpoints(graph: WorkflowGraph) -> list[tuple[GraphEdge, str]]:
        """Edges whose source or target is not a node of *graph*."""
        node_ids = set(graph.node_ids())
        problems: list[tuple[GraphEdge, str]] = []
        for edge in graph.edges:
            if edge.source not in node_ids:
                problems.append((edge, "source"))
            if edge.target not in node_ids:
                problems.append((edge, "target"))
        return problems

    @staticmethod
    def validate_graph_edges(graph: WorkflowGraph, catalog: NodeCatalog | None = None) -> list[str]:
        """Validate all edges in a graph. Returns list of error strings."""
        errors: list[str] = []
        for edge, end in EdgeValidator.unresolved_endpoints(graph):
            missing = edge.source if end == "source" else edge.target
            errors.append(f"Edge '{edge.id}' references unknown {end} node '{missing}'")

        if catalog is None:
            return errors

        node_map = {n.id: n for n in graph.nodes}
        for edge in graph.edges:
            src = node_map.get(edge.source)
            tgt = node_map.get(edge.target)
            if not src or not tgt:
                continue
            for err in EdgeValidator.validate_edge(src.type, tgt.type, catalog):
                errors.append(f"Edge {edge.source} → {edge.target}: {err}")
        return errors
