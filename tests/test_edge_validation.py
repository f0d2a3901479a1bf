"""Tests for edge validation: endpoint resolution and catalog signature compatibility."""

from __future__ import annotations

import pytest

from conftest import make_graph
from flowise_core.validation.edges import EdgeValidator


class TestSignatureCompatibility:
    """Test EdgeValidator.is_signature_compatible()."""

    def test_shared_token(self):
        assert EdgeValidator.is_signature_compatible("message, string", "string")

    def test_no_shared_token(self):
        assert not EdgeValidator.is_signature_compatible("memory", "message, string")

    @pytest.mark.parametrize("out_sig,in_sig", [("", "message"), ("memory", ""), ("any", "message"), ("memory", "*")])
    def test_empty_or_wildcard_always_compatible(self, out_sig, in_sig):
        assert EdgeValidator.is_signature_compatible(out_sig, in_sig)

    def test_tokens_split_on_pipe_and_comma(self):
        assert EdgeValidator.signature_tokens("Document | Context,  string") == {"document", "context", "string"}


class TestValidateEdge:
    def test_without_catalog_everything_passes(self):
        assert EdgeValidator.validate_edge("Buffer Memory", "Chat Output") == []

    def test_compatible_pair(self, catalog):
        assert EdgeValidator.validate_edge("Chat Input", "Prompt Template", catalog) == []

    def test_incompatible_pair(self, catalog):
        errors = EdgeValidator.validate_edge("Buffer Memory", "Chat Output", catalog)
        assert len(errors) == 1
        assert errors[0].startswith("Type mismatch: Buffer Memory outputs 'memory'")

    def test_unknown_types_allowed(self, catalog):
        assert EdgeValidator.validate_edge("Homemade Node", "Chat Output", catalog) == []

    def test_resolves_path_ids(self, catalog):
        assert EdgeValidator.validate_edge("bufferMemory", "chatOutput", catalog)


class TestValidateGraphEdges:
    def test_generated_graphs_pass(self, catalog, chat_graph, rag_graph, assistant_graph):
        for graph in (chat_graph, rag_graph, assistant_graph):
            assert EdgeValidator.validate_graph_edges(graph, catalog) == []

    def test_unknown_endpoints(self):
        graph = make_graph([("a", "Chat Input", {})], [("a", "ghost"), ("ghost", "a")])
        assert EdgeValidator.validate_graph_edges(graph) == [
            "Edge 'a->ghost' references unknown target node 'ghost'",
            "Edge 'ghost->a' references unknown source node 'ghost'",
        ]

    def test_mismatch_reported_with_endpoints(self, catalog):
        graph = make_graph([("m", "Buffer Memory", {}), ("o", "Chat Output", {})], [("m", "o")])
        errors = EdgeValidator.validate_graph_edges(graph, catalog)
        assert len(errors) == 1
        assert errors[0].startswith("Edge m → o: Type mismatch")
