"""Indexed, read-only view over the scraped Flowise node list."""

from __future__ import annotations

import json
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from flowise_core.schemas.catalog import CatalogSnapshot, CatalogStats, NodeDescriptor

logger = logging.getLogger(__name__)

# Agent type -> keywords matched against a node's category or label.
RECOMMENDED_KEYWORDS: dict[str, tuple[str, ...]] = {
    "chat": ("Chat", "Prompt", "Memory", "LLM"),
    "assistant": ("Assistant", "Tools", "Agent", "Memory"),
    "rag": ("Document", "Embeddings", "Vector Store", "Retriever"),
    "workflow": ("Logic", "Condition", "Loop", "Variable"),
    "api": ("HTTP Request", "Webhook", "API", "Function"),
    "default": ("Chat", "Prompt", "LLM", "Memory"),
}

_descriptor_list = TypeAdapter(list[NodeDescriptor])


def load_catalog(path: str | Path | None = None) -> CatalogSnapshot | None:
    """Read the node list at *path* (``settings.NODE_CATALOG_PATH`` by default).

    Returns None when the file is missing, unreadable or malformed; callers
    treat that as "catalog unavailable".
    """
    if path is None:
        from flowise_core.config import settings

        path = settings.NODE_CATALOG_PATH
    catalog_path = Path(path)

    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
        nodes = _descriptor_list.validate_python(raw)
        mtime = catalog_path.stat().st_mtime
    except (OSError, ValueError, ValidationError):
        logger.exception("Failed to load node catalog from %s", catalog_path)
        return None

    categories = sorted({n.category for n in nodes})
    logger.info("Loaded %d catalog nodes in %d categories from %s", len(nodes), len(categories), catalog_path)
    return CatalogSnapshot(
        nodes=nodes,
        categories=categories,
        total_count=len(nodes),
        last_updated=datetime.fromtimestamp(mtime, tz=timezone.utc),
    )


class NodeCatalog:
    """Lookup, search and recommendation over one loaded catalog snapshot."""

    def __init__(self, snapshot: CatalogSnapshot, source_path: Path | None = None) -> None:
        self._snapshot = snapshot
        self._source_path = source_path
        self._by_path = {n.path_id.lower(): n for n in snapshot.nodes}
        self._by_label = {n.label.lower(): n for n in snapshot.nodes}

    @classmethod
    def load(cls, path: str | Path | None = None) -> NodeCatalog | None:
        if path is None:
            from flowise_core.config import settings

            path = settings.NODE_CATALOG_PATH
        snapshot = load_catalog(path)
        if snapshot is None:
            return None
        return cls(snapshot, Path(path))

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def nodes(self) -> list[NodeDescriptor]:
        return list(self._snapshot.nodes)

    @property
    def categories(self) -> list[str]:
        return list(self._snapshot.categories)

    def find_by_category(self, category: str) -> list[NodeDescriptor]:
        wanted = category.lower()
        return [n for n in self._snapshot.nodes if n.category.lower() == wanted]

    def search(self, query: str) -> list[NodeDescriptor]:
        needle = query.lower()
        return [
            n for n in self._snapshot.nodes
            if needle in n.label.lower() or needle in n.description.lower()
        ]

    def recommended_for(self, agent_type: str) -> list[NodeDescriptor]:
        keywords = RECOMMENDED_KEYWORDS.get((agent_type or "").lower(), RECOMMENDED_KEYWORDS["default"])
        lowered = [k.lower() for k in keywords]
        return [
            n for n in self._snapshot.nodes
            if any(k in n.category.lower() or k in n.label.lower() for k in lowered)
        ]

    def get(self, path_id: str) -> NodeDescriptor | None:
        return self._by_path.get(path_id.lower())

    def resolve(self, node_type: str) -> NodeDescriptor | None:
        """Find the descriptor for a graph node type (path id or label)."""
        key = (node_type or "").lower()
        return self._by_path.get(key) or self._by_label.get(key)

    def stats(self) -> CatalogStats:
        counts = Counter(n.category for n in self._snapshot.nodes)
        return CatalogStats(
            total_nodes=self._snapshot.total_count,
            categories=self.categories,
            category_counts=dict(sorted(counts.items())),
        )

    def is_fresh(self, max_age_days: int = 7, now: datetime | None = None) -> bool:
        """True when the catalog source was written within *max_age_days*."""
        if self._source_path is None:
            return False
        try:
            mtime = self._source_path.stat().st_mtime
        except OSError:
            return False
        now = now or datetime.now(timezone.utc)
        modified = datetime.fromtimestamp(mtime, tz=timezone.utc)
        return now - modified < timedelta(days=max_age_days)


@lru_cache(maxsize=1)
def get_node_catalog() -> NodeCatalog | None:
    """Process-wide catalog, loaded once on first use."""
    return NodeCatalog.load()
