"""Declarative render elements derived from a graph snapshot."""

import logging
from dataclasses import dataclass

from cerebro.graph.snapshot import GraphSnapshotStore

logger = logging.getLogger(__name__)

CATEGORY_COLORS: dict[str, str] = {
    "topic": "#3B82F6",
    "person": "#F97316",
    "place": "#22C55E",
    "media": "#A855F7",
    "event": "#EF4444",
    "idea": "#EAB308",
}

CATEGORY_LABELS: dict[str, str] = {
    "topic": "Topic",
    "person": "Person",
    "place": "Place",
    "media": "Media",
    "event": "Event",
    "idea": "Idea",
}

FALLBACK_COLOR = "#6B7280"

# Node diameter range: MIN_NODE_SIZE for one mention, +NODE_SIZE_RANGE at the max
MIN_NODE_SIZE = 20.0
NODE_SIZE_RANGE = 40.0


def category_color(category: str) -> str:
    return CATEGORY_COLORS.get(category, FALLBACK_COLOR)


def category_label(category: str) -> str:
    return CATEGORY_LABELS.get(category, category.capitalize())


def legend() -> list[tuple[str, str, str]]:
    """(category, label, color) rows in display order."""
    return [(cat, CATEGORY_LABELS[cat], color) for cat, color in CATEGORY_COLORS.items()]


@dataclass(frozen=True)
class NodeElement:
    """Renderable node."""

    id: str
    label: str
    category: str
    mention_count: int
    color: str
    size: float
    first_seen_ms: float


@dataclass(frozen=True)
class EdgeElement:
    """Renderable edge."""

    id: str
    source: str
    target: str
    label: str
    weight: float


@dataclass(frozen=True)
class RenderElements:
    """The full element set handed to the renderer on mount."""

    nodes: tuple[NodeElement, ...] = ()
    edges: tuple[EdgeElement, ...] = ()

    @property
    def node_ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.nodes)


def node_size(mention_count: int, max_mentions: int) -> float:
    """Scale node size linearly with mentions relative to the busiest concept."""
    return MIN_NODE_SIZE + (mention_count / max(max_mentions, 1)) * NODE_SIZE_RANGE


def build_elements(store: GraphSnapshotStore) -> RenderElements:
    """Build nodes and edges for the current snapshot.

    Edges referencing a concept that is not in the snapshot are dropped.
    """
    max_mentions = store.max_mention_count()
    graph = store.graph

    nodes = tuple(
        NodeElement(
            id=c.id,
            label=c.name,
            category=c.category,
            mention_count=c.mention_count,
            color=category_color(c.category),
            size=node_size(c.mention_count, max_mentions),
            first_seen_ms=c.first_seen_ms,
        )
        for c in graph.concepts
    )

    edges = []
    dangling = 0
    for e in graph.edges:
        if e.source_id not in store or e.target_id not in store:
            dangling += 1
            continue
        edges.append(
            EdgeElement(
                id=e.id,
                source=e.source_id,
                target=e.target_id,
                label=e.relation,
                weight=e.weight,
            )
        )

    if dangling:
        logger.debug(f"Dropped {dangling} edges with endpoints outside the snapshot")

    return RenderElements(nodes=nodes, edges=tuple(edges))
