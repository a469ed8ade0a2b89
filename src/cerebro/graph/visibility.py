"""Temporal visibility: which concepts and edges exist at a given cursor time."""

from dataclasses import dataclass

from cerebro.graph.snapshot import GraphSnapshotStore


@dataclass(frozen=True)
class VisibilityResult:
    """One complete visibility batch for a cursor value."""

    cursor: float
    concept_ids: frozenset[str]
    edge_ids: frozenset[str]

    def is_node_visible(self, concept_id: str) -> bool:
        return concept_id in self.concept_ids

    def is_edge_visible(self, edge_id: str) -> bool:
        return edge_id in self.edge_ids


class TemporalVisibilityEngine:
    """
    Pure mapping from a cursor value to visible node and edge sets.

    A concept is visible iff first_seen <= cursor. An edge is visible iff
    both endpoints are visible, so edges whose endpoints are missing from
    the snapshot never show up. Node visibility is fully resolved before
    any edge is looked at and the result is returned as one batch.
    """

    def __init__(self, store: GraphSnapshotStore) -> None:
        self.store = store

    @property
    def has_time_axis(self) -> bool:
        """False for an empty graph; temporal controls must be disabled."""
        return self.store.time_range() is not None

    def visible(self, cursor: float) -> VisibilityResult:
        """Compute visibility at ``cursor`` (epoch ms) in O(V+E)."""
        graph = self.store.graph

        nodes = frozenset(c.id for c in graph.concepts if c.first_seen_ms <= cursor)
        edges = frozenset(
            e.id for e in graph.edges
            if e.source_id in nodes and e.target_id in nodes
        )
        return VisibilityResult(cursor=cursor, concept_ids=nodes, edge_ids=edges)

    def all_visible(self) -> VisibilityResult:
        """Visibility with the cursor at the end of the time axis."""
        time_range = self.store.time_range()
        if time_range is None:
            return VisibilityResult(cursor=0.0, concept_ids=frozenset(), edge_ids=frozenset())
        return self.visible(time_range[1])
