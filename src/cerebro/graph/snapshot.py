"""Holder for the currently loaded graph snapshot and its derived indices."""

import logging

from cerebro.models import Concept, Graph

logger = logging.getLogger(__name__)


class GraphSnapshotStore:
    """
    Single-owner store for one immutable graph.

    There is no partial update: any change upstream means a full reload via
    load(). invalidate() only marks the snapshot stale so the next access
    refetches instead of reusing it.
    """

    def __init__(self) -> None:
        self._graph = Graph()
        self._by_id: dict[str, Concept] = {}
        self._time_range: tuple[float, float] | None = None
        self._max_mentions = 1
        self._loaded = False
        self._stale = False
        self.version = 0

    def load(self, graph: Graph) -> None:
        """Replace the current snapshot and rebuild indices."""
        by_id = {c.id: c for c in graph.concepts}
        if graph.concepts:
            first_seen = [c.first_seen_ms for c in graph.concepts]
            time_range = (min(first_seen), max(first_seen))
        else:
            time_range = None
        max_mentions = max((c.mention_count for c in graph.concepts), default=1)

        # Swap everything at once so readers never see a mixed state
        self._graph = graph
        self._by_id = by_id
        self._time_range = time_range
        self._max_mentions = max(max_mentions, 1)
        self._loaded = True
        self._stale = False
        self.version += 1
        logger.debug(
            f"Loaded snapshot v{self.version}: {len(graph.concepts)} concepts, "
            f"{len(graph.edges)} edges"
        )

    def clear(self) -> None:
        """Drop the snapshot entirely (empty graph, nothing loaded)."""
        self.load(Graph())
        self._loaded = False

    def invalidate(self) -> None:
        """Mark the snapshot stale; the next load must refetch."""
        self._stale = True

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def has_snapshot(self) -> bool:
        return self._loaded

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def needs_fetch(self) -> bool:
        """True when there is no usable snapshot in memory."""
        return not self._loaded or self._stale

    def time_range(self) -> tuple[float, float] | None:
        """(min, max) of first_seen in epoch ms, or None for an empty graph."""
        return self._time_range

    def max_mention_count(self) -> int:
        """Largest mention_count in the snapshot, never below 1."""
        return self._max_mentions

    def concept_by_id(self, concept_id: str) -> Concept | None:
        return self._by_id.get(concept_id)

    def __contains__(self, concept_id: str) -> bool:
        return concept_id in self._by_id

    def __len__(self) -> int:
        return len(self._graph.concepts)
