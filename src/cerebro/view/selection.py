"""Concept selection with a freshness-window detail cache and enrichment.

Selection and enrichment for different concepts are independent; for one
concept, enrichment is single-flight.
"""

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from cerebro.client import ArchiveClient
from cerebro.config import settings
from cerebro.errors import ApiError, DetailFetchFailure, EnrichmentFailure
from cerebro.graph.snapshot import GraphSnapshotStore
from cerebro.models import ConceptDetail

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached concept detail and when it was fetched (clock seconds)."""

    detail: ConceptDetail
    fetched_at: float


class SelectionCache:
    """
    Active selection plus a per-concept detail cache.

    select() serves entries younger than the freshness window without a
    network call. A selection overtaken by a newer select() or a clear while
    its fetch was in flight is cached but never becomes active.
    """

    def __init__(
        self,
        client: ArchiveClient,
        store: GraphSnapshotStore,
        freshness: float | None = None,
        max_entries: int | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.freshness = settings.detail_freshness if freshness is None else freshness
        self.max_entries = max_entries or settings.detail_cache_size
        self.clock = clock or time.monotonic

        self.selection: ConceptDetail | None = None
        self.last_error: DetailFetchFailure | None = None
        self._cache: OrderedDict[str, CacheEntry] = OrderedDict()
        self._generation = 0
        self._enriching: set[str] = set()

    @property
    def panel_visible(self) -> bool:
        return self.selection is not None

    def cached(self, concept_id: str) -> ConceptDetail | None:
        """Fresh cached detail for a concept, or None."""
        entry = self._cache.get(concept_id)
        if entry is None:
            return None
        if self.clock() - entry.fetched_at >= self.freshness:
            del self._cache[concept_id]
            return None
        self._cache.move_to_end(concept_id)
        return entry.detail

    async def select(self, concept_id: str) -> ConceptDetail | None:
        """Make a concept the active selection, fetching its detail if needed.

        Returns the detail, or None when the fetch failed or was superseded.
        """
        self._generation += 1
        generation = self._generation

        detail = self.cached(concept_id)
        if detail is not None:
            logger.debug(f"Detail cache hit: {concept_id}")
            self.selection = detail
            return detail

        try:
            detail = await self.client.fetch_concept_detail(concept_id)
        except ApiError as e:
            # Kept silent toward the UI: no panel, no banner. Recorded for diagnostics.
            self.last_error = DetailFetchFailure(f"Could not load concept {concept_id}: {e.message}")
            logger.warning(str(self.last_error))
            if generation == self._generation:
                self.selection = None
            return None

        self._store(concept_id, detail)

        if generation != self._generation:
            logger.debug(f"Selection of {concept_id} superseded while loading")
            return None

        self.selection = detail
        return detail

    def clear_selection(self) -> None:
        """Background tap: drop the selection and hide the panel. Idempotent."""
        self._generation += 1
        self.selection = None

    def is_enriching(self, concept_id: str) -> bool:
        return concept_id in self._enriching

    async def enrich(self, concept_id: str) -> ConceptDetail | None:
        """Run enrichment for a concept.

        A second call while one is in flight for the same concept is ignored
        and returns None. On success the cached detail is replaced and the
        graph snapshot marked stale. On failure EnrichmentFailure is raised
        and the cache is left untouched.
        """
        if concept_id in self._enriching:
            logger.debug(f"Enrichment already in flight for {concept_id}, ignoring")
            return None

        self._enriching.add(concept_id)
        try:
            detail = await self.client.enrich_concept(concept_id)
        except ApiError as e:
            logger.error(f"Enrichment failed for {concept_id}: {e.message}")
            raise EnrichmentFailure(e.message) from e
        finally:
            self._enriching.discard(concept_id)

        self._store(concept_id, detail)
        if self.selection is not None and self.selection.id == concept_id:
            self.selection = detail

        # Mention counts may have moved; the next graph access must refetch
        self.store.invalidate()
        logger.info(f"Enriched {concept_id}: {len(detail.enrichments)} enrichments")
        return detail

    def prune(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self.clock()
        expired = [
            cid for cid, entry in self._cache.items()
            if now - entry.fetched_at >= self.freshness
        ]
        for cid in expired:
            del self._cache[cid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._cache)

    def _store(self, concept_id: str, detail: ConceptDetail) -> None:
        self._cache[concept_id] = CacheEntry(detail=detail, fetched_at=self.clock())
        self._cache.move_to_end(concept_id)
        while len(self._cache) > self.max_entries:
            evicted, _ = self._cache.popitem(last=False)
            logger.debug(f"Evicted detail {evicted} from cache")
