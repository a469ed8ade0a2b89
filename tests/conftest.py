"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from cerebro.client import ArchiveClient
from cerebro.config import Settings, get_test_settings
from cerebro.models import Concept, ConceptDetail, Edge, Enrichment, Graph

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def at_ms(ms: float) -> datetime:
    """Datetime that sits at ``ms`` on the epoch-millisecond time axis."""
    return EPOCH + timedelta(milliseconds=ms)


class FakeTimer:
    """Timer handle recorded by FakeScheduler."""

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for the event loop's call_later."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due timers in order. Returns how many fired."""
        target = self.now + seconds
        fired = 0
        while True:
            due = [t for t in self.pending if t.when <= target + 1e-9]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.now = timer.when
            timer.fired = True
            timer.callback()
            fired += 1
        self.now = target
        return fired

    def run_all(self, limit: int = 10_000) -> int:
        """Fire timers until none are pending."""
        fired = 0
        while self.pending and fired < limit:
            timer = min(self.pending, key=lambda t: t.when)
            self.now = timer.when
            timer.fired = True
            timer.callback()
            fired += 1
        return fired


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_concept(
    concept_id: str,
    first_seen_ms: float = 0.0,
    category: str = "topic",
    mention_count: int = 1,
    name: str | None = None,
) -> Concept:
    return Concept(
        id=concept_id,
        name=name or concept_id.lower(),
        category=category,
        first_seen=at_ms(first_seen_ms),
        last_seen=at_ms(first_seen_ms),
        mention_count=mention_count,
    )


def make_detail(concept: Concept, enrichments: tuple[Enrichment, ...] = ()) -> ConceptDetail:
    return ConceptDetail(concept=concept, edges=(), enrichments=enrichments)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with defaults."""
    return get_test_settings()


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scenario_graph() -> Graph:
    """A(first_seen=0) --relates--> B(first_seen=10)."""
    return Graph(
        concepts=(make_concept("A", 0), make_concept("B", 10)),
        edges=(Edge(id="A->B", source_id="A", target_id="B", relation="relates", weight=1.0),),
    )


@pytest.fixture
def sample_graph() -> Graph:
    """Five concepts over ten minutes with a dangling edge."""
    concepts = (
        make_concept("rust", 0, "topic", mention_count=12),
        make_concept("alice", 120_000, "person", mention_count=4),
        make_concept("berlin", 240_000, "place", mention_count=2),
        make_concept("launch", 360_000, "event", mention_count=6),
        make_concept("wasm", 600_000, "idea", mention_count=3),
    )
    edges = (
        Edge(id="e1", source_id="alice", target_id="rust", relation="talks_about", weight=3),
        Edge(id="e2", source_id="rust", target_id="wasm", relation="compiles_to", weight=2),
        Edge(id="e3", source_id="alice", target_id="berlin", relation="lives_in", weight=1),
        Edge(id="e4", source_id="launch", target_id="ghost", relation="mentions", weight=1),
    )
    return Graph(concepts=concepts, edges=edges)


@pytest.fixture
def mock_client(sample_graph: Graph) -> ArchiveClient:
    """Mock archive client for testing without a server."""
    client = MagicMock(spec=ArchiveClient)
    by_id = {c.id: c for c in sample_graph.concepts}

    async def fetch_detail(concept_id: str) -> ConceptDetail:
        return make_detail(by_id[concept_id])

    client.fetch_graph = AsyncMock(return_value=sample_graph)
    client.fetch_concept_detail = AsyncMock(side_effect=fetch_detail)
    client.enrich_concept = AsyncMock(side_effect=fetch_detail)
    client.trigger_extraction = AsyncMock()
    client.close = AsyncMock()

    return client


@pytest.fixture
def knowledge_enrichment_data() -> dict:
    """Enrichment record as the server sends it."""
    return {
        "id": "enr-1",
        "concept_id": "rust",
        "source": "perplexity",
        "content": {
            "summary": "Rust is a systems programming language.",
            "related_topics": ["cargo", "llvm"],
            "key_facts": ["Memory safe without GC"],
            "suggested_exploration": ["async rust"],
        },
        "expires_at": None,
        "created_at": "2024-05-01T12:00:00Z",
    }
