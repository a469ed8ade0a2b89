"""Concept graph models - nodes, edges and snapshots as served by the archive API."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from cerebro.models.enrichment import Enrichment
from cerebro.models.timestamps import parse_datetime, to_epoch_ms

ConceptCategory = Literal["topic", "person", "place", "media", "event", "idea"]

CONCEPT_CATEGORIES: tuple[str, ...] = ("topic", "person", "place", "media", "event", "idea")


@dataclass(frozen=True)
class Concept:
    """
    An entity or topic extracted from the message archive.

    Immutable on the client; mention_count and last_seen only drift
    between extraction runs, which always arrive as a new snapshot.
    """

    id: str
    name: str
    category: str  # one of CONCEPT_CATEGORIES; unknown values render grey
    first_seen: datetime
    last_seen: datetime
    description: str = ""
    mention_count: int = 1
    metadata: dict[str, Any] = field(default_factory=dict)
    group_id: str | None = None
    created_at: datetime | None = None

    @property
    def first_seen_ms(self) -> float:
        """First sighting on the epoch-millisecond time axis."""
        return to_epoch_ms(self.first_seen)

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "mention_count": self.mention_count,
            "first_seen": self.first_seen.isoformat(),
            "last_seen": self.last_seen.isoformat(),
            "metadata": dict(self.metadata),
            "group_id": self.group_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Concept":
        """Create from an API record."""
        first_seen = parse_datetime(data["first_seen"])
        last_seen = parse_datetime(data.get("last_seen")) or first_seen
        return cls(
            id=data["id"],
            name=data["name"],
            category=data.get("category", "topic"),
            description=data.get("description") or "",
            mention_count=data.get("mention_count", 1),
            first_seen=first_seen,
            last_seen=last_seen,
            metadata=data.get("metadata") or {},
            group_id=data.get("group_id"),
            created_at=parse_datetime(data.get("created_at")),
        )


@dataclass(frozen=True)
class Edge:
    """
    A directed, labelled relation between two concepts.

    Example: "rust" --discussed_with--> "wasm" (weight: 3)
    """

    id: str
    source_id: str
    target_id: str
    relation: str
    weight: float = 0.0

    def to_dict(self) -> dict:
        """Convert to the wire representation."""
        return {
            "id": self.id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "relation": self.relation,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Edge":
        """Create from an API record."""
        return cls(
            id=data["id"],
            source_id=data["source_id"],
            target_id=data["target_id"],
            relation=data.get("relation", ""),
            weight=data.get("weight", 0.0),
        )


@dataclass(frozen=True)
class Graph:
    """One immutable graph snapshot. Replaced wholesale, never patched."""

    concepts: tuple[Concept, ...] = ()
    edges: tuple[Edge, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.concepts

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        """Create from the /cerebro/graph payload (null lists allowed)."""
        return cls(
            concepts=tuple(Concept.from_dict(c) for c in data.get("concepts") or []),
            edges=tuple(Edge.from_dict(e) for e in data.get("edges") or []),
        )


@dataclass(frozen=True)
class ConceptDetail:
    """A concept together with its touching edges and enrichments."""

    concept: Concept
    edges: tuple[Edge, ...] = ()
    enrichments: tuple[Enrichment, ...] = ()

    @property
    def id(self) -> str:
        return self.concept.id

    @classmethod
    def from_dict(cls, data: dict) -> "ConceptDetail":
        """Create from the /cerebro/concepts/{id} payload.

        The server embeds the concept fields at the top level next to
        ``edges`` and ``enrichments``.
        """
        return cls(
            concept=Concept.from_dict(data),
            edges=tuple(Edge.from_dict(e) for e in data.get("edges") or []),
            enrichments=tuple(Enrichment.from_dict(e) for e in data.get("enrichments") or []),
        )


@dataclass(frozen=True)
class Extraction:
    """Summary record of one extraction run."""

    id: str
    batch_start: datetime | None = None
    batch_end: datetime | None = None
    message_count: int = 0
    concept_count: int = 0
    edge_count: int = 0
    llm_provider: str = ""
    llm_model: str = ""
    token_count: int = 0
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Extraction":
        """Create from the /cerebro/extract response."""
        return cls(
            id=data.get("id", ""),
            batch_start=parse_datetime(data.get("batch_start")),
            batch_end=parse_datetime(data.get("batch_end")),
            message_count=data.get("message_count", 0),
            concept_count=data.get("concept_count", 0),
            edge_count=data.get("edge_count", 0),
            llm_provider=data.get("llm_provider", ""),
            llm_model=data.get("llm_model", ""),
            token_count=data.get("token_count", 0),
            created_at=parse_datetime(data.get("created_at")),
        )
