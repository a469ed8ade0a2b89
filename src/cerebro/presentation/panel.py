"""Concept detail panel display model."""

from dataclasses import dataclass

from cerebro.config import settings
from cerebro.graph.elements import category_color, category_label
from cerebro.models import ConceptDetail
from cerebro.presentation.cards import EnrichmentCard, build_card


@dataclass(frozen=True)
class ConnectionRow:
    """One edge touching the selected concept."""

    edge_id: str
    relation: str
    role: str  # "(target)" when the concept is the edge source, else "(source)"


@dataclass(frozen=True)
class ConceptPanel:
    """Everything the side panel / bottom sheet shows for a selection."""

    concept_id: str
    name: str
    category: str
    category_label: str
    color: str
    mention_count: int
    description: str
    connections: tuple[ConnectionRow, ...]
    cards: tuple[EnrichmentCard, ...]
    enriching: bool

    @property
    def enrich_label(self) -> str:
        return "Enriching..." if self.enriching else "Enrich with Cerebro"


def build_panel(
    detail: ConceptDetail,
    enriching: bool = False,
    max_connections: int | None = None,
) -> ConceptPanel:
    """Build the panel for a concept detail."""
    limit = max_connections or settings.panel_max_connections
    concept = detail.concept
    connections = tuple(
        ConnectionRow(
            edge_id=e.id,
            relation=e.relation,
            role="(target)" if e.source_id == concept.id else "(source)",
        )
        for e in detail.edges[:limit]
    )
    return ConceptPanel(
        concept_id=concept.id,
        name=concept.name,
        category=concept.category,
        category_label=category_label(concept.category),
        color=category_color(concept.category),
        mention_count=concept.mention_count,
        description=concept.description,
        connections=connections,
        cards=tuple(build_card(e) for e in detail.enrichments),
        enriching=enriching,
    )


def format_panel(panel: ConceptPanel) -> str:
    """Plain-text rendering of a panel (used by scripts)."""
    lines = [
        f"{panel.name} [{panel.category_label}] - {panel.mention_count} mentions",
    ]
    if panel.description:
        lines.append(panel.description)
    if panel.connections:
        lines.append("")
        lines.append("Connections:")
        for row in panel.connections:
            lines.append(f"  -> {row.relation} {row.role}")
    for card in panel.cards:
        lines.append("")
        lines.append(f"[{card.title}]" + (" TTL" if card.has_ttl else ""))
        for section in card.sections:
            if section.heading:
                lines.append(f"{section.heading}:")
            lines.extend(f"  {line}" for line in section.lines)
    return "\n".join(lines)
