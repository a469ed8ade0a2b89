"""Display models for the concept panel."""

from cerebro.presentation.cards import CardSection, EnrichmentCard, build_card
from cerebro.presentation.panel import ConceptPanel, ConnectionRow, build_panel, format_panel

__all__ = [
    "CardSection",
    "EnrichmentCard",
    "build_card",
    "ConceptPanel",
    "ConnectionRow",
    "build_panel",
    "format_panel",
]
