"""Cerebro data models."""

from cerebro.models.concept import (
    CONCEPT_CATEGORIES,
    Concept,
    ConceptCategory,
    ConceptDetail,
    Edge,
    Extraction,
    Graph,
)
from cerebro.models.enrichment import (
    ArticleRef,
    BookRef,
    BooksArticlesContent,
    Enrichment,
    EnrichmentContent,
    EnrichmentSource,
    KnowledgeContent,
    TrendingContent,
    TrendingPost,
    UnknownContent,
)
from cerebro.models.timestamps import from_epoch_ms, parse_datetime, to_epoch_ms

__all__ = [
    "Concept",
    "ConceptCategory",
    "CONCEPT_CATEGORIES",
    "ConceptDetail",
    "Edge",
    "Extraction",
    "Graph",
    "Enrichment",
    "EnrichmentContent",
    "EnrichmentSource",
    "KnowledgeContent",
    "TrendingContent",
    "TrendingPost",
    "BooksArticlesContent",
    "BookRef",
    "ArticleRef",
    "UnknownContent",
    "parse_datetime",
    "to_epoch_ms",
    "from_epoch_ms",
]
