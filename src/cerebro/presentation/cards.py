"""Enrichment cards: one renderer per enrichment source."""

from dataclasses import dataclass, field
from typing import Callable

from cerebro.models import (
    BooksArticlesContent,
    Enrichment,
    EnrichmentSource,
    KnowledgeContent,
    TrendingContent,
    UnknownContent,
)

SOURCE_LABELS: dict[EnrichmentSource, str] = {
    EnrichmentSource.KNOWLEDGE: "Knowledge",
    EnrichmentSource.TRENDING: "X / Trending",
    EnrichmentSource.BOOKS_ARTICLES: "Books & Articles",
}

SOURCE_ICONS: dict[EnrichmentSource, str] = {
    EnrichmentSource.KNOWLEDGE: "globe",
    EnrichmentSource.TRENDING: "hashtag",
    EnrichmentSource.BOOKS_ARTICLES: "book",
}


@dataclass(frozen=True)
class CardSection:
    heading: str | None
    lines: tuple[str, ...]


@dataclass(frozen=True)
class EnrichmentCard:
    """Display model for one enrichment."""

    enrichment_id: str
    title: str
    icon: str
    has_ttl: bool
    sections: tuple[CardSection, ...] = field(default_factory=tuple)


def _knowledge_sections(content: KnowledgeContent) -> list[CardSection]:
    sections = []
    if content.summary:
        sections.append(CardSection(None, (content.summary,)))
    if content.key_facts:
        sections.append(CardSection("Key Facts", tuple(f"- {f}" for f in content.key_facts)))
    if content.related_topics:
        sections.append(CardSection("Related", (", ".join(content.related_topics),)))
    if content.suggested_exploration:
        sections.append(CardSection("Explore", content.suggested_exploration))
    return sections


def _trending_sections(content: TrendingContent) -> list[CardSection]:
    sections = []
    if content.sentiment:
        line = f"Sentiment: {content.sentiment.capitalize()}"
        if content.trending_score:
            line += f" ({content.trending_score})"
        sections.append(CardSection(None, (line,)))
    if content.trending_posts:
        lines = []
        for post in content.trending_posts:
            lines.append(post.summary)
            if post.context:
                lines.append(f"  {post.context}")
        sections.append(CardSection("Posts", tuple(lines)))
    return sections


def _books_articles_sections(content: BooksArticlesContent) -> list[CardSection]:
    sections = []
    if content.books:
        lines = []
        for book in content.books:
            line = book.title
            if book.author:
                line += f" by {book.author}"
            lines.append(line)
            if book.relevance:
                lines.append(f"  {book.relevance}")
        sections.append(CardSection("Books", tuple(lines)))
    if content.articles:
        lines = []
        for article in content.articles:
            line = article.title
            if article.source:
                line += f" - {article.source}"
            lines.append(line)
        sections.append(CardSection("Articles", tuple(lines)))
    return sections


def _unknown_sections(content: UnknownContent) -> list[CardSection]:
    return [CardSection(None, tuple(f"{k}: {v}" for k, v in sorted(content.raw.items())))]


_RENDERERS: dict[EnrichmentSource, Callable[..., list[CardSection]]] = {
    EnrichmentSource.KNOWLEDGE: _knowledge_sections,
    EnrichmentSource.TRENDING: _trending_sections,
    EnrichmentSource.BOOKS_ARTICLES: _books_articles_sections,
    EnrichmentSource.UNKNOWN: _unknown_sections,
}


def build_card(enrichment: Enrichment) -> EnrichmentCard:
    """Render an enrichment with the renderer registered for its source."""
    render = _RENDERERS[enrichment.source]
    return EnrichmentCard(
        enrichment_id=enrichment.id,
        title=SOURCE_LABELS.get(enrichment.source, enrichment.raw_source or "Enrichment"),
        icon=SOURCE_ICONS.get(enrichment.source, "circle-info"),
        has_ttl=enrichment.expires_at is not None,
        sections=tuple(render(enrichment.content)),
    )
