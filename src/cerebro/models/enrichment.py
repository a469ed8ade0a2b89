"""Enrichment models - external knowledge attached to a concept.

The ``source`` field is the discriminant of a tagged union: each source has
its own content type, and consumers dispatch on the source instead of
probing the content for keys.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

from cerebro.models.timestamps import parse_datetime


class EnrichmentSource(str, Enum):
    """Which enrichment provider produced the content."""

    KNOWLEDGE = "knowledge"  # encyclopedic summary
    TRENDING = "trending"  # social / trending posts
    BOOKS_ARTICLES = "books_articles"  # reading list
    UNKNOWN = "unknown"  # newer server, older client

    @classmethod
    def parse(cls, value: str) -> "EnrichmentSource":
        """Map a wire value (including legacy provider names) to a source."""
        value = (value or "").lower()
        if value in _WIRE_ALIASES:
            return _WIRE_ALIASES[value]
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


# The server names sources after the provider that produced them
_WIRE_ALIASES: dict[str, EnrichmentSource] = {
    "perplexity": EnrichmentSource.KNOWLEDGE,
    "grok_x": EnrichmentSource.TRENDING,
    "grok_books": EnrichmentSource.BOOKS_ARTICLES,
}


def _strings(values: Any) -> tuple[str, ...]:
    return tuple(str(v) for v in values or [])


@dataclass(frozen=True)
class KnowledgeContent:
    """Encyclopedic summary of a concept."""

    summary: str = ""
    related_topics: tuple[str, ...] = ()
    key_facts: tuple[str, ...] = ()
    suggested_exploration: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "KnowledgeContent":
        return cls(
            summary=data.get("summary") or "",
            related_topics=_strings(data.get("related_topics")),
            key_facts=_strings(data.get("key_facts")),
            suggested_exploration=_strings(data.get("suggested_exploration")),
        )


@dataclass(frozen=True)
class TrendingPost:
    summary: str
    context: str = ""


@dataclass(frozen=True)
class TrendingContent:
    """What is currently being said about a concept."""

    trending_posts: tuple[TrendingPost, ...] = ()
    sentiment: str = ""
    trending_score: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "TrendingContent":
        return cls(
            trending_posts=tuple(
                TrendingPost(summary=p.get("summary") or "", context=p.get("context") or "")
                for p in data.get("trending_posts") or []
            ),
            sentiment=data.get("sentiment") or "",
            # Providers send the score as free text ("high", "7/10")
            trending_score=str(data.get("trending_score") or ""),
        )


@dataclass(frozen=True)
class BookRef:
    title: str
    author: str = ""
    relevance: str = ""


@dataclass(frozen=True)
class ArticleRef:
    title: str
    source: str = ""
    relevance: str = ""


@dataclass(frozen=True)
class BooksArticlesContent:
    """Reading list for a concept."""

    books: tuple[BookRef, ...] = ()
    articles: tuple[ArticleRef, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "BooksArticlesContent":
        return cls(
            books=tuple(
                BookRef(
                    title=b.get("title") or "",
                    author=b.get("author") or "",
                    relevance=b.get("relevance") or "",
                )
                for b in data.get("books") or []
            ),
            articles=tuple(
                ArticleRef(
                    title=a.get("title") or "",
                    source=a.get("source") or "",
                    relevance=a.get("relevance") or "",
                )
                for a in data.get("articles") or []
            ),
        )


@dataclass(frozen=True)
class UnknownContent:
    """Content from a source this client does not know how to read."""

    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "UnknownContent":
        return cls(raw=dict(data))


EnrichmentContent = Union[KnowledgeContent, TrendingContent, BooksArticlesContent, UnknownContent]

_CONTENT_TYPES: dict[EnrichmentSource, type] = {
    EnrichmentSource.KNOWLEDGE: KnowledgeContent,
    EnrichmentSource.TRENDING: TrendingContent,
    EnrichmentSource.BOOKS_ARTICLES: BooksArticlesContent,
    EnrichmentSource.UNKNOWN: UnknownContent,
}


def parse_content(source: EnrichmentSource, data: dict | None) -> EnrichmentContent:
    """Build the content variant selected by ``source``."""
    return _CONTENT_TYPES[source].from_dict(data or {})


@dataclass(frozen=True)
class Enrichment:
    """
    One enrichment result for a concept.

    Examples: a knowledge summary of "rust", trending posts about "wasm"
    """

    id: str
    concept_id: str
    source: EnrichmentSource
    content: EnrichmentContent
    created_at: datetime | None = None
    expires_at: datetime | None = None  # None = never expires
    raw_source: str = ""  # wire value, kept for display of unknown sources

    def is_expired(self, now: datetime) -> bool:
        """Check whether the provider's TTL has elapsed."""
        return self.expires_at is not None and now >= self.expires_at

    @classmethod
    def from_dict(cls, data: dict) -> "Enrichment":
        """Create from an API record."""
        raw_source = data.get("source", "")
        source = EnrichmentSource.parse(raw_source)
        return cls(
            id=data["id"],
            concept_id=data.get("concept_id", ""),
            source=source,
            content=parse_content(source, data.get("content")),
            created_at=parse_datetime(data.get("created_at")),
            expires_at=parse_datetime(data.get("expires_at")),
            raw_source=raw_source,
        )
