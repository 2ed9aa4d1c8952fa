"""
Pydantic models for API request/response validation.
"""

from pydantic import BaseModel

from .database import DBArticle, DBUserArticle
from .extractor import ReadableContent


# ─────────────────────────────────────────────────────────────
# Article Schemas
# ─────────────────────────────────────────────────────────────

class ArticleResponse(BaseModel):
    """Article as returned by list and detail endpoints."""
    id: int
    source_id: str
    title: str
    description: str | None
    content: str | None
    summary: str | None
    url: str
    image_url: str | None
    source: str
    author: str | None
    category: str
    relevance_score: int
    industries: list[str]
    published_at: str
    created_at: str

    @classmethod
    def from_db(cls, article: DBArticle) -> "ArticleResponse":
        return cls(
            id=article.id,
            source_id=article.source_id,
            title=article.title,
            description=article.description,
            content=article.content,
            summary=article.summary,
            url=article.url,
            image_url=article.image_url,
            source=article.source,
            author=article.author,
            category=article.category.value,
            relevance_score=article.relevance_score,
            industries=[i.value for i in article.industries],
            published_at=article.published_at.isoformat(),
            created_at=article.created_at.isoformat(),
        )


class ArticleListResponse(BaseModel):
    """One page of articles plus the total matching the filter."""
    articles: list[ArticleResponse]
    total: int


class SummaryResponse(BaseModel):
    summary: str


class AggregationResponse(BaseModel):
    """Tally of an aggregation run."""
    total: int
    new: int
    errors: int


# ─────────────────────────────────────────────────────────────
# User List Schemas
# ─────────────────────────────────────────────────────────────

class UserArticleResponse(BaseModel):
    """An article on one of the user's lists."""
    article: ArticleResponse
    added_at: str

    @classmethod
    def from_db(cls, item: DBUserArticle) -> "UserArticleResponse":
        return cls(
            article=ArticleResponse.from_db(item.article),
            added_at=item.added_at.isoformat(),
        )


class MembershipResponse(BaseModel):
    """Whether an article is on a user's list."""
    value: bool


# ─────────────────────────────────────────────────────────────
# Reader Mode Schemas
# ─────────────────────────────────────────────────────────────

class ReadableContentResponse(BaseModel):
    title: str
    content: str
    text_content: str
    excerpt: str
    byline: str | None
    length: int
    reading_time_minutes: int

    @classmethod
    def from_content(cls, readable: ReadableContent) -> "ReadableContentResponse":
        return cls(
            title=readable.title,
            content=readable.content,
            text_content=readable.text_content,
            excerpt=readable.excerpt,
            byline=readable.byline,
            length=readable.length,
            reading_time_minutes=readable.reading_time_minutes,
        )


class ReaderModeResponse(BaseModel):
    """Reader-mode result; data on success, error otherwise."""
    success: bool
    data: ReadableContentResponse | None = None
    error: str | None = None


# ─────────────────────────────────────────────────────────────
# Status Schemas
# ─────────────────────────────────────────────────────────────

class StatusResponse(BaseModel):
    status: str
    version: str
    classification_enabled: bool
    summarization_enabled: bool
    refresh_in_progress: bool
    last_aggregation: str | None
    feed_count: int
