"""
Exception types and HTTP helpers for common error patterns.

Pipeline code raises the domain exceptions below; route handlers use the
require_* helpers to reduce boilerplate for 404 errors.
"""

from typing import TypeVar

from fastapi import HTTPException

T = TypeVar("T")


class AINewsError(Exception):
    """Base class for aggregator errors."""


class StorageError(AINewsError):
    """Raised when the article store fails."""


class DuplicateArticleError(StorageError):
    """Raised when an article with the same source_id is already stored."""

    def __init__(self, source_id: str):
        super().__init__(f"Article already exists: {source_id}")
        self.source_id = source_id


class StorageUnavailableError(StorageError):
    """Raised when no storage backend is configured or reachable."""


class FeedFetchError(AINewsError):
    """Raised when a feed source cannot be downloaded."""


class FeedParseError(FeedFetchError):
    """Raised when a downloaded feed cannot be parsed."""


class SummaryError(AINewsError):
    """Raised when the model returns no usable summary."""


def require_resource(resource: T | None, detail: str = "Resource not found") -> T:
    """
    Raise 404 if resource is None, otherwise return the resource.

    Usage:
        article = require_resource(db.get_article(id), "Article not found")
    """
    if resource is None:
        raise HTTPException(status_code=404, detail=detail)
    return resource


def require_article(article: T | None) -> T:
    """Raise 404 if article is None."""
    return require_resource(article, "Article not found")
