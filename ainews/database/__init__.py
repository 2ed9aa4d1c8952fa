"""
Database module - SQLite article store and per-user article associations.

Uses repository pattern for better separation of concerns.
"""

from .connection import DatabaseConnection
from .models import (
    ArticleCandidate,
    ArticleFilter,
    Category,
    DBArticle,
    DBUserArticle,
    Industry,
)
from .article_repository import ArticleRepository
from .user_article_repository import UserArticleRepository
from .database import Database

__all__ = [
    "Database",
    "DatabaseConnection",
    "ArticleCandidate",
    "ArticleFilter",
    "Category",
    "DBArticle",
    "DBUserArticle",
    "Industry",
    "ArticleRepository",
    "UserArticleRepository",
]
