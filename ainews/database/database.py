"""
Database facade - provides unified access to all repositories.

This is the article store the aggregation pipeline writes to and the
query API reads from.
"""

from datetime import datetime
from pathlib import Path

from .connection import DatabaseConnection
from .article_repository import ArticleRepository
from .user_article_repository import UserArticleRepository
from .models import ArticleCandidate, ArticleFilter, DBArticle, DBUserArticle


class Database:
    """Unified database access facade."""

    def __init__(self, db_path: Path):
        self._connection = DatabaseConnection(db_path)

        # Initialize repositories
        self.articles = ArticleRepository(self._connection)
        self.bookmarks = UserArticleRepository(self._connection, "bookmarks")
        self.reading_list = UserArticleRepository(self._connection, "reading_list")
        self.read_history = UserArticleRepository(
            self._connection, "read_history", refresh_on_add=True
        )

    # ─────────────────────────────────────────────────────────────
    # Article operations (delegated to ArticleRepository)
    # ─────────────────────────────────────────────────────────────

    def insert_article(self, candidate: ArticleCandidate) -> int:
        return self.articles.add(candidate)

    def get_article(self, article_id: int) -> DBArticle | None:
        return self.articles.get(article_id)

    def get_article_by_source_id(self, source_id: str) -> DBArticle | None:
        return self.articles.get_by_source_id(source_id)

    def list_articles(
        self,
        article_filter: ArticleFilter | None = None,
        limit: int = 50,
        offset: int = 0
    ) -> list[DBArticle]:
        return self.articles.get_many(article_filter, limit, offset)

    def count_articles(self, article_filter: ArticleFilter | None = None) -> int:
        return self.articles.count(article_filter)

    def set_summary_if_absent(self, article_id: int, summary: str) -> bool:
        return self.articles.set_summary_if_absent(article_id, summary)

    def get_last_created_at(self) -> datetime | None:
        return self.articles.get_last_created_at()

    # ─────────────────────────────────────────────────────────────
    # Bookmarks
    # ─────────────────────────────────────────────────────────────

    def add_bookmark(self, user_id: int, article_id: int) -> None:
        self.bookmarks.add(user_id, article_id)

    def remove_bookmark(self, user_id: int, article_id: int) -> bool:
        return self.bookmarks.remove(user_id, article_id)

    def is_bookmarked(self, user_id: int, article_id: int) -> bool:
        return self.bookmarks.exists(user_id, article_id)

    def get_bookmarks(self, user_id: int) -> list[DBUserArticle]:
        return self.bookmarks.get_all(user_id)

    # ─────────────────────────────────────────────────────────────
    # Reading list
    # ─────────────────────────────────────────────────────────────

    def add_to_reading_list(self, user_id: int, article_id: int) -> None:
        self.reading_list.add(user_id, article_id)

    def remove_from_reading_list(self, user_id: int, article_id: int) -> bool:
        return self.reading_list.remove(user_id, article_id)

    def is_in_reading_list(self, user_id: int, article_id: int) -> bool:
        return self.reading_list.exists(user_id, article_id)

    def get_reading_list(self, user_id: int) -> list[DBUserArticle]:
        return self.reading_list.get_all(user_id)

    # ─────────────────────────────────────────────────────────────
    # Read history
    # ─────────────────────────────────────────────────────────────

    def mark_read(self, user_id: int, article_id: int) -> None:
        self.read_history.add(user_id, article_id)

    def is_read(self, user_id: int, article_id: int) -> bool:
        return self.read_history.exists(user_id, article_id)

    def get_read_history(self, user_id: int) -> list[DBUserArticle]:
        return self.read_history.get_all(user_id)
