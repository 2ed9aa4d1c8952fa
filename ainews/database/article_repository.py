"""
Article repository - insert-if-absent, filtered queries and summary backfill.
"""

import sqlite3
from datetime import datetime, timezone

from ..exceptions import DuplicateArticleError
from .connection import DatabaseConnection
from .converters import industries_to_db, parse_db_timestamp, row_to_article, to_db_timestamp
from .models import ArticleCandidate, ArticleFilter, DBArticle, clamp_score


class ArticleRepository:
    """Repository for article operations."""

    def __init__(self, db: DatabaseConnection):
        self._db = db

    def add(self, candidate: ArticleCandidate) -> int:
        """
        Insert a new article.

        Returns the new article ID. Raises DuplicateArticleError when an
        article with the same source_id already exists; other storage
        errors propagate.
        """
        with self._db.conn() as conn:
            try:
                cursor = conn.execute(
                    """INSERT INTO articles
                       (source_id, title, description, content, url, image_url, source,
                        author, category, relevance_score, industries, published_at, created_at)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (candidate.source_id, candidate.title, candidate.description,
                     candidate.content, candidate.url, candidate.image_url, candidate.source,
                     candidate.author, candidate.category.value,
                     clamp_score(candidate.relevance_score),
                     industries_to_db(candidate.industries),
                     to_db_timestamp(candidate.published_at),
                     to_db_timestamp(datetime.now(timezone.utc)))
                )
                return cursor.lastrowid
            except sqlite3.IntegrityError as e:
                if "articles.source_id" in str(e):
                    raise DuplicateArticleError(candidate.source_id) from e
                raise

    def get(self, article_id: int) -> DBArticle | None:
        """Get single article by ID."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE id = ?", (article_id,)
            ).fetchone()
            return row_to_article(row) if row else None

    def get_by_source_id(self, source_id: str) -> DBArticle | None:
        """Get article by its source identifier."""
        with self._db.conn() as conn:
            row = conn.execute(
                "SELECT * FROM articles WHERE source_id = ?", (source_id,)
            ).fetchone()
            return row_to_article(row) if row else None

    def _where(self, article_filter: ArticleFilter) -> tuple[str, list]:
        """Build the WHERE clause shared by list and count queries."""
        query = " WHERE 1=1"
        params: list = []

        if article_filter.category and article_filter.category != "all":
            query += " AND category = ?"
            params.append(article_filter.category)
        if article_filter.industry and article_filter.industry != "all":
            # Industries are stored as a JSON list, so match the quoted tag
            query += " AND industries LIKE ?"
            params.append(f'%"{article_filter.industry}"%')
        if article_filter.search:
            query += " AND (title LIKE ? OR description LIKE ?)"
            pattern = f"%{article_filter.search}%"
            params.extend([pattern, pattern])
        if article_filter.since:
            query += " AND published_at >= ?"
            params.append(to_db_timestamp(article_filter.since))

        return query, params

    def get_many(
        self,
        article_filter: ArticleFilter | None = None,
        limit: int = 50,
        offset: int = 0
    ) -> list[DBArticle]:
        """Get articles ordered by relevance, then recency."""
        where, params = self._where(article_filter or ArticleFilter())
        query = (
            "SELECT * FROM articles" + where +
            " ORDER BY relevance_score DESC, published_at DESC, id DESC LIMIT ? OFFSET ?"
        )
        params.extend([limit, offset])

        with self._db.conn() as conn:
            rows = conn.execute(query, params).fetchall()
            return [row_to_article(row) for row in rows]

    def count(self, article_filter: ArticleFilter | None = None) -> int:
        """Count articles matching a filter."""
        where, params = self._where(article_filter or ArticleFilter())
        with self._db.conn() as conn:
            row = conn.execute("SELECT COUNT(*) AS cnt FROM articles" + where, params).fetchone()
            return row["cnt"] if row else 0

    def set_summary_if_absent(self, article_id: int, summary: str) -> bool:
        """Store a summary only when none is set. Returns True if updated."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                "UPDATE articles SET summary = ? WHERE id = ? AND summary IS NULL",
                (summary, article_id)
            )
            return cursor.rowcount > 0

    def get_last_created_at(self) -> datetime | None:
        """Timestamp of the most recently ingested article."""
        with self._db.conn() as conn:
            row = conn.execute("SELECT MAX(created_at) AS last FROM articles").fetchone()
            return parse_db_timestamp(row["last"]) if row else None
