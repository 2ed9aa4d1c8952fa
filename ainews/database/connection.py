"""
Database connection management and schema initialization.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..exceptions import StorageUnavailableError


class DatabaseConnection:
    """Manages database connection and schema."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            raise StorageUnavailableError(f"Database not available at {db_path}: {e}") from e

    @contextmanager
    def conn(self) -> Iterator[sqlite3.Connection]:
        """Get database connection with row factory."""
        try:
            connection = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StorageUnavailableError(f"Database not available at {self.db_path}: {e}") from e
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _init_schema(self):
        """Initialize database schema."""
        with self.conn() as connection:
            connection.executescript("""
                CREATE TABLE IF NOT EXISTS articles (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    source_id TEXT UNIQUE NOT NULL,
                    title TEXT NOT NULL,
                    description TEXT,
                    content TEXT,
                    summary TEXT,
                    url TEXT NOT NULL,
                    image_url TEXT,
                    source TEXT NOT NULL,
                    author TEXT,
                    category TEXT NOT NULL DEFAULT 'other' CHECK(category IN (
                        'breakthrough', 'company_announcement', 'policy',
                        'funding', 'research', 'other'
                    )),
                    relevance_score INTEGER NOT NULL DEFAULT 50
                        CHECK(relevance_score BETWEEN 0 AND 100),
                    industries TEXT,
                    published_at TIMESTAMP NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                );

                CREATE TABLE IF NOT EXISTS bookmarks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    article_id INTEGER NOT NULL REFERENCES articles(id) ON DELETE CASCADE,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(user_id, article_id)
                );

                CREATE TABLE IF NOT EXISTS reading_list (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    article_id INTEGER NOT NULL REFERENCES articles(id) ON DELETE CASCADE,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(user_id, article_id)
                );

                CREATE TABLE IF NOT EXISTS read_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    article_id INTEGER NOT NULL REFERENCES articles(id) ON DELETE CASCADE,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE(user_id, article_id)
                );

                CREATE INDEX IF NOT EXISTS idx_articles_ranking
                    ON articles(relevance_score DESC, published_at DESC);
                CREATE INDEX IF NOT EXISTS idx_articles_published ON articles(published_at DESC);
                CREATE INDEX IF NOT EXISTS idx_articles_category ON articles(category);
                CREATE INDEX IF NOT EXISTS idx_articles_created ON articles(created_at DESC);
                CREATE INDEX IF NOT EXISTS idx_bookmarks_user ON bookmarks(user_id, created_at DESC);
                CREATE INDEX IF NOT EXISTS idx_reading_list_user ON reading_list(user_id, created_at DESC);
                CREATE INDEX IF NOT EXISTS idx_read_history_user ON read_history(user_id, created_at DESC);
            """)
