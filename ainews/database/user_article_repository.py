"""
Repository for per-user article associations (bookmarks, reading list, read history).
"""

from datetime import datetime, timezone

from .connection import DatabaseConnection
from .converters import row_to_user_article, to_db_timestamp
from .models import DBUserArticle


class UserArticleRepository:
    """
    Repository for one (user_id, article_id) association table.

    The same shape backs bookmarks, the reading list and read history.
    """

    TABLES = ("bookmarks", "reading_list", "read_history")

    def __init__(self, db: DatabaseConnection, table: str, refresh_on_add: bool = False):
        if table not in self.TABLES:
            raise ValueError(f"Unknown association table: {table}")
        self._db = db
        self._table = table
        self._refresh_on_add = refresh_on_add

    def add(self, user_id: int, article_id: int) -> None:
        """Associate an article with a user. Re-adding is a no-op unless refreshing."""
        now = to_db_timestamp(datetime.now(timezone.utc))
        with self._db.conn() as conn:
            if self._refresh_on_add:
                conn.execute(
                    f"""INSERT INTO {self._table} (user_id, article_id, created_at)
                        VALUES (?, ?, ?)
                        ON CONFLICT(user_id, article_id) DO UPDATE SET created_at = excluded.created_at""",
                    (user_id, article_id, now)
                )
            else:
                conn.execute(
                    f"""INSERT OR IGNORE INTO {self._table} (user_id, article_id, created_at)
                        VALUES (?, ?, ?)""",
                    (user_id, article_id, now)
                )

    def remove(self, user_id: int, article_id: int) -> bool:
        """Remove an association. Returns True if a row was deleted."""
        with self._db.conn() as conn:
            cursor = conn.execute(
                f"DELETE FROM {self._table} WHERE user_id = ? AND article_id = ?",
                (user_id, article_id)
            )
            return cursor.rowcount > 0

    def exists(self, user_id: int, article_id: int) -> bool:
        with self._db.conn() as conn:
            row = conn.execute(
                f"SELECT 1 FROM {self._table} WHERE user_id = ? AND article_id = ?",
                (user_id, article_id)
            ).fetchone()
            return row is not None

    def get_all(self, user_id: int, limit: int = 100) -> list[DBUserArticle]:
        """List a user's articles, most recently added first."""
        with self._db.conn() as conn:
            rows = conn.execute(
                f"""SELECT a.*, x.user_id AS user_id, x.created_at AS added_at
                    FROM {self._table} x
                    JOIN articles a ON a.id = x.article_id
                    WHERE x.user_id = ?
                    ORDER BY x.created_at DESC, x.id DESC
                    LIMIT ?""",
                (user_id, limit)
            ).fetchall()
            return [row_to_user_article(row) for row in rows]
