"""
Database row converters - convert SQLite rows to dataclasses and back.
"""

import json
import sqlite3
from datetime import datetime, timezone

from .models import Category, DBArticle, DBUserArticle, Industry


def to_db_timestamp(value: datetime) -> str:
    """Normalize a datetime to a sortable UTC ISO string (second precision)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0).isoformat()


def parse_db_timestamp(value: str | None) -> datetime | None:
    """Parse a stored timestamp, treating naive values as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def industries_to_db(industries: list[Industry] | None) -> str | None:
    """Serialize industry tags as an ordered JSON list."""
    if industries is None:
        return None
    return json.dumps([i.value for i in industries])


def industries_from_db(value: str | None) -> list[Industry]:
    if not value:
        return []
    try:
        return Industry.parse_many(json.loads(value))
    except json.JSONDecodeError:
        return []


def row_to_article(row: sqlite3.Row) -> DBArticle:
    """Convert a database row to a DBArticle."""
    now = datetime.now(timezone.utc)
    return DBArticle(
        id=row["id"],
        source_id=row["source_id"],
        title=row["title"],
        url=row["url"],
        source=row["source"],
        category=Category.parse(row["category"]),
        relevance_score=row["relevance_score"],
        published_at=parse_db_timestamp(row["published_at"]) or now,
        created_at=parse_db_timestamp(row["created_at"]) or now,
        description=row["description"],
        content=row["content"],
        summary=row["summary"],
        image_url=row["image_url"],
        author=row["author"],
        industries=industries_from_db(row["industries"]),
    )


def row_to_user_article(row: sqlite3.Row) -> DBUserArticle:
    """Convert a joined association + article row to a DBUserArticle."""
    return DBUserArticle(
        article=row_to_article(row),
        user_id=row["user_id"],
        added_at=parse_db_timestamp(row["added_at"]) or datetime.now(timezone.utc),
    )
