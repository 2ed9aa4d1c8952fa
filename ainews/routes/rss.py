"""
RSS route: re-export the top articles as an RSS 2.0 feed.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ..config import config, get_db
from ..database import ArticleFilter, Database
from ..rss_export import generate_rss

router = APIRouter(tags=["rss"])


@router.get("/rss")
async def rss_feed(
    db: Annotated[Database, Depends(get_db)],
    category: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
) -> Response:
    """Top articles by relevance, optionally for one category."""
    articles = db.list_articles(ArticleFilter(category=category), limit=limit)
    xml = generate_rss(articles, base_url=config.PUBLIC_BASE_URL, category=category)
    return Response(content=xml, media_type="application/rss+xml")
