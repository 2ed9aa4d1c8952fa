"""
Article routes: list, detail, on-demand summary and aggregation trigger.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query

from ..auth import verify_admin_key, verify_api_key
from ..config import state, get_db
from ..database import ArticleFilter, Database
from ..exceptions import StorageUnavailableError, require_article
from ..schemas import (
    AggregationResponse,
    ArticleListResponse,
    ArticleResponse,
    SummaryResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/articles",
    tags=["articles"],
    dependencies=[Depends(verify_api_key)]
)

TIME_RANGES = {
    "24h": timedelta(hours=24),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
}


def time_range_start(time_range: str, now: datetime | None = None) -> datetime | None:
    """Earliest published_at for a time range; None for 'all'."""
    delta = TIME_RANGES.get(time_range)
    if delta is None:
        return None
    return (now or datetime.now(timezone.utc)) - delta


# ─────────────────────────────────────────────────────────────
# List (static paths first)
# ─────────────────────────────────────────────────────────────

@router.get("")
async def list_articles(
    db: Annotated[Database, Depends(get_db)],
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    category: str | None = None,
    industry: str | None = None,
    search: str | None = None,
    time_range: str = Query(default="24h", pattern="^(24h|7d|30d|all)$"),
) -> ArticleListResponse:
    """
    Get articles ranked by relevance, then recency.

    Args:
        category: Category value, or 'all'
        industry: Industry tag, or 'all'
        search: Substring matched against title and description
        time_range: Only articles published within 24h, 7d, 30d, or all
    """
    article_filter = ArticleFilter(
        category=category,
        industry=industry,
        search=search or None,
        since=time_range_start(time_range),
    )
    articles = db.list_articles(article_filter, limit=limit, offset=offset)
    return ArticleListResponse(
        articles=[ArticleResponse.from_db(a) for a in articles],
        total=db.count_articles(article_filter),
    )


@router.post("/aggregate", dependencies=[Depends(verify_admin_key)])
async def trigger_aggregation() -> AggregationResponse:
    """Run one aggregation pass now (admin only)."""
    if state.aggregator is None:
        raise HTTPException(status_code=503, detail="Aggregator not initialized")
    if state.refresh_in_progress:
        raise HTTPException(status_code=409, detail="Aggregation already in progress")

    state.refresh_in_progress = True
    try:
        result = await state.aggregator.aggregate_news()
    except StorageUnavailableError as e:
        logger.error(f"Aggregation aborted: {e}")
        raise HTTPException(status_code=503, detail=f"Storage unavailable: {e}")
    finally:
        state.refresh_in_progress = False

    return AggregationResponse(**result.to_dict())


# ─────────────────────────────────────────────────────────────
# Single Article
# ─────────────────────────────────────────────────────────────

@router.get("/{article_id}")
async def get_article(
    article_id: int,
    db: Annotated[Database, Depends(get_db)]
) -> ArticleResponse:
    """Get a single article."""
    return ArticleResponse.from_db(require_article(db.get_article(article_id)))


@router.post("/{article_id}/summary")
async def summarize_article(
    article_id: int,
    db: Annotated[Database, Depends(get_db)]
) -> SummaryResponse:
    """
    Get the article's summary, generating and storing it on first request.
    """
    article = require_article(db.get_article(article_id))
    if article.summary:
        return SummaryResponse(summary=article.summary)

    if not state.summarizer:
        raise HTTPException(
            status_code=503,
            detail="Summarization unavailable: no LLM API key configured"
        )

    try:
        summary = await state.summarizer.summarize(article)
    except Exception as e:
        logger.exception(f"Summary generation failed for article {article_id}")
        raise HTTPException(status_code=502, detail=f"Summary generation failed: {e}")

    if not db.set_summary_if_absent(article_id, summary):
        # A concurrent request stored one first
        stored = db.get_article(article_id)
        if stored and stored.summary:
            summary = stored.summary

    return SummaryResponse(summary=summary)
