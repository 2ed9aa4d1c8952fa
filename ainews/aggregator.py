"""
Aggregator - runs one ingestion pass over every configured source.

Sources are processed one after another. A failing source is logged and
counted without affecting the others; duplicates are skipped; only an
unavailable store aborts the run.
"""

import logging
from contextlib import aclosing
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, AsyncIterator

from .database.models import ArticleCandidate
from .exceptions import DuplicateArticleError, StorageUnavailableError
from .feeds import ArxivFetcher, FeedSource, RSSFetcher

if TYPE_CHECKING:
    from .database import Database

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """Tally of one aggregation run."""
    total: int = 0   # candidates produced by fetchers
    new: int = 0     # candidates actually inserted
    errors: int = 0  # sources that failed

    def to_dict(self) -> dict[str, int]:
        return {"total": self.total, "new": self.new, "errors": self.errors}


class Aggregator:
    """Pulls every source through fetch, classify and store."""

    def __init__(
        self,
        store: "Database",
        sources: list[FeedSource],
        rss_fetcher: RSSFetcher,
        arxiv_fetcher: ArxivFetcher | None = None,
    ):
        self.store = store
        self.sources = list(sources)
        self.rss_fetcher = rss_fetcher
        self.arxiv_fetcher = arxiv_fetcher

    async def aggregate_news(self) -> AggregationResult:
        """
        Run one aggregation pass.

        Raises:
            StorageUnavailableError: If the article store cannot be used
        """
        logger.info(f"Starting news aggregation ({len(self.sources)} feeds)")
        result = AggregationResult()

        for source in self.sources:
            await self._ingest(source.name, self.rss_fetcher.fetch(source), result)

        if self.arxiv_fetcher is not None:
            await self._ingest(ArxivFetcher.SOURCE_NAME, self.arxiv_fetcher.fetch(), result)

        logger.info(
            f"Aggregation complete: {result.total} fetched, "
            f"{result.new} new, {result.errors} errors"
        )
        return result

    async def _ingest(
        self,
        source_name: str,
        candidates: AsyncIterator[ArticleCandidate],
        result: AggregationResult,
    ) -> None:
        """Store every candidate from one source, counting a failure once."""
        new_before = result.new
        try:
            async with aclosing(candidates):
                async for candidate in candidates:
                    result.total += 1
                    try:
                        self.store.insert_article(candidate)
                    except DuplicateArticleError:
                        continue
                    result.new += 1
        except StorageUnavailableError:
            raise
        except Exception:
            logger.exception(f"Error processing source {source_name}")
            result.errors += 1
            return

        logger.info(f"{source_name}: {result.new - new_before} new articles")

    def last_aggregation_time(self) -> datetime | None:
        """When the most recent article was stored, if any."""
        return self.store.get_last_created_at()
