"""
AI News Aggregator API Server

FastAPI application providing endpoints for:
- Article queries (filter, search, time range) and detail
- On-demand summaries
- Admin-triggered aggregation
- Bookmarks, reading list, read history
- Reader mode and RSS export
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .aggregator import Aggregator
from .classifier import Classifier
from .config import config, state
from .database import Database
from .extractor import ContentExtractor
from .feeds import ArxivFetcher, RSSFetcher
from .providers import get_provider_from_env
from .rate_limit import setup_rate_limiting
from .routes import (
    articles_router,
    misc_router,
    rss_router,
    bookmarks_router,
    reading_list_router,
    read_history_router,
)
from .summarizer import Summarizer

logger = logging.getLogger(__name__)


def init_state() -> None:
    """
    Build the pipeline and store into the shared app state.

    Raises:
        StorageUnavailableError: If the database cannot be opened
    """
    state.db = Database(config.DB_PATH)

    # Initialize LLM provider (supports Anthropic, OpenAI, Google)
    state.provider = get_provider_from_env(
        anthropic_key=config.ANTHROPIC_API_KEY or None,
        openai_key=config.OPENAI_API_KEY or None,
        google_key=config.GOOGLE_API_KEY or None,
        preferred_provider=config.LLM_PROVIDER or None,
        default_model=config.LLM_MODEL or None,
        timeout=config.LLM_TIMEOUT,
        max_retries=config.LLM_MAX_RETRIES,
    )

    model = config.LLM_MODEL or None
    state.classifier = Classifier(provider=state.provider, model=model)
    if state.provider:
        state.summarizer = Summarizer(provider=state.provider, model=model)
        logger.info(f"LLM provider initialized: {state.provider.name}")
    else:
        state.summarizer = None
        logger.warning(
            "No LLM API key configured. Set ANTHROPIC_API_KEY, OPENAI_API_KEY, "
            "or GOOGLE_API_KEY. Articles get default tags; summaries disabled."
        )

    state.extractor = ContentExtractor(
        validate_timeout=config.VALIDATE_TIMEOUT,
        fetch_timeout=config.FETCH_TIMEOUT,
    )
    state.aggregator = Aggregator(
        store=state.db,
        sources=config.FEED_SOURCES,
        rss_fetcher=RSSFetcher(state.extractor, state.classifier, timeout=config.FETCH_TIMEOUT),
        arxiv_fetcher=ArxivFetcher(timeout=config.FETCH_TIMEOUT),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application resources."""
    # Startup - skip if already initialized (e.g., by tests)
    if state.db is None:
        init_state()
    yield


app = FastAPI(
    title="AI News Aggregator API",
    version=__version__,
    lifespan=lifespan
)

setup_rate_limiting(app)

# Include routers
app.include_router(misc_router)
app.include_router(articles_router)
app.include_router(bookmarks_router)
app.include_router(reading_list_router)
app.include_router(read_history_router)
app.include_router(rss_router)


def main() -> None:
    """Run the API server."""
    import uvicorn

    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)


if __name__ == "__main__":
    main()
