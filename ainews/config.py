"""
Configuration and application state management.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from fastapi import HTTPException

from .feeds import FeedSource

if TYPE_CHECKING:
    from .aggregator import Aggregator
    from .classifier import Classifier
    from .database import Database
    from .extractor import ContentExtractor
    from .providers import LLMProvider
    from .summarizer import Summarizer

# Load environment variables
load_dotenv()


# AI news feeds aggregated when AINEWS_FEEDS is not set
DEFAULT_FEED_SOURCES = [
    FeedSource(
        name="TechCrunch",
        url="https://techcrunch.com/category/artificial-intelligence/feed/",
    ),
    FeedSource(
        name="The Verge",
        url="https://www.theverge.com/rss/ai-artificial-intelligence/index.xml",
    ),
    FeedSource(
        name="Wired",
        url="https://www.wired.com/feed/tag/ai/latest/rss",
    ),
    FeedSource(
        name="VentureBeat",
        url="https://venturebeat.com/category/ai/feed/",
    ),
]


def _parse_int(value: str | None, default: int) -> int:
    """Parse integer from environment variable."""
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_feed_sources(value: str | None) -> list[FeedSource]:
    """
    Parse a feed list of the form "Name|https://url, Other|https://url2".

    Entries without a "Name|" prefix use the URL as the name.
    Returns the default sources when the value is empty.
    """
    if not value or not value.strip():
        return list(DEFAULT_FEED_SOURCES)

    sources = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if "|" in entry:
            name, url = entry.split("|", 1)
            name, url = name.strip(), url.strip()
        else:
            name, url = entry, entry
        if url:
            sources.append(FeedSource(name=name or url, url=url))
    return sources


class Config:
    """Application configuration from environment."""
    # LLM Provider configuration
    # Set one of these API keys based on your preferred provider
    ANTHROPIC_API_KEY: str = os.getenv("ANTHROPIC_API_KEY", "")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")

    # Preferred provider: "anthropic", "openai", or "google"
    # If not set, uses the first available key in order: Anthropic > OpenAI > Google
    LLM_PROVIDER: str = os.getenv("LLM_PROVIDER", "")

    # Optional: override the default model for the selected provider
    LLM_MODEL: str = os.getenv("LLM_MODEL", "")

    DB_PATH: Path = Path(os.getenv("DB_PATH", "./data/ainews.db"))
    PORT: int = _parse_int(os.getenv("PORT"), 5005)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # API access control
    AUTH_API_KEY: str = os.getenv("AUTH_API_KEY", "")
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")
    RATE_LIMIT_PER_MINUTE: int = _parse_int(os.getenv("RATE_LIMIT_PER_MINUTE"), 60)

    # Used for links in the RSS re-export
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:5005")

    # Network timeouts (seconds)
    VALIDATE_TIMEOUT: int = _parse_int(os.getenv("VALIDATE_TIMEOUT"), 5)
    FETCH_TIMEOUT: int = _parse_int(os.getenv("FETCH_TIMEOUT"), 10)
    LLM_TIMEOUT: int = _parse_int(os.getenv("LLM_TIMEOUT"), 10)
    LLM_MAX_RETRIES: int = _parse_int(os.getenv("LLM_MAX_RETRIES"), 1)

    FEED_SOURCES: list[FeedSource] = parse_feed_sources(os.getenv("AINEWS_FEEDS"))

    @classmethod
    def has_llm_key(cls) -> bool:
        """Check if any LLM API key is configured."""
        return bool(cls.ANTHROPIC_API_KEY or cls.OPENAI_API_KEY or cls.GOOGLE_API_KEY)


config = Config()


class AppState:
    """Shared application state."""
    db: "Database | None" = None
    provider: "LLMProvider | None" = None  # LLM provider instance
    classifier: "Classifier | None" = None
    summarizer: "Summarizer | None" = None
    extractor: "ContentExtractor | None" = None
    aggregator: "Aggregator | None" = None
    refresh_in_progress: bool = False


state = AppState()


def get_db() -> "Database":
    """Dependency to get database instance."""
    if not state.db:
        raise HTTPException(status_code=500, detail="Database not initialized")
    return state.db
