"""
Summarizer - LLM-powered article summarization.

Features:
- Multi-provider support (Anthropic, OpenAI, Google)
- Short 2-3 sentence summaries for the article detail view
- Summaries generated on demand and stored once per article
"""

import logging

from .database.models import DBArticle
from .exceptions import SummaryError
from .providers import LLMProvider, Message, ModelTier

logger = logging.getLogger(__name__)


class Summarizer:
    """LLM-powered article summarizer with multi-provider support."""

    # Maximum content length to send to API
    MAX_CONTENT_LENGTH = 15000

    SYSTEM_PROMPT = "You are a helpful assistant that creates concise summaries of AI news articles."

    INSTRUCTION_PROMPT = (
        "Summarize the following AI news article in 2-3 concise sentences. "
        "Focus on the key information and why it matters."
    )

    def __init__(self, provider: LLMProvider, model: str | None = None):
        """
        Initialize summarizer with an LLM provider.

        Args:
            provider: LLM provider instance (Anthropic, OpenAI, or Google)
            model: Optional model override (defaults to the provider's fast tier)
        """
        self.provider = provider
        self.model = model

    def build_prompt(self, article: DBArticle) -> str:
        """Build the user prompt from the article's best available text."""
        body = (article.description or article.content or article.title)[:self.MAX_CONTENT_LENGTH]
        return f"""{self.INSTRUCTION_PROMPT}

Title: {article.title}

Content: {body}"""

    async def summarize(self, article: DBArticle) -> str:
        """
        Generate a summary for an article.

        Returns:
            The summary as plain text

        Raises:
            SummaryError: If the model returns an empty response
            Exception: Provider errors propagate to the caller
        """
        messages = [
            Message(role="system", content=self.SYSTEM_PROMPT),
            Message(role="user", content=self.build_prompt(article)),
        ]

        response = await self.provider.complete_async(
            messages=messages,
            model=self.model or self.provider.get_model_for_tier(ModelTier.FAST),
            max_tokens=300,
            temperature=0.3,
        )

        summary = (response.text or "").strip()
        if not summary:
            raise SummaryError(f"Empty summary for article {article.id}")

        logger.info(f"Generated summary for article {article.id} with {response.model}")
        return summary
