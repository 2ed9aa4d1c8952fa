"""
Classifier - LLM-powered category, relevance and industry tagging.

Features:
- Prompt that lists the fixed category and industry vocabularies
- JSON-schema constrained response through any LLM provider
- Out-of-vocabulary values dropped, scores clamped to [0, 100]
- Default tags on any failure so the article is still ingested
"""

import json
import logging
import re
from dataclasses import dataclass, field

from .database.models import Category, Industry, clamp_score
from .providers import LLMProvider, Message, ModelTier, ResponseSchema

logger = logging.getLogger(__name__)


DEFAULT_SCORE = 50


@dataclass
class Classification:
    """Result of classifying one article."""
    category: Category = Category.OTHER
    score: int = DEFAULT_SCORE
    industries: list[Industry] = field(default_factory=list)


class Classifier:
    """Tags articles with a category, relevance score and industries."""

    # Maximum description length sent to the model
    MAX_DESCRIPTION_LENGTH = 500

    SYSTEM_PROMPT = (
        "You are an AI news categorization assistant. Analyze the article and "
        "return JSON with category, relevance score, and relevant industries."
    )

    CATEGORY_DESCRIPTIONS = {
        Category.BREAKTHROUGH: "Major AI breakthroughs, new capabilities, research advances",
        Category.COMPANY_ANNOUNCEMENT: "Product launches, partnerships, company news",
        Category.POLICY: "Regulations, policy changes, legal issues",
        Category.FUNDING: "Funding rounds, M&A, investments",
        Category.RESEARCH: "Academic papers, research findings",
        Category.OTHER: "Everything else",
    }

    INDUSTRY_DESCRIPTIONS = {
        Industry.OIL_GAS: "Oil & Gas, Energy sector",
        Industry.MEDICAL: "Healthcare, Medical, Pharmaceuticals, Biotech",
        Industry.HOSPITALITY: "Hotels, Tourism, Travel, Restaurants",
        Industry.REAL_ESTATE: "Real Estate, Property, Construction",
        Industry.EDUCATION: "Education, EdTech, Training",
        Industry.FINANCE: "Finance, Banking, FinTech, Insurance",
        Industry.TECHNOLOGY: "General Technology, Software, Hardware",
        Industry.MANUFACTURING: "Manufacturing, Industrial, Supply Chain",
        Industry.RETAIL: "Retail, E-commerce, Consumer goods",
        Industry.OTHER: "Other industries",
    }

    RESPONSE_SCHEMA = ResponseSchema(
        name="article_analysis",
        schema={
            "type": "object",
            "properties": {
                "category": {
                    "type": "string",
                    "enum": [c.value for c in Category],
                    "description": "The category of the article",
                },
                "score": {
                    "type": "integer",
                    "description": "Relevance score from 0 to 100",
                },
                "industries": {
                    "type": "array",
                    "items": {
                        "type": "string",
                        "enum": [i.value for i in Industry],
                    },
                    "description": "Array of relevant industries",
                },
            },
            "required": ["category", "score", "industries"],
            "additionalProperties": False,
        },
    )

    def __init__(self, provider: LLMProvider | None = None, model: str | None = None):
        """
        Initialize classifier.

        Args:
            provider: LLM provider; without one every article gets default tags
            model: Optional model override (defaults to the provider's fast tier)
        """
        self.provider = provider
        self.model = model

    def build_prompt(self, title: str, description: str) -> str:
        """Build the user prompt for one article."""
        truncated = (description or "")[:self.MAX_DESCRIPTION_LENGTH]
        categories = "\n".join(
            f"- {c.value}: {desc}" for c, desc in self.CATEGORY_DESCRIPTIONS.items()
        )
        industries = "\n".join(
            f"- {i.value}: {desc}" for i, desc in self.INDUSTRY_DESCRIPTIONS.items()
        )
        return f"""Categorize this AI news article, rate its importance (0-100), and identify relevant industries:

Title: {title}
Description: {truncated}

Categories:
{categories}

Industries (select ALL that apply):
{industries}

Return JSON with:
- category: one of the above categories
- score: relevance/importance score 0-100 (consider: impact, novelty, source credibility)
- industries: array of relevant industry tags (can be multiple)"""

    async def classify(self, title: str, description: str) -> Classification:
        """
        Classify an article. Never raises.

        Returns the default classification (other, 50, no industries) when
        no provider is configured or the model call or its output fails.
        """
        if self.provider is None:
            return Classification()

        messages = [
            Message(role="system", content=self.SYSTEM_PROMPT),
            Message(role="user", content=self.build_prompt(title, description)),
        ]

        try:
            response = await self.provider.complete_async(
                messages=messages,
                response_schema=self.RESPONSE_SCHEMA,
                model=self.model or self.provider.get_model_for_tier(ModelTier.FAST),
                max_tokens=256,
            )
            payload = response.parsed if response.parsed is not None else response.text
            return self.parse_result(payload)
        except Exception as e:
            logger.warning(f"Error categorizing article '{title[:80]}': {e!r}")
            return Classification()

    def parse_result(self, payload: object) -> Classification:
        """
        Turn a structured payload or JSON text into a Classification.

        Raises ValueError when the payload is empty or not a JSON object.
        """
        if isinstance(payload, str):
            payload = self._load_json(payload)
        if not isinstance(payload, dict):
            raise ValueError(f"Expected JSON object, got {type(payload).__name__}")

        return Classification(
            category=Category.parse(payload.get("category")),
            score=self._parse_score(payload.get("score")),
            industries=Industry.parse_many(payload.get("industries")),
        )

    def _load_json(self, text: str) -> object:
        text = text.strip()
        if not text:
            raise ValueError("Empty classification response")
        # Models sometimes wrap JSON in a ```json fence
        fenced = re.search(r"```(?:json)?\s*(.*?)\s*```", text, re.DOTALL)
        if fenced:
            text = fenced.group(1)
        return json.loads(text)

    def _parse_score(self, value: object) -> int:
        if isinstance(value, bool):
            return DEFAULT_SCORE
        try:
            score = int(round(float(value)))
        except (TypeError, ValueError, OverflowError):
            return DEFAULT_SCORE
        # A zero score is treated as missing
        return clamp_score(score) if score else DEFAULT_SCORE
