"""
Database models - dataclasses and fixed vocabularies for database entities.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Category(Enum):
    """Article categories the classifier may choose from."""
    BREAKTHROUGH = "breakthrough"
    COMPANY_ANNOUNCEMENT = "company_announcement"
    POLICY = "policy"
    FUNDING = "funding"
    RESEARCH = "research"
    OTHER = "other"

    @classmethod
    def parse(cls, value: object) -> "Category":
        """Map a raw value to a category, falling back to OTHER."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


class Industry(Enum):
    """Industry tags an article may be associated with."""
    OIL_GAS = "oil_gas"
    MEDICAL = "medical"
    HOSPITALITY = "hospitality"
    REAL_ESTATE = "real_estate"
    EDUCATION = "education"
    FINANCE = "finance"
    TECHNOLOGY = "technology"
    MANUFACTURING = "manufacturing"
    RETAIL = "retail"
    OTHER = "other"

    @classmethod
    def parse_many(cls, values: object) -> list["Industry"]:
        """Keep known tags only, de-duplicated in first-seen order."""
        if not isinstance(values, (list, tuple)):
            return []
        known = {i.value: i for i in cls}
        result: list[Industry] = []
        for value in values:
            tag = known.get(str(value).strip().lower())
            if tag and tag not in result:
                result.append(tag)
        return result


MIN_SCORE = 0
MAX_SCORE = 100


def clamp_score(score: int) -> int:
    """Clamp a relevance score into [0, 100]."""
    return max(MIN_SCORE, min(MAX_SCORE, score))


@dataclass
class ArticleCandidate:
    """A normalized article produced by a feed fetcher, ready to insert."""
    source_id: str
    title: str
    url: str
    source: str
    published_at: datetime
    description: str = ""
    content: str = ""
    image_url: str | None = None
    author: str | None = None
    category: Category = Category.OTHER
    relevance_score: int = 50
    # None means the article was never classified
    industries: list[Industry] | None = None


@dataclass
class DBArticle:
    id: int
    source_id: str
    title: str
    url: str
    source: str
    category: Category
    relevance_score: int
    published_at: datetime
    created_at: datetime
    description: str | None = None
    content: str | None = None
    summary: str | None = None
    image_url: str | None = None
    author: str | None = None
    industries: list[Industry] = field(default_factory=list)


@dataclass
class ArticleFilter:
    """Filter for article list/count queries."""
    category: str | None = None
    industry: str | None = None
    search: str | None = None
    since: datetime | None = None


@dataclass
class DBUserArticle:
    """An article associated with a user (bookmark, reading list, history)."""
    article: DBArticle
    user_id: int
    added_at: datetime
