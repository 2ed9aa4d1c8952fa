"""
Feed Fetchers - turn feed sources into normalized article candidates.

Handles:
- RSS 2.0 and Atom feeds via feedparser (RSSFetcher)
- The ArXiv search API for AI research papers (ArxivFetcher)

Both fetchers yield candidates lazily from an async generator: a fetch is
finite and single-use. Source-level failures (download or parse) raise;
item-level problems skip the item.
"""

import asyncio
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, AsyncIterator

import aiohttp
import feedparser
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .database.models import ArticleCandidate, Category
from .exceptions import FeedFetchError, FeedParseError

if TYPE_CHECKING:
    from .classifier import Classifier
    from .extractor import ContentExtractor

logger = logging.getLogger(__name__)

# Storage bounds for candidate text fields
MAX_DESCRIPTION_LENGTH = 5000
MAX_CONTENT_LENGTH = 10000


@dataclass(frozen=True)
class FeedSource:
    """A configured RSS/Atom feed."""
    name: str
    url: str


@dataclass
class RawFeedItem:
    """The fields of an RSS/Atom entry the pipeline uses."""
    title: str | None = None
    link: str | None = None
    guid: str | None = None
    published: datetime | None = None
    content_encoded: str | None = None
    content: str | None = None
    description: str | None = None
    summary: str | None = None
    content_snippet: str | None = None
    author: str | None = None
    media_content_url: str | None = None
    media_thumbnail_url: str | None = None
    enclosure_url: str | None = None

    @property
    def image_url(self) -> str | None:
        """media:content, then media:thumbnail, then enclosure."""
        return self.media_content_url or self.media_thumbnail_url or self.enclosure_url


@dataclass
class ArxivEntry:
    """One paper from an ArXiv API response."""
    entry_id: str
    title: str
    summary: str
    published: datetime | None
    authors: list[str]


def _struct_time_to_datetime(value) -> datetime | None:
    try:
        return datetime(*value[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def _first_url(media: object, key: str = "url") -> str | None:
    """First URL from a feedparser media list (list of attribute dicts)."""
    if isinstance(media, list):
        for entry in media:
            if isinstance(entry, dict) and entry.get(key):
                return entry[key]
    return None


def _collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def entry_to_raw_item(entry) -> RawFeedItem:
    """Build a RawFeedItem from a feedparser entry, tolerating missing fields."""
    contents = entry.get("content") or []
    content_encoded = None
    content = None
    for block in contents:
        value = block.get("value")
        if not value:
            continue
        if content is None:
            content = value
        if content_encoded is None and "html" in (block.get("type") or ""):
            content_encoded = value

    published = None
    for key in ("published_parsed", "updated_parsed"):
        if entry.get(key):
            published = _struct_time_to_datetime(entry[key])
            if published:
                break

    link = entry.get("link")
    if not link:
        for alt in entry.get("links") or []:
            if alt.get("rel") == "alternate" or alt.get("type") == "text/html":
                link = alt.get("href")
                break

    enclosure_url = None
    for enclosure in entry.get("enclosures") or []:
        if enclosure.get("href"):
            enclosure_url = enclosure["href"]
            break

    summary = entry.get("summary")
    snippet = None
    if summary:
        snippet = _collapse_whitespace(re.sub(r"<[^>]*>", " ", summary))

    return RawFeedItem(
        title=(entry.get("title") or "").strip() or None,
        link=(link or "").strip() or None,
        guid=entry.get("id") or None,
        published=published,
        content_encoded=content_encoded,
        content=content,
        description=entry.get("description"),
        summary=summary,
        content_snippet=snippet,
        author=entry.get("author") or None,
        media_content_url=_first_url(entry.get("media_content")),
        media_thumbnail_url=_first_url(entry.get("media_thumbnail")),
        enclosure_url=enclosure_url,
    )


def parse_feed(content: str | bytes) -> list[RawFeedItem]:
    """
    Parse RSS/Atom content into raw items.

    Raises FeedParseError when feedparser finds no entries in a malformed feed.
    """
    parsed = feedparser.parse(content)

    if parsed.bozo and not parsed.entries:
        raise FeedParseError(f"Failed to parse feed: {parsed.get('bozo_exception')}")

    return [entry_to_raw_item(entry) for entry in parsed.entries]


def parse_arxiv_feed(xml_content: str) -> list[ArxivEntry]:
    """
    Parse an ArXiv API Atom response.

    Tags are matched by local name so namespace prefixes don't matter.
    Entries without a title or id are dropped.

    Raises FeedParseError if the XML is malformed.
    """
    try:
        root = ET.fromstring(xml_content)
    except ET.ParseError as e:
        raise FeedParseError(f"Invalid ArXiv XML: {e}")

    def local(tag: str) -> str:
        return tag.rsplit("}", 1)[-1]

    entries = []
    for entry in root.iter():
        if local(entry.tag) != "entry":
            continue

        fields: dict[str, str] = {}
        authors: list[str] = []
        for child in entry.iter():
            name = local(child.tag)
            text = (child.text or "").strip()
            if name == "name":
                if text:
                    authors.append(text)
            elif name in ("title", "summary", "id", "published") and name not in fields:
                fields[name] = text

        title = _collapse_whitespace(fields.get("title", ""))
        entry_id = fields.get("id", "")
        if not title or not entry_id:
            continue

        published = None
        if fields.get("published"):
            try:
                published = datetime.fromisoformat(fields["published"].replace("Z", "+00:00"))
            except ValueError:
                pass

        entries.append(ArxivEntry(
            entry_id=entry_id,
            title=title,
            summary=_collapse_whitespace(fields.get("summary", "")),
            published=published,
            authors=authors,
        ))

    return entries


class RSSFetcher:
    """Fetches a feed and yields validated, classified article candidates."""

    def __init__(
        self,
        extractor: "ContentExtractor",
        classifier: "Classifier",
        timeout: int = 10,
        user_agent: str | None = None,
    ):
        self.extractor = extractor
        self.classifier = classifier
        self.timeout = timeout
        self.user_agent = user_agent or "AINewsAggregator/1.0 (+https://github.com/ainews)"

    async def download(self, url: str) -> bytes:
        """Download raw feed bytes. Raises FeedFetchError on failure."""
        headers = {"User-Agent": self.user_agent}
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    url,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as resp:
                    resp.raise_for_status()
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FeedFetchError(f"Could not download feed {url}: {e!r}") from e

    async def fetch(self, source: FeedSource) -> AsyncIterator[ArticleCandidate]:
        """Yield article candidates for one feed source."""
        items = parse_feed(await self.download(source.url))
        logger.info(f"{source.name}: {len(items)} items in feed")

        for item in items:
            candidate = await self.build_candidate(item, source.name)
            if candidate is not None:
                yield candidate

    async def build_candidate(self, item: RawFeedItem, source_name: str) -> ArticleCandidate | None:
        """Enrich one raw item; None if it is unusable or its link is unreachable."""
        if not item.title or not item.link:
            return None

        extracted = self.extractor.extract_best_effort_content(item)
        description = extracted.excerpt or item.content_snippet or ""

        if not await self.extractor.validate_reachable(item.link):
            logger.info(f"Skipping article with unreachable URL: {item.title}")
            return None

        classification = await self.classifier.classify(item.title, description)

        return ArticleCandidate(
            source_id=item.guid or item.link,
            title=item.title,
            url=item.link,
            source=source_name,
            published_at=item.published or datetime.now(timezone.utc),
            description=description[:MAX_DESCRIPTION_LENGTH],
            content=extracted.content[:MAX_CONTENT_LENGTH],
            image_url=item.image_url,
            author=item.author,
            category=classification.category,
            relevance_score=classification.score,
            industries=classification.industries,
        )


class ArxivFetcher:
    """Fetches recent AI papers from ArXiv; every paper is tagged as research."""

    API_URL = "http://export.arxiv.org/api/query"
    CATEGORIES = ("cs.AI", "cs.LG", "cs.CL")  # AI, ML, Computational Linguistics
    MAX_RESULTS = 20
    SOURCE_NAME = "ArXiv"
    RESEARCH_SCORE = 75

    def __init__(
        self,
        categories: tuple[str, ...] | list[str] | None = None,
        max_results: int = MAX_RESULTS,
        timeout: int = 10,
    ):
        self.categories = tuple(categories or self.CATEGORIES)
        self.max_results = max_results
        self.timeout = timeout

    @retry(
        retry=retry_if_exception_type(FeedFetchError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def download(self, category: str) -> str:
        """Query the API for the newest papers in a subject category, retrying transient failures."""
        params = {
            "search_query": f"cat:{category}",
            "sortBy": "submittedDate",
            "sortOrder": "descending",
            "max_results": str(self.max_results),
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.get(
                    self.API_URL,
                    params=params,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as resp:
                    resp.raise_for_status()
                    return await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FeedFetchError(f"ArXiv query failed for {category}: {e!r}") from e

    async def fetch(self) -> AsyncIterator[ArticleCandidate]:
        """Yield research candidates for each configured category in turn."""
        for category in self.categories:
            entries = parse_arxiv_feed(await self.download(category))
            logger.info(f"ArXiv {category}: {len(entries)} papers")
            for entry in entries:
                yield self.to_candidate(entry)

    def to_candidate(self, entry: ArxivEntry) -> ArticleCandidate:
        return ArticleCandidate(
            source_id=entry.entry_id,
            title=entry.title,
            url=entry.entry_id,
            source=self.SOURCE_NAME,
            published_at=entry.published or datetime.now(timezone.utc),
            description=entry.summary[:MAX_DESCRIPTION_LENGTH],
            content=entry.summary[:MAX_CONTENT_LENGTH],
            author=", ".join(entry.authors) or None,
            category=Category.RESEARCH,
            relevance_score=self.RESEARCH_SCORE,
            industries=None,
        )
