"""
Content Extractor - best-effort article text and link checks.

Handles:
- Link reachability checks (HEAD, short timeout, bounded redirects)
- Picking the richest content field a feed item provides
- Reader-mode extraction from a page using trafilatura
- Fallback to BeautifulSoup heuristics for reader mode
- Batched link validation with bounded concurrency

Every operation degrades to an empty/false/None result instead of raising,
so one bad item never stops an aggregation run.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urljoin

import aiohttp
import trafilatura
from bs4 import BeautifulSoup

from .url_validator import is_safe_url

if TYPE_CHECKING:
    from .feeds import RawFeedItem

logger = logging.getLogger(__name__)

NO_EXCERPT = "No excerpt available"
REDIRECT_STATUSES = {301, 302, 303, 307, 308}


@dataclass
class ExtractedText:
    """Content picked from a feed item."""
    content: str
    excerpt: str


@dataclass
class ReadableContent:
    """Reader-mode view of a web page."""
    title: str
    content: str  # cleaned HTML
    text_content: str
    excerpt: str
    byline: str | None
    length: int
    reading_time_minutes: int


def strip_markup(html: str) -> str:
    """Remove tags and collapse whitespace."""
    if not html:
        return ""
    if "<" not in html:
        return re.sub(r"\s+", " ", html).strip()
    text = BeautifulSoup(html, "html.parser").get_text(separator=" ")
    return re.sub(r"\s+", " ", text).strip()


def estimate_reading_time(text: str, words_per_minute: int = 225) -> int:
    """Estimated minutes to read text, minimum one."""
    words = len(text.split())
    return max(1, -(-words // words_per_minute))


class ContentExtractor:
    """Extracts readable text and validates article links."""

    EXCERPT_LENGTH = 500
    BATCH_SIZE = 10

    def __init__(
        self,
        validate_timeout: float = 5,
        fetch_timeout: float = 10,
        max_redirects: int = 3,
        user_agent: str | None = None,
    ):
        self.validate_timeout = validate_timeout
        self.fetch_timeout = fetch_timeout
        self.max_redirects = max_redirects
        self.user_agent = user_agent or "Mozilla/5.0 (compatible; AINewsAggregator/1.0)"
        self.headers = {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    # ─────────────────────────────────────────────────────────────
    # Link validation
    # ─────────────────────────────────────────────────────────────

    async def validate_reachable(self, url: str) -> bool:
        """
        Check that a URL answers a HEAD request with a non-error status.

        Redirects are followed up to max_redirects. Returns False on any
        network error, timeout, or 4xx/5xx response.
        """
        try:
            async with aiohttp.ClientSession(headers=self.headers) as session:
                async with session.head(
                    url,
                    timeout=aiohttp.ClientTimeout(total=self.validate_timeout),
                    allow_redirects=True,
                    # aiohttp raises once the hop count reaches max_redirects
                    max_redirects=self.max_redirects + 1,
                ) as resp:
                    return 200 <= resp.status < 400
        except Exception as e:
            logger.debug(f"URL validation failed for {url}: {e!r}")
            return False

    async def batch_validate(self, urls: list[str]) -> dict[str, bool]:
        """
        Validate many URLs, at most BATCH_SIZE at a time.

        Returns one entry per distinct input URL.
        """
        unique_urls = list(dict.fromkeys(urls))
        results: dict[str, bool] = {}

        for start in range(0, len(unique_urls), self.BATCH_SIZE):
            batch = unique_urls[start:start + self.BATCH_SIZE]
            outcomes = await asyncio.gather(*(self.validate_reachable(u) for u in batch))
            results.update(zip(batch, outcomes))

        return results

    # ─────────────────────────────────────────────────────────────
    # Feed item content
    # ─────────────────────────────────────────────────────────────

    def extract_best_effort_content(self, item: "RawFeedItem") -> ExtractedText:
        """
        Pick the longest content-bearing field of a feed item.

        Fields are checked richest-first (encoded content, content,
        description, summary, snippet); on equal length the earlier one wins.
        The excerpt is the first EXCERPT_LENGTH characters of plain text.
        """
        candidates = [
            item.content_encoded,
            item.content,
            item.description,
            item.summary,
            item.content_snippet,
        ]

        full_content = ""
        for field in candidates:
            if isinstance(field, str) and len(field) > len(full_content):
                full_content = field

        excerpt = strip_markup(full_content)[:self.EXCERPT_LENGTH].strip()
        return ExtractedText(content=full_content, excerpt=excerpt or NO_EXCERPT)

    # ─────────────────────────────────────────────────────────────
    # Reader mode
    # ─────────────────────────────────────────────────────────────

    async def extract_reader_mode_content(self, url: str) -> ReadableContent | None:
        """
        Fetch a page and extract its main article content.

        Returns None if the URL is unsafe, the fetch fails, or nothing
        readable is found.
        """
        if not is_safe_url(url):
            logger.info(f"Refusing reader mode for unsafe URL: {url}")
            return None

        try:
            page = await self._fetch_page(url)
        except Exception as e:
            logger.warning(f"Reader mode fetch failed for {url}: {e!r}")
            return None
        if page is None:
            return None

        final_url, html = page
        try:
            return self._extract_readable(final_url, html)
        except Exception as e:
            logger.warning(f"Reader mode extraction failed for {url}: {e!r}")
            return None

    async def _fetch_page(self, url: str) -> tuple[str, str] | None:
        """
        GET a page, following at most max_redirects hops by hand.

        Every redirect target is re-checked with is_safe_url, so a public
        page cannot bounce the request to an internal address. Returns
        (final_url, html), or None when a hop is refused or the chain is
        too long.
        """
        current = url
        async with aiohttp.ClientSession(headers=self.headers) as session:
            for _ in range(self.max_redirects + 1):
                async with session.get(
                    current,
                    timeout=aiohttp.ClientTimeout(total=self.fetch_timeout),
                    allow_redirects=False,
                ) as resp:
                    location = resp.headers.get("Location")
                    if resp.status in REDIRECT_STATUSES and location:
                        current = urljoin(str(resp.url), location)
                        if not is_safe_url(current):
                            logger.info(f"Refusing reader mode redirect from {url} to {current}")
                            return None
                        continue
                    resp.raise_for_status()
                    return str(resp.url), await resp.text()

        logger.info(f"Reader mode gave up on {url}: more than {self.max_redirects} redirects")
        return None

    def _extract_readable(self, url: str, html: str) -> ReadableContent | None:
        """Extract with trafilatura, falling back to BeautifulSoup heuristics."""
        content = trafilatura.extract(
            html,
            url=url,
            output_format="html",
            include_links=True,
            include_images=False,
            include_tables=True,
            favor_recall=True,
        )
        metadata = trafilatura.extract_metadata(html, default_url=url)

        title = metadata.title if metadata and metadata.title else None
        byline = metadata.author if metadata and metadata.author else None
        description = metadata.description if metadata and metadata.description else None

        if not content:
            content, fallback_title, fallback_byline = self._extract_with_beautifulsoup(html)
            title = title or fallback_title
            byline = byline or fallback_byline

        text = strip_markup(content)
        if not text:
            return None

        return ReadableContent(
            title=title or "",
            content=content,
            text_content=text,
            excerpt=description or text[:300].strip(),
            byline=byline,
            length=len(text),
            reading_time_minutes=estimate_reading_time(text),
        )

    def _extract_with_beautifulsoup(self, html: str) -> tuple[str, str | None, str | None]:
        """Fallback extraction: returns (content_html, title, byline)."""
        soup = BeautifulSoup(html, "html.parser")

        # Remove unwanted elements
        for tag in soup.find_all([
            "script", "style", "nav", "header", "footer", "aside",
            "noscript", "iframe", "form", "button", "input"
        ]):
            tag.decompose()

        article = (
            soup.find("article") or
            soup.find(attrs={"role": "main"}) or
            soup.find("main") or
            soup.find(class_=re.compile(r"^(article|post|post-content|entry-content|story)$", re.I)) or
            soup.body
        )

        content = ""
        if article:
            parts = [
                str(elem)
                for elem in article.find_all(["p", "h1", "h2", "h3", "h4", "ul", "ol", "blockquote", "pre"])
                if elem.get_text(strip=True)
            ]
            content = "\n".join(parts) or str(article)

        title = None
        if og_title := soup.find("meta", property="og:title"):
            title = og_title.get("content")
        if not title and (title_tag := soup.find("title")):
            title = title_tag.get_text(strip=True)
            # Drop a trailing " | Site Name" suffix
            title = re.sub(r"\s*[|\-–—]\s*[^|\-–—]+$", "", title)

        byline = None
        if author_meta := soup.find("meta", {"name": "author"}):
            byline = author_meta.get("content")

        return content, title, byline
