"""
Tests for the RSS and ArXiv feed fetchers.

Network access is patched out: downloads return canned documents and link
validation is mocked.
"""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiohttp import test_utils, web
from tenacity import wait_none

from ainews.classifier import Classification
from ainews.database import Category, Industry
from ainews.exceptions import FeedFetchError, FeedParseError
from ainews.extractor import ContentExtractor
from ainews.feeds import (
    ArxivFetcher,
    FeedSource,
    RSSFetcher,
    parse_arxiv_feed,
    parse_feed,
)

RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/"
     xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Example AI News</title>
    <link>https://news.example.com</link>
    <description>AI coverage</description>
    <item>
      <title>Lab ships new model</title>
      <link>https://news.example.com/new-model</link>
      <guid isPermaLink="false">example-guid-1</guid>
      <pubDate>Mon, 06 Jan 2025 10:30:00 GMT</pubDate>
      <description>Short teaser.</description>
      <content:encoded><![CDATA[<p>The lab shipped a new model today with much better reasoning.</p>]]></content:encoded>
      <dc:creator>Ada Writer</dc:creator>
      <media:content url="https://news.example.com/img/model.jpg" medium="image"/>
    </item>
    <item>
      <title>No guid here</title>
      <link>https://news.example.com/no-guid</link>
      <description>Item without a guid or date.</description>
      <enclosure url="https://news.example.com/img/enclosure.jpg" type="image/jpeg" length="1000"/>
    </item>
    <item>
      <description>Item without a title or link is dropped.</description>
    </item>
  </channel>
</rss>
"""

ARXIV_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>ArXiv Query</title>
  <entry>
    <id>http://arxiv.org/abs/2501.00001v1</id>
    <published>2025-01-02T18:00:00Z</published>
    <title>Scaling   Laws for
      Tiny Models</title>
    <summary>  We study scaling
      laws.  </summary>
    <author><name>Alice Smith</name></author>
    <author><name>Bob Jones</name></author>
  </entry>
  <entry>
    <id>http://arxiv.org/abs/2501.00002v1</id>
    <published>2025-01-02T17:00:00Z</published>
    <title></title>
    <summary>No title, dropped.</summary>
  </entry>
</feed>
"""


def make_fetcher(reachable=True, classification=None):
    """RSSFetcher with mocked link validation and classification."""
    extractor = ContentExtractor()
    extractor.validate_reachable = AsyncMock(return_value=reachable)
    classifier = MagicMock()
    classifier.classify = AsyncMock(return_value=classification or Classification(
        category=Category.BREAKTHROUGH,
        score=88,
        industries=[Industry.TECHNOLOGY],
    ))
    fetcher = RSSFetcher(extractor, classifier)
    fetcher.download = AsyncMock(return_value=RSS_FEED)
    return fetcher


async def collect(generator):
    return [item async for item in generator]


class TestParseFeed:
    """Tests for raw RSS item extraction."""

    def test_extracts_fields(self):
        items = parse_feed(RSS_FEED)
        first = items[0]

        assert first.title == "Lab ships new model"
        assert first.link == "https://news.example.com/new-model"
        assert first.guid == "example-guid-1"
        assert first.author == "Ada Writer"
        assert "much better reasoning" in first.content_encoded
        assert first.image_url == "https://news.example.com/img/model.jpg"
        assert first.published == datetime(2025, 1, 6, 10, 30, tzinfo=timezone.utc)

    def test_enclosure_image(self):
        items = parse_feed(RSS_FEED)
        assert items[1].image_url == "https://news.example.com/img/enclosure.jpg"
        assert items[1].published is None

    def test_missing_fields_are_none(self):
        items = parse_feed(RSS_FEED)
        assert items[2].title is None
        assert items[2].link is None

    def test_garbage_raises(self):
        with pytest.raises(FeedParseError):
            parse_feed(b"<html><body>not a feed")


class TestRSSFetcher:
    """Tests for RSSFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_yields_classified_candidates(self):
        fetcher = make_fetcher()
        candidates = await collect(fetcher.fetch(FeedSource("Example", "https://news.example.com/feed")))

        # The title-less item is dropped
        assert len(candidates) == 2
        first = candidates[0]
        assert first.source_id == "example-guid-1"
        assert first.source == "Example"
        assert first.category == Category.BREAKTHROUGH
        assert first.relevance_score == 88
        assert first.industries == [Industry.TECHNOLOGY]
        assert first.description == "The lab shipped a new model today with much better reasoning."
        assert first.image_url == "https://news.example.com/img/model.jpg"
        assert first.author == "Ada Writer"

    @pytest.mark.asyncio
    async def test_source_id_falls_back_to_link(self):
        fetcher = make_fetcher()
        candidates = await collect(fetcher.fetch(FeedSource("Example", "https://news.example.com/feed")))
        second = candidates[1]

        assert second.source_id == "https://news.example.com/no-guid"
        # Missing date falls back to ingestion time
        assert (datetime.now(timezone.utc) - second.published_at).total_seconds() < 60

    @pytest.mark.asyncio
    async def test_unreachable_links_are_skipped(self):
        fetcher = make_fetcher(reachable=False)
        candidates = await collect(fetcher.fetch(FeedSource("Example", "https://news.example.com/feed")))

        assert candidates == []
        fetcher.classifier.classify.assert_not_called()

    @pytest.mark.asyncio
    async def test_download_failure_propagates(self):
        fetcher = make_fetcher()
        fetcher.download = AsyncMock(side_effect=FeedFetchError("timeout"))

        with pytest.raises(FeedFetchError):
            await collect(fetcher.fetch(FeedSource("Example", "https://news.example.com/feed")))

    @pytest.mark.asyncio
    async def test_long_fields_are_capped(self):
        fetcher = make_fetcher()
        item = parse_feed(RSS_FEED)[0]
        item.content_encoded = "x" * 20000

        candidate = await fetcher.build_candidate(item, "Example")

        assert len(candidate.content) == 10000
        assert len(candidate.description) <= 5000


class TestArxiv:
    """Tests for ArXiv parsing and candidate forcing."""

    def test_parse_collapses_whitespace(self):
        entries = parse_arxiv_feed(ARXIV_FEED)

        assert len(entries) == 1
        entry = entries[0]
        assert entry.title == "Scaling Laws for Tiny Models"
        assert entry.summary == "We study scaling laws."
        assert entry.authors == ["Alice Smith", "Bob Jones"]
        assert entry.published == datetime(2025, 1, 2, 18, 0, tzinfo=timezone.utc)

    def test_invalid_xml_raises(self):
        with pytest.raises(FeedParseError):
            parse_arxiv_feed("<feed><entry>")

    @pytest.mark.asyncio
    async def test_candidates_forced_to_research(self):
        fetcher = ArxivFetcher(categories=["cs.AI"])
        fetcher.download = AsyncMock(return_value=ARXIV_FEED)

        candidates = await collect(fetcher.fetch())

        assert len(candidates) == 1
        candidate = candidates[0]
        assert candidate.category == Category.RESEARCH
        assert candidate.relevance_score == 75
        assert candidate.industries is None
        assert candidate.source == "ArXiv"
        assert candidate.source_id == "http://arxiv.org/abs/2501.00001v1"
        assert candidate.url == candidate.source_id
        assert candidate.author == "Alice Smith, Bob Jones"

    @pytest.mark.asyncio
    async def test_queries_each_category(self):
        fetcher = ArxivFetcher()
        fetcher.download = AsyncMock(return_value=ARXIV_FEED)

        candidates = await collect(fetcher.fetch())

        assert [c.args[0] for c in fetcher.download.call_args_list] == ["cs.AI", "cs.LG", "cs.CL"]
        assert len(candidates) == 3

    @pytest.mark.asyncio
    async def test_no_reachability_check(self):
        fetcher = ArxivFetcher(categories=["cs.AI"])
        fetcher.download = AsyncMock(return_value=ARXIV_FEED)

        with patch.object(ContentExtractor, "validate_reachable") as mock_validate:
            await collect(fetcher.fetch())

        mock_validate.assert_not_called()


def make_slow_site(delay: float = 1):
    """aiohttp app whose only route answers after `delay` seconds."""
    requests = []

    async def slow(request):
        requests.append(request.path)
        await asyncio.sleep(delay)
        return web.Response(body=RSS_FEED)

    app = web.Application()
    app.router.add_get("/slow", slow)
    return app, requests


class TestDownloadTimeouts:
    """Timeouts surface as FeedFetchError so callers can isolate or retry them."""

    @pytest.mark.asyncio
    async def test_rss_timeout_wrapped(self):
        app, _ = make_slow_site()
        fetcher = RSSFetcher(MagicMock(), MagicMock(), timeout=0.2)
        async with test_utils.TestServer(app) as server:
            with pytest.raises(FeedFetchError):
                await fetcher.download(str(server.make_url("/slow")))

    @pytest.mark.asyncio
    async def test_arxiv_timeout_is_retried(self, monkeypatch):
        monkeypatch.setattr(ArxivFetcher.download.retry, "wait", wait_none())
        app, requests = make_slow_site()
        fetcher = ArxivFetcher(categories=["cs.AI"], timeout=0.2)
        async with test_utils.TestServer(app) as server:
            fetcher.API_URL = str(server.make_url("/slow"))
            with pytest.raises(FeedFetchError):
                await fetcher.download("cs.AI")

        assert len(requests) == 3
