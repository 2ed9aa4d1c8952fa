"""RSS 2.0 export of stored articles."""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime

from .database.models import DBArticle

ATOM_NS = "http://www.w3.org/2005/Atom"

ET.register_namespace("atom", ATOM_NS)


def _rfc822(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def generate_rss(
    articles: list[DBArticle],
    base_url: str,
    category: str | None = None,
) -> str:
    """
    Generate an RSS 2.0 feed from articles.

    Args:
        articles: Articles in the order they should appear
        base_url: Public URL of this service, used for channel links
        category: Category the articles were filtered by, if any

    Returns:
        RSS XML string
    """
    base_url = base_url.rstrip("/")

    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")

    title = "AI News Aggregator"
    if category and category != "all":
        title += f" - {category}"

    ET.SubElement(channel, "title").text = title
    ET.SubElement(channel, "link").text = base_url
    ET.SubElement(channel, "description").text = "Daily AI news from top sources"
    ET.SubElement(channel, "language").text = "en-us"
    ET.SubElement(channel, "lastBuildDate").text = _rfc822(datetime.now(timezone.utc))
    ET.SubElement(
        channel,
        f"{{{ATOM_NS}}}link",
        href=f"{base_url}/rss",
        rel="self",
        type="application/rss+xml",
    )

    for article in articles:
        _add_item(channel, article)

    # Generate XML string with declaration
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(
        rss, encoding="unicode"
    )


def _add_item(channel: ET.Element, article: DBArticle) -> None:
    """Add an item element for one article."""
    item = ET.SubElement(channel, "item")
    ET.SubElement(item, "title").text = article.title
    ET.SubElement(item, "link").text = article.url
    ET.SubElement(item, "guid", isPermaLink="false").text = str(article.id)
    ET.SubElement(item, "pubDate").text = _rfc822(article.published_at)
    ET.SubElement(item, "description").text = article.description or ""
    ET.SubElement(item, "category").text = article.category.value
    ET.SubElement(item, "source", url=article.url).text = article.source
