"""
RSS feed client for fetching items from RSS/Atom feeds.

Fetches a fixed list of technology news feeds, tags every item with the
feed it came from and merges them into a single newest-first list.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from html import unescape
from typing import Optional
from xml.etree import ElementTree

import requests


logger = logging.getLogger(__name__)


# Common RSS namespaces
NAMESPACES = {
    "content": "http://purl.org/rss/1.0/modules/content/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "atom": "http://www.w3.org/2005/Atom",
    "rss1": "http://purl.org/rss/1.0/",
}

ATOM_NS = "{http://www.w3.org/2005/Atom}"
RSS1_NS = "{http://purl.org/rss/1.0/}"

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; AI-Investor-Daily/1.0)",
    "Accept": "application/rss+xml, application/atom+xml, application/xml, text/xml, */*",
}

FEED_TIMEOUT_SECONDS = 15


class RSSClientError(Exception):
    """Raised when RSS feed fetching or parsing fails."""
    pass


@dataclass(frozen=True)
class RSSFeedConfig:
    """Configuration for a single RSS feed."""

    name: str  # Fallback display name when the feed has no title
    url: str


@dataclass(frozen=True)
class FeedItem:
    """A single feed entry tagged with the feed it came from."""

    title: str
    link: str
    published_at: Optional[datetime]
    source_name: str


def _to_utc(value: datetime) -> datetime:
    """Normalise to an aware UTC datetime; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_rss_date(date_string: Optional[str]) -> Optional[datetime]:
    """
    Parse various RSS date formats.

    Handles:
    - RFC 822 (common in RSS 2.0): "Mon, 15 Jan 2024 10:30:00 GMT"
    - ISO 8601 (common in Atom): "2024-01-15T10:30:00Z"

    Returns None when the date is missing or unparseable so the item
    sorts as oldest.
    """
    if not date_string:
        return None

    date_string = date_string.strip()

    # Try RFC 822 format (email.utils handles this well)
    try:
        return _to_utc(parsedate_to_datetime(date_string))
    except (TypeError, ValueError, IndexError):
        pass

    try:
        return _to_utc(datetime.fromisoformat(date_string.replace("Z", "+00:00")))
    except ValueError:
        pass

    iso_formats = [
        "%Y-%m-%dT%H:%M:%S.%fZ",
        "%Y-%m-%dT%H:%M:%SZ",
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d",
    ]

    for fmt in iso_formats:
        try:
            return _to_utc(datetime.strptime(date_string, fmt))
        except ValueError:
            continue

    logger.debug(f"Could not parse RSS date: {date_string}")
    return None


def _clean_text(text: Optional[str]) -> str:
    """Strip tags and entities from a title and normalise whitespace."""
    if not text:
        return ""
    text = re.sub(r'<[^>]+>', ' ', text)
    text = unescape(text)
    return re.sub(r'\s+', ' ', text).strip()


def _get_element_text(element: Optional[ElementTree.Element], default: str = "") -> str:
    """Safely get text content from an XML element."""
    if element is None:
        return default
    return (element.text or default).strip()


def _find_first(parent: ElementTree.Element, *paths: str) -> Optional[ElementTree.Element]:
    """Return the first element matching any of the given paths."""
    for path in paths:
        elem = parent.find(path, NAMESPACES)
        if elem is not None:
            return elem
    return None


def _parse_rss_item(item: ElementTree.Element, source_name: str) -> Optional[FeedItem]:
    """
    Parse an RSS 2.0 / RSS 1.0 <item> element into a FeedItem.

    Falls back to <guid> when <link> is missing. Items without a title
    or any link are dropped.
    """
    title = _get_element_text(_find_first(item, "title", "rss1:title"))
    link = _get_element_text(_find_first(item, "link", "rss1:link"))
    if not link:
        link = _get_element_text(item.find("guid"))

    if not title or not link:
        return None

    pub_date = _get_element_text(_find_first(item, "pubDate", "dc:date"))

    return FeedItem(
        title=_clean_text(title),
        link=link,
        published_at=_parse_rss_date(pub_date),
        source_name=source_name,
    )


def _parse_atom_entry(entry: ElementTree.Element, source_name: str) -> Optional[FeedItem]:
    """
    Parse an Atom <entry> element into a FeedItem.

    Prefers the rel="alternate" link, then the first link with an href.
    """
    title = _get_element_text(_find_first(entry, "atom:title", "title"))

    link = ""
    links = entry.findall("atom:link", NAMESPACES) or entry.findall("link")
    for link_elem in links:
        if link_elem.get("rel", "alternate") == "alternate" and link_elem.get("href"):
            link = link_elem.get("href")
            break
    if not link:
        for link_elem in links:
            link = link_elem.get("href") or _get_element_text(link_elem)
            if link:
                break

    if not title or not link:
        return None

    # Prefer published, fall back to updated
    pub_elem = _find_first(entry, "atom:published", "published", "atom:updated", "updated")

    return FeedItem(
        title=_clean_text(title),
        link=link,
        published_at=_parse_rss_date(_get_element_text(pub_elem)),
        source_name=source_name,
    )


def _detect_feed_type(root: ElementTree.Element) -> str:
    """Detect whether the feed is RSS 2.0, RSS 1.0, or Atom."""
    tag = root.tag.lower()

    # Remove namespace prefix if present
    if "}" in tag:
        tag = tag.split("}")[-1]

    if tag == "rss":
        return "rss2"
    elif tag == "rdf":
        return "rss1"
    elif tag == "feed":
        return "atom"

    if root.find("channel") is not None:
        return "rss2"

    return "unknown"


def _get_feed_title(root: ElementTree.Element, feed_type: str) -> Optional[str]:
    """Extract the feed's own title from its metadata."""
    title_elem = None
    if feed_type == "rss2":
        channel = root.find("channel")
        if channel is not None:
            title_elem = channel.find("title")
    elif feed_type == "rss1":
        channel = _find_first(root, "rss1:channel", "channel")
        if channel is not None:
            title_elem = _find_first(channel, "rss1:title", "title")
    elif feed_type == "atom":
        title_elem = _find_first(root, "atom:title", "title")

    title = _clean_text(_get_element_text(title_elem))
    return title or None


def parse_feed(xml_content: str, feed_name: str = "RSS Feed") -> list[FeedItem]:
    """
    Parse RSS/Atom feed XML content into FeedItem objects.

    Automatically detects feed type (RSS 2.0, RSS 1.0, Atom). Every item is
    tagged with the feed's title, or feed_name if the feed has none.

    Args:
        xml_content: Raw XML string of the feed.
        feed_name: Name to use as source if feed doesn't specify.

    Returns:
        List of FeedItem objects in document order.

    Raises:
        RSSClientError: If XML parsing fails.
    """
    try:
        root = ElementTree.fromstring(xml_content)
    except ElementTree.ParseError as e:
        raise RSSClientError(f"Failed to parse RSS feed XML: {e}")

    feed_type = _detect_feed_type(root)
    logger.debug(f"Detected feed type: {feed_type}")

    source_name = _get_feed_title(root, feed_type) or feed_name

    items: list[Optional[FeedItem]] = []

    if feed_type == "rss2":
        channel = root.find("channel")
        if channel is None:
            logger.warning("RSS 2.0 feed has no channel element")
            return []
        items = [_parse_rss_item(item, source_name) for item in channel.findall("item")]

    elif feed_type == "rss1":
        # RSS 1.0: items are siblings of the channel under the RDF root
        elements = root.findall("rss1:item", NAMESPACES) or root.findall("item")
        items = [_parse_rss_item(item, source_name) for item in elements]

    elif feed_type == "atom":
        entries = root.findall("atom:entry", NAMESPACES) or root.findall("entry")
        items = [_parse_atom_entry(entry, source_name) for entry in entries]

    else:
        logger.warning(f"Unknown feed type for root tag: {root.tag}")

    parsed = [item for item in items if item is not None]
    logger.info(f"Parsed {len(parsed)} items from {feed_name}")
    return parsed


def fetch_rss_feed(
    url: str,
    feed_name: str = "RSS Feed",
    timeout: int = FEED_TIMEOUT_SECONDS,
) -> list[FeedItem]:
    """
    Fetch and parse an RSS/Atom feed from a URL.

    Args:
        url: URL of the RSS/Atom feed.
        feed_name: Fallback display name for the feed source.
        timeout: Request timeout in seconds.

    Returns:
        List of FeedItem objects from the feed.

    Raises:
        RSSClientError: If fetching or parsing fails.
    """
    logger.info(f"Fetching RSS feed: {feed_name} ({url})")

    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout:
        raise RSSClientError(f"RSS feed request timed out: {url}")
    except requests.RequestException as e:
        raise RSSClientError(f"Failed to fetch RSS feed {url}: {e}")

    return parse_feed(response.text, feed_name)


def _sort_key(item: FeedItem) -> float:
    """Newest first; undated items sort as oldest."""
    if item.published_at is None:
        return 0.0
    return item.published_at.timestamp()


def fetch_all_feeds(
    feeds: list[RSSFeedConfig],
    timeout: int = FEED_TIMEOUT_SECONDS,
) -> list[FeedItem]:
    """
    Fetch every feed in order and merge the results.

    A failing feed is logged and skipped; it never aborts the run.

    Args:
        feeds: Feeds to fetch, in order.
        timeout: Per-feed request timeout in seconds.

    Returns:
        All items from all successful feeds, newest first.
    """
    items: list[FeedItem] = []

    for feed in feeds:
        try:
            feed_items = fetch_rss_feed(feed.url, feed.name, timeout=timeout)
        except RSSClientError as e:
            logger.warning(f"Failed to fetch {feed.name}: {e}")
            continue
        items.extend(feed_items)

    items.sort(key=_sort_key, reverse=True)
    logger.info(f"Fetched {len(items)} feed items from {len(feeds)} feeds")
    return items


# =============================================================================
# Default RSS Feeds (AI / technology focused)
# =============================================================================

DEFAULT_FEEDS = [
    RSSFeedConfig(name="Reuters Technology", url="https://www.reuters.com/technology/rss"),
    RSSFeedConfig(name="TechCrunch", url="https://techcrunch.com/feed/"),
    RSSFeedConfig(name="VentureBeat AI", url="https://venturebeat.com/category/ai/feed/"),
    RSSFeedConfig(name="The Verge", url="https://www.theverge.com/rss/index.xml"),
    RSSFeedConfig(name="Wired", url="https://www.wired.com/feed/rss"),
    RSSFeedConfig(name="Ars Technica", url="https://arstechnica.com/feed/"),
]
