"""
Article content extraction.

Fetches free articles, pulls their paragraph text and derives a short
excerpt for the email.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import requests
from bs4 import BeautifulSoup

from .paywall import Accessibility, check_accessibility
from .rate_limiter import FixedIntervalRateLimiter
from .rss_client import FeedItem


logger = logging.getLogger(__name__)


REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0",
}

ARTICLE_TIMEOUT_SECONDS = 12
EXCERPT_WORDS = 100

# Hard cap on articles fetched per run
MAX_ARTICLES_PER_RUN = 10


@dataclass(frozen=True)
class Article:
    """A free article with its extracted text."""

    title: str
    link: str
    published_at: Optional[datetime]
    source_name: str
    full_text: str
    excerpt: str


def first_n_words(text: str, n: int = EXCERPT_WORDS) -> str:
    """Return the first n whitespace-delimited words joined by single spaces."""
    if not text:
        return ""
    return " ".join(text.split()[:n])


def extract_article_text(html: str) -> str:
    """
    Extract paragraph text from article HTML.

    Uses <p> elements inside <article> containers when there are any,
    otherwise every <p> in the document.
    """
    soup = BeautifulSoup(html, "html.parser")

    paragraphs = soup.select("article p")
    if not paragraphs:
        paragraphs = soup.find_all("p")

    text = "\n\n".join(p.get_text() for p in paragraphs)
    return re.sub(r"\s+", " ", text).strip()


def fetch_article_text(url: str, timeout: int = ARTICLE_TIMEOUT_SECONDS) -> str:
    """
    Fetch a URL and extract its paragraph text.

    Returns:
        The extracted text, or an empty string on any failure.
    """
    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
        response.raise_for_status()
        return extract_article_text(response.text)
    except requests.RequestException as e:
        logger.warning(f"Failed to fetch {url}: {e}")
    except Exception as e:
        logger.warning(f"Failed to extract content from {url}: {e}")
    return ""


def build_article(item: FeedItem, text: str) -> Article:
    """Create an Article from a feed item and its extracted text."""
    return Article(
        title=item.title,
        link=item.link,
        published_at=item.published_at,
        source_name=item.source_name,
        full_text=text,
        excerpt=first_n_words(text, EXCERPT_WORDS),
    )


def collect_free_articles(
    candidates: list[FeedItem],
    max_articles: int = MAX_ARTICLES_PER_RUN,
    rate_limiter: Optional[FixedIntervalRateLimiter] = None,
    relax_paywall_check: bool = False,
) -> list[Article]:
    """
    Collect up to max_articles free articles from keyword-matched candidates.

    Candidates are visited in order. Items without a link and links already
    seen are skipped. Each remaining link is paywall-checked; free ones are
    fetched and turned into Articles.

    Args:
        candidates: Feed items that passed the keyword filter.
        max_articles: Maximum number of articles to return.
        rate_limiter: Limiter consulted before every paywall check.
        relax_paywall_check: If True and too few free articles were found,
            fill the remaining slots from unchecked candidates.

    Returns:
        Articles with unique links, in candidate order.
    """
    articles: list[Article] = []
    seen_links: set[str] = set()

    for item in candidates:
        if len(articles) >= max_articles:
            break
        if not item.link or item.link in seen_links:
            continue
        seen_links.add(item.link)

        if check_accessibility(item.link, rate_limiter=rate_limiter) is Accessibility.PAYWALLED:
            logger.info(f"Skipped (likely paywalled): {item.title}")
            continue

        text = fetch_article_text(item.link)
        articles.append(build_article(item, text))
        logger.info(f"Added free article: {item.title}")

    if relax_paywall_check and len(articles) < max_articles:
        logger.info(
            f"Only {len(articles)} free articles found; relaxing paywall check..."
        )
        accepted = {article.link for article in articles}
        for item in candidates:
            if len(articles) >= max_articles:
                break
            if not item.link or item.link in accepted:
                continue
            accepted.add(item.link)
            articles.append(build_article(item, fetch_article_text(item.link)))

    return articles
