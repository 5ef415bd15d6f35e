"""
Paywall detection for article pages.

Classifies a publisher page as free or paywalled using phrase and CSS
selector heuristics. Fetch failures are treated as paywalled so a gated
link is never shown to a reader.
"""

import enum
import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from .rate_limiter import FixedIntervalRateLimiter


logger = logging.getLogger(__name__)


REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; AI-Investor-Daily/1.0)",
}

PAYWALL_TIMEOUT_SECONDS = 10

# Only the start of the page is inspected
TEXT_SCAN_LIMIT = 4000

# Phrases that indicate a paywall (lowercase)
PAYWALL_PHRASES = [
    "subscribe",
    "sign in to continue",
    "full article is for subscribers",
    "to continue reading",
    "please subscribe",
    "log in to view",
    "become a member",
    "subscription required",
]

# CSS selectors that indicate a paywall
PAYWALL_SELECTORS = [
    '[class*="paywall"]',
    '[id*="paywall"]',
    ".subscription-overlay",
    ".meteredContent",
    ".subscription-required",
]


class Accessibility(enum.Enum):
    """Result of the paywall check."""

    FREE = "free"
    PAYWALLED = "paywalled"


def _visible_text(soup: BeautifulSoup) -> str:
    """Body text with script and style content removed."""
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    container = soup.body or soup
    return container.get_text(separator=" ")


def classify_html(html: str) -> Accessibility:
    """
    Classify a page's HTML as free or paywalled.

    Args:
        html: Raw page HTML.

    Returns:
        PAYWALLED if a paywall phrase appears in the first 4000 characters
        of the visible text or a paywall selector matches any element,
        FREE otherwise.
    """
    soup = BeautifulSoup(html, "html.parser")

    # Probe selectors first; removing scripts doesn't affect them
    for selector in PAYWALL_SELECTORS:
        if soup.select_one(selector) is not None:
            logger.debug(f"Paywall selector matched: {selector}")
            return Accessibility.PAYWALLED

    text = _visible_text(soup)[:TEXT_SCAN_LIMIT].lower()
    for phrase in PAYWALL_PHRASES:
        if phrase in text:
            logger.debug(f"Paywall phrase matched: '{phrase}'")
            return Accessibility.PAYWALLED

    return Accessibility.FREE


def check_accessibility(
    url: str,
    rate_limiter: Optional[FixedIntervalRateLimiter] = None,
    timeout: int = PAYWALL_TIMEOUT_SECONDS,
) -> Accessibility:
    """
    Fetch a URL and classify it as free or paywalled.

    Args:
        url: The article URL.
        rate_limiter: Optional limiter consulted before the request.
        timeout: Request timeout in seconds.

    Returns:
        The page classification. Any fetch or parse error yields PAYWALLED.
    """
    if rate_limiter is not None:
        rate_limiter.wait()

    try:
        response = requests.get(url, headers=REQUEST_HEADERS, timeout=timeout)
        response.raise_for_status()
        return classify_html(response.text)
    except requests.RequestException as e:
        logger.warning(f"Paywall check fetch failed for {url}: {e}")
    except Exception as e:
        logger.warning(f"Paywall check failed for {url}: {e}")

    return Accessibility.PAYWALLED
