"""
Keyword filtering of feed items.

Keeps items whose title or source name mentions an AI topic.
"""

import re
from typing import Iterable

from .rss_client import FeedItem


# Matched case-insensitively as substrings (no stemming or tokenization)
AI_KEYWORDS = [
    "AI",
    "artificial intelligence",
    "machine learning",
    "LLM",
    "large language model",
    "GPT",
    "Claude",
    "Copilot",
    "chatbot",
    "neural",
    "deep learning",
    "OpenAI",
]

# Keywords this short must match a whole word ("ai" is inside "daily", "said")
SHORT_KEYWORD_LENGTH = 2


def _contains(text_lower: str, keyword: str) -> bool:
    keyword = keyword.lower()
    if len(keyword) <= SHORT_KEYWORD_LENGTH:
        return re.search(r"\b" + re.escape(keyword) + r"\b", text_lower) is not None
    return keyword in text_lower


def matches_keywords(text: str, keywords: Iterable[str] = AI_KEYWORDS) -> bool:
    """Return True if any keyword appears in text, ignoring case."""
    if not text:
        return False
    text_lower = text.lower()
    return any(_contains(text_lower, keyword) for keyword in keywords)


def filter_candidates(
    items: list[FeedItem],
    keywords: Iterable[str] = AI_KEYWORDS,
) -> list[FeedItem]:
    """
    Keep items whose title OR source name matches a keyword.

    Order is preserved, so filtering an already filtered list is a no-op.
    """
    keywords = list(keywords)
    return [
        item for item in items
        if matches_keywords(item.title, keywords) or matches_keywords(item.source_name, keywords)
    ]
