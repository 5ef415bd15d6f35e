"""
Daily pipeline orchestration.

Chains fetch → filter → extract → enrich → select and hands back the
EmailPayload consumed by the renderer. Every stage works on the complete
output of the previous one; nothing is kept at module level.
"""

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .article_extractor import MAX_ARTICLES_PER_RUN, Article, collect_free_articles
from .config import Config
from .entity_extractor import (
    OrganizationExtractor,
    RuleBasedOrganizationExtractor,
    count_organizations,
    rank_organizations,
)
from .keyword_filter import filter_candidates
from .rate_limiter import FixedIntervalRateLimiter
from .rss_client import fetch_all_feeds
from .selection import PICK_COUNT, Pick, select_picks
from .ticker_resolver import resolve_tickers


logger = logging.getLogger(__name__)


MAX_PAYLOAD_ARTICLES = MAX_ARTICLES_PER_RUN


@dataclass(frozen=True)
class ArticleExcerpt:
    """The part of an Article shown in the email."""

    title: str
    link: str
    source_name: str
    excerpt: str


@dataclass(frozen=True)
class EmailPayload:
    """Everything the renderer needs for one issue."""

    issue_date: date
    picks: list[Pick]
    articles: list[ArticleExcerpt]


def build_payload(issue_date: date, picks: list[Pick], articles: list[Article]) -> EmailPayload:
    """Project articles to excerpts and cap both lists."""
    excerpts = [
        ArticleExcerpt(
            title=article.title,
            link=article.link,
            source_name=article.source_name,
            excerpt=article.excerpt,
        )
        for article in articles[:MAX_PAYLOAD_ARTICLES]
    ]
    return EmailPayload(issue_date=issue_date, picks=list(picks[:PICK_COUNT]), articles=excerpts)


def run_pipeline(
    config: Config,
    rng: Optional[random.Random] = None,
    issue_date: Optional[date] = None,
    extractor: Optional[OrganizationExtractor] = None,
) -> EmailPayload:
    """
    Execute one full curation run.

    Steps:
    1. Fetch and merge all RSS feeds
    2. Keep AI-related candidates
    3. Collect free articles and their excerpts
    4. Count organization mentions
    5. Resolve organizations to tickers
    6. Select five picks

    Args:
        config: Application configuration.
        rng: Random source for pick selection. Seeded from config when omitted.
        issue_date: Date printed on the issue (defaults to today).
        extractor: Organization extractor (rule-based by default).

    Returns:
        The EmailPayload for the renderer.
    """
    rng = rng or random.Random(config.random_seed)
    issue_date = issue_date or date.today()
    extractor = extractor or RuleBasedOrganizationExtractor()

    feed_items = fetch_all_feeds(config.feeds)
    logger.info(f"Fetched {len(feed_items)} feed items")

    candidates = filter_candidates(feed_items)
    logger.info(f"Keyword-filtered to {len(candidates)} items")

    articles = collect_free_articles(
        candidates,
        max_articles=config.max_articles,
        rate_limiter=FixedIntervalRateLimiter(config.request_delay_seconds),
        relax_paywall_check=config.relax_paywall_check,
    )
    logger.info(f"Collected {len(articles)} articles")

    org_counts = count_organizations((a.full_text for a in articles), extractor)
    org_names = rank_organizations(org_counts, limit=config.max_organizations)
    logger.info(f"Extracted {len(org_counts)} organizations, resolving top {len(org_names)}")

    tickers = resolve_tickers(
        org_names,
        rate_limiter=FixedIntervalRateLimiter(config.api_delay_seconds),
        max_symbols=config.max_tickers,
    )

    picks = select_picks(
        tickers,
        rng=rng,
        small_cap_min=config.small_cap_min,
        small_cap_max=config.small_cap_max,
        fund_name_pattern=config.fund_name_pattern,
    )
    logger.info(f"Selected picks: {', '.join(p.symbol for p in picks)}")

    return build_payload(issue_date, picks, articles)
