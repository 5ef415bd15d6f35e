"""
Configuration management for the daily run.

Loads settings from environment variables / .env file and provides
typed accessors with validation.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .article_extractor import MAX_ARTICLES_PER_RUN
from .entity_extractor import DEFAULT_ORGANIZATION_LIMIT
from .rss_client import DEFAULT_FEEDS, RSSFeedConfig
from .selection import DEFAULT_FUND_NAME_PATTERN, SMALL_CAP_MAX, SMALL_CAP_MIN
from .ticker_resolver import MAX_RESOLVED_SYMBOLS


class ConfigError(Exception):
    """Raised when configuration is invalid."""
    pass


@dataclass
class Config:
    """Application configuration container."""

    feeds: list[RSSFeedConfig] = field(default_factory=lambda: list(DEFAULT_FEEDS))

    # Hard caps on work per run
    max_articles: int = MAX_ARTICLES_PER_RUN
    max_organizations: int = DEFAULT_ORGANIZATION_LIMIT
    max_tickers: int = MAX_RESOLVED_SYMBOLS

    # Minimum spacing between outbound calls (seconds)
    request_delay_seconds: float = 0.4  # publisher pages (paywall checks)
    api_delay_seconds: float = 0.3  # finance search / quote endpoints

    # Pick selection
    small_cap_min: float = SMALL_CAP_MIN
    small_cap_max: float = SMALL_CAP_MAX
    fund_name_pattern: str = DEFAULT_FUND_NAME_PATTERN  # empty disables the filter

    relax_paywall_check: bool = False
    random_seed: Optional[int] = None
    output_dir: str = "output"


def _get_optional_env(key: str, default: str) -> str:
    """Get an optional environment variable with a default."""
    return os.environ.get(key, default)


def _get_bool_env(key: str, default: bool = True) -> bool:
    """Get a boolean environment variable. Accepts true/false/1/0/yes/no."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def _get_int_env(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got: {value}")


def _get_float_env(key: str, default: float) -> float:
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got: {value}")


def _check_range(key: str, value: float, maximum: Optional[float] = None) -> None:
    """Raise ConfigError unless 0 <= value <= maximum."""
    if value < 0:
        raise ConfigError(f"{key} must not be negative, got: {value}")
    if maximum is not None and value > maximum:
        raise ConfigError(f"{key} must be at most {maximum}, got: {value}")


def _feed_name_from_url(url: str) -> str:
    """Derive a display name from the feed's domain."""
    domain = urlparse(url).netloc
    name = domain.replace("www.", "").split(".")[0].title()
    return name or "RSS Feed"


def _parse_rss_feeds() -> list[RSSFeedConfig]:
    """
    Parse RSS feed configuration from environment variables.

    Format: RSS_FEEDS=url1,url2,url3 (comma-separated URLs)

    The feed name is automatically derived from the URL domain. When the
    variable is unset or empty the built-in feed list is used.

    Returns:
        List of RSSFeedConfig objects.
    """
    simple_feeds = os.environ.get("RSS_FEEDS", "")

    feeds = []
    for url in simple_feeds.split(","):
        url = url.strip()
        if url:
            feeds.append(RSSFeedConfig(name=_feed_name_from_url(url), url=url))

    return feeds or list(DEFAULT_FEEDS)


def load_config(env_path: Optional[Path] = None) -> Config:
    """
    Load configuration from environment variables.

    Args:
        env_path: Optional path to .env file. If not provided,
                  searches for .env in current and parent directories.

    Returns:
        Config object with all settings populated.

    Raises:
        ConfigError: If a setting has an invalid value.
    """
    # Load .env file if it exists
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()

    small_cap_min = _get_float_env("SMALL_CAP_MIN", SMALL_CAP_MIN)
    small_cap_max = _get_float_env("SMALL_CAP_MAX", SMALL_CAP_MAX)
    if small_cap_min > small_cap_max:
        raise ConfigError(
            f"SMALL_CAP_MIN ({small_cap_min:.0f}) exceeds SMALL_CAP_MAX ({small_cap_max:.0f})"
        )

    fund_name_pattern = _get_optional_env("FUND_NAME_PATTERN", DEFAULT_FUND_NAME_PATTERN)
    try:
        re.compile(fund_name_pattern)
    except re.error as e:
        raise ConfigError(f"FUND_NAME_PATTERN is not a valid regular expression: {e}")

    seed_str = _get_optional_env("RANDOM_SEED", "")
    random_seed = _get_int_env("RANDOM_SEED", 0) if seed_str else None

    max_articles = _get_int_env("MAX_ARTICLES", MAX_ARTICLES_PER_RUN)
    _check_range("MAX_ARTICLES", max_articles, MAX_ARTICLES_PER_RUN)
    max_organizations = _get_int_env("MAX_ORGANIZATIONS", DEFAULT_ORGANIZATION_LIMIT)
    _check_range("MAX_ORGANIZATIONS", max_organizations, DEFAULT_ORGANIZATION_LIMIT)
    max_tickers = _get_int_env("MAX_TICKERS", MAX_RESOLVED_SYMBOLS)
    _check_range("MAX_TICKERS", max_tickers, MAX_RESOLVED_SYMBOLS)

    request_delay_seconds = _get_float_env("REQUEST_DELAY_SECONDS", 0.4)
    _check_range("REQUEST_DELAY_SECONDS", request_delay_seconds)
    api_delay_seconds = _get_float_env("API_DELAY_SECONDS", 0.3)
    _check_range("API_DELAY_SECONDS", api_delay_seconds)

    return Config(
        feeds=_parse_rss_feeds(),
        max_articles=max_articles,
        max_organizations=max_organizations,
        max_tickers=max_tickers,
        request_delay_seconds=request_delay_seconds,
        api_delay_seconds=api_delay_seconds,
        small_cap_min=small_cap_min,
        small_cap_max=small_cap_max,
        fund_name_pattern=fund_name_pattern,
        relax_paywall_check=_get_bool_env("RELAX_PAYWALL_CHECK", False),
        random_seed=random_seed,
        output_dir=_get_optional_env("OUTPUT_DIR", "output"),
    )
