"""
Ticker resolution via Yahoo Finance.

Maps organization names to ticker symbols with the symbol search endpoint,
then enriches each symbol with quote data (names, market cap, business
summary). Missing data is treated as "no match", never as an error.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from .rate_limiter import FixedIntervalRateLimiter, NoOpRateLimiter


logger = logging.getLogger(__name__)


SEARCH_URL = "https://query1.finance.yahoo.com/v1/finance/search"
QUOTE_URL = "https://query1.finance.yahoo.com/v7/finance/quote"
QUOTE_PAGE_URL = "https://finance.yahoo.com/quote/{symbol}"

REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0",
    "Accept": "application/json",
}

API_TIMEOUT_SECONDS = 8
SEARCH_RESULT_LIMIT = 6
MAX_RESOLVED_SYMBOLS = 40


@dataclass(frozen=True)
class TickerRecord:
    """Market data for one resolved symbol."""

    symbol: str
    display_name: str
    full_name: str
    market_cap: Optional[float]
    summary: str
    source_link: str


def quote_link(symbol: str) -> str:
    """Public quote page for a symbol."""
    return QUOTE_PAGE_URL.format(symbol=symbol)


def _get_json(url: str, params: dict, timeout: int) -> Optional[dict]:
    """GET a JSON document; returns None on any failure."""
    try:
        response = requests.get(url, params=params, headers=REQUEST_HEADERS, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.RequestException as e:
        logger.debug(f"Finance API request failed ({url}): {e}")
        return None
    except ValueError as e:
        logger.debug(f"Finance API returned invalid JSON ({url}): {e}")
        return None
    return data if isinstance(data, dict) else None


def search_symbols(
    query: str,
    limit: int = SEARCH_RESULT_LIMIT,
    timeout: int = API_TIMEOUT_SECONDS,
) -> list[dict]:
    """
    Search for instruments matching free text.

    Returns:
        Up to limit quote match records, or an empty list.
    """
    data = _get_json(
        SEARCH_URL,
        params={"q": query, "quotesCount": limit, "newsCount": 0},
        timeout=timeout,
    )
    if not data:
        return []
    quotes = data.get("quotes")
    if not isinstance(quotes, list):
        return []
    return [q for q in quotes if isinstance(q, dict)][:limit]


def fetch_quote(symbol: str, timeout: int = API_TIMEOUT_SECONDS) -> Optional[dict]:
    """
    Fetch quote details for a symbol.

    Returns:
        The first quote result record, or None.
    """
    data = _get_json(QUOTE_URL, params={"symbols": symbol}, timeout=timeout)
    if not data:
        return None
    quote_response = data.get("quoteResponse")
    if not isinstance(quote_response, dict):
        return None
    results = quote_response.get("result")
    if isinstance(results, list) and results and isinstance(results[0], dict):
        return results[0]
    return None


def _market_cap(value) -> Optional[float]:
    """Positive numeric market cap, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value > 0 else None


def _build_record(symbol: str, quote: dict, match: dict, org_name: str) -> TickerRecord:
    display_name = (
        quote.get("shortName")
        or quote.get("longName")
        or match.get("shortname")
        or org_name
    )
    return TickerRecord(
        symbol=symbol,
        display_name=display_name,
        full_name=quote.get("longName") or match.get("longname") or display_name,
        market_cap=_market_cap(quote.get("marketCap")),
        summary=quote.get("longBusinessSummary") or "",
        source_link=quote_link(symbol),
    )


def sort_by_market_cap(records: list[TickerRecord]) -> list[TickerRecord]:
    """Largest market cap first; records without one sort last."""
    return sorted(records, key=lambda r: r.market_cap or 0, reverse=True)


def resolve_tickers(
    org_names: list[str],
    rate_limiter: Optional[FixedIntervalRateLimiter] = None,
    max_symbols: int = MAX_RESOLVED_SYMBOLS,
    search_limit: int = SEARCH_RESULT_LIMIT,
) -> list[TickerRecord]:
    """
    Resolve organization names to ticker records.

    Names are processed in order. Every search and quote call goes through
    the rate limiter. A symbol is resolved at most once; the first quote
    that comes back wins. Resolution stops once max_symbols symbols are
    known.

    Args:
        org_names: Organization names, most mentioned first.
        rate_limiter: Limiter consulted before every API call.
        max_symbols: Cap on distinct resolved symbols.
        search_limit: Matches requested per search.

    Returns:
        Resolved records sorted by market cap, largest first.
    """
    limiter = rate_limiter or NoOpRateLimiter()
    resolved: dict[str, TickerRecord] = {}

    for org_name in org_names:
        if len(resolved) >= max_symbols:
            break

        limiter.wait()
        matches = search_symbols(org_name, limit=search_limit)
        if not matches:
            logger.debug(f"No ticker matches for '{org_name}'")
            continue

        for match in matches:
            if len(resolved) >= max_symbols:
                break
            raw_symbol = match.get("symbol")
            if not raw_symbol or not isinstance(raw_symbol, str):
                continue
            symbol = raw_symbol.upper()
            if symbol in resolved:
                continue

            limiter.wait()
            quote = fetch_quote(symbol)
            if quote is None:
                continue

            resolved[symbol] = _build_record(symbol, quote, match, org_name)
            logger.debug(f"Resolved '{org_name}' -> {symbol}")

    logger.info(f"Resolved {len(resolved)} ticker symbols from {len(org_names)} organizations")
    return sort_by_market_cap(list(resolved.values()))
