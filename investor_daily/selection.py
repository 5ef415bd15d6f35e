"""
Investment pick selection logic.

Builds exactly five picks from the resolved ticker pool in four tiers:
anchors, small caps, backfill, and a static fallback pool.
"""

import logging
import random
import re
from dataclasses import dataclass
from typing import Optional

from .ticker_resolver import TickerRecord, quote_link


logger = logging.getLogger(__name__)


PICK_COUNT = 5

# Well-known large-cap names; two are drawn per run
ANCHOR_SYMBOLS = ["NVDA", "MSFT", "GOOGL", "AMD", "INTC", "QCOM"]
ANCHOR_COUNT = 2

# Small-cap band in USD
SMALL_CAP_MIN = 300_000_000
SMALL_CAP_MAX = 2_000_000_000
SMALL_CAP_COUNT = 3

DEFAULT_FUND_NAME_PATTERN = r"\b(ETF|Fund|Trust|Index)\b"

# Used only to pad the list; must hold at least PICK_COUNT symbols
FALLBACK_POOL = ["NVDA", "MSFT", "GOOGL", "AMD", "BOTZ", "AIQ", "ROBO", "SMH"]

RATIONALE_ANCHOR = "large-cap AI/tech exposure"
RATIONALE_SMALL_CAP = "small-cap AI opportunity"
RATIONALE_BACKFILL = "AI-related mention & market cap"
RATIONALE_FALLBACK = "popular AI/tech ETF"


@dataclass(frozen=True)
class Pick:
    """A single investment pick, in display order."""

    display_name: str
    symbol: str
    market_cap: Optional[float]
    rationale: str
    link: str


def _pick_from_record(record: TickerRecord, rationale: str) -> Pick:
    return Pick(
        display_name=record.display_name,
        symbol=record.symbol,
        market_cap=record.market_cap,
        rationale=rationale,
        link=record.source_link or quote_link(record.symbol),
    )


def _in_band(record: TickerRecord, low: float, high: float) -> bool:
    return record.market_cap is not None and low <= record.market_cap <= high


def select_picks(
    tickers: list[TickerRecord],
    rng: Optional[random.Random] = None,
    anchor_symbols: list[str] = ANCHOR_SYMBOLS,
    small_cap_min: float = SMALL_CAP_MIN,
    small_cap_max: float = SMALL_CAP_MAX,
    fund_name_pattern: Optional[str] = DEFAULT_FUND_NAME_PATTERN,
    fallback_pool: list[str] = FALLBACK_POOL,
) -> list[Pick]:
    """
    Select exactly PICK_COUNT picks from the ticker pool.

    Selection strategy (stops as soon as the list is full):
    1. Anchors: draw two anchor symbols at random; add those present in
       the pool.
    2. Small caps: up to three pool entries inside the market-cap band,
       in pool order.
    3. Backfill: remaining pool entries in pool order, skipping funds,
       ETFs, trusts and indices when a fund pattern is set.
    4. Fallback: random symbols from the static pool until full.

    Picks are only ever appended; earlier picks keep their rank.

    Args:
        tickers: Resolved ticker pool, largest market cap first.
        rng: Random source for anchor and fallback draws.
        anchor_symbols: Candidate anchor symbols.
        small_cap_min: Lower bound of the small-cap band (inclusive).
        small_cap_max: Upper bound of the small-cap band (inclusive).
        fund_name_pattern: Regex matched against display names in the
            backfill tier; empty or None disables the filter.
        fallback_pool: Static symbols used for padding.

    Returns:
        List of PICK_COUNT picks with unique symbols.
    """
    rng = rng or random.Random()
    picks: list[Pick] = []
    used_symbols: set[str] = set()

    def add(pick: Pick) -> None:
        picks.append(pick)
        used_symbols.add(pick.symbol)

    pool = {record.symbol: record for record in tickers}

    # Phase 1: Anchors
    for symbol in rng.sample(anchor_symbols, min(ANCHOR_COUNT, len(anchor_symbols))):
        if len(picks) >= PICK_COUNT:
            break
        record = pool.get(symbol)
        if record is not None and symbol not in used_symbols:
            add(_pick_from_record(record, RATIONALE_ANCHOR))

    # Phase 2: Small caps
    small_caps_added = 0
    for record in tickers:
        if len(picks) >= PICK_COUNT or small_caps_added >= SMALL_CAP_COUNT:
            break
        if record.symbol in used_symbols or not _in_band(record, small_cap_min, small_cap_max):
            continue
        add(_pick_from_record(record, RATIONALE_SMALL_CAP))
        small_caps_added += 1

    # Phase 3: Backfill by market cap
    fund_filter = re.compile(fund_name_pattern, re.IGNORECASE) if fund_name_pattern else None
    for record in tickers:
        if len(picks) >= PICK_COUNT:
            break
        if record.symbol in used_symbols:
            continue
        if fund_filter is not None and fund_filter.search(record.display_name):
            continue
        add(_pick_from_record(record, RATIONALE_BACKFILL))

    # Phase 4: Static fallback pool
    if len(picks) < PICK_COUNT:
        available = [s for s in dict.fromkeys(fallback_pool) if s not in used_symbols]
        needed = min(PICK_COUNT - len(picks), len(available))
        logger.info(f"Padding picks with {needed} fallback symbols")
        for symbol in rng.sample(available, needed):
            add(Pick(
                display_name=symbol,
                symbol=symbol,
                market_cap=None,
                rationale=RATIONALE_FALLBACK,
                link=quote_link(symbol),
            ))

    if len(picks) < PICK_COUNT:
        logger.warning(f"Fallback pool exhausted; only {len(picks)} picks selected")

    return picks
