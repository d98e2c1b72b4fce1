"""
Static registry of locked tickers.

Tickers listed here have verified segment data (manual override,
strong parsing hints or LLM verification) and skip automated
qualitative re-screening. The table ships with the deployed artifact
and is never modified at runtime.
"""

from typing import Optional

from app.domain.qualitative.entities import LockedTickerEntry, LockReason

_MANUAL = LockReason.MANUAL_OVERRIDE
_HINTS = LockReason.STRONG_HINTS

LOCKED_TICKERS: tuple[LockedTickerEntry, ...] = (
    LockedTickerEntry("AMZN", _MANUAL, "2024 segment table stored"),
    LockedTickerEntry("DIS", _MANUAL, "2025 segment table stored"),
    LockedTickerEntry("WMT", _MANUAL, "2025 segment table stored"),
    LockedTickerEntry("MA", _MANUAL, "2024 net revenue by category stored"),
    LockedTickerEntry("V", _MANUAL, "2025 net revenue table stored"),
    LockedTickerEntry("JNJ", _MANUAL, "2024 segment summary stored"),
    LockedTickerEntry("BBY", _MANUAL, "manual override for revenue segments"),
    LockedTickerEntry("TSLA", _MANUAL, "manual review confirmed"),
    LockedTickerEntry(
        "ABBV",
        _MANUAL,
        "2024 segment summary: Immunology $26.7B, Neuroscience $9B, "
        "Oncology $6.6B, Aesthetics $5.2B, Eye Care $2.2B",
    ),
    LockedTickerEntry(
        "ABNB", _MANUAL, "2024 unified marketplace platform revenue $11.1B"
    ),
    LockedTickerEntry(
        "COST",
        _MANUAL,
        "2025 10-K: Net Sales $269.9B + Membership Fees $5.3B = $275.2B",
    ),
    LockedTickerEntry(
        "XOM",
        _MANUAL,
        "2024 segment earnings: Upstream $25.4B, Energy Products $4B, "
        "Chemical $2.6B, Specialty $3B",
    ),
    LockedTickerEntry("NVDA", _HINTS, "ticker-specific parsing hints"),
    LockedTickerEntry("AAPL", _HINTS, "ticker-specific parsing hints"),
    LockedTickerEntry("META", _HINTS, "ticker-specific parsing hints"),
    LockedTickerEntry(
        "GOOGL",
        _MANUAL,
        "2024 10-K: Total $350B - Search $198B, Cloud $43B, "
        "Subscriptions $40B, YouTube $36B, Network $30B",
    ),
    LockedTickerEntry(
        "GOOG",
        _MANUAL,
        "2024 10-K: Total $350B - Search $198B, Cloud $43B, "
        "Subscriptions $40B, YouTube $36B, Network $30B",
    ),
    LockedTickerEntry(
        "ADBE",
        _MANUAL,
        "2025 10-K: Subscription $22.9B, Services $540M, Product $325M = $23.8B",
    ),
    LockedTickerEntry(
        "AMD",
        _MANUAL,
        "2024 10-K: Data Center $12.6B, Client $7B, Embedded $3.6B, "
        "Gaming $2.6B = $25.8B",
    ),
    LockedTickerEntry(
        "AMT",
        _MANUAL,
        "2024 10-K: Property (US/Canada, LatAm, APAC, Data Centers, Europe) "
        "+ Services = $10.1B",
    ),
    LockedTickerEntry(
        "CSCO", _MANUAL, "2025 10-K: Product $41.6B, Services $15B = $56.7B"
    ),
    LockedTickerEntry(
        "AVGO",
        _MANUAL,
        "2025 10-K: Products $44.8B, Subscriptions/Services $19B = $63.9B",
    ),
    LockedTickerEntry("NFLX", _HINTS, "ticker-specific parsing hints"),
    LockedTickerEntry("MSFT", _HINTS, "ticker-specific parsing hints"),
)


def is_locked_ticker(ticker: Optional[str]) -> bool:
    """Return True if the ticker is in the static registry (case-insensitive)."""
    if not ticker:
        return False
    upper = ticker.upper()
    return any(entry.ticker == upper for entry in LOCKED_TICKERS)


def get_locked_entry(ticker: Optional[str]) -> Optional[LockedTickerEntry]:
    """Return the registry entry for a ticker, or None."""
    if not ticker:
        return None
    upper = ticker.upper()
    for entry in LOCKED_TICKERS:
        if entry.ticker == upper:
            return entry
    return None
