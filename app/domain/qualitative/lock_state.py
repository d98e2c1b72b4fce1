"""
Domain service: Lock-state resolution.

A ticker is locked (exempt from automated qualitative screening) iff it
appears in the static registry OR has a persisted override with
``locked = True``. The result is a plain set union; there is no
conflict resolution between the two sources.
"""

from collections.abc import Iterable

from app.domain.qualitative.entities import (
    LockedTickerEntry,
    LockOrigin,
    QualitativeOverride,
)

# Tickers the site screens; the review page splits these into locked / pending.
COVERED_TICKERS: tuple[str, ...] = (
    "TSLA", "AAPL", "MSFT", "GOOGL", "AMZN", "META", "NVDA", "PYPL", "JPM",
    "BAC", "SBUX", "MCD", "KO", "CAT", "LMT", "AMD", "CRM", "ORCL", "ADBE",
    "NFLX", "CSCO", "AVGO", "QCOM", "JNJ", "UNH", "PFE", "ABBV", "MRK", "PG",
    "COST", "WMT", "HD", "NKE", "XOM", "CVX", "UPS", "HON", "DE", "VZ", "T",
    "DIS", "V", "MA", "GS", "BRK.B", "SPOT", "UBER", "ABNB", "SQ", "SHOP",
    "ZM", "PLTR", "COIN", "CMG", "LULU", "PEP", "INTC", "AMT", "F", "GM",
    "TM", "BUD", "DEO", "PM", "MO", "LVS", "MGM",
)


def resolve_lock_origins(
    registry: Iterable[LockedTickerEntry],
    overrides: Iterable[QualitativeOverride],
) -> dict[str, set[LockOrigin]]:
    """Map every locked ticker to the sources that lock it.

    Args:
        registry: Static locked-ticker entries.
        overrides: Persisted override rows (locked or not).

    Returns:
        Uppercased ticker -> non-empty set of LockOrigin.
    """
    origins: dict[str, set[LockOrigin]] = {}
    for entry in registry:
        origins.setdefault(entry.ticker.upper(), set()).add(LockOrigin.REGISTRY)
    for row in overrides:
        if row.locked:
            origins.setdefault(row.ticker.upper(), set()).add(LockOrigin.OVERRIDE)
    return origins


def resolve_locked_tickers(
    registry: Iterable[LockedTickerEntry],
    overrides: Iterable[QualitativeOverride],
) -> frozenset[str]:
    """Return the set of uppercased tickers exempt from automated screening."""
    return frozenset(resolve_lock_origins(registry, overrides))


def partition_universe(
    universe: Iterable[str], locked: frozenset[str]
) -> tuple[list[str], list[str]]:
    """Split a ticker universe into sorted (locked, pending) lists."""
    tickers = sorted({t.upper() for t in universe})
    return (
        [t for t in tickers if t in locked],
        [t for t in tickers if t not in locked],
    )
