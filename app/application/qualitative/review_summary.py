"""
Use cases: Lock-state queries for the review surface.

GetReviewSummaryUseCase
    Input: ReviewSummaryQuery (optional substring filter)
    Output: ReviewSummaryResult (locked / pending split of covered tickers)

ListLockedTickersUseCase
    Input: none
    Output: list[LockedTickerResult] with per-ticker lock origins

Side effects: None (read-only queries).
Failure cases: OverrideStoreError when the override store cannot be read.
"""

import logging
from collections.abc import Iterable

from app.application.qualitative.dtos import (
    LockedTickerResult,
    ReviewSummaryQuery,
    ReviewSummaryResult,
)
from app.domain.qualitative.entities import LockedTickerEntry
from app.domain.qualitative.lock_state import (
    COVERED_TICKERS,
    partition_universe,
    resolve_lock_origins,
    resolve_locked_tickers,
)
from app.domain.qualitative.locked_tickers import LOCKED_TICKERS
from app.domain.qualitative.ports import QualitativeOverrideRepository

logger = logging.getLogger(__name__)


def _filter(tickers: list[str], query: str | None) -> list[str]:
    if not query:
        return tickers
    needle = query.strip().lower()
    return [t for t in tickers if needle in t.lower()]


class GetReviewSummaryUseCase:
    """Splits the covered universe into locked and needs-review tickers."""

    def __init__(
        self,
        override_repo: QualitativeOverrideRepository,
        registry: Iterable[LockedTickerEntry] = LOCKED_TICKERS,
        universe: Iterable[str] = COVERED_TICKERS,
    ) -> None:
        self._override_repo = override_repo
        self._registry = tuple(registry)
        self._universe = tuple(universe)

    def execute(self, query: ReviewSummaryQuery) -> ReviewSummaryResult:
        """Run the review summary query.

        Args:
            query: Optional ticker substring filter.

        Returns:
            Filtered locked/pending lists with unfiltered counts.
        """
        locked_set = resolve_locked_tickers(
            self._registry, self._override_repo.list_all()
        )
        locked, pending = partition_universe(self._universe, locked_set)
        logger.info(
            "Review summary: locked=%d, pending=%d", len(locked), len(pending)
        )
        return ReviewSummaryResult(
            locked=_filter(locked, query.query),
            pending=_filter(pending, query.query),
            locked_count=len(locked),
            pending_count=len(pending),
            total=len(locked) + len(pending),
        )


class ListLockedTickersUseCase:
    """Returns every locked ticker with the sources that lock it."""

    def __init__(
        self,
        override_repo: QualitativeOverrideRepository,
        registry: Iterable[LockedTickerEntry] = LOCKED_TICKERS,
    ) -> None:
        self._override_repo = override_repo
        self._registry = tuple(registry)

    def execute(self) -> list[LockedTickerResult]:
        origins = resolve_lock_origins(self._registry, self._override_repo.list_all())
        entries = {entry.ticker.upper(): entry for entry in self._registry}
        results = []
        for ticker in sorted(origins):
            entry = entries.get(ticker)
            results.append(
                LockedTickerResult(
                    ticker=ticker,
                    origins=sorted(o.value for o in origins[ticker]),
                    reason=entry.reason.value if entry else None,
                    notes=entry.notes if entry else None,
                )
            )
        return results
