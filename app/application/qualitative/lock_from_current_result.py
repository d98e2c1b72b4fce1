"""
Use case: Lock a ticker from its current screening result.

Input: LockFromCurrentResultCommand (ticker)
Output: LockFromCurrentResultResult ("Locked <TICKER>" + stored override)
Side effects: At most one override upsert, keyed by the uppercased ticker.
Failure cases:
    - InvalidTickerError: empty ticker (no fetch, no write).
    - ScreeningFetchError / ScreeningPayloadError: upstream failure (no write).
    - NoSegmentsAvailableError: empty segment breakdown (no write).
    - OverrideStoreError: persistence failure.
"""

import logging

from app.application.qualitative.dtos import (
    LockFromCurrentResultCommand,
    LockFromCurrentResultResult,
    SaveOverrideCommand,
    SegmentInput,
)
from app.application.qualitative.save_override import SaveOverrideUseCase
from app.domain.qualitative.entities import normalize_ticker
from app.domain.qualitative.errors import InvalidTickerError, NoSegmentsAvailableError
from app.domain.qualitative.ports import ScreeningPort

logger = logging.getLogger(__name__)

MANUAL_REVIEW_SOURCE = "Manual review"
LOCK_NOTES = "Locked from current screen result"


class LockFromCurrentResultUseCase:
    """Fetches the current screening output and persists it as a locked override.

    Operator-triggered; no retries. Every failure propagates as a domain
    error whose message is shown to the operator.
    """

    def __init__(
        self,
        screening_port: ScreeningPort,
        save_override: SaveOverrideUseCase,
    ) -> None:
        self._screening_port = screening_port
        self._save_override = save_override

    def execute(
        self, command: LockFromCurrentResultCommand
    ) -> LockFromCurrentResultResult:
        """Run the lock-from-current-result use case.

        Args:
            command: Ticker to lock.

        Returns:
            Confirmation message and the stored override.
        """
        ticker = normalize_ticker(command.ticker)
        if not ticker:
            raise InvalidTickerError(command.ticker)

        snapshot = self._screening_port.fetch(ticker)
        if not snapshot.segment_breakdown:
            logger.warning("Refusing to lock %s: no segments in screening result", ticker)
            raise NoSegmentsAvailableError(ticker)

        stored = self._save_override.execute(
            SaveOverrideCommand(
                ticker=ticker,
                segments=tuple(
                    SegmentInput(name=s.name, value=s.value)
                    for s in snapshot.segment_breakdown
                ),
                total_revenue=snapshot.segment_total or None,
                year=snapshot.filing_year,
                source=MANUAL_REVIEW_SOURCE,
                notes=LOCK_NOTES,
            )
        )

        logger.info("Locked %s from current screening result", ticker)
        return LockFromCurrentResultResult(message=f"Locked {ticker}", override=stored)
