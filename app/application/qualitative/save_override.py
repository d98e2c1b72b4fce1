"""
Use case: Store a qualitative override for a ticker.

Input: SaveOverrideCommand (ticker, segments, total, year, source, notes)
Output: OverrideResult
Side effects: Upserts one row keyed by the uppercased ticker, always locked.
Failure cases: MissingOverrideFieldsError, OverrideStoreError.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from app.application.qualitative.dtos import OverrideResult, SaveOverrideCommand
from app.domain.qualitative.entities import (
    QualitativeOverride,
    Segment,
    normalize_ticker,
)
from app.domain.qualitative.errors import MissingOverrideFieldsError
from app.domain.qualitative.ports import QualitativeOverrideRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SaveOverrideUseCase:
    """Validates and upserts an operator-asserted segment breakdown.

    Last write wins. The stored row is always ``locked = True`` and
    stamped with the injected clock.
    """

    def __init__(
        self,
        override_repo: QualitativeOverrideRepository,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self._override_repo = override_repo
        self._now = now

    def execute(self, command: SaveOverrideCommand) -> OverrideResult:
        """Run the save override use case.

        Args:
            command: The override to store.

        Returns:
            The stored override.

        Raises:
            MissingOverrideFieldsError: If the ticker or segment list is empty.
            OverrideStoreError: If the repository rejects the write.
        """
        ticker = normalize_ticker(command.ticker)
        if not ticker or not command.segments:
            raise MissingOverrideFieldsError()

        override = QualitativeOverride(
            ticker=ticker,
            segments=[Segment(name=s.name, value=s.value) for s in command.segments],
            total_revenue=command.total_revenue,
            year=command.year,
            source=command.source,
            notes=command.notes,
            locked=True,
            updated_at=self._now(),
        )
        self._override_repo.upsert(override)

        logger.info(
            "Stored qualitative override: ticker=%s, segments=%d",
            ticker,
            len(override.segments),
        )
        return OverrideResult.from_entity(override)
