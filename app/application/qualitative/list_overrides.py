"""
Use case: List stored qualitative overrides.

Input: none
Output: list[OverrideResult] ordered by ticker
Side effects: None (read-only query).
Failure cases: OverrideStoreError.
"""

import logging

from app.application.qualitative.dtos import OverrideResult
from app.domain.qualitative.ports import QualitativeOverrideRepository

logger = logging.getLogger(__name__)


class ListOverridesUseCase:
    """Returns every persisted override, ordered by ticker."""

    def __init__(self, override_repo: QualitativeOverrideRepository) -> None:
        self._override_repo = override_repo

    def execute(self) -> list[OverrideResult]:
        rows = self._override_repo.list_all()
        logger.debug("Listed %d qualitative overrides", len(rows))
        return [OverrideResult.from_entity(row) for row in rows]
