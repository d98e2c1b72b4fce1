"""
Domain entities for the qualitative screening bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


def normalize_ticker(ticker: Optional[str]) -> str:
    """Return the stripped, uppercased ticker ('' for None)."""
    return (ticker or "").strip().upper()


class LockReason(Enum):
    """Why a ticker is exempt from automated qualitative re-screening."""

    MANUAL_OVERRIDE = "manual_override"
    STRONG_HINTS = "strong_hints"
    LLM_VERIFIED = "llm_verified"


class LockOrigin(Enum):
    """Where a ticker's lock comes from."""

    REGISTRY = "registry"
    OVERRIDE = "override"


@dataclass(frozen=True)
class LockedTickerEntry:
    """A statically registered locked ticker."""

    ticker: str
    reason: LockReason
    notes: Optional[str] = None


@dataclass(frozen=True)
class Segment:
    """A single named revenue segment.

    ``value`` is expressed in the filing currency's base unit
    (tables reported "in millions" are already scaled).
    """

    name: str
    value: float


@dataclass(frozen=True)
class ExtractedSegment:
    """A revenue segment produced by filing extraction, with provenance."""

    name: str
    value: float
    tag: str
    percent_of_total: Optional[float] = None


@dataclass
class QualitativeOverride:
    """Operator-asserted segment breakdown for a ticker.

    Keyed on ``ticker``. Upserts overwrite the whole row; last write wins.
    """

    ticker: str
    segments: list[Segment] = field(default_factory=list)
    total_revenue: Optional[float] = None
    year: Optional[int] = None
    source: str = "Manual review"
    notes: Optional[str] = None
    locked: bool = True
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SegmentHints:
    """Regular-expression hints that bias table extraction for one ticker."""

    table_hint_regex: re.Pattern
    row_label_regex: re.Pattern
    row_exclude_regex: Optional[re.Pattern] = None
    max_segments: int = 10
    label_tag: str = "10-K table (ticker hints)"
    expected_segments: tuple[str, ...] = ()
    prefer_max_value: bool = False


@dataclass(frozen=True)
class SecFiling:
    """Reference to an annual report in the SEC archive."""

    url: str
    filed_at: str
    accession: str
    primary_document: str

    @property
    def year(self) -> Optional[int]:
        """Filing year taken from the first four characters of ``filed_at``."""
        head = self.filed_at[:4]
        return int(head) if head.isdigit() else None


@dataclass(frozen=True)
class ScreeningSnapshot:
    """Typed view of the screening endpoint's qualitative output for a ticker."""

    ticker: str
    segment_breakdown: list[Segment]
    segment_total: Optional[float] = None
    filed_at: Optional[str] = None

    @property
    def filing_year(self) -> Optional[int]:
        """Year parsed from ``filed_at``, or None if absent or malformed."""
        if not self.filed_at:
            return None
        head = self.filed_at[:4]
        return int(head) if head.isdigit() else None
