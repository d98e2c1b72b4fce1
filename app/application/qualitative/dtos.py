"""
Data Transfer Objects for the qualitative application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from app.domain.qualitative.entities import QualitativeOverride


@dataclass(frozen=True)
class SegmentInput:
    """A named segment value submitted by an operator."""

    name: str
    value: float


@dataclass(frozen=True)
class SaveOverrideCommand:
    """Input DTO for storing a qualitative override.

    Attributes:
        ticker: Ticker symbol, any case.
        segments: Ordered segment breakdown. Must be non-empty.
        total_revenue: Optional total the segments add up to.
        year: Optional fiscal/filing year.
        source: Provenance label.
        notes: Free-form operator notes.
    """

    ticker: str
    segments: tuple[SegmentInput, ...]
    total_revenue: Optional[float] = None
    year: Optional[int] = None
    source: str = "Manual review"
    notes: Optional[str] = None


@dataclass(frozen=True)
class OverrideResult:
    """Output DTO for a stored override."""

    ticker: str
    segments: tuple[SegmentInput, ...]
    total_revenue: Optional[float]
    year: Optional[int]
    source: str
    notes: Optional[str]
    locked: bool
    updated_at: Optional[datetime]

    @classmethod
    def from_entity(cls, override: QualitativeOverride) -> "OverrideResult":
        return cls(
            ticker=override.ticker,
            segments=tuple(SegmentInput(s.name, s.value) for s in override.segments),
            total_revenue=override.total_revenue,
            year=override.year,
            source=override.source,
            notes=override.notes,
            locked=override.locked,
            updated_at=override.updated_at,
        )


@dataclass(frozen=True)
class LockFromCurrentResultCommand:
    """Input DTO for locking a ticker from its current screening output.

    Attributes:
        ticker: Ticker symbol, any case. Must be non-empty.
    """

    ticker: str


@dataclass(frozen=True)
class LockFromCurrentResultResult:
    """Output DTO for a successful lock.

    Attributes:
        message: User-visible confirmation, e.g. "Locked XOM".
        override: The row that was written.
    """

    message: str
    override: OverrideResult


@dataclass(frozen=True)
class ReviewSummaryQuery:
    """Input DTO for the review summary.

    Attributes:
        query: Optional case-insensitive substring filter on tickers.
    """

    query: Optional[str] = None


@dataclass(frozen=True)
class ReviewSummaryResult:
    """Output DTO splitting the covered universe into locked and pending.

    Counts are taken before the query filter is applied.
    """

    locked: list[str]
    pending: list[str]
    locked_count: int
    pending_count: int
    total: int


@dataclass(frozen=True)
class LockedTickerResult:
    """A locked ticker and where its lock comes from."""

    ticker: str
    origins: list[str]
    reason: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class ScreenQualitativeQuery:
    """Input DTO for the qualitative screening of a ticker."""

    ticker: str


@dataclass(frozen=True)
class SegmentResult:
    """A segment in a screening result."""

    name: str
    value: float
    tag: str
    percent_of_total: Optional[float] = None


@dataclass(frozen=True)
class FilingResult:
    """The filing a screening result was computed from."""

    url: str
    filed_at: str
    accession: str
    primary_document: str


@dataclass(frozen=True)
class ScreenQualitativeResult:
    """Output DTO for a qualitative screening.

    Attributes:
        ticker: Uppercased ticker.
        locked: Whether the ticker is currently locked.
        method: "override" when served from a locked override,
            "filing_extraction" when computed from the latest filing.
        source: Human-readable provenance of the segment data.
        segment_breakdown: Ordered segments.
        segment_total: Sum of segment values (or the stored total);
            0.0 when there are no segments.
        filing: Filing used, None for overrides.
        total_revenue: Reported total revenue from XBRL facts, if any.
        interest_income: Reported interest income (0.0 when not reported).
        non_compliant_percent: Interest income as a share of total revenue.
        compliant_percent: 100 minus ``non_compliant_percent``.
        total_revenue_tag: XBRL tag the total revenue was read from.
        interest_income_tag: XBRL tag the interest income was read from.
    """

    ticker: str
    locked: bool
    method: str
    source: str
    segment_breakdown: list[SegmentResult] = field(default_factory=list)
    segment_total: float = 0.0
    filing: Optional[FilingResult] = None
    total_revenue: Optional[float] = None
    interest_income: Optional[float] = None
    non_compliant_percent: Optional[float] = None
    compliant_percent: Optional[float] = None
    total_revenue_tag: Optional[str] = None
    interest_income_tag: Optional[str] = None
