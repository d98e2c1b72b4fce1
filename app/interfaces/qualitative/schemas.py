"""
Pydantic schemas for qualitative API request/response validation.

These schemas enforce input validation and define the API contract.
No business logic belongs here.

Override rows use the store's snake_case column names; the screening
response keeps the camelCase keys (``segmentBreakdown``, ``secFiling``)
that screening consumers already read.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

TICKER_DESCRIPTION = "Ticker symbol (case-insensitive)"
TICKER_PATTERN = r"^[A-Za-z0-9.\-]*$"
TICKER_MAX_LEN = 16


class SegmentItem(BaseModel):
    """A named revenue segment."""

    name: str = Field(..., min_length=1, max_length=255)
    value: float


class OverrideItem(BaseModel):
    """A stored qualitative override."""

    ticker: str
    segments: list[SegmentItem]
    total_revenue: Optional[float] = None
    year: Optional[int] = None
    source: str
    notes: Optional[str] = None
    locked: bool
    updated_at: Optional[datetime] = None


class OverridesResponse(BaseModel):
    """Response schema for the override listing."""

    overrides: list[OverrideItem]


class SaveOverrideRequest(BaseModel):
    """Request schema for storing an override.

    Ticker and segments default to empty so that a missing value is
    reported with the store's own message rather than a schema error.
    """

    ticker: str = Field(
        default="",
        max_length=TICKER_MAX_LEN,
        pattern=TICKER_PATTERN,
        description=TICKER_DESCRIPTION,
    )
    segments: list[SegmentItem] = Field(default_factory=list)
    total_revenue: Optional[float] = None
    year: Optional[int] = Field(default=None, ge=1900, le=2200)
    source: str = Field(default="Manual review", max_length=255)
    notes: Optional[str] = Field(default=None, max_length=2000)


class OkResponse(BaseModel):
    """Acknowledgement for write endpoints."""

    ok: bool = True


class LockRequest(BaseModel):
    """Request schema for locking a ticker from its current screening result."""

    ticker: str = Field(
        default="",
        max_length=TICKER_MAX_LEN,
        pattern=TICKER_PATTERN,
        description=TICKER_DESCRIPTION,
    )


class LockResponse(BaseModel):
    """Response schema for a successful lock."""

    message: str
    override: OverrideItem


class ReviewSummaryResponse(BaseModel):
    """Locked / needs-review split of the covered tickers."""

    locked: list[str]
    pending: list[str]
    locked_count: int
    pending_count: int
    total: int


class LockedTickerItem(BaseModel):
    """A locked ticker and the sources that lock it."""

    ticker: str
    origins: list[str]
    reason: Optional[str] = None
    notes: Optional[str] = None


class LockedTickersResponse(BaseModel):
    """Response schema for the resolved locked set."""

    tickers: list[LockedTickerItem]
    count: int


class ScreeningSegmentItem(BaseModel):
    """A segment in the screening response."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    value: float
    tag: str
    percent_of_total: Optional[float] = Field(default=None, alias="percentOfTotal")


class XbrlTagsItem(BaseModel):
    """XBRL tags the reported totals were read from ("Unavailable" if none)."""

    model_config = ConfigDict(populate_by_name=True)

    total_revenue: str = Field(default="Unavailable", alias="totalRevenue")
    interest_income: str = Field(default="Unavailable", alias="interestIncome")


class QualitativeItem(BaseModel):
    """Qualitative part of a screening response.

    ``segmentTotal`` is always a number: the sum of the segment values, the
    stored total for overrides, and 0 when no segments were found. Revenue,
    interest income and the compliance percentages are null when no total
    revenue is reported in XBRL facts.
    """

    model_config = ConfigDict(populate_by_name=True)

    segment_breakdown: list[ScreeningSegmentItem] = Field(alias="segmentBreakdown")
    segment_total: float = Field(default=0.0, alias="segmentTotal")
    source: str
    method: str
    total_revenue: Optional[float] = Field(default=None, alias="totalRevenue")
    interest_income: Optional[float] = Field(default=None, alias="interestIncome")
    non_compliant_percent: Optional[float] = Field(default=None, alias="nonCompliantPercent")
    compliant_percent: Optional[float] = Field(default=None, alias="compliantPercent")
    xbrl_tags: XbrlTagsItem = Field(default_factory=XbrlTagsItem, alias="xbrlTags")


class SecFilingItem(BaseModel):
    """Filing reference in a screening response."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    filed_at: str = Field(alias="filedAt")
    accession: str
    primary_document: str = Field(alias="primaryDocument")


class ScreeningResponse(BaseModel):
    """Response schema for the qualitative screening endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    ticker: str
    locked: bool
    qualitative: QualitativeItem
    sec_filing: Optional[SecFilingItem] = Field(default=None, alias="secFiling")


class AdminSessionRequest(BaseModel):
    """Operator credentials."""

    username: str = Field(..., max_length=255)
    password: str = Field(..., max_length=255)


class AdminSessionResponse(BaseModel):
    """Issued admin session token."""

    token: str
    expires_in: int


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Response schema for the readiness check."""

    status: str
    version: str
    store: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers."""

    error: str
    detail: str | None = None
