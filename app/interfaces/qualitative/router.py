"""
FastAPI router for the qualitative screening bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
Review and write routes require an admin session.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from app.application.qualitative.dtos import (
    LockFromCurrentResultCommand,
    OverrideResult,
    ReviewSummaryQuery,
    SaveOverrideCommand,
    ScreenQualitativeQuery,
    SegmentInput,
)
from app.application.qualitative.list_overrides import ListOverridesUseCase
from app.application.qualitative.lock_from_current_result import (
    LockFromCurrentResultUseCase,
)
from app.application.qualitative.review_summary import (
    GetReviewSummaryUseCase,
    ListLockedTickersUseCase,
)
from app.application.qualitative.save_override import SaveOverrideUseCase
from app.application.qualitative.screen_qualitative import ScreenQualitativeUseCase
from app.core.config import settings
from app.interfaces.qualitative.dependencies import (
    get_list_locked_tickers_use_case,
    get_list_overrides_use_case,
    get_lock_from_current_result_use_case,
    get_review_summary_use_case,
    get_save_override_use_case,
    get_screen_qualitative_use_case,
)
from app.interfaces.qualitative.schemas import (
    ErrorResponse,
    LockedTickerItem,
    LockedTickersResponse,
    LockRequest,
    LockResponse,
    OkResponse,
    OverrideItem,
    OverridesResponse,
    QualitativeItem,
    ReviewSummaryResponse,
    SaveOverrideRequest,
    ScreeningResponse,
    ScreeningSegmentItem,
    SecFilingItem,
    SegmentItem,
    XbrlTagsItem,
)
from app.shared.security.admin_auth import require_admin
from app.shared.security.rate_limiting import limiter

router = APIRouter(tags=["qualitative"])


def _override_item(result: OverrideResult) -> OverrideItem:
    return OverrideItem(
        ticker=result.ticker,
        segments=[SegmentItem(name=s.name, value=s.value) for s in result.segments],
        total_revenue=result.total_revenue,
        year=result.year,
        source=result.source,
        notes=result.notes,
        locked=result.locked,
        updated_at=result.updated_at,
    )


# ── Overrides ────────────────────────────────────────────────────


@router.get(
    "/qualitative-overrides",
    response_model=OverridesResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List qualitative overrides",
    description="Return every stored override, ordered by ticker.",
)
def list_overrides(
    use_case: ListOverridesUseCase = Depends(get_list_overrides_use_case),
) -> OverridesResponse:
    """List all stored overrides."""
    results = use_case.execute()
    return OverridesResponse(overrides=[_override_item(r) for r in results])


@router.post(
    "/qualitative-overrides",
    response_model=OkResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    dependencies=[Depends(require_admin)],
    summary="Store a qualitative override",
    description="Insert or replace the locked override for a ticker.",
)
def save_override(
    body: SaveOverrideRequest,
    use_case: SaveOverrideUseCase = Depends(get_save_override_use_case),
) -> OkResponse:
    """Upsert an operator-supplied segment breakdown."""
    command = SaveOverrideCommand(
        ticker=body.ticker,
        segments=tuple(SegmentInput(name=s.name, value=s.value) for s in body.segments),
        total_revenue=body.total_revenue,
        year=body.year,
        source=body.source,
        notes=body.notes,
    )
    use_case.execute(command)
    return OkResponse(ok=True)


# ── Review ───────────────────────────────────────────────────────


@router.get(
    "/qualitative-review",
    response_model=ReviewSummaryResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    dependencies=[Depends(require_admin)],
    summary="Review summary",
    description=(
        "Split the covered tickers into locked and needs-review lists. "
        "Counts ignore the query filter."
    ),
)
def review_summary(
    query: Optional[str] = Query(default=None, max_length=16),
    use_case: GetReviewSummaryUseCase = Depends(get_review_summary_use_case),
) -> ReviewSummaryResponse:
    """Return the locked / pending split of the covered universe."""
    result = use_case.execute(ReviewSummaryQuery(query=query))
    return ReviewSummaryResponse(
        locked=result.locked,
        pending=result.pending,
        locked_count=result.locked_count,
        pending_count=result.pending_count,
        total=result.total,
    )


@router.post(
    "/qualitative-review/lock",
    response_model=LockResponse,
    responses={
        401: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    dependencies=[Depends(require_admin)],
    summary="Lock from current result",
    description=(
        "Fetch the current screening result for a ticker and store its "
        "segment breakdown as a locked override."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
def lock_from_current_result(
    request: Request,
    body: LockRequest,
    use_case: LockFromCurrentResultUseCase = Depends(
        get_lock_from_current_result_use_case
    ),
) -> LockResponse:
    """Lock a ticker's current segment breakdown."""
    result = use_case.execute(LockFromCurrentResultCommand(ticker=body.ticker))
    return LockResponse(
        message=result.message,
        override=_override_item(result.override),
    )


@router.get(
    "/locked-tickers",
    response_model=LockedTickersResponse,
    responses={500: {"model": ErrorResponse}},
    summary="List locked tickers",
    description="Resolve the locked set from the static registry and stored overrides.",
)
def list_locked_tickers(
    use_case: ListLockedTickersUseCase = Depends(get_list_locked_tickers_use_case),
) -> LockedTickersResponse:
    """List every locked ticker with its origins."""
    results = use_case.execute()
    return LockedTickersResponse(
        tickers=[
            LockedTickerItem(
                ticker=r.ticker,
                origins=r.origins,
                reason=r.reason,
                notes=r.notes,
            )
            for r in results
        ],
        count=len(results),
    )


# ── Screening ────────────────────────────────────────────────────


@router.get(
    "/screening/{ticker}",
    response_model=ScreeningResponse,
    responses={
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Qualitative screening",
    description=(
        "Return the revenue segment breakdown for a ticker, from its locked "
        "override when one exists, otherwise from XBRL company facts and its "
        "latest annual filing, with interest-income compliance ratios."
    ),
)
@limiter.limit(settings.rate_limit_heavy)
def screen_ticker(
    request: Request,
    ticker: str,
    use_case: ScreenQualitativeUseCase = Depends(get_screen_qualitative_use_case),
) -> ScreeningResponse:
    """Screen a ticker's qualitative segment data."""
    result = use_case.execute(ScreenQualitativeQuery(ticker=ticker))
    filing = None
    if result.filing is not None:
        filing = SecFilingItem(
            url=result.filing.url,
            filed_at=result.filing.filed_at,
            accession=result.filing.accession,
            primary_document=result.filing.primary_document,
        )
    return ScreeningResponse(
        ticker=result.ticker,
        locked=result.locked,
        qualitative=QualitativeItem(
            segment_breakdown=[
                ScreeningSegmentItem(
                    name=s.name,
                    value=s.value,
                    tag=s.tag,
                    percent_of_total=s.percent_of_total,
                )
                for s in result.segment_breakdown
            ],
            segment_total=result.segment_total,
            source=result.source,
            method=result.method,
            total_revenue=result.total_revenue,
            interest_income=result.interest_income,
            non_compliant_percent=result.non_compliant_percent,
            compliant_percent=result.compliant_percent,
            xbrl_tags=XbrlTagsItem(
                total_revenue=result.total_revenue_tag or "Unavailable",
                interest_income=result.interest_income_tag or "Unavailable",
            ),
        ),
        sec_filing=filing,
    )
