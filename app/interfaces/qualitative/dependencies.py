"""
Dependency injection for the qualitative screening bounded context.

Provides FastAPI dependency functions that wire infrastructure
adapters into use cases via constructor injection.
These are the composition root for the qualitative context.

The engine and the SEC adapter are process-wide singletons: the engine
owns the connection pool and the adapter owns the ticker-map cache and
request throttle.
"""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

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
from app.infrastructure.qualitative.override_repository import (
    SqlQualitativeOverrideRepository,
)
from app.infrastructure.qualitative.screening_client import HttpScreeningClient
from app.infrastructure.qualitative.sec_filing_adapter import SecEdgarFilingAdapter
from app.shared.cache import TTLCache


@lru_cache(maxsize=1)
def get_db_engine() -> Engine:
    """Build a SQLAlchemy engine from application settings."""
    return create_engine(settings.get_database_url(), pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_filing_source() -> SecEdgarFilingAdapter:
    """Build the shared SEC EDGAR adapter."""
    return SecEdgarFilingAdapter(
        user_agent=settings.sec_user_agent,
        min_interval_seconds=settings.sec_min_interval_seconds,
        ticker_map_cache=TTLCache(settings.ticker_map_ttl_seconds),
        timeout=settings.http_timeout_seconds,
    )


def _override_repo() -> SqlQualitativeOverrideRepository:
    return SqlQualitativeOverrideRepository(engine=get_db_engine())


def get_list_overrides_use_case() -> ListOverridesUseCase:
    """Build ListOverridesUseCase with its infrastructure dependencies."""
    return ListOverridesUseCase(override_repo=_override_repo())


def get_save_override_use_case() -> SaveOverrideUseCase:
    """Build SaveOverrideUseCase with its infrastructure dependencies."""
    return SaveOverrideUseCase(override_repo=_override_repo())


def get_lock_from_current_result_use_case() -> LockFromCurrentResultUseCase:
    """Build LockFromCurrentResultUseCase with its infrastructure dependencies."""
    return LockFromCurrentResultUseCase(
        screening_port=HttpScreeningClient(
            base_url=settings.screening_base_url,
            timeout=settings.http_timeout_seconds,
        ),
        save_override=SaveOverrideUseCase(override_repo=_override_repo()),
    )


def get_review_summary_use_case() -> GetReviewSummaryUseCase:
    """Build GetReviewSummaryUseCase with its infrastructure dependencies."""
    return GetReviewSummaryUseCase(override_repo=_override_repo())


def get_list_locked_tickers_use_case() -> ListLockedTickersUseCase:
    """Build ListLockedTickersUseCase with its infrastructure dependencies."""
    return ListLockedTickersUseCase(override_repo=_override_repo())


def get_screen_qualitative_use_case() -> ScreenQualitativeUseCase:
    """Build ScreenQualitativeUseCase with its infrastructure dependencies."""
    return ScreenQualitativeUseCase(
        override_repo=_override_repo(),
        filing_source=get_filing_source(),
    )
