"""
Use case: Qualitative screening of a ticker.

Input: ScreenQualitativeQuery (ticker)
Output: ScreenQualitativeResult
Side effects: Network reads through the filing source when no locked
    override exists. Nothing is written.
Failure cases: InvalidTickerError, TickerNotFoundError, FilingUnavailableError,
    OverrideStoreError.
"""

import logging
from typing import Any

from app.application.qualitative.dtos import (
    FilingResult,
    ScreenQualitativeQuery,
    ScreenQualitativeResult,
    SegmentResult,
)
from app.domain.qualitative.company_facts import (
    INTEREST_INCOME_TAGS,
    TOTAL_REVENUE_TAGS,
    XBRL_SEGMENT_SOURCE,
    compliance_ratios,
    extract_segment_revenue,
    latest_fact_value_for_tags,
)
from app.domain.qualitative.entities import (
    ExtractedSegment,
    QualitativeOverride,
    normalize_ticker,
)
from app.domain.qualitative.errors import FilingUnavailableError, InvalidTickerError
from app.domain.qualitative.locked_tickers import is_locked_ticker
from app.domain.qualitative.ports import FilingSourcePort, QualitativeOverrideRepository
from app.domain.qualitative.segment_extractor import extract_segments, with_percentages
from app.domain.qualitative.segment_hints import get_segment_hints

logger = logging.getLogger(__name__)

METHOD_OVERRIDE = "override"
METHOD_FILING = "filing_extraction"


def _to_results(segments: list[ExtractedSegment]) -> list[SegmentResult]:
    return [
        SegmentResult(
            name=s.name,
            value=s.value,
            tag=s.tag,
            percent_of_total=s.percent_of_total,
        )
        for s in segments
    ]


class ScreenQualitativeUseCase:
    """Produces the qualitative segment breakdown for a ticker.

    Locked overrides short-circuit filing data entirely. Otherwise the
    registrant's XBRL company facts supply total revenue, interest income
    and, when reported, dimensional segment revenue. Only when no segment
    facts exist is the latest annual filing's HTML parsed, biased by any
    registered segment hints.
    """

    def __init__(
        self,
        override_repo: QualitativeOverrideRepository,
        filing_source: FilingSourcePort,
    ) -> None:
        self._override_repo = override_repo
        self._filing_source = filing_source

    def execute(self, query: ScreenQualitativeQuery) -> ScreenQualitativeResult:
        """Run the qualitative screening use case.

        Args:
            query: Ticker to screen.

        Returns:
            Segment breakdown with provenance and compliance ratios.
        """
        ticker = normalize_ticker(query.ticker)
        if not ticker:
            raise InvalidTickerError(query.ticker)

        override = self._override_repo.get(ticker)
        if override is not None and override.locked:
            logger.info("Serving locked override for %s", ticker)
            return self._from_override(override)

        filing = self._filing_source.latest_annual_filing(ticker)
        facts = self._company_facts(ticker)

        revenue_fact = latest_fact_value_for_tags(facts, TOTAL_REVENUE_TAGS)
        interest_fact = latest_fact_value_for_tags(facts, INTEREST_INCOME_TAGS)
        total_revenue = (
            revenue_fact.value if revenue_fact is not None and revenue_fact.value > 0 else None
        )
        interest_income = interest_fact.value if interest_fact is not None else 0.0

        segments = extract_segment_revenue(facts)
        if segments:
            segments, source = with_percentages(segments, total_revenue), XBRL_SEGMENT_SOURCE
        else:
            document = self._filing_source.fetch_document(filing)
            segments, source = extract_segments(
                document, get_segment_hints(ticker), total_revenue
            )

        logger.info(
            "Extracted %d segments for %s from %s (%s)",
            len(segments),
            ticker,
            filing.accession,
            source,
        )
        ratios = (
            compliance_ratios(total_revenue, interest_income)
            if total_revenue is not None
            else None
        )
        return ScreenQualitativeResult(
            ticker=ticker,
            locked=is_locked_ticker(ticker),
            method=METHOD_FILING,
            source=source,
            segment_breakdown=_to_results(segments),
            segment_total=sum(s.value for s in segments),
            filing=FilingResult(
                url=filing.url,
                filed_at=filing.filed_at,
                accession=filing.accession,
                primary_document=filing.primary_document,
            ),
            total_revenue=total_revenue,
            interest_income=interest_income,
            non_compliant_percent=ratios.non_compliant_percent if ratios else None,
            compliant_percent=ratios.compliant_percent if ratios else None,
            total_revenue_tag=revenue_fact.tag if revenue_fact is not None else None,
            interest_income_tag=interest_fact.tag if interest_fact is not None else None,
        )

    def _company_facts(self, ticker: str) -> dict[str, Any]:
        try:
            return self._filing_source.fetch_company_facts(ticker)
        except FilingUnavailableError as exc:
            logger.warning("Company facts unavailable for %s: %s", ticker, exc.message)
            return {}

    @staticmethod
    def _from_override(override: QualitativeOverride) -> ScreenQualitativeResult:
        segments = with_percentages(
            [
                ExtractedSegment(name=s.name, value=s.value, tag=override.source)
                for s in override.segments
            ],
            override.total_revenue,
        )
        total = override.total_revenue
        if total is None:
            total = sum(s.value for s in segments)
        return ScreenQualitativeResult(
            ticker=override.ticker,
            locked=True,
            method=METHOD_OVERRIDE,
            source=override.source,
            segment_breakdown=_to_results(segments),
            segment_total=total,
            filing=None,
            total_revenue=override.total_revenue,
        )
