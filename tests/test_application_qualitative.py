"""
Tests for the qualitative application layer (use cases).

Tests use cases with mocked ports. No real infrastructure needed.
Each test verifies orchestration logic and the write/no-write contract.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx
import pytest

from app.application.qualitative.dtos import (
    LockFromCurrentResultCommand,
    ReviewSummaryQuery,
    SaveOverrideCommand,
    ScreenQualitativeQuery,
    SegmentInput,
)
from app.application.qualitative.list_overrides import ListOverridesUseCase
from app.application.qualitative.lock_from_current_result import (
    LOCK_NOTES,
    MANUAL_REVIEW_SOURCE,
    LockFromCurrentResultUseCase,
)
from app.application.qualitative.review_summary import (
    GetReviewSummaryUseCase,
    ListLockedTickersUseCase,
)
from app.application.qualitative.save_override import SaveOverrideUseCase
from app.application.qualitative.screen_qualitative import (
    METHOD_FILING,
    METHOD_OVERRIDE,
    ScreenQualitativeUseCase,
)
from app.domain.qualitative.company_facts import XBRL_SEGMENT_SOURCE
from app.domain.qualitative.entities import (
    LockedTickerEntry,
    LockReason,
    QualitativeOverride,
    ScreeningSnapshot,
    SecFiling,
    Segment,
)
from app.domain.qualitative.errors import (
    FilingUnavailableError,
    InvalidTickerError,
    MissingOverrideFieldsError,
    NoSegmentsAvailableError,
    ScreeningFetchError,
)
from app.domain.qualitative.segment_extractor import TABLE_TAG
from app.infrastructure.qualitative.screening_client import HttpScreeningClient

NOW = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)

XOM_SEGMENTS = [
    Segment("Upstream", 25.4e9),
    Segment("Energy Products", 4.0e9),
    Segment("Chemical Products", 2.6e9),
    Segment("Specialty Products", 3.0e9),
]


def _save_use_case(repo: MagicMock) -> SaveOverrideUseCase:
    return SaveOverrideUseCase(override_repo=repo, now=lambda: NOW)


def _lock_use_case(repo: MagicMock, screening: MagicMock) -> LockFromCurrentResultUseCase:
    return LockFromCurrentResultUseCase(
        screening_port=screening, save_override=_save_use_case(repo)
    )


class TestSaveOverrideUseCase:
    """Tests for SaveOverrideUseCase."""

    def test_stores_locked_uppercased_row(self) -> None:
        repo = MagicMock()
        result = _save_use_case(repo).execute(
            SaveOverrideCommand(
                ticker="xom",
                segments=(SegmentInput("Upstream", 25.4e9),),
                total_revenue=25.4e9,
                year=2024,
            )
        )

        stored = repo.upsert.call_args.args[0]
        assert stored.ticker == "XOM"
        assert stored.locked is True
        assert stored.updated_at == NOW
        assert stored.source == "Manual review"
        assert result.ticker == "XOM"
        assert result.segments == (SegmentInput("Upstream", 25.4e9),)

    def test_missing_ticker_rejected_without_write(self) -> None:
        repo = MagicMock()
        with pytest.raises(MissingOverrideFieldsError):
            _save_use_case(repo).execute(
                SaveOverrideCommand(ticker="  ", segments=(SegmentInput("A", 1.0),))
            )
        repo.upsert.assert_not_called()

    def test_missing_segments_rejected_without_write(self) -> None:
        repo = MagicMock()
        with pytest.raises(MissingOverrideFieldsError):
            _save_use_case(repo).execute(SaveOverrideCommand(ticker="XOM", segments=()))
        repo.upsert.assert_not_called()


class TestLockFromCurrentResultUseCase:
    """Tests for LockFromCurrentResultUseCase."""

    def test_locks_current_breakdown(self) -> None:
        repo = MagicMock()
        screening = MagicMock()
        screening.fetch.return_value = ScreeningSnapshot(
            ticker="XOM",
            segment_breakdown=XOM_SEGMENTS,
            segment_total=35.0e9,
            filed_at="2025-02-19",
        )

        result = _lock_use_case(repo, screening).execute(
            LockFromCurrentResultCommand(ticker="xom")
        )

        screening.fetch.assert_called_once_with("XOM")
        repo.upsert.assert_called_once()
        stored = repo.upsert.call_args.args[0]
        assert stored.ticker == "XOM"
        assert stored.segments == XOM_SEGMENTS
        assert stored.total_revenue == 35.0e9
        assert stored.year == 2025
        assert stored.source == MANUAL_REVIEW_SOURCE
        assert stored.notes == LOCK_NOTES
        assert stored.locked is True
        assert result.message == "Locked XOM"
        assert result.override.ticker == "XOM"

    def test_empty_breakdown_is_refused_without_write(self) -> None:
        repo = MagicMock()
        screening = MagicMock()
        screening.fetch.return_value = ScreeningSnapshot(ticker="XOM", segment_breakdown=[])

        with pytest.raises(NoSegmentsAvailableError) as exc_info:
            _lock_use_case(repo, screening).execute(
                LockFromCurrentResultCommand(ticker="XOM")
            )
        assert exc_info.value.message == "No segments available to lock"
        repo.upsert.assert_not_called()

    def test_null_breakdown_from_endpoint_is_refused_without_write(self) -> None:
        repo = MagicMock()
        screening = HttpScreeningClient(
            "http://screening.local/api/v1",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(
                    200, json={"qualitative": {"segmentBreakdown": None}}
                )
            ),
        )

        with pytest.raises(NoSegmentsAvailableError):
            _lock_use_case(repo, screening).execute(
                LockFromCurrentResultCommand(ticker="XOM")
            )
        repo.upsert.assert_not_called()

    def test_zero_total_and_missing_filing_date_stored_as_null(self) -> None:
        repo = MagicMock()
        screening = MagicMock()
        screening.fetch.return_value = ScreeningSnapshot(
            ticker="KO", segment_breakdown=[Segment("Beverages", 1.0)], segment_total=0.0
        )

        _lock_use_case(repo, screening).execute(LockFromCurrentResultCommand(ticker="KO"))

        stored = repo.upsert.call_args.args[0]
        assert stored.total_revenue is None
        assert stored.year is None

    def test_empty_ticker_rejected_before_fetch(self) -> None:
        repo = MagicMock()
        screening = MagicMock()
        with pytest.raises(InvalidTickerError):
            _lock_use_case(repo, screening).execute(LockFromCurrentResultCommand(ticker=""))
        screening.fetch.assert_not_called()
        repo.upsert.assert_not_called()

    def test_fetch_failure_propagates_without_write(self) -> None:
        repo = MagicMock()
        screening = MagicMock()
        screening.fetch.side_effect = ScreeningFetchError("XOM", "HTTP 500")
        with pytest.raises(ScreeningFetchError):
            _lock_use_case(repo, screening).execute(
                LockFromCurrentResultCommand(ticker="XOM")
            )
        repo.upsert.assert_not_called()


class TestListOverridesUseCase:
    """Tests for ListOverridesUseCase."""

    def test_maps_rows(self) -> None:
        repo = MagicMock()
        repo.list_all.return_value = [
            QualitativeOverride(ticker="KO", segments=[Segment("Beverages", 1.0)])
        ]
        results = ListOverridesUseCase(override_repo=repo).execute()
        assert [r.ticker for r in results] == ["KO"]
        assert results[0].segments == (SegmentInput("Beverages", 1.0),)


class TestReviewSummaryUseCases:
    """Tests for GetReviewSummaryUseCase and ListLockedTickersUseCase."""

    registry = (
        LockedTickerEntry("AAPL", LockReason.STRONG_HINTS, "hints"),
        LockedTickerEntry("XOM", LockReason.MANUAL_OVERRIDE),
    )
    universe = ("AAPL", "XOM", "PYPL", "KO", "PEP")

    def _repo(self) -> MagicMock:
        repo = MagicMock()
        repo.list_all.return_value = [
            QualitativeOverride(ticker="PYPL", locked=True),
            QualitativeOverride(ticker="KO", locked=False),
        ]
        return repo

    def test_split_and_counts(self) -> None:
        use_case = GetReviewSummaryUseCase(
            override_repo=self._repo(), registry=self.registry, universe=self.universe
        )
        result = use_case.execute(ReviewSummaryQuery())
        assert result.locked == ["AAPL", "PYPL", "XOM"]
        assert result.pending == ["KO", "PEP"]
        assert (result.locked_count, result.pending_count, result.total) == (3, 2, 5)

    def test_query_filters_lists_but_not_counts(self) -> None:
        use_case = GetReviewSummaryUseCase(
            override_repo=self._repo(), registry=self.registry, universe=self.universe
        )
        result = use_case.execute(ReviewSummaryQuery(query="p"))
        assert result.locked == ["AAPL", "PYPL"]
        assert result.pending == ["PEP"]
        assert result.locked_count == 3
        assert result.total == 5

    def test_default_registry_locks_aapl(self) -> None:
        repo = MagicMock()
        repo.list_all.return_value = []
        result = GetReviewSummaryUseCase(override_repo=repo).execute(ReviewSummaryQuery())
        assert "AAPL" in result.locked
        assert "AAPL" not in result.pending

    def test_locked_tickers_with_origins(self) -> None:
        results = ListLockedTickersUseCase(
            override_repo=self._repo(), registry=self.registry
        ).execute()
        by_ticker = {r.ticker: r for r in results}
        assert [r.ticker for r in results] == ["AAPL", "PYPL", "XOM"]
        assert by_ticker["AAPL"].origins == ["registry"]
        assert by_ticker["AAPL"].reason == "strong_hints"
        assert by_ticker["PYPL"].origins == ["override"]
        assert by_ticker["PYPL"].reason is None


class TestScreenQualitativeUseCase:
    """Tests for ScreenQualitativeUseCase."""

    filing = SecFiling(
        url="https://www.sec.gov/Archives/edgar/data/1/000000000125000001/doc.htm",
        filed_at="2025-02-01",
        accession="0000000001-25-000001",
        primary_document="doc.htm",
    )

    def test_locked_override_short_circuits_filing(self) -> None:
        repo = MagicMock()
        repo.get.return_value = QualitativeOverride(
            ticker="XOM", segments=XOM_SEGMENTS, total_revenue=None, source="Manual review"
        )
        filings = MagicMock()

        result = ScreenQualitativeUseCase(repo, filings).execute(
            ScreenQualitativeQuery(ticker="xom")
        )

        filings.latest_annual_filing.assert_not_called()
        assert result.method == METHOD_OVERRIDE
        assert result.locked is True
        assert result.filing is None
        assert result.segment_total == pytest.approx(35.0e9)
        assert result.segment_breakdown[0].tag == "Manual review"
        assert result.segment_breakdown[0].percent_of_total == pytest.approx(72.6)

    def test_extracts_from_latest_filing(self) -> None:
        repo = MagicMock()
        repo.get.return_value = None
        filings = MagicMock()
        filings.latest_annual_filing.return_value = self.filing
        filings.fetch_document.return_value = (
            "<table><tr><td>Net revenue:</td></tr>"
            "<tr><td>Payments</td><td>300</td></tr>"
            "<tr><td>Subscriptions</td><td>100</td></tr>"
            "<tr><td>Total net revenue</td><td>400</td></tr></table>"
        )

        result = ScreenQualitativeUseCase(repo, filings).execute(
            ScreenQualitativeQuery(ticker="pypl")
        )

        filings.fetch_document.assert_called_once_with(self.filing)
        assert result.method == METHOD_FILING
        assert result.locked is False
        assert result.source == TABLE_TAG
        assert [s.name for s in result.segment_breakdown] == ["Payments", "Subscriptions"]
        assert result.segment_total == 400.0
        assert result.filing.accession == "0000000001-25-000001"

    def test_unlocked_override_is_ignored(self) -> None:
        repo = MagicMock()
        repo.get.return_value = QualitativeOverride(ticker="KO", locked=False)
        filings = MagicMock()
        filings.latest_annual_filing.return_value = self.filing
        filings.fetch_document.return_value = "<p>nothing</p>"

        result = ScreenQualitativeUseCase(repo, filings).execute(
            ScreenQualitativeQuery(ticker="KO")
        )
        assert result.method == METHOD_FILING
        assert result.segment_breakdown == []
        assert result.segment_total == 0.0
        assert result.source == "Unavailable"

    def test_filing_errors_propagate(self) -> None:
        repo = MagicMock()
        repo.get.return_value = None
        filings = MagicMock()
        filings.latest_annual_filing.side_effect = FilingUnavailableError("KO")
        with pytest.raises(FilingUnavailableError):
            ScreenQualitativeUseCase(repo, filings).execute(
                ScreenQualitativeQuery(ticker="KO")
            )

    @staticmethod
    def _facts(segment_entries: list) -> dict:
        return {
            "us-gaap": {
                "Revenues": {
                    "units": {"USD": [{"end": "2024-12-31", "val": 1_000.0, "form": "10-K"}]}
                },
                "InterestIncomeNonoperating": {
                    "units": {"USD": [{"end": "2024-12-31", "val": 50.0, "form": "10-K"}]}
                },
                "RevenueFromContractWithCustomerBySegment": {
                    "units": {"USD": segment_entries}
                },
            }
        }

    def test_xbrl_segment_facts_take_precedence(self) -> None:
        repo = MagicMock()
        repo.get.return_value = None
        filings = MagicMock()
        filings.latest_annual_filing.return_value = self.filing
        filings.fetch_company_facts.return_value = self._facts(
            [
                {"end": "2024-12-31", "val": 600.0, "form": "10-K", "segment": "Cloud"},
                {"end": "2024-12-31", "val": 400.0, "form": "10-K", "segment": "Devices"},
            ]
        )

        result = ScreenQualitativeUseCase(repo, filings).execute(
            ScreenQualitativeQuery(ticker="msft")
        )

        filings.fetch_document.assert_not_called()
        assert result.source == XBRL_SEGMENT_SOURCE
        assert [(s.name, s.percent_of_total) for s in result.segment_breakdown] == [
            ("Cloud", 60.0),
            ("Devices", 40.0),
        ]
        assert result.total_revenue == 1_000.0
        assert result.interest_income == 50.0
        assert result.non_compliant_percent == pytest.approx(5.0)
        assert result.compliant_percent == pytest.approx(95.0)
        assert result.total_revenue_tag == "Revenues"
        assert result.interest_income_tag == "InterestIncomeNonoperating"

    def test_html_fallback_still_reports_ratios(self) -> None:
        repo = MagicMock()
        repo.get.return_value = None
        filings = MagicMock()
        filings.latest_annual_filing.return_value = self.filing
        filings.fetch_company_facts.return_value = self._facts([])
        filings.fetch_document.return_value = (
            "<table><tr><td>Net revenue:</td></tr>"
            "<tr><td>Payments</td><td>300</td></tr>"
            "<tr><td>Total net revenue</td><td>300</td></tr></table>"
        )

        result = ScreenQualitativeUseCase(repo, filings).execute(
            ScreenQualitativeQuery(ticker="pypl")
        )

        filings.fetch_document.assert_called_once_with(self.filing)
        assert result.source == TABLE_TAG
        assert result.non_compliant_percent == pytest.approx(5.0)

    def test_zero_segment_sum_uses_total_revenue_as_base(self) -> None:
        repo = MagicMock()
        repo.get.return_value = None
        filings = MagicMock()
        filings.latest_annual_filing.return_value = self.filing
        filings.fetch_company_facts.return_value = self._facts(
            [{"end": "2024-12-31", "val": 0.0, "form": "10-K", "segment": "Legacy"}]
        )

        result = ScreenQualitativeUseCase(repo, filings).execute(
            ScreenQualitativeQuery(ticker="msft")
        )

        assert result.segment_total == 0.0
        assert result.segment_breakdown[0].percent_of_total == 0.0

    def test_company_facts_failure_falls_back_to_filing(self) -> None:
        repo = MagicMock()
        repo.get.return_value = None
        filings = MagicMock()
        filings.latest_annual_filing.return_value = self.filing
        filings.fetch_company_facts.side_effect = FilingUnavailableError("KO", "HTTP 503")
        filings.fetch_document.return_value = "<p>nothing</p>"

        result = ScreenQualitativeUseCase(repo, filings).execute(
            ScreenQualitativeQuery(ticker="KO")
        )

        assert result.source == "Unavailable"
        assert result.total_revenue is None
        assert result.interest_income == 0.0
        assert result.non_compliant_percent is None
        assert result.compliant_percent is None
