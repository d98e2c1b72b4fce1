"""
Tests for the outbound HTTP adapters.

The network is replaced by ``httpx.MockTransport`` handlers, so the
real request/response path of each adapter is exercised offline.
"""

import json

import httpx
import pytest

from app.domain.qualitative.errors import (
    FilingUnavailableError,
    ScreeningFetchError,
    ScreeningPayloadError,
    TickerNotFoundError,
)
from app.infrastructure.qualitative.screening_client import (
    HttpScreeningClient,
    parse_screening_payload,
)
from app.infrastructure.qualitative.sec_filing_adapter import (
    SecEdgarFilingAdapter,
    normalize_cik,
    parse_ticker_map,
    select_latest_annual_filing,
)
from app.shared.cache import TTLCache

TICKERS_BODY = {
    "0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."},
    "1": {"cik_str": 34088, "ticker": "XOM", "title": "Exxon Mobil Corp"},
}

SUBMISSIONS_BODY = {
    "cik": "0000034088",
    "filings": {
        "recent": {
            "form": ["8-K", "10-Q", "10-K", "10-K"],
            "accessionNumber": [
                "0000034088-25-000020",
                "0000034088-25-000015",
                "0000034088-25-000010",
                "0000034088-24-000018",
            ],
            "primaryDocument": ["a.htm", "b.htm", "xom-20241231.htm", "old.htm"],
            "filingDate": ["2025-05-01", "2025-04-30", "2025-02-19", "2024-02-28"],
        }
    },
}

COMPANY_FACTS_BODY = {
    "cik": 34088,
    "entityName": "Exxon Mobil Corp",
    "facts": {
        "us-gaap": {
            "Revenues": {
                "units": {
                    "USD": [
                        {"end": "2023-12-31", "val": 344_582_000_000, "form": "10-K"},
                        {"end": "2024-12-31", "val": 339_247_000_000, "form": "10-K"},
                    ]
                }
            }
        }
    },
}


# ══════════════════════════════════════════════════════════════════════
# Screening client
# ══════════════════════════════════════════════════════════════════════


class TestParseScreeningPayload:
    """Tests for boundary validation of the screening response."""

    def test_maps_segments_and_filing_date(self) -> None:
        snapshot = parse_screening_payload(
            "XOM",
            {
                "qualitative": {
                    "segmentBreakdown": [{"name": "Upstream", "value": 25.4e9, "tag": "x"}],
                    "segmentTotal": 25.4e9,
                },
                "secFiling": {"filedAt": "2025-02-19", "url": "https://x"},
            },
        )
        assert snapshot.segment_breakdown[0].name == "Upstream"
        assert snapshot.segment_total == 25.4e9
        assert snapshot.filing_year == 2025

    def test_missing_qualitative_yields_empty_breakdown(self) -> None:
        snapshot = parse_screening_payload("XOM", {"ticker": "XOM"})
        assert snapshot.segment_breakdown == []
        assert snapshot.filed_at is None

    def test_null_breakdown_yields_empty_breakdown(self) -> None:
        snapshot = parse_screening_payload(
            "XOM", {"qualitative": {"segmentBreakdown": None, "segmentTotal": None}}
        )
        assert snapshot.segment_breakdown == []
        assert snapshot.segment_total is None

    def test_bad_segment_value_reports_location(self) -> None:
        with pytest.raises(ScreeningPayloadError) as exc_info:
            parse_screening_payload(
                "XOM",
                {"qualitative": {"segmentBreakdown": [{"name": "Upstream", "value": "lots"}]}},
            )
        assert exc_info.value.location == "qualitative.segmentBreakdown.0.value"

    def test_non_object_body(self) -> None:
        with pytest.raises(ScreeningPayloadError) as exc_info:
            parse_screening_payload("XOM", ["not", "an", "object"])
        assert exc_info.value.location == "<root>"


class TestHttpScreeningClient:
    """Tests for HttpScreeningClient over a mock transport."""

    def test_fetches_quoted_ticker_path(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.path)
            return httpx.Response(
                200,
                json={"qualitative": {"segmentBreakdown": [{"name": "A", "value": 1}]}},
            )

        client = HttpScreeningClient(
            "http://screening.local/api/v1/", transport=httpx.MockTransport(handler)
        )
        snapshot = client.fetch("BRK.B")
        assert seen == ["/api/v1/screening/BRK.B"]
        assert snapshot.segment_breakdown[0].value == 1.0

    def test_http_error_status(self) -> None:
        client = HttpScreeningClient(
            "http://screening.local/api/v1",
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )
        with pytest.raises(ScreeningFetchError) as exc_info:
            client.fetch("XOM")
        assert exc_info.value.message == "Failed to fetch screening data"

    def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = HttpScreeningClient(
            "http://screening.local/api/v1", transport=httpx.MockTransport(handler)
        )
        with pytest.raises(ScreeningFetchError):
            client.fetch("XOM")

    def test_non_json_body(self) -> None:
        client = HttpScreeningClient(
            "http://screening.local/api/v1",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, text="<html>oops</html>")
            ),
        )
        with pytest.raises(ScreeningPayloadError):
            client.fetch("XOM")

    def test_null_breakdown_over_http(self) -> None:
        client = HttpScreeningClient(
            "http://screening.local/api/v1",
            transport=httpx.MockTransport(
                lambda request: httpx.Response(
                    200, json={"qualitative": {"segmentBreakdown": None}}
                )
            ),
        )
        assert client.fetch("XOM").segment_breakdown == []


# ══════════════════════════════════════════════════════════════════════
# SEC EDGAR adapter
# ══════════════════════════════════════════════════════════════════════


class TestEdgarParsing:
    """Tests for the pure EDGAR payload helpers."""

    def test_normalize_cik(self) -> None:
        assert normalize_cik("34088") == "0000034088"

    def test_ticker_map_dict_layout(self) -> None:
        assert parse_ticker_map(TICKERS_BODY) == {"AAPL": "320193", "XOM": "34088"}

    def test_ticker_map_exchange_layout(self) -> None:
        body = {
            "fields": ["cik", "name", "ticker", "exchange"],
            "data": [[320193, "Apple Inc.", "aapl", "Nasdaq"]],
        }
        assert parse_ticker_map(body) == {"AAPL": "320193"}

    def test_latest_10k_is_selected(self) -> None:
        filing = select_latest_annual_filing("34088", SUBMISSIONS_BODY)
        assert filing.accession == "0000034088-25-000010"
        assert filing.filed_at == "2025-02-19"
        assert filing.url == (
            "https://www.sec.gov/Archives/edgar/data/34088/"
            "000003408825000010/xom-20241231.htm"
        )

    def test_foreign_annual_form_fallback(self) -> None:
        body = {
            "filings": {
                "recent": {
                    "form": ["6-K", "20-F"],
                    "accessionNumber": ["a-1", "b-2"],
                    "primaryDocument": ["x.htm", "annual.htm"],
                    "filingDate": ["2025-03-01", "2025-02-01"],
                }
            }
        }
        filing = select_latest_annual_filing("1", body)
        assert filing.primary_document == "annual.htm"

    def test_no_annual_form(self) -> None:
        body = {
            "filings": {
                "recent": {
                    "form": ["8-K"],
                    "accessionNumber": ["a-1"],
                    "primaryDocument": ["x.htm"],
                    "filingDate": ["2025-03-01"],
                }
            }
        }
        assert select_latest_annual_filing("1", body) is None


class _EdgarStub:
    """Mock transport handler serving a tiny EDGAR."""

    def __init__(self, tickers_status: int = 200, facts_status: int = 200) -> None:
        self.requests: list[httpx.Request] = []
        self.tickers_status = tickers_status
        self.facts_status = facts_status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/files/company_tickers.json":
            if self.tickers_status != 200:
                return httpx.Response(self.tickers_status)
            return httpx.Response(200, content=json.dumps(TICKERS_BODY))
        if path == "/files/company_tickers_exchange.json":
            return httpx.Response(
                200,
                json={"fields": ["cik", "ticker"], "data": [[34088, "XOM"]]},
            )
        if path == "/submissions/CIK0000034088.json":
            return httpx.Response(200, json=SUBMISSIONS_BODY)
        if path == "/api/xbrl/companyfacts/CIK0000034088.json":
            if self.facts_status != 200:
                return httpx.Response(self.facts_status)
            return httpx.Response(200, json=COMPANY_FACTS_BODY)
        if path.endswith("/xom-20241231.htm"):
            return httpx.Response(200, text="<html>10-K</html>")
        return httpx.Response(404)


def _adapter(stub: _EdgarStub, clock, sleeps: list) -> SecEdgarFilingAdapter:
    return SecEdgarFilingAdapter(
        user_agent="Tests tests@example.com",
        min_interval_seconds=0.2,
        ticker_map_cache=TTLCache(3600, clock=clock),
        transport=httpx.MockTransport(stub),
        clock=clock,
        sleep=sleeps.append,
    )


class TestSecEdgarFilingAdapter:
    """Tests for SecEdgarFilingAdapter over a mock transport."""

    def test_latest_filing_and_document(self, clock) -> None:
        stub = _EdgarStub()
        adapter = _adapter(stub, clock, [])

        filing = adapter.latest_annual_filing("xom")
        document = adapter.fetch_document(filing)

        assert filing.accession == "0000034088-25-000010"
        assert document == "<html>10-K</html>"
        assert all(
            r.headers["User-Agent"] == "Tests tests@example.com" for r in stub.requests
        )

    def test_ticker_map_is_cached(self, clock) -> None:
        stub = _EdgarStub()
        adapter = _adapter(stub, clock, [])
        adapter.get_cik("AAPL")
        adapter.get_cik("XOM")
        paths = [r.url.path for r in stub.requests]
        assert paths.count("/files/company_tickers.json") == 1

    def test_ticker_map_reloads_after_ttl(self, clock) -> None:
        stub = _EdgarStub()
        adapter = _adapter(stub, clock, [])
        adapter.get_cik("AAPL")
        clock.advance(3600)
        adapter.get_cik("AAPL")
        paths = [r.url.path for r in stub.requests]
        assert paths.count("/files/company_tickers.json") == 2

    def test_falls_back_to_exchange_file(self, clock) -> None:
        stub = _EdgarStub(tickers_status=503)
        adapter = _adapter(stub, clock, [])
        assert adapter.get_cik("XOM") == "34088"

    def test_unknown_ticker(self, clock) -> None:
        adapter = _adapter(_EdgarStub(), clock, [])
        with pytest.raises(TickerNotFoundError):
            adapter.latest_annual_filing("ZZZZ")

    def test_submissions_failure(self, clock) -> None:
        adapter = _adapter(_EdgarStub(), clock, [])
        with pytest.raises(FilingUnavailableError):
            adapter.latest_annual_filing("AAPL")

    def test_requests_are_throttled(self, clock) -> None:
        sleeps: list = []
        adapter = _adapter(_EdgarStub(), clock, sleeps)
        adapter.latest_annual_filing("XOM")
        assert sleeps == [pytest.approx(0.2)]

    def test_company_facts(self, clock) -> None:
        stub = _EdgarStub()
        facts = _adapter(stub, clock, []).fetch_company_facts("XOM")
        assert set(facts) == {"us-gaap"}
        assert stub.requests[-1].url.host == "data.sec.gov"

    def test_company_facts_not_published(self, clock) -> None:
        assert _adapter(_EdgarStub(), clock, []).fetch_company_facts("AAPL") == {}

    def test_company_facts_server_error(self, clock) -> None:
        adapter = _adapter(_EdgarStub(facts_status=503), clock, [])
        with pytest.raises(FilingUnavailableError):
            adapter.fetch_company_facts("XOM")

    def test_company_facts_unknown_ticker(self, clock) -> None:
        with pytest.raises(TickerNotFoundError):
            _adapter(_EdgarStub(), clock, []).fetch_company_facts("ZZZZ")
