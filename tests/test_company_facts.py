"""
Tests for revenue figures read from XBRL company facts.
"""

import pytest

from app.domain.qualitative.company_facts import (
    INTEREST_INCOME_TAGS,
    TOTAL_REVENUE_TAGS,
    compliance_ratios,
    extract_segment_revenue,
    format_segment_key,
    latest_fact_value,
    latest_fact_value_for_tags,
)


def _tag(*entries: dict, unit: str = "USD") -> dict:
    return {"units": {unit: list(entries)}}


FACTS = {
    "us-gaap": {
        "Revenues": _tag(
            {"end": "2023-12-31", "val": 900.0, "form": "10-K"},
            {"end": "2024-12-31", "val": 1_000.0, "form": "10-K"},
            {"end": "2025-03-31", "val": 260.0, "form": "10-Q"},
        ),
        "InterestIncome": _tag({"end": "2024-12-31", "val": 30.0, "form": "10-K"}),
    }
}


class TestLatestFactValue:
    """Tests for picking the latest reported value of a tag."""

    def test_prefers_latest_annual_entry(self) -> None:
        assert latest_fact_value(FACTS, "Revenues") == 1_000.0

    def test_falls_back_to_any_form(self) -> None:
        quarterly = _tag({"end": "2025-03-31", "val": 260.0, "form": "10-Q"})
        facts = {"us-gaap": {"Revenues": quarterly}}
        assert latest_fact_value(facts, "Revenues") == 260.0

    def test_other_usd_unit_keys(self) -> None:
        pure = _tag({"end": "2024", "val": 5.0, "form": "10-K"}, unit="USDpure")
        facts = {"us-gaap": {"Revenues": pure}}
        assert latest_fact_value(facts, "Revenues") == 5.0

    def test_missing_tag_or_bad_shape(self) -> None:
        assert latest_fact_value(FACTS, "SalesRevenueNet") is None
        assert latest_fact_value({}, "Revenues") is None
        assert latest_fact_value(None, "Revenues") is None
        assert latest_fact_value({"us-gaap": {"Revenues": {"units": {}}}}, "Revenues") is None

    def test_first_tag_with_a_value_wins(self) -> None:
        revenue = latest_fact_value_for_tags(FACTS, TOTAL_REVENUE_TAGS)
        interest = latest_fact_value_for_tags(FACTS, INTEREST_INCOME_TAGS)
        assert (revenue.tag, revenue.value) == ("Revenues", 1_000.0)
        assert (interest.tag, interest.value) == ("InterestIncome", 30.0)

    def test_no_tag_matches(self) -> None:
        assert latest_fact_value_for_tags({"us-gaap": {}}, TOTAL_REVENUE_TAGS) is None


class TestSegmentRevenue:
    """Tests for dimensional revenue facts."""

    def test_segment_key_formats(self) -> None:
        assert format_segment_key("Cloud") == "Cloud"
        assert format_segment_key({"b": "2", "a": "1"}) == "a:1 | b:2"
        assert format_segment_key(None) is None
        assert format_segment_key(42) is None

    def test_latest_entry_per_segment_sorted_by_value(self) -> None:
        facts = {
            "us-gaap": {
                "RevenueFromContractWithCustomerExcludingAssessedTax": _tag(
                    {"end": "2023-12-31", "val": 900.0, "form": "10-K", "segment": "Cloud"},
                    {"end": "2024-12-31", "val": 700.0, "form": "10-K", "segment": "Cloud"},
                    {"end": "2024-12-31", "val": 800.0, "form": "10-K", "segment": "Devices"},
                    {"end": "2024-12-31", "val": 999.0, "form": "10-Q", "segment": "Cloud"},
                    {"end": "2024-12-31", "val": 5_000.0, "form": "10-K"},
                ),
                "OperatingExpenses": _tag(
                    {"end": "2024-12-31", "val": 10.0, "form": "10-K", "segment": "Cloud"}
                ),
            }
        }
        segments = extract_segment_revenue(facts)
        assert [(s.name, s.value) for s in segments] == [("Devices", 800.0), ("Cloud", 700.0)]
        assert segments[0].tag == "RevenueFromContractWithCustomerExcludingAssessedTax"

    def test_undated_ties_keep_larger_value(self) -> None:
        facts = {
            "us-gaap": {
                "SalesRevenueNet": _tag(
                    {"val": 10.0, "form": "10-K", "segment": "Retail"},
                    {"val": 30.0, "form": "10-K", "segment": "Retail"},
                )
            }
        }
        assert extract_segment_revenue(facts)[0].value == 30.0

    def test_caps_at_ten_segments(self) -> None:
        entries = [
            {"end": "2024-12-31", "val": float(i), "form": "10-K", "segment": f"S{i}"}
            for i in range(1, 13)
        ]
        segments = extract_segment_revenue({"us-gaap": {"Revenues": _tag(*entries)}})
        assert len(segments) == 10
        assert segments[0].name == "S12"

    def test_no_facts(self) -> None:
        assert extract_segment_revenue({}) == []
        assert extract_segment_revenue(None) == []


class TestComplianceRatios:
    """Tests for the interest-income ratio."""

    def test_ratio(self) -> None:
        ratios = compliance_ratios(1_000.0, 30.0)
        assert ratios.non_compliant_percent == pytest.approx(3.0)
        assert ratios.compliant_percent == pytest.approx(97.0)

    def test_capped_at_one_hundred(self) -> None:
        ratios = compliance_ratios(100.0, 250.0)
        assert ratios.non_compliant_percent == 100.0
        assert ratios.compliant_percent == 0.0
