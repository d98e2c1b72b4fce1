"""
Domain service: Revenue figures from XBRL company facts.

Reads the ``facts`` object of an EDGAR ``companyfacts`` document:

    {"us-gaap": {"<Tag>": {"units": {"USD": [{"val", "end", "form", ...}]}}}}

and derives total revenue, interest income, dimensional (segment)
revenue facts and the interest-income ratio used for compliance
screening. Pure functions over decoded JSON; no IO.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from app.domain.qualitative.entities import ExtractedSegment

XBRL_SEGMENT_SOURCE = "SEC XBRL (segment facts)"
XBRL_MAX_SEGMENTS = 10

ANNUAL_FORMS = frozenset({"10-K", "20-F", "40-F"})

TOTAL_REVENUE_TAGS = (
    "RevenueFromContractWithCustomerExcludingAssessedTax",
    "Revenues",
    "SalesRevenueNet",
    "SalesRevenueGoodsNet",
    "SalesRevenueServicesNet",
)

INTEREST_INCOME_TAGS = (
    "InterestIncomeNonoperating",
    "InterestIncomeOperating",
    "InterestIncome",
)

_UNIT_KEYS = ("USD", "USD/shares", "USDpure")


@dataclass(frozen=True)
class FactValue:
    """The latest value reported under one XBRL tag."""

    tag: str
    value: float


@dataclass(frozen=True)
class ComplianceRatios:
    """Share of total revenue that is interest income, and the remainder."""

    non_compliant_percent: float
    compliant_percent: float


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _gaap(facts: Any) -> dict:
    if not isinstance(facts, dict):
        return {}
    gaap = facts.get("us-gaap")
    return gaap if isinstance(gaap, dict) else {}


def latest_fact_value(facts: Any, tag: str) -> Optional[float]:
    """Latest value of a us-gaap tag, preferring annual-report entries.

    Entries are ordered by their ``end`` date; when none of them comes
    from an annual form the full list is used instead.
    """
    tag_data = _gaap(facts).get(tag)
    units = tag_data.get("units") if isinstance(tag_data, dict) else None
    if not isinstance(units, dict):
        return None
    entries = next((units[key] for key in _UNIT_KEYS if units.get(key)), None)
    if not isinstance(entries, list):
        return None
    entries = [e for e in entries if isinstance(e, dict)]
    annual = [e for e in entries if e.get("form") in ANNUAL_FORMS and _is_number(e.get("val"))]
    candidates = sorted(annual or entries, key=lambda e: str(e.get("end") or ""))
    if not candidates:
        return None
    value = candidates[-1].get("val")
    return float(value) if _is_number(value) else None


def latest_fact_value_for_tags(facts: Any, tags: tuple[str, ...]) -> Optional[FactValue]:
    """First tag in ``tags`` that carries a numeric value."""
    for tag in tags:
        value = latest_fact_value(facts, tag)
        if value is not None:
            return FactValue(tag=tag, value=value)
    return None


def format_segment_key(segment: Any) -> Optional[str]:
    """Stable label for an XBRL segment (dimension/member mapping or string)."""
    if not segment:
        return None
    if isinstance(segment, str):
        return segment
    if isinstance(segment, dict):
        return " | ".join(sorted(f"{key}:{value}" for key, value in segment.items()))
    return None


def extract_segment_revenue(facts: Any) -> list[ExtractedSegment]:
    """Collect dimensional revenue facts from 10-K entries.

    Considers every us-gaap tag whose name mentions revenue or sales and
    keeps, per segment, the entry with the latest ``end`` date (ties
    without dates keep the larger value). Returns at most ten segments,
    largest first, each tagged with the XBRL tag it came from.
    """
    latest: dict[str, tuple[float, str, str]] = {}
    for tag, tag_data in _gaap(facts).items():
        lowered = tag.lower()
        if "revenue" not in lowered and "sales" not in lowered:
            continue
        units = tag_data.get("units") if isinstance(tag_data, dict) else None
        entries = units.get("USD") if isinstance(units, dict) else None
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict) or entry.get("form") != "10-K":
                continue
            value = entry.get("val")
            key = format_segment_key(entry.get("segment"))
            if not _is_number(value) or key is None:
                continue
            end = str(entry.get("end") or "")
            existing = latest.get(key)
            if (
                existing is None
                or (end and existing[2] and end > existing[2])
                or (not existing[2] and end)
                or (not existing[2] and not end and value > existing[0])
            ):
                latest[key] = (float(value), tag, end)

    ranked = sorted(latest.items(), key=lambda item: item[1][0], reverse=True)
    return [
        ExtractedSegment(name=name, value=value, tag=tag)
        for name, (value, tag, _end) in ranked[:XBRL_MAX_SEGMENTS]
    ]


def compliance_ratios(total_revenue: float, interest_income: float) -> ComplianceRatios:
    """Interest income as a percentage of revenue, capped at 100."""
    non_compliant = min(100.0, interest_income / total_revenue * 100)
    return ComplianceRatios(
        non_compliant_percent=non_compliant,
        compliant_percent=max(0.0, 100.0 - non_compliant),
    )
