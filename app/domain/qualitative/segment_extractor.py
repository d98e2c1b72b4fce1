"""
Domain service: Revenue segment extraction from annual filings.

Pure business logic that locates revenue-breakdown tables inside a
10-K primary document and turns their rows into named segments.
No IO, no frameworks. Documents are parsed with BeautifulSoup over
lxml, which closes implied ``</td>``/``</tr>`` tags the way EDGAR
filings often leave them.

Extraction order:
    1. Ticker hints (see ``segment_hints``) when registered.
    2. Generic revenue tables ("net revenue" sections, product tables).
    3. Plain-text lines of the form "<Label> 1,234 5,678".
"""

from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from app.domain.qualitative.entities import ExtractedSegment, SegmentHints

GENERIC_MAX_SEGMENTS = 10

TABLE_TAG = "10-K table (best-effort)"
NET_REVENUE_TAG = "10-K table (net revenue section)"
META_TAG = "10-K table (meta revenue by type)"
TEXT_TAG = "10-K text (best-effort)"

HTML_PARSER = "lxml"
_BLOCK_TAGS = ("tr", "p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6")

_I = re.IGNORECASE

_SPACE_RE = re.compile(r"\s+")

_IN_MILLIONS_RE = re.compile(r"in\s+millions", _I)
_TOTAL_RE = re.compile(
    r"total\s+(net\s+)?sales|total\s+revenue|net\s+sales|total\s+net\s+revenue"
    r"|total\s+operating\s+income",
    _I,
)
_INCLUDE_TABLE_RE = re.compile(
    r"(disaggregated\s+net\s+sales|net\s+sales\s+by|net\s+revenue"
    r"|revenue\s+by\s+product|revenue\s+by\s+segment|segment\s+revenue"
    r"|revenue\s+by\s+source|revenues?\s+by\s+type)",
    _I,
)
_META_REVENUE_HINT_RE = re.compile(
    r"(revenue\s+by\s+source|advertising|other\s+revenue|family\s+of\s+apps"
    r"|reality\s+labs|revenues?\s+by\s+type)",
    _I,
)
_META_ROW_RE = re.compile(
    r"(advertising|other\s+revenue|family\s+of\s+apps|reality\s+labs)", _I
)
_PRODUCT_HINT_RE = re.compile(
    r"(iphone|ipad|mac|wearables|services|accessories|hardware|software|devices)",
    _I,
)
_NET_REVENUE_RE = re.compile(r"net\s+revenue", _I)
_NET_REVENUE_HEADER_RE = re.compile(r"^(net\s+revenue|revenues?):?$", _I)
_EXCLUDE_ROW_RE = re.compile(
    r"(note|notes|due|debt|liabilities|acceleration|securities|cupertino"
    r"|california|geographic|legal|lease|item\s+\d|cost\s+of\s+goods|cogs"
    r"|gross\s+profit|gross\s+margin|operating\s+income)",
    _I,
)
_YEAR_RE = re.compile(r"^\d{4}$")
_EXPENSE_LABEL_RE = re.compile(
    r"(expenses?|costs?|operating\s+expenses?|research\s+and\s+development"
    r"|sales,\s*general\s+and\s+administrative|sg&a|margin"
    r"|income\s+from\s+operations|operating\s+income)",
    _I,
)
_TEXT_LINE_RE = re.compile(
    r"^([A-Z][A-Za-z0-9&,\-()/\s]{3,}?)\s+\$?\(?([\d,]{3,})"
    r"(?:\s+\$?\(?([\d,]{3,})\)?)*$",
    _I,
)
_TEXT_TOTAL_RE = re.compile(r"total\s+(net\s+)?sales|total\s+revenue|net\s+sales", _I)
_GROUPED_NUMBER_RE = re.compile(r"\d{3,}(?:,\d{3})+")


def _parse(raw: str) -> BeautifulSoup:
    soup = BeautifulSoup(raw, HTML_PARSER)
    for node in soup.find_all(["script", "style"]):
        node.decompose()
    return soup


def _clean(text: str) -> str:
    return _SPACE_RE.sub(" ", text.replace("\xa0", " ")).strip()


def strip_html(raw: str) -> str:
    """Reduce an HTML fragment to single-spaced visible text."""
    return _clean(_parse(raw).get_text(" "))


def html_to_lines(raw: str) -> str:
    """Like ``strip_html`` but keeps one line per row, paragraph or break."""
    soup = _parse(raw)
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.append("\n")
    return "\n".join(_clean(line) for line in soup.get_text(" ").split("\n"))


def normalize_segment_name(value: str) -> str:
    """Lowercase a label and collapse every non-alphanumeric run to one space."""
    return re.sub(r"[^a-z0-9]+", " ", value.lower()).strip()


def order_segments_by_expected(
    segments: list[ExtractedSegment], expected: tuple[str, ...] | list[str]
) -> list[ExtractedSegment]:
    """Put segments matching ``expected`` first, in that order, then the rest."""
    if not expected:
        return list(segments)
    by_key: dict[str, ExtractedSegment] = {}
    for seg in segments:
        by_key.setdefault(normalize_segment_name(seg.name), seg)
    ordered: list[ExtractedSegment] = []
    for name in expected:
        match = by_key.get(normalize_segment_name(name))
        if match is not None and match not in ordered:
            ordered.append(match)
    ordered.extend(seg for seg in segments if seg not in ordered)
    return ordered


def is_revenue_like_segment_set(segments: list[ExtractedSegment]) -> bool:
    """Reject sets where half or more of the labels read like expense lines."""
    if not segments:
        return False
    bad = sum(1 for seg in segments if _EXPENSE_LABEL_RE.search(seg.name))
    return bad / len(segments) < 0.5


def with_percentages(
    segments: list[ExtractedSegment], fallback_total: Optional[float] = None
) -> list[ExtractedSegment]:
    """Attach ``percent_of_total`` (one decimal) relative to the segment sum.

    When the segments sum to zero, ``fallback_total`` (typically the
    reported total revenue) is used as the base instead.
    """
    total = sum(seg.value for seg in segments)
    if total <= 0:
        total = fallback_total or 0
    if total <= 0:
        return list(segments)
    return [
        ExtractedSegment(
            name=seg.name,
            value=seg.value,
            tag=seg.tag,
            percent_of_total=round(seg.value / total * 100, 1),
        )
        for seg in segments
    ]


def _row_cells(table: Tag) -> list[list[str]]:
    """Cell texts per row, skipping rows that belong to nested tables."""
    rows = []
    for row in table.find_all("tr"):
        if row.find_parent("table") is not table:
            continue
        cells = [
            _clean(cell.get_text(" "))
            for cell in row.find_all(["td", "th"])
            if cell.find_parent("tr") is row
        ]
        rows.append([c for c in cells if c])
    return rows


def _numbers(cells: list[str]) -> list[int]:
    values = []
    for cell in cells:
        digits = re.sub(r"[^\d,]", "", cell)
        if not re.search(r"\d", digits):
            continue
        value = int(digits.replace(",", ""))
        if value > 0:
            values.append(value)
    return values


def _hinted_segments(
    rows: list[list[str]], in_millions: bool, hints: SegmentHints
) -> list[ExtractedSegment]:
    segments: list[ExtractedSegment] = []
    seen: set[str] = set()
    for cells in rows:
        if len(cells) < 2:
            continue
        name = cells[0]
        if _TOTAL_RE.search(name) or not hints.row_label_regex.search(name):
            continue
        if hints.row_exclude_regex is not None and hints.row_exclude_regex.search(name):
            continue
        numbers = _numbers(cells[1:])
        if not numbers or name in seen:
            continue
        seen.add(name)
        value = max(numbers) if hints.prefer_max_value else numbers[-1]
        scaled = value * 1_000_000 if in_millions else value
        segments.append(ExtractedSegment(name=name, value=float(scaled), tag=hints.label_tag))
        if len(segments) >= hints.max_segments:
            break
    return segments


def _labelled_rows(
    rows: list[list[str]],
    in_millions: bool,
    tag: str,
    *,
    stop_at_total: bool = False,
    skip_years: bool = False,
) -> list[ExtractedSegment]:
    segments: list[ExtractedSegment] = []
    seen: set[str] = set()
    for cells in rows:
        if len(cells) < 2:
            continue
        name = cells[0]
        if _TOTAL_RE.search(name):
            if stop_at_total:
                break
            continue
        if _EXCLUDE_ROW_RE.search(name):
            continue
        if skip_years and _YEAR_RE.match(name):
            continue
        numbers = _numbers(cells[1:])
        if not numbers or name in seen:
            continue
        seen.add(name)
        scaled = numbers[0] * 1_000_000 if in_millions else numbers[0]
        segments.append(ExtractedSegment(name=name, value=float(scaled), tag=tag))
        if len(segments) >= GENERIC_MAX_SEGMENTS:
            break
    return segments


def _meta_segments(rows: list[list[str]], in_millions: bool) -> list[ExtractedSegment]:
    hints = SegmentHints(
        table_hint_regex=_META_REVENUE_HINT_RE,
        row_label_regex=_META_ROW_RE,
        max_segments=6,
        label_tag=META_TAG,
    )
    return _hinted_segments(rows, in_millions, hints)


def extract_segments_from_html(
    document: str, hints: Optional[SegmentHints] = None
) -> list[ExtractedSegment]:
    """Extract revenue segments from the tables of a filing document.

    Args:
        document: Raw HTML of the filing's primary document.
        hints: Optional ticker hints; tried before the generic heuristics.

    Returns:
        Segments in table order (or hint order), empty if nothing revenue-like
        was found. Hinted results that fail the revenue-likeness check
        short-circuit to an empty list.
    """
    tables = _parse(document).find_all("table")

    if hints is not None:
        for table in tables:
            table_text = _clean(table.get_text(" "))
            if not hints.table_hint_regex.search(table_text):
                continue
            segments = _hinted_segments(
                _row_cells(table), bool(_IN_MILLIONS_RE.search(table_text)), hints
            )
            if segments:
                ordered = order_segments_by_expected(segments, hints.expected_segments)
                return ordered if is_revenue_like_segment_set(ordered) else []

    for table in tables:
        table_text = _clean(table.get_text(" "))
        if not (
            _INCLUDE_TABLE_RE.search(table_text)
            or _META_REVENUE_HINT_RE.search(table_text)
        ):
            continue
        rows = _row_cells(table)
        in_millions = bool(_IN_MILLIONS_RE.search(table_text))

        if _META_ROW_RE.search(table_text):
            segments = _meta_segments(rows, in_millions)
            if segments and is_revenue_like_segment_set(segments):
                return segments

        header = next(
            (i for i, cells in enumerate(rows) if cells and _NET_REVENUE_HEADER_RE.match(cells[0])),
            None,
        )
        if header is not None:
            segments = _labelled_rows(
                rows[header + 1:], in_millions, NET_REVENUE_TAG, stop_at_total=True
            )
            if segments and is_revenue_like_segment_set(segments):
                return segments

        if not (
            _PRODUCT_HINT_RE.search(table_text)
            or _META_ROW_RE.search(table_text)
            or _NET_REVENUE_RE.search(table_text)
        ):
            continue
        segments = _labelled_rows(rows, in_millions, TABLE_TAG, skip_years=True)
        if segments and is_revenue_like_segment_set(segments):
            return segments

    return []


def extract_segments_from_text(text: str) -> list[ExtractedSegment]:
    """Best-effort extraction from text lines like ``"iPhone 209,586 201,183"``."""
    segments: list[ExtractedSegment] = []
    seen: set[str] = set()
    for line in (raw.strip() for raw in re.split(r"[\r\n]+", text)):
        if not line or _TEXT_TOTAL_RE.search(line):
            continue
        match = _TEXT_LINE_RE.match(line)
        if not match:
            continue
        name = _SPACE_RE.sub(" ", match.group(1)).strip()
        grouped = _GROUPED_NUMBER_RE.findall(line)
        if not grouped or not name or name in seen:
            continue
        seen.add(name)
        segments.append(
            ExtractedSegment(
                name=name, value=float(grouped[0].replace(",", "")), tag=TEXT_TAG
            )
        )
        if len(segments) >= GENERIC_MAX_SEGMENTS:
            break
    return segments


def extract_segments(
    document: str,
    hints: Optional[SegmentHints] = None,
    fallback_total: Optional[float] = None,
) -> tuple[list[ExtractedSegment], str]:
    """Run table extraction, then text extraction, and report which one hit.

    Args:
        document: Raw HTML of the filing's primary document.
        hints: Optional ticker hints for the table pass.
        fallback_total: Percentage base used when the segments sum to zero.

    Returns:
        ``(segments_with_percentages, source_label)``. The label is
        ``"Unavailable"`` when both passes come back empty.
    """
    segments = extract_segments_from_html(document, hints)
    if segments:
        return with_percentages(segments, fallback_total), TABLE_TAG
    segments = extract_segments_from_text(html_to_lines(document))
    if segments:
        return with_percentages(segments, fallback_total), TEXT_TAG
    return [], "Unavailable"
