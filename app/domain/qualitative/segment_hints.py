"""
Per-ticker segment hints for annual filing tables.

Each entry tells the extractor which table holds the revenue
breakdown (``table_hint_regex``), which rows are segments
(``row_label_regex`` / ``row_exclude_regex``), how to tag the result,
and in which order the segments are expected to appear.
"""

import re
from typing import Optional

from app.domain.qualitative.entities import SegmentHints

_I = re.IGNORECASE


def _rx(pattern: str) -> re.Pattern:
    return re.compile(pattern, _I)


_GOOGLE_HINTS = SegmentHints(
    table_hint_regex=_rx(
        r"(revenues?\s+by\s+type|google\s+search|youtube|google\s+cloud"
        r"|other\s+bets|google\s+network)"
    ),
    row_label_regex=_rx(
        r"(google\s+search|youtube|google\s+network|google\s+advertising"
        r"|google\s+subscriptions|platforms|devices|google\s+cloud|other\s+bets"
        r"|hedging\s+gains)"
    ),
    row_exclude_regex=_rx(
        r"(google\s+services\s+total|total\s+revenues?|google\s+advertising)"
    ),
    max_segments=12,
    label_tag="10-K table (google revenues by type)",
    expected_segments=(
        "Google Search & other",
        "YouTube ads",
        "Google Network",
        "Google subscriptions, platforms, and devices",
        "Google Cloud",
        "Other Bets",
        "Hedging gains (losses)",
    ),
)

SEGMENT_HINTS: dict[str, SegmentHints] = {
    "META": SegmentHints(
        table_hint_regex=_rx(
            r"(revenue\s+by\s+source|revenues?\s+by\s+type|advertising"
            r"|family\s+of\s+apps|reality\s+labs|other\s+revenue)"
        ),
        row_label_regex=_rx(
            r"(advertising|other\s+revenue|family\s+of\s+apps|reality\s+labs)"
        ),
        max_segments=6,
        label_tag="10-K table (meta revenue by type)",
        expected_segments=(
            "Advertising",
            "Other revenue",
            "Family of apps",
            "Reality Labs",
        ),
    ),
    "GOOGL": _GOOGLE_HINTS,
    "GOOG": _GOOGLE_HINTS,
    "NFLX": SegmentHints(
        table_hint_regex=_rx(r"(streaming\s+revenues?|dvd\s+revenues?)"),
        row_label_regex=_rx(r"(streaming\s+revenues?|dvd\s+revenues?)"),
        max_segments=6,
        label_tag="10-K table (netflix revenue by type)",
        expected_segments=("Streaming revenues", "DVD revenues"),
        prefer_max_value=True,
    ),
    "AAPL": SegmentHints(
        table_hint_regex=_rx(
            r"(net\s+sales|revenue\s+by\s+product|net\s+sales\s+by\s+product"
            r"|net\s+sales\s+by\s+reportable\s+segment)"
        ),
        row_label_regex=_rx(
            r"(iphone|mac|ipad|wearables|services|accessories"
            r"|home\s+and\s+accessories)"
        ),
        row_exclude_regex=_rx(r"(total|net\s+sales)"),
        max_segments=8,
        label_tag="10-K table (apple net sales by product)",
        expected_segments=(
            "iPhone",
            "Mac",
            "iPad",
            "Wearables, Home and Accessories",
            "Services",
        ),
    ),
    "NVDA": SegmentHints(
        table_hint_regex=_rx(
            r"(revenue\s+by\s+reportable\s+segments|reportable\s+segments)"
        ),
        row_label_regex=_rx(
            r"(compute\s+&\s+networking|compute\s+and\s+networking|graphics)"
        ),
        row_exclude_regex=_rx(
            r"(total|operating\s+income"
            r"|operating\s+income\s+by\s+reportable\s+segments)"
        ),
        max_segments=4,
        label_tag="10-K table (nvda reportable segments)",
        expected_segments=("Compute & Networking", "Graphics"),
    ),
    "MSFT": SegmentHints(
        table_hint_regex=_rx(
            r"(revenue,\s+classified\s+by\s+significant\s+product\s+and\s+service"
            r"\s+offerings|significant\s+product\s+and\s+service\s+offerings"
            r"|revenue\s+by\s+significant\s+product\s+and\s+service"
            r"|significant\s+product\s+and\s+service.*revenue)"
        ),
        row_label_regex=_rx(
            r"(server\s+products\s+and\s+cloud\s+services"
            r"|microsoft\s+365\s+commercial\s+products\s+and\s+cloud\s+services"
            r"|gaming|linkedin|windows\s+and\s+devices"
            r"|search\s+and\s+news\s+advertising"
            r"|dynamics\s+products\s+and\s+cloud\s+services"
            r"|enterprise\s+and\s+partner\s+services"
            r"|microsoft\s+365\s+consumer\s+products\s+and\s+cloud\s+services"
            r"|other)"
        ),
        row_exclude_regex=_rx(r"(total|growth|%)"),
        max_segments=12,
        label_tag="10-K table (msft revenue by offering)",
        expected_segments=(
            "Server products and cloud services",
            "Microsoft 365 Commercial products and cloud services",
            "Gaming",
            "LinkedIn",
            "Windows and Devices",
            "Search and news advertising",
            "Dynamics products and cloud services",
            "Enterprise and partner services",
            "Microsoft 365 Consumer products and cloud services",
            "Other",
        ),
    ),
    "ADBE": SegmentHints(
        table_hint_regex=_rx(r"(revenue|subscription|product|services\s+and\s+other)"),
        row_label_regex=_rx(r"(subscription|product|services\s+and\s+other)"),
        row_exclude_regex=_rx(r"(total\s+revenue|percentage)"),
        max_segments=4,
        label_tag="10-K table (adobe revenue by type)",
        expected_segments=("Subscription", "Product", "Services and other"),
    ),
    "ABBV": SegmentHints(
        table_hint_regex=_rx(
            r"(net\s+revenues?|product\s+revenues?|immunology|neuroscience"
            r"|oncology|aesthetics|eye\s+care)"
        ),
        row_label_regex=_rx(
            r"(immunology|neuroscience|oncology|aesthetics|eye\s+care"
            r"|other\s+key\s+products|all\s+other)"
        ),
        row_exclude_regex=_rx(r"(total|net\s+revenues?$|percentage)"),
        max_segments=10,
        label_tag="10-K table (abbvie revenue by therapeutic area)",
        expected_segments=(
            "Immunology",
            "Neuroscience",
            "Oncology",
            "Aesthetics",
            "Eye Care",
            "Other Key Products",
            "All Other",
        ),
    ),
    "ABNB": SegmentHints(
        table_hint_regex=_rx(r"(revenue|marketplace|platform|service\s+fees?)"),
        row_label_regex=_rx(
            r"(marketplace\s+platform|service\s+fees?|platform\s+revenue)"
        ),
        row_exclude_regex=_rx(r"(total|percentage)"),
        max_segments=3,
        label_tag="10-K table (airbnb revenue)",
        expected_segments=("Marketplace Platform Revenue",),
    ),
    "COST": SegmentHints(
        table_hint_regex=_rx(r"(net\s+sales|membership\s+fees?|revenue)"),
        row_label_regex=_rx(r"(net\s+sales|membership\s+fees?)"),
        row_exclude_regex=_rx(r"(total\s+revenue|percentage)"),
        max_segments=4,
        label_tag="10-K table (costco revenue)",
        expected_segments=("Net Sales", "Membership Fees"),
    ),
    "XOM": SegmentHints(
        table_hint_regex=_rx(
            r"(earnings\s+by\s+segment|segment\s+earnings|upstream"
            r"|energy\s+products|chemical\s+products|specialty\s+products)"
        ),
        row_label_regex=_rx(
            r"(upstream|energy\s+products|chemical\s+products|specialty\s+products)"
        ),
        row_exclude_regex=_rx(r"(total|corporate|financing|eliminations)"),
        max_segments=6,
        label_tag="10-K table (exxon segment earnings)",
        expected_segments=(
            "Upstream",
            "Energy Products",
            "Chemical Products",
            "Specialty Products",
        ),
    ),
    "AMZN": SegmentHints(
        table_hint_regex=_rx(
            r"(net\s+sales|revenue\s+by\s+segment|north\s+america|international"
            r"|aws|amazon\s+web\s+services)"
        ),
        row_label_regex=_rx(
            r"(north\s+america|international|aws|amazon\s+web\s+services)"
        ),
        row_exclude_regex=_rx(r"(total|consolidated|eliminations)"),
        max_segments=5,
        label_tag="10-K table (amazon revenue by segment)",
        expected_segments=("North America", "International", "AWS"),
    ),
    "DIS": SegmentHints(
        table_hint_regex=_rx(r"(revenues?\s+by\s+segment|entertainment|sports|experiences)"),
        row_label_regex=_rx(
            r"(entertainment|sports|experiences|direct-to-consumer"
            r"|linear\s+networks|content\s+sales|parks)"
        ),
        row_exclude_regex=_rx(r"(total|eliminations|corporate)"),
        max_segments=8,
        label_tag="10-K table (disney revenue by segment)",
        expected_segments=("Entertainment", "Sports", "Experiences"),
    ),
    "JNJ": SegmentHints(
        table_hint_regex=_rx(
            r"(sales\s+by\s+segment|net\s+sales|innovative\s+medicine|medtech)"
        ),
        row_label_regex=_rx(
            r"(innovative\s+medicine|medtech|pharmaceutical|medical\s+devices)"
        ),
        row_exclude_regex=_rx(r"(total|consumer\s+health|worldwide)"),
        max_segments=4,
        label_tag="10-K table (jnj revenue by segment)",
        expected_segments=("Innovative Medicine", "MedTech"),
    ),
    "MA": SegmentHints(
        table_hint_regex=_rx(
            r"(net\s+revenue|payment\s+network|value.added\s+services"
            r"|domestic\s+assessments|cross.border)"
        ),
        row_label_regex=_rx(
            r"(payment\s+network|value.added\s+services|domestic\s+assessments"
            r"|cross.border\s+volume|transaction\s+processing|other\s+revenues?"
            r"|rebates|incentives)"
        ),
        row_exclude_regex=_rx(r"(total|net\s+revenue$)"),
        max_segments=8,
        label_tag="10-K table (mastercard net revenue)",
        expected_segments=("Payment Network", "Value-Added Services and Solutions"),
    ),
    "V": SegmentHints(
        table_hint_regex=_rx(
            r"(net\s+revenues?|service\s+revenues?|data\s+processing"
            r"|international\s+transaction|other\s+revenues?)"
        ),
        row_label_regex=_rx(
            r"(service\s+revenues?|data\s+processing\s+revenues?"
            r"|international\s+transaction\s+revenues?|other\s+revenues?"
            r"|client\s+incentives)"
        ),
        row_exclude_regex=_rx(r"(total|net\s+revenues?$)"),
        max_segments=6,
        label_tag="10-K table (visa net revenue)",
        expected_segments=(
            "Service revenues",
            "Data processing revenues",
            "International transaction revenues",
            "Other revenues",
        ),
    ),
    "TSLA": SegmentHints(
        table_hint_regex=_rx(
            r"(revenues?\s+by\s+source|automotive|energy\s+generation"
            r"|services\s+and\s+other)"
        ),
        row_label_regex=_rx(
            r"(automotive\s+sales|automotive\s+regulatory\s+credits"
            r"|automotive\s+leasing|energy\s+generation\s+and\s+storage"
            r"|services\s+and\s+other)"
        ),
        row_exclude_regex=_rx(r"(total|revenues?$)"),
        max_segments=8,
        label_tag="10-K table (tesla revenue by source)",
        expected_segments=(
            "Automotive sales",
            "Automotive regulatory credits",
            "Automotive leasing",
            "Energy generation and storage",
            "Services and other",
        ),
    ),
    "WMT": SegmentHints(
        table_hint_regex=_rx(
            r"(net\s+sales|revenues?\s+by\s+segment|walmart\s+u\.?s\.?"
            r"|walmart\s+international|sam'?s\s+club)"
        ),
        row_label_regex=_rx(r"(walmart\s+u\.?s\.?|walmart\s+international|sam'?s\s+club)"),
        row_exclude_regex=_rx(r"(total|consolidated|net\s+sales$)"),
        max_segments=5,
        label_tag="10-K table (walmart revenue by segment)",
        expected_segments=("Walmart U.S.", "Walmart International", "Sam's Club"),
    ),
    "AMD": SegmentHints(
        table_hint_regex=_rx(
            r"(net\s+revenue|revenue\s+by\s+segment|data\s+center|client"
            r"|gaming|embedded)"
        ),
        row_label_regex=_rx(r"(data\s+center|client|gaming|embedded)"),
        row_exclude_regex=_rx(r"(total|net\s+revenue$|operating\s+income)"),
        max_segments=5,
        label_tag="10-K table (amd revenue by segment)",
        expected_segments=("Data Center", "Client", "Gaming", "Embedded"),
    ),
    "AMT": SegmentHints(
        table_hint_regex=_rx(
            r"(revenue|property|services|u\.?s\.?\s*&?\s*canada|latin\s+america"
            r"|europe|africa|apac|data\s+centers?)"
        ),
        row_label_regex=_rx(
            r"(u\.?s\.?\s*&?\s*canada|latin\s+america|africa\s*&?\s*apac|europe"
            r"|data\s+centers?|services|total\s+property)"
        ),
        row_exclude_regex=_rx(r"(total\s+revenues?$|percentage)"),
        max_segments=8,
        label_tag="10-K table (american tower revenue by region)",
        expected_segments=(
            "U.S. & Canada",
            "Latin America",
            "Africa & APAC",
            "Europe",
            "Data Centers",
            "Services",
        ),
    ),
    "CSCO": SegmentHints(
        table_hint_regex=_rx(r"(revenue|product|services)"),
        row_label_regex=_rx(r"(product|services)"),
        row_exclude_regex=_rx(r"(total|percentage)"),
        max_segments=4,
        label_tag="10-K table (cisco revenue by type)",
        expected_segments=("Product", "Services"),
    ),
    "AVGO": SegmentHints(
        table_hint_regex=_rx(r"(net\s+revenue|products?|subscriptions?\s+and\s+services)"),
        row_label_regex=_rx(r"(products?|subscriptions?\s+and\s+services)"),
        row_exclude_regex=_rx(r"(total|percentage)"),
        max_segments=4,
        label_tag="10-K table (broadcom revenue by type)",
        expected_segments=("Products", "Subscriptions and services"),
    ),
}


def get_segment_hints(ticker: Optional[str]) -> Optional[SegmentHints]:
    """Return the hints registered for a ticker, or None."""
    if not ticker:
        return None
    return SEGMENT_HINTS.get(ticker.upper())
