"""
Adapter: Screening endpoint client.

Implements ScreeningPort over HTTP. The response body is validated
against explicit pydantic models at the boundary; anything that does
not match becomes a ScreeningPayloadError tagged with the offending
field path instead of leaking loosely-typed JSON into the domain.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.domain.qualitative.entities import ScreeningSnapshot, Segment
from app.domain.qualitative.errors import ScreeningFetchError, ScreeningPayloadError
from app.domain.qualitative.ports import ScreeningPort

logger = logging.getLogger(__name__)


class _SegmentPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    value: float


class _QualitativePayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    segment_breakdown: Optional[list[_SegmentPayload]] = Field(
        default=None, alias="segmentBreakdown"
    )
    segment_total: Optional[float] = Field(default=None, alias="segmentTotal")


class _FilingPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    filed_at: Optional[str] = Field(default=None, alias="filedAt")


class ScreeningPayload(BaseModel):
    """Subset of the screening response this service relies on."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    qualitative: Optional[_QualitativePayload] = None
    sec_filing: Optional[_FilingPayload] = Field(default=None, alias="secFiling")


def parse_screening_payload(ticker: str, body: object) -> ScreeningSnapshot:
    """Validate a decoded screening response and map it to a snapshot.

    A missing or null ``segmentBreakdown`` maps to an empty breakdown so
    that callers report "no segments" rather than a malformed payload.

    Raises:
        ScreeningPayloadError: With the dotted location of the first error.
    """
    try:
        payload = ScreeningPayload.model_validate(body)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
        raise ScreeningPayloadError(ticker, location, first.get("msg", "invalid")) from exc

    qualitative = payload.qualitative or _QualitativePayload()
    return ScreeningSnapshot(
        ticker=ticker,
        segment_breakdown=[
            Segment(name=s.name, value=s.value)
            for s in qualitative.segment_breakdown or []
        ],
        segment_total=qualitative.segment_total,
        filed_at=payload.sec_filing.filed_at if payload.sec_filing else None,
    )


class HttpScreeningClient(ScreeningPort):
    """Fetches ``GET {base_url}/screening/{ticker}``.

    Args:
        base_url: Root of the screening API (e.g. ``http://host/api/v1``).
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used to stub the network in tests.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def fetch(self, ticker: str) -> ScreeningSnapshot:
        url = f"{self._base_url}/screening/{quote(ticker, safe='')}"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            logger.warning("Screening request failed for %s: %s", ticker, type(exc).__name__)
            raise ScreeningFetchError(ticker, str(exc)) from exc

        if response.status_code >= 400:
            logger.warning(
                "Screening endpoint returned %d for %s", response.status_code, ticker
            )
            raise ScreeningFetchError(ticker, f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise ScreeningPayloadError(ticker, "<root>", "response is not JSON") from exc

        return parse_screening_payload(ticker, body)
