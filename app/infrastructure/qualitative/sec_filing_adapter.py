"""
Adapter: SEC EDGAR filing source.

Implements FilingSourcePort against the public EDGAR endpoints:
    - ``www.sec.gov/files/company_tickers.json``   ticker -> CIK map
    - ``data.sec.gov/submissions/CIK##########.json``   recent filings
    - ``data.sec.gov/api/xbrl/companyfacts/CIK##########.json``   XBRL facts
    - ``www.sec.gov/Archives/edgar/data/...``      primary documents

SEC fair-access rules require a descriptive User-Agent and a modest
request rate; every request goes through a shared throttle. The
ticker map is large and changes rarely, so it is held in a TTLCache.
"""

import logging
import time
from collections.abc import Callable
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app.domain.qualitative.entities import SecFiling
from app.domain.qualitative.errors import FilingUnavailableError, TickerNotFoundError
from app.domain.qualitative.ports import FilingSourcePort
from app.shared.cache import Clock, TTLCache

logger = logging.getLogger(__name__)

SEC_BASE_DATA = "https://data.sec.gov"
SEC_BASE_WWW = "https://www.sec.gov"
ANNUAL_FORMS = ("10-K", "20-F", "40-F")
TICKER_MAP_KEY = "ticker_cik_map"


class _RecentFilings(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    form: list[str] = Field(default_factory=list)
    accession_number: list[str] = Field(default_factory=list, alias="accessionNumber")
    primary_document: list[str] = Field(default_factory=list, alias="primaryDocument")
    filing_date: list[str] = Field(default_factory=list, alias="filingDate")


class _Filings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    recent: Optional[_RecentFilings] = None


class _Submissions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    filings: Optional[_Filings] = None


def normalize_cik(cik: str) -> str:
    """Left-pad a CIK to the ten digits EDGAR URLs expect."""
    return cik.zfill(10)


def parse_ticker_map(body: Any) -> dict[str, str]:
    """Build ``TICKER -> cik`` from either EDGAR ticker file layout.

    ``company_tickers.json`` is ``{"0": {"cik_str": .., "ticker": ..}, ...}``;
    ``company_tickers_exchange.json`` is ``{"fields": [...], "data": [[...]]}``.
    """
    mapping: dict[str, str] = {}
    if not isinstance(body, dict):
        return mapping
    if isinstance(body.get("fields"), list) and isinstance(body.get("data"), list):
        fields = body["fields"]
        if "cik" in fields and "ticker" in fields:
            cik_at, ticker_at = fields.index("cik"), fields.index("ticker")
            for row in body["data"]:
                if isinstance(row, list) and len(row) > max(cik_at, ticker_at):
                    if row[ticker_at] and row[cik_at]:
                        mapping[str(row[ticker_at]).upper()] = str(row[cik_at])
        return mapping
    for row in body.values():
        if isinstance(row, dict) and row.get("ticker") and row.get("cik_str"):
            mapping[str(row["ticker"]).upper()] = str(row["cik_str"])
    return mapping


def select_latest_annual_filing(cik: str, body: Any) -> Optional[SecFiling]:
    """Pick the first 10-K (else 20-F, else 40-F) among the recent filings.

    Recent filings are listed newest first, so the first match per form
    is the latest of that form.
    """
    try:
        submissions = _Submissions.model_validate(body)
    except ValidationError:
        logger.warning("Unexpected submissions payload for CIK %s", cik)
        return None

    recent = submissions.filings.recent if submissions.filings else None
    if recent is None or not recent.form or not recent.accession_number:
        return None

    index = next(
        (recent.form.index(form) for form in ANNUAL_FORMS if form in recent.form),
        None,
    )
    if index is None:
        return None
    try:
        accession = recent.accession_number[index]
        primary_document = recent.primary_document[index]
        filed_at = recent.filing_date[index]
    except IndexError:
        return None

    url = (
        f"{SEC_BASE_WWW}/Archives/edgar/data/{int(cik)}/"
        f"{accession.replace('-', '')}/{primary_document}"
    )
    return SecFiling(
        url=url,
        filed_at=filed_at,
        accession=accession,
        primary_document=primary_document,
    )


class SecEdgarFilingAdapter(FilingSourcePort):
    """EDGAR-backed filing source with a request throttle and cached ticker map.

    Args:
        user_agent: Contact string sent as User-Agent, required by the SEC.
        min_interval_seconds: Minimum spacing between two requests.
        ticker_map_cache: Cache for the ticker -> CIK map.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used to stub the network in tests.
        clock: Seconds source for the throttle.
        sleep: Sleep function for the throttle.
    """

    def __init__(
        self,
        user_agent: str,
        min_interval_seconds: float = 0.2,
        ticker_map_cache: Optional[TTLCache[dict[str, str]]] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
        clock: Clock = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._user_agent = user_agent
        self._min_interval = min_interval_seconds
        self._ticker_cache = (
            ticker_map_cache if ticker_map_cache is not None else TTLCache(24 * 60 * 60)
        )
        self._timeout = timeout
        self._transport = transport
        self._clock = clock
        self._sleep = sleep
        self._last_request_at: Optional[float] = None

    # ------------------------------------------------------------------
    # FilingSourcePort
    # ------------------------------------------------------------------

    def latest_annual_filing(self, ticker: str) -> SecFiling:
        cik = self._resolve_cik(ticker)
        url = f"{SEC_BASE_DATA}/submissions/CIK{normalize_cik(cik)}.json"
        try:
            body = self._get(url, accept="application/json").json()
        except (httpx.HTTPError, ValueError) as exc:
            raise FilingUnavailableError(ticker, str(exc)) from exc

        filing = select_latest_annual_filing(cik, body)
        if filing is None:
            raise FilingUnavailableError(ticker, "no annual report in recent filings")
        logger.info("Latest annual filing for %s: %s (%s)", ticker, filing.accession, filing.filed_at)
        return filing

    def fetch_document(self, filing: SecFiling) -> str:
        try:
            return self._get(filing.url, accept="text/html").text
        except httpx.HTTPError as exc:
            raise FilingUnavailableError(filing.accession, str(exc)) from exc

    def fetch_company_facts(self, ticker: str) -> dict[str, Any]:
        cik = self._resolve_cik(ticker)
        url = f"{SEC_BASE_DATA}/api/xbrl/companyfacts/CIK{normalize_cik(cik)}.json"
        try:
            body = self._get(url, accept="application/json").json()
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                logger.info("No XBRL company facts published for %s", ticker)
                return {}
            raise FilingUnavailableError(ticker, f"company facts: {exc}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise FilingUnavailableError(ticker, f"company facts: {exc}") from exc
        facts = body.get("facts") if isinstance(body, dict) else None
        return facts if isinstance(facts, dict) else {}

    # ------------------------------------------------------------------
    # Ticker map
    # ------------------------------------------------------------------

    def get_cik(self, ticker: str) -> Optional[str]:
        """Return the CIK for a ticker, or None if EDGAR does not list it."""
        mapping = self._ticker_cache.get_or_set(TICKER_MAP_KEY, self._load_ticker_map)
        return mapping.get(ticker.upper())

    def _resolve_cik(self, ticker: str) -> str:
        try:
            cik = self.get_cik(ticker)
        except (httpx.HTTPError, ValueError) as exc:
            raise FilingUnavailableError(ticker, f"ticker map unavailable: {exc}") from exc
        if cik is None:
            raise TickerNotFoundError(ticker)
        return cik

    def _load_ticker_map(self) -> dict[str, str]:
        try:
            body = self._get(f"{SEC_BASE_WWW}/files/company_tickers.json").json()
        except (httpx.HTTPError, ValueError):
            logger.warning("company_tickers.json unavailable, trying exchange file")
            body = self._get(f"{SEC_BASE_WWW}/files/company_tickers_exchange.json").json()
        mapping = parse_ticker_map(body)
        logger.info("Loaded %d tickers from EDGAR", len(mapping))
        return mapping

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    def _throttle(self) -> None:
        now = self._clock()
        if self._last_request_at is not None:
            wait = self._min_interval - (now - self._last_request_at)
            if wait > 0:
                self._sleep(wait)
        self._last_request_at = self._clock()

    def _get(self, url: str, accept: str = "application/json") -> httpx.Response:
        self._throttle()
        headers = {
            "User-Agent": self._user_agent,
            "Accept-Encoding": "gzip, deflate",
            "Accept": accept,
        }
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            response = client.get(url, headers=headers)
        response.raise_for_status()
        return response
