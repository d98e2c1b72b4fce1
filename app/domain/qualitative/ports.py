"""
Port interfaces (ABCs) for the qualitative screening bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from app.domain.qualitative.entities import (
    QualitativeOverride,
    ScreeningSnapshot,
    SecFiling,
)


class QualitativeOverrideRepository(ABC):
    """Port for persisting and retrieving qualitative overrides."""

    @abstractmethod
    def list_all(self) -> list[QualitativeOverride]:
        """Return every override row ordered by ticker ascending.

        Raises:
            OverrideStoreError: If the store cannot be read.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, ticker: str) -> Optional[QualitativeOverride]:
        """Return the override for an uppercased ticker, or None."""
        raise NotImplementedError

    @abstractmethod
    def upsert(self, override: QualitativeOverride) -> None:
        """Insert or replace the override keyed by its ticker.

        Raises:
            OverrideStoreError: If the write is rejected.
        """
        raise NotImplementedError


class ScreeningPort(ABC):
    """Port for obtaining the current qualitative screening output of a ticker."""

    @abstractmethod
    def fetch(self, ticker: str) -> ScreeningSnapshot:
        """Return the current screening snapshot for a ticker.

        Raises:
            ScreeningFetchError: If the endpoint fails or is unreachable.
            ScreeningPayloadError: If the response does not match the schema.
        """
        raise NotImplementedError


class FilingSourcePort(ABC):
    """Port for locating and downloading annual filings."""

    @abstractmethod
    def latest_annual_filing(self, ticker: str) -> SecFiling:
        """Return the most recent annual filing (10-K, 20-F or 40-F).

        Raises:
            TickerNotFoundError: If the ticker has no registrant.
            FilingUnavailableError: If no annual filing exists.
        """
        raise NotImplementedError

    @abstractmethod
    def fetch_document(self, filing: SecFiling) -> str:
        """Return the raw HTML of the filing's primary document."""
        raise NotImplementedError

    @abstractmethod
    def fetch_company_facts(self, ticker: str) -> dict[str, Any]:
        """Return the ``facts`` object of the registrant's XBRL company facts.

        An empty dict means the registrant publishes no facts.

        Raises:
            TickerNotFoundError: If the ticker has no registrant.
            FilingUnavailableError: If the facts cannot be downloaded.
        """
        raise NotImplementedError
