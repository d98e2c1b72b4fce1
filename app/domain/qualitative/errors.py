"""
Domain-specific errors for the qualitative screening bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""

NO_SEGMENTS_MESSAGE = "No segments available to lock"
SCREENING_FETCH_MESSAGE = "Failed to fetch screening data"


class QualitativeDomainError(Exception):
    """Base error for all qualitative screening domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidTickerError(QualitativeDomainError):
    """Raised when a ticker symbol is empty or malformed."""

    def __init__(self, ticker: str) -> None:
        super().__init__(f"Invalid ticker: {ticker!r}")
        self.ticker = ticker


class MissingOverrideFieldsError(QualitativeDomainError):
    """Raised when an override is submitted without a ticker or segments."""

    def __init__(self) -> None:
        super().__init__("Missing ticker or segments")


class NoSegmentsAvailableError(QualitativeDomainError):
    """Raised when a lock is requested but there is no segment breakdown."""

    def __init__(self, ticker: str) -> None:
        super().__init__(NO_SEGMENTS_MESSAGE)
        self.ticker = ticker


class ScreeningFetchError(QualitativeDomainError):
    """Raised when the screening endpoint cannot be reached or errors out."""

    def __init__(self, ticker: str, reason: str = "") -> None:
        super().__init__(SCREENING_FETCH_MESSAGE)
        self.ticker = ticker
        self.reason = reason


class ScreeningPayloadError(QualitativeDomainError):
    """Raised when a screening payload does not match the expected schema.

    ``location`` is the dotted path of the first offending field.
    """

    def __init__(self, ticker: str, location: str, reason: str) -> None:
        super().__init__(f"Malformed screening payload at {location}: {reason}")
        self.ticker = ticker
        self.location = location
        self.reason = reason


class OverrideStoreError(QualitativeDomainError):
    """Raised when the override store rejects a read or write."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class TickerNotFoundError(QualitativeDomainError):
    """Raised when a ticker is unknown to the filing source."""

    def __init__(self, ticker: str) -> None:
        super().__init__(f"Ticker not found: {ticker}")
        self.ticker = ticker


class FilingUnavailableError(QualitativeDomainError):
    """Raised when no annual filing can be located or downloaded."""

    def __init__(self, ticker: str, reason: str = "") -> None:
        super().__init__(f"No annual filing available for {ticker}")
        self.ticker = ticker
        self.reason = reason


class AdminAuthError(QualitativeDomainError):
    """Raised when an admin session is missing, invalid or not configured."""
