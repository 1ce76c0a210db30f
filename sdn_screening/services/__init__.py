"""SDN screening services."""

from .results import (
    LookupQuery,
    LookupResult,
    CustomerCheckResult,
    BulkCheckSummary,
    BulkCheckResult,
)
from .watchlist import (
    WatchlistClient,
    WatchlistError,
    WatchlistTransportError,
    WatchlistPayloadError,
)
from .screening import SanctionsScreener, get_screener, close_screener

__all__ = [
    "LookupQuery",
    "LookupResult",
    "CustomerCheckResult",
    "BulkCheckSummary",
    "BulkCheckResult",
    "WatchlistClient",
    "WatchlistError",
    "WatchlistTransportError",
    "WatchlistPayloadError",
    "SanctionsScreener",
    "get_screener",
    "close_screener",
]
