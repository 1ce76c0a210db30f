"""Result shapes returned by the screening operations.

Failures are carried in the ``error`` field of each result rather than
raised, so every operation always hands back one of these objects.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..models import RiskLevel, WatchlistRecord


NON_EMPTY_BATCH_ERROR = "customerNames must be a non-empty array"
BLANK_NAME_ERROR = "customerName must be a non-empty string"


@dataclass(frozen=True)
class LookupQuery:
    """Parameters of one watchlist lookup."""
    name: Optional[str] = None
    country: Optional[str] = None
    limit: Optional[int] = 100     # pagination hint, None = not sent
    fuzzy: bool = False

    def to_params(self) -> dict[str, str]:
        """Query parameters for the provider, empty fields left out."""
        params = {}
        if self.name:
            params["name"] = self.name
        if self.country:
            params["country"] = self.country
        if self.limit:
            params["limit"] = str(self.limit)
        if self.fuzzy:
            params["fuzzy"] = "true"
        return params


@dataclass
class LookupResult:
    """Result of a watchlist lookup."""
    success: bool
    data: list[WatchlistRecord] = field(default_factory=list)
    count: int = 0
    error: Optional[str] = None

    @classmethod
    def ok(cls, records: list[WatchlistRecord]) -> "LookupResult":
        return cls(success=True, data=list(records), count=len(records))

    @classmethod
    def failed(cls, error: str) -> "LookupResult":
        return cls(success=False, data=[], count=0, error=error)

    def to_dict(self) -> dict:
        out = {
            "success": self.success,
            "data": [record.to_dict() for record in self.data],
            "count": self.count,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class CustomerCheckResult:
    """Outcome of screening a single name."""
    customer_name: str
    is_sdn: Optional[bool]          # None when the lookup failed
    risk_level: RiskLevel
    match_count: int = 0
    matches: list[WatchlistRecord] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_lookup(cls, customer_name: str, lookup: LookupResult) -> "CustomerCheckResult":
        """Apply the decision rule to a lookup outcome."""
        if not lookup.success:
            return cls.unknown(customer_name, lookup.error or "Unknown error")

        if lookup.data:
            return cls(
                customer_name=customer_name,
                is_sdn=True,
                risk_level=RiskLevel.CRITICAL,
                match_count=len(lookup.data),
                matches=list(lookup.data),
            )

        return cls(
            customer_name=customer_name,
            is_sdn=False,
            risk_level=RiskLevel.CLEAR,
        )

    @classmethod
    def unknown(cls, customer_name: str, error: str) -> "CustomerCheckResult":
        return cls(
            customer_name=customer_name,
            is_sdn=None,
            risk_level=RiskLevel.UNKNOWN,
            error=error,
        )

    def to_dict(self) -> dict:
        out = {
            "customerName": self.customer_name,
            "isSDN": self.is_sdn,
            "matchCount": self.match_count,
            "matches": [record.to_dict() for record in self.matches],
            "riskLevel": self.risk_level.value,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class BulkCheckSummary:
    """Tally of risk levels across a batch."""
    critical: int = 0
    clear: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.clear + self.unknown

    def to_dict(self) -> dict:
        return {
            "critical": self.critical,
            "clear": self.clear,
            "unknown": self.unknown,
        }


@dataclass
class BulkCheckResult:
    """Outcome of screening a batch of names."""
    success: bool
    total_checked: int = 0
    flagged_count: int = 0
    results: list[CustomerCheckResult] = field(default_factory=list)
    summary: BulkCheckSummary = field(default_factory=BulkCheckSummary)
    error: Optional[str] = None

    @classmethod
    def from_results(cls, results: list[CustomerCheckResult]) -> "BulkCheckResult":
        flagged = sum(1 for r in results if r.is_sdn is True)
        summary = BulkCheckSummary(
            critical=flagged,
            clear=sum(1 for r in results if r.risk_level == RiskLevel.CLEAR),
            unknown=sum(1 for r in results if r.risk_level == RiskLevel.UNKNOWN),
        )
        return cls(
            success=True,
            total_checked=len(results),
            flagged_count=flagged,
            results=list(results),
            summary=summary,
        )

    @classmethod
    def failed(cls, error: str) -> "BulkCheckResult":
        return cls(success=False, error=error)

    def unknown_names(self) -> list[str]:
        """Names whose lookup failed, in input order, for a follow-up batch."""
        return [
            r.customer_name for r in self.results
            if r.risk_level == RiskLevel.UNKNOWN
        ]

    def to_dict(self) -> dict:
        out = {
            "success": self.success,
            "totalChecked": self.total_checked,
            "flaggedCount": self.flagged_count,
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary.to_dict(),
        }
        if self.error is not None:
            out["error"] = self.error
        return out
