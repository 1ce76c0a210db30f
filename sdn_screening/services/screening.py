"""Sanctions screening service."""

import asyncio
import time
from typing import Optional, Sequence

import structlog

from ..config import get_settings
from .results import (
    BLANK_NAME_ERROR,
    NON_EMPTY_BATCH_ERROR,
    BulkCheckResult,
    CustomerCheckResult,
    LookupQuery,
    LookupResult,
)
from .watchlist import WatchlistClient

logger = structlog.get_logger()


class SanctionsScreener:
    """Screen customer names against the SDN watchlist."""

    def __init__(
        self,
        client: Optional[WatchlistClient] = None,
        max_concurrent: Optional[int] = None,
    ):
        self.settings = get_settings()
        self.client = client or WatchlistClient()
        if max_concurrent is None:
            max_concurrent = self.settings.max_concurrent
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self.max_concurrent = max_concurrent

    async def get_sdn_data(
        self,
        name: Optional[str] = None,
        country: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> LookupResult:
        """Fetch watchlist records by name and/or country."""
        if limit is None:
            limit = self.settings.default_limit
        return await self.client.lookup(
            LookupQuery(name=name, country=country, limit=limit)
        )

    async def check_customer(
        self,
        customer_name: str,
        fuzzy_match: bool = True
    ) -> CustomerCheckResult:
        """Check a single name against the watchlist.

        Fuzzy/alias matching is done by the provider; ``fuzzy_match`` only
        asks for it. Any record returned counts as a match.
        """
        if not isinstance(customer_name, str) or not customer_name.strip():
            logger.warning("Rejected SDN check", reason=BLANK_NAME_ERROR)
            return CustomerCheckResult.unknown(customer_name, BLANK_NAME_ERROR)

        lookup = await self.client.lookup(
            LookupQuery(name=customer_name, limit=None, fuzzy=fuzzy_match)
        )
        result = CustomerCheckResult.from_lookup(customer_name, lookup)

        if result.is_sdn:
            logger.warning(
                "SDN match found",
                customer_name=customer_name,
                match_count=result.match_count,
            )
        return result

    async def bulk_check(self, customer_names: Sequence[str]) -> BulkCheckResult:
        """Check many names concurrently, fuzzy matching always on.

        Results keep the input order. A failed lookup only marks that name
        UNKNOWN; the batch itself still succeeds.
        """
        if (
            not isinstance(customer_names, (list, tuple))
            or len(customer_names) == 0
        ):
            logger.warning("Rejected bulk SDN check", reason=NON_EMPTY_BATCH_ERROR)
            return BulkCheckResult.failed(NON_EMPTY_BATCH_ERROR)

        start_time = time.monotonic()
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def check_with_semaphore(name: str) -> CustomerCheckResult:
            async with semaphore:
                return await self.check_customer(name, True)

        try:
            results = await asyncio.gather(
                *(check_with_semaphore(name) for name in customer_names)
            )
        except Exception as e:
            logger.exception("Error in bulk SDN check", total=len(customer_names))
            return BulkCheckResult.failed(str(e) or "Unknown error")

        bulk = BulkCheckResult.from_results(results)

        logger.info(
            "Bulk SDN check completed",
            total=bulk.total_checked,
            flagged=bulk.flagged_count,
            unknown=bulk.summary.unknown,
            elapsed_ms=int((time.monotonic() - start_time) * 1000),
        )
        return bulk

    async def close(self):
        await self.client.close()


# Singleton instance
_screener: Optional[SanctionsScreener] = None


def get_screener() -> SanctionsScreener:
    """Get the screener singleton."""
    global _screener
    if _screener is None:
        _screener = SanctionsScreener()
    return _screener


async def close_screener():
    """Close and drop the screener singleton."""
    global _screener
    if _screener is not None:
        await _screener.close()
        _screener = None
