"""Client for the remote SDN watchlist provider."""

from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from ..config import get_settings
from ..models import WatchlistRecord
from .results import LookupQuery, LookupResult

logger = structlog.get_logger()


LOOKUP_PATH = "/getsdn"


class WatchlistError(Exception):
    """Base error raised inside the client while performing a lookup."""


class WatchlistTransportError(WatchlistError):
    """Provider unreachable, timed out, or answered with a non-2xx status."""


class WatchlistPayloadError(WatchlistError):
    """Provider answered 2xx but the body could not be interpreted."""


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


class WatchlistClient:
    """Issue name/country lookups against the provider's ``/getsdn`` endpoint.

    One request per lookup, no retries and no caching. ``lookup`` never
    raises: every failure is returned as an unsuccessful ``LookupResult``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.sdn_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )

    async def lookup(self, query: LookupQuery) -> LookupResult:
        """Look up watchlist records matching ``query``."""
        try:
            records = await self._fetch(query)
        except WatchlistError as e:
            logger.error(
                "SDN lookup failed",
                name=query.name,
                country=query.country,
                error=str(e),
            )
            return LookupResult.failed(str(e))
        except Exception as e:
            logger.exception("Unexpected error during SDN lookup", name=query.name)
            return LookupResult.failed(_describe(e))

        logger.debug("SDN lookup completed", name=query.name, count=len(records))
        return LookupResult.ok(records)

    async def _fetch(self, query: LookupQuery) -> list[WatchlistRecord]:
        try:
            response = await self.client.get(LOOKUP_PATH, params=query.to_params())
        except httpx.HTTPError as e:
            raise WatchlistTransportError(_describe(e)) from e

        if not response.is_success:
            reason = response.reason_phrase or str(response.status_code)
            raise WatchlistTransportError(f"SDN API request failed: {reason}")

        try:
            payload = response.json()
        except ValueError as e:
            raise WatchlistPayloadError("SDN API returned invalid JSON") from e

        return self._parse(payload)

    def _parse(self, payload) -> list[WatchlistRecord]:
        if not isinstance(payload, list):
            logger.warning(
                "SDN API returned a non-array body, treating as no matches",
                body_type=type(payload).__name__,
            )
            return []

        records = []
        for index, item in enumerate(payload):
            try:
                records.append(WatchlistRecord.model_validate(item))
            except ValidationError as e:
                raise WatchlistPayloadError(
                    f"SDN API returned malformed record at index {index}: "
                    f"{e.error_count()} validation error(s)"
                ) from e
        return records

    async def close(self):
        await self.client.aclose()

    async def __aenter__(self) -> "WatchlistClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()
