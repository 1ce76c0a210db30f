"""Shared fixtures: an in-process fake of the SDN watchlist provider."""

import asyncio

import httpx
import pytest
import pytest_asyncio

from sdn_screening.services import SanctionsScreener, WatchlistClient


BASE_URL = "https://sdn.test"


def make_record(record_id: str, name: str, **fields) -> dict:
    """Provider-shaped record dict."""
    record = {
        "id": record_id,
        "schema": "Person",
        "name": name,
        "aliases": "",
        "birth_date": "1970-01-01",
        "countries": "ir",
        "addresses": "",
        "identifiers": "",
        "sanctions": "SDGT",
        "phones": "",
        "emails": "",
        "dataset": "us_ofac_sdn",
        "first_seen": "2023-01-01T00:00:00",
        "last_seen": "2024-06-01T00:00:00",
        "last_change": "2024-05-01T00:00:00",
    }
    record.update(fields)
    return record


class FakeProvider:
    """httpx handler that answers ``/getsdn`` by the ``name`` parameter.

    ``routes`` maps a name to ``(status, body)`` or to an exception to raise.
    Names without a route get ``default``. ``delays`` holds per-name sleeps
    so tests can force responses to complete out of order.
    """

    def __init__(self, routes=None, default=(200, []), delays=None):
        self.routes = routes or {}
        self.default = default
        self.delays = delays or {}
        self.requests: list[httpx.Request] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        name = request.url.params.get("name")

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(name, 0)
            if delay:
                await asyncio.sleep(delay)

            outcome = self.routes.get(name, self.default)
            if isinstance(outcome, Exception):
                raise outcome

            status, body = outcome
            if isinstance(body, (bytes, str)):
                return httpx.Response(status, content=body)
            return httpx.Response(status, json=body)
        finally:
            self.in_flight -= 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_params(self) -> dict:
        return dict(self.requests[-1].url.params)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest_asyncio.fixture
async def client(provider):
    watchlist = WatchlistClient(base_url=BASE_URL, transport=provider.transport)
    yield watchlist
    await watchlist.close()


@pytest_asyncio.fixture
async def screener(client):
    return SanctionsScreener(client=client, max_concurrent=5)
