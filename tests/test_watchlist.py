"""Tests for the watchlist provider client."""

import httpx
import pytest

from sdn_screening.config import get_settings
from sdn_screening.services import LookupQuery, WatchlistClient

from .conftest import BASE_URL, FakeProvider, make_record


class TestLookupRequest:
    """What goes over the wire"""

    @pytest.mark.asyncio
    async def test_sends_single_get_to_getsdn(self, client, provider):
        await client.lookup(LookupQuery(name="Jane Doe", country="us", limit=10))

        assert len(provider.requests) == 1
        request = provider.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/getsdn"
        assert provider.last_params == {"name": "Jane Doe", "country": "us", "limit": "10"}

    @pytest.mark.asyncio
    async def test_omits_empty_fields(self, client, provider):
        await client.lookup(LookupQuery(country="ir"))
        assert provider.last_params == {"country": "ir", "limit": "100"}

    @pytest.mark.asyncio
    async def test_fuzzy_flag(self, client, provider):
        await client.lookup(LookupQuery(name="Jane", limit=None, fuzzy=True))
        assert provider.last_params == {"name": "Jane", "fuzzy": "true"}

    @pytest.mark.asyncio
    async def test_base_url_trailing_slash_and_prefix(self):
        provider = FakeProvider()
        async with WatchlistClient(base_url="https://sdn.test/api/", transport=provider.transport) as client:
            assert client.base_url == "https://sdn.test/api"
            await client.lookup(LookupQuery(name="x"))

        assert provider.requests[0].url.path == "/api/getsdn"

    @pytest.mark.asyncio
    async def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.delenv("SDN_API_URL", raising=False)
        monkeypatch.delenv("REQUEST_TIMEOUT", raising=False)
        get_settings.cache_clear()
        try:
            async with WatchlistClient() as client:
                assert client.base_url == "https://sdn-api-w7wr.onrender.com"
                assert client.timeout == 30.0
        finally:
            get_settings.cache_clear()

    @pytest.mark.asyncio
    async def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("SDN_API_URL", "https://mirror.sdn.test/")
        get_settings.cache_clear()
        try:
            async with WatchlistClient() as client:
                assert client.base_url == "https://mirror.sdn.test"
        finally:
            get_settings.cache_clear()


class TestLookupSuccess:
    """2xx responses"""

    @pytest.mark.asyncio
    async def test_returns_parsed_records(self, client, provider):
        provider.default = (200, [make_record("1", "Ali Hassan"), make_record("2", "Ali Hasan")])

        result = await client.lookup(LookupQuery(name="Ali Hassan"))

        assert result.success is True
        assert result.count == 2
        assert [r.id for r in result.data] == ["1", "2"]
        assert result.error is None

    @pytest.mark.asyncio
    async def test_empty_array(self, client, provider):
        result = await client.lookup(LookupQuery(name="Nobody"))
        assert result.success is True
        assert result.data == []
        assert result.count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"message": "ok"}, 42, True])
    async def test_non_array_body_is_treated_as_no_matches(self, client, provider, body):
        provider.default = (200, body)

        result = await client.lookup(LookupQuery(name="Jane"))

        assert result.success is True
        assert result.data == []
        assert result.count == 0

    @pytest.mark.asyncio
    async def test_identical_lookups_return_identical_content(self, client, provider):
        provider.default = (200, [make_record("1", "Ali Hassan")])

        first = await client.lookup(LookupQuery(name="Ali"))
        second = await client.lookup(LookupQuery(name="Ali"))

        assert first == second
        assert len(provider.requests) == 2


class TestLookupFailure:
    """Every failure comes back as an unsuccessful result"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,reason", [
        (404, "Not Found"),
        (500, "Internal Server Error"),
        (503, "Service Unavailable"),
    ])
    async def test_non_2xx(self, client, provider, status, reason):
        provider.default = (status, {"detail": "ignored"})

        result = await client.lookup(LookupQuery(name="Jane"))

        assert result.success is False
        assert result.error == f"SDN API request failed: {reason}"
        assert result.data == []
        assert result.count == 0

    @pytest.mark.asyncio
    async def test_connection_error(self, client, provider):
        provider.default = httpx.ConnectError("Connection refused")

        result = await client.lookup(LookupQuery(name="Jane"))

        assert result.success is False
        assert result.error == "Connection refused"
        assert result.count == 0

    @pytest.mark.asyncio
    async def test_timeout(self, client, provider):
        provider.default = httpx.ReadTimeout("")

        result = await client.lookup(LookupQuery(name="Jane"))

        assert result.success is False
        assert result.error == "ReadTimeout"

    @pytest.mark.asyncio
    async def test_invalid_json(self, client, provider):
        provider.default = (200, b"<html>oops</html>")

        result = await client.lookup(LookupQuery(name="Jane"))

        assert result.success is False
        assert result.error == "SDN API returned invalid JSON"

    @pytest.mark.asyncio
    async def test_malformed_record(self, client, provider):
        provider.default = (200, [make_record("1", "Ok"), {"id": "2"}])

        result = await client.lookup(LookupQuery(name="Jane"))

        assert result.success is False
        assert result.error.startswith("SDN API returned malformed record at index 1")
        assert result.data == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, provider):
        client = WatchlistClient(base_url=BASE_URL, transport=provider.transport)
        await client.close()

        result = await client.lookup(LookupQuery(name="Jane"))

        assert result.success is False
        assert result.error
