"""Tests for Bazaar registry discovery."""

import asyncio

import httpx
import pytest

from x402_toolkit.config import RegistryConfig
from x402_toolkit.discover import (
    build_registry_url,
    discover,
    discover_sync,
    normalize_listing,
    parse_discovery_response,
)
from x402_toolkit.http.constants import DEFAULT_REGISTRY_URL
from x402_toolkit.schemas import RegistryError

from .mocks import StalledHandler, USDC_BASE

REGISTRY_BODY = {
    "items": [
        {
            "resource": "https://api.example.com/compute",
            "description": "Sandboxed compute",
            "accepts": [
                {
                    "scheme": "exact",
                    "network": "eip155:8453",
                    "asset": USDC_BASE,
                    "maxAmountRequired": "2000",
                    "payTo": "0xAAA",
                }
            ],
            "metadata": {"category": "compute"},
        },
        {
            "resource": {"url": "https://api.example.com/weather", "description": "Weather"},
            "accepts": [
                {
                    "scheme": "exact",
                    "network": "eip155:8453",
                    "asset": USDC_BASE,
                    "amount": "1000",
                    "payTo": "0xBBB",
                },
                {
                    "scheme": "exact",
                    "network": "eip155:8453",
                    "asset": USDC_BASE,
                    "amount": "500",
                    "payTo": "0xBBB",
                },
            ],
        },
        {"resource": "https://api.example.com/free", "accepts": []},
    ],
    "total": 42,
}


def make_client(status: int = 200, body=None, seen: list | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        if body is None:
            return httpx.Response(status, text="Server Error")
        return httpx.Response(status, json=body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


# =============================================================================
# Parsing
# =============================================================================


class TestParseDiscoveryResponse:
    def test_services_in_registry_order(self):
        result = parse_discovery_response(REGISTRY_BODY)

        assert [s.url for s in result.services] == [
            "https://api.example.com/compute",
            "https://api.example.com/weather",
        ]
        assert result.total == 42

    def test_prices_use_cheapest_option(self):
        result = parse_discovery_response(REGISTRY_BODY)
        assert [s.price for s in result.services] == [
            "$0.002 USDC on Base",
            "$0.0005 USDC on Base",
        ]

    def test_listing_fields(self):
        compute, weather = parse_discovery_response(REGISTRY_BODY).services

        assert compute.description == "Sandboxed compute"
        assert compute.metadata == {"category": "compute"}
        assert compute.accepts[0].amount == "2000"
        assert weather.description == "Weather"
        assert weather.metadata == {}
        assert len(weather.accepts) == 2

    def test_resources_key(self):
        result = parse_discovery_response({"resources": REGISTRY_BODY["items"]})
        assert len(result.services) == 2
        assert result.total == 2

    def test_total_count_and_pagination_total(self):
        items = REGISTRY_BODY["items"]
        assert parse_discovery_response({"items": items, "totalCount": 7}).total == 7
        assert parse_discovery_response({"items": items, "pagination": {"total": 9}}).total == 9

    def test_total_defaults_to_service_count(self):
        assert parse_discovery_response({"items": REGISTRY_BODY["items"]}).total == 2

    @pytest.mark.parametrize("data", [None, [], {}, {"items": "nope"}, {"items": None}])
    def test_unusable_bodies_yield_empty_result(self, data):
        result = parse_discovery_response(data)
        assert result.services == []
        assert result.total == 0


class TestNormalizeListing:
    def test_cheapest_compares_big_integers(self):
        item = {
            "url": "https://api.example.com/big",
            "accepts": [
                {"asset": USDC_BASE, "network": "base", "amount": "100000000000000000000"},
                {"asset": USDC_BASE, "network": "base", "amount": "99999999999999999999"},
            ],
        }
        listing = normalize_listing(item)
        assert listing.price == "$99999999999999.999999 USDC on Base"

    def test_tie_keeps_first_option(self):
        item = {
            "url": "u",
            "accepts": [
                {"asset": USDC_BASE, "network": "eip155:8453", "amount": "10"},
                {"asset": "0xOTHER0000000000000000000000000000000000", "network": "eip155:8453", "amount": "10"},
            ],
        }
        assert normalize_listing(item).price == "$0.00001 USDC on Base"

    def test_invalid_options_are_skipped(self):
        item = {
            "url": "u",
            "accepts": ["junk", {"amount": "-1"}, {"asset": USDC_BASE, "network": "base", "amount": "3000"}],
        }
        listing = normalize_listing(item)
        assert len(listing.accepts) == 1
        assert listing.price == "$0.003 USDC on Base"

    @pytest.mark.parametrize(
        "item",
        [None, "x", {}, {"accepts": None}, {"accepts": []}, {"accepts": ["junk"]}],
    )
    def test_items_without_options_are_dropped(self, item):
        assert normalize_listing(item) is None

    def test_url_and_description_fallbacks(self):
        item = {
            "accepts": [
                {
                    "amount": "1",
                    "resource": "https://inline.example.com",
                    "description": "inline",
                }
            ],
        }
        listing = normalize_listing(item)
        assert listing.url == "https://inline.example.com"
        assert listing.description == "inline"

        listing = normalize_listing({"metadata": {"description": "meta"}, "accepts": [{"amount": "1"}]})
        assert listing.url == ""
        assert listing.description == "meta"

    def test_non_string_fallbacks_are_skipped(self):
        item = {
            "description": {"en": "structured"},
            "resource": {"url": 7},
            "accepts": [
                {
                    "amount": "1",
                    "resource": {"url": "https://nested.example.com"},
                    "description": "inline",
                }
            ],
            "metadata": {"url": "https://meta.example.com"},
            "url": None,
        }
        listing = normalize_listing(item)
        assert listing is not None
        assert listing.url == ""
        assert listing.description == "inline"

        item["accepts"][0]["resource"] = "https://inline.example.com"
        assert normalize_listing(item).url == "https://inline.example.com"


# =============================================================================
# URL building
# =============================================================================


class TestBuildRegistryUrl:
    def test_no_params(self):
        assert build_registry_url(DEFAULT_REGISTRY_URL) == DEFAULT_REGISTRY_URL

    def test_only_given_params(self):
        url = httpx.URL(build_registry_url(DEFAULT_REGISTRY_URL, limit=5))
        assert dict(url.params) == {"limit": "5"}

    def test_all_params(self):
        url = httpx.URL(build_registry_url("https://registry.example.com/list", 10, 20, "http"))
        assert url.host == "registry.example.com"
        assert dict(url.params) == {"limit": "10", "offset": "20", "type": "http"}

    def test_zero_offset_is_sent(self):
        url = httpx.URL(build_registry_url(DEFAULT_REGISTRY_URL, offset=0))
        assert url.params["offset"] == "0"


# =============================================================================
# discover
# =============================================================================


class TestDiscover:
    @pytest.mark.asyncio
    async def test_returns_services(self):
        seen: list[httpx.Request] = []
        async with make_client(body=REGISTRY_BODY, seen=seen) as client:
            result = await discover(config=RegistryConfig(http_client=client))

        assert len(result.services) == 2
        assert result.total == 42
        assert str(seen[0].url) == DEFAULT_REGISTRY_URL
        assert seen[0].headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_sends_pagination(self):
        seen: list[httpx.Request] = []
        async with make_client(body={"items": []}, seen=seen) as client:
            await discover(limit=5, offset=10, resource_type="http", config=RegistryConfig(http_client=client))

        params = seen[0].url.params
        assert params["limit"] == "5"
        assert params["offset"] == "10"
        assert params["type"] == "http"

    @pytest.mark.asyncio
    async def test_custom_registry_url_and_headers(self):
        seen: list[httpx.Request] = []
        config = RegistryConfig(
            url="https://ignored.example.com",
            headers={"Authorization": "Bearer token"},
        )
        async with make_client(body={"items": []}, seen=seen) as client:
            config.http_client = client
            await discover(registry_url="https://registry.example.com/v1/list", config=config)

        assert seen[0].url.host == "registry.example.com"
        assert seen[0].url.path == "/v1/list"
        assert seen[0].headers["Authorization"] == "Bearer token"

    @pytest.mark.asyncio
    async def test_registry_error(self):
        async with make_client(status=500) as client:
            with pytest.raises(RegistryError) as exc_info:
                await discover(config=RegistryConfig(http_client=client))

        assert exc_info.value.status_code == 500
        assert str(exc_info.value) == "Bazaar request failed (500): Server Error"

    @pytest.mark.asyncio
    async def test_unreadable_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html></html>")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(RegistryError):
                await discover(config=RegistryConfig(http_client=client))

    @pytest.mark.asyncio
    async def test_cancellation_aborts_in_flight_request(self):
        handler = StalledHandler()

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            task = asyncio.create_task(discover(config=RegistryConfig(http_client=client)))
            await handler.started.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert len(handler.requests) == 1


def test_discover_sync():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=REGISTRY_BODY)

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        result = discover_sync(limit=2, config=RegistryConfig(http_client=client))

    assert [s.price for s in result.services] == ["$0.002 USDC on Base", "$0.0005 USDC on Base"]
