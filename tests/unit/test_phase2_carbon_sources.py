"""
Unit tests for Phase 2: Carbon Intensity Sources.

Tests cover:
- Carbon readings and static fallback
- Static source
- Electricity Maps source: success, missing key, HTTP errors, bad payloads
"""

import httpx
import pytest

from greenops.collectors.carbon import ElectricityMapsCarbonSource, StaticCarbonSource
from greenops.planning.carbon import CarbonReading, ReadingSource
from greenops.planning.engine import PlanAssembler, PlanningRequest
from greenops.planning.regions import GeoGroup, Region
from greenops.planning.strategies import Strategy


@pytest.fixture
def region() -> Region:
    return Region("FRA1", "Frankfurt, Germany", 210, 0.26, GeoGroup.EU, zone="DE")


def _source(handler, api_key: str = "test-key") -> ElectricityMapsCarbonSource:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ElectricityMapsCarbonSource(api_key=api_key, client=client)


# =============================================================================
# Reading Tests
# =============================================================================


class TestCarbonReading:
    """Tests for CarbonReading."""

    def test_fallback_uses_region_default(self, region):
        reading = CarbonReading.fallback(region)

        assert reading.region_id == "FRA1"
        assert reading.value == 210.0
        assert reading.source == ReadingSource.FALLBACK_STATIC
        assert reading.is_live is False

    def test_to_dict(self, region):
        data = CarbonReading("FRA1", 123.4, ReadingSource.LIVE).to_dict()

        assert data == {"region_id": "FRA1", "value": 123.4, "source": "live"}


class TestStaticCarbonSource:
    """Tests for StaticCarbonSource."""

    @pytest.mark.asyncio
    async def test_always_fallback(self, region):
        source = StaticCarbonSource()

        reading = await source.get_reading(region)

        assert reading == CarbonReading.fallback(region)
        assert source.is_live is False


# =============================================================================
# Electricity Maps Tests
# =============================================================================


class TestElectricityMapsCarbonSource:
    """Tests for ElectricityMapsCarbonSource."""

    @pytest.mark.asyncio
    async def test_live_reading(self, region):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"zone": "DE", "carbonIntensity": 142})

        source = _source(handler)
        reading = await source.get_reading(region)

        assert reading.value == 142.0
        assert reading.source == ReadingSource.LIVE
        assert source.is_live is True

        request = seen[0]
        assert request.url.path.endswith("/carbon-intensity/latest")
        assert request.url.params["zone"] == "DE"
        assert request.headers["auth-token"] == "test-key"

    @pytest.mark.asyncio
    async def test_no_api_key_skips_network(self, region):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"carbonIntensity": 1})

        source = _source(handler, api_key="")
        reading = await source.get_reading(region)

        assert reading.source == ReadingSource.FALLBACK_STATIC
        assert reading.value == 210.0
        assert calls == []
        assert source.is_live is False

    @pytest.mark.asyncio
    async def test_region_without_zone(self):
        region = Region("XX1", "Nowhere", 300, 0.2, GeoGroup.EU)

        source = _source(lambda r: httpx.Response(200, json={"carbonIntensity": 1}))
        reading = await source.get_reading(region)

        assert reading.source == ReadingSource.FALLBACK_STATIC
        assert reading.value == 300.0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 404, 500, 503])
    async def test_http_error_falls_back(self, region, status_code):
        source = _source(lambda r: httpx.Response(status_code, text="nope"))

        reading = await source.get_reading(region)

        assert reading == CarbonReading.fallback(region)

    @pytest.mark.asyncio
    async def test_transport_error_falls_back(self, region):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        source = _source(handler)
        reading = await source.get_reading(region)

        assert reading == CarbonReading.fallback(region)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [{}, {"carbonIntensity": None}, {"carbonIntensity": "high"}, {"carbonIntensity": True}],
    )
    async def test_non_numeric_value_falls_back(self, region, payload):
        source = _source(lambda r: httpx.Response(200, json=payload))

        reading = await source.get_reading(region)

        assert reading == CarbonReading.fallback(region)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            '{"carbonIntensity": NaN}',
            '{"carbonIntensity": Infinity}',
            '{"carbonIntensity": -Infinity}',
            '{"carbonIntensity": -12}',
        ],
    )
    async def test_non_finite_or_negative_value_falls_back(self, region, body):
        source = _source(
            lambda r: httpx.Response(
                200, content=body.encode(), headers={"content-type": "application/json"}
            )
        )

        reading = await source.get_reading(region)

        assert reading == CarbonReading.fallback(region)
        assert reading.source == ReadingSource.FALLBACK_STATIC

    @pytest.mark.asyncio
    async def test_zero_is_a_valid_reading(self, region):
        source = _source(lambda r: httpx.Response(200, json={"carbonIntensity": 0}))

        reading = await source.get_reading(region)

        assert reading.value == 0.0
        assert reading.source == ReadingSource.LIVE

    @pytest.mark.asyncio
    async def test_nan_reading_does_not_poison_planning(self, catalog, single_api):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["zone"] == "GB":
                return httpx.Response(
                    200,
                    content=b'{"carbonIntensity": NaN}',
                    headers={"content-type": "application/json"},
                )
            return httpx.Response(200, json={"carbonIntensity": 300})

        result = await PlanAssembler(catalog, _source(handler)).plan(PlanningRequest(single_api))

        lon = result.readings[0]
        assert lon.region_id == "LON1"
        assert lon.source == ReadingSource.FALLBACK_STATIC
        for scores in result.region_scores:
            assert 0.0 <= scores.co2 <= 1.0
        # LON1 falls back to 260, the lowest reading
        assert result.plan_for(Strategy.MAX_GREEN).region.id == "LON1"
        assert result.plan_for(Strategy.BUDGET).region.id == "BLR1"

    @pytest.mark.asyncio
    async def test_invalid_json_falls_back(self, region):
        source = _source(lambda r: httpx.Response(200, text="<html>"))

        reading = await source.get_reading(region)

        assert reading == CarbonReading.fallback(region)

    @pytest.mark.asyncio
    async def test_float_value(self, region):
        source = _source(lambda r: httpx.Response(200, json={"carbonIntensity": 98.6}))

        reading = await source.get_reading(region)

        assert reading.value == pytest.approx(98.6)

    @pytest.mark.asyncio
    async def test_close_leaves_injected_client_open(self, region):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        source = ElectricityMapsCarbonSource(api_key="k", client=client)

        await source.close()

        assert client.is_closed is False
        await client.aclose()

    @pytest.mark.asyncio
    async def test_close_owned_client(self):
        source = ElectricityMapsCarbonSource(api_key="k")
        client = await source._get_client()

        await source.close()

        assert client.is_closed is True
