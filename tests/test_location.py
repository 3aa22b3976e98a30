import asyncio

import httpx
import pytest

from src.storefinder.exceptions import GeocodeFailed, LocationUnavailable
from src.storefinder.models.domain import Coordinates
from src.storefinder.services.location import (
    LocationResolver,
    NominatimGeocoder,
    ReportedPositionProvider,
    Suggestion,
    SuggestionDebouncer,
)

PORTLAND = Coordinates(lat=45.5231, lng=-122.6765)


class DummyGeocoder:
    def __init__(self, results=None, error=None):
        self.results = results or {}
        self.error = error
        self.suggest_calls = []

    async def geocode(self, text):
        if self.error:
            raise self.error
        if text not in self.results:
            raise GeocodeFailed(text)
        return self.results[text]

    async def suggest(self, text):
        self.suggest_calls.append(text)
        return [Suggestion(label=f"{text}, Oregon", value=f"{text}, Oregon")]


class SlowDevice:
    async def get_current_position(self, timeout_ms):
        await asyncio.sleep(1)
        return PORTLAND


class DeniedDevice:
    async def get_current_position(self, timeout_ms):
        raise PermissionError("User denied Geolocation")


def test_device_location_from_reported_position():
    resolver = LocationResolver(DummyGeocoder(), ReportedPositionProvider(PORTLAND))

    assert asyncio.run(resolver.resolve_device_location()) == PORTLAND


@pytest.mark.parametrize(
    "device",
    [None, ReportedPositionProvider(None), DeniedDevice(), ReportedPositionProvider(Coordinates(0, 0))],
)
def test_device_location_failures_raise_location_unavailable(device):
    resolver = LocationResolver(DummyGeocoder(), device)

    with pytest.raises(LocationUnavailable):
        asyncio.run(resolver.resolve_device_location())


def test_device_location_times_out():
    resolver = LocationResolver(DummyGeocoder(), SlowDevice(), timeout_seconds=0.01)

    with pytest.raises(LocationUnavailable):
        asyncio.run(resolver.resolve_device_location())


def test_resolve_address_success_and_failures():
    resolver = LocationResolver(DummyGeocoder({"Portland, OR": PORTLAND}))

    assert asyncio.run(resolver.resolve_address("  Portland, OR ")) == PORTLAND
    with pytest.raises(GeocodeFailed):
        asyncio.run(resolver.resolve_address("Atlantis"))
    with pytest.raises(GeocodeFailed):
        asyncio.run(resolver.resolve_address("   "))


def test_resolve_address_wraps_provider_errors():
    resolver = LocationResolver(DummyGeocoder(error=RuntimeError("provider down")))

    with pytest.raises(GeocodeFailed) as excinfo:
        asyncio.run(resolver.resolve_address("Portland"))
    assert "provider down" in str(excinfo.value)


def _nominatim(handler) -> NominatimGeocoder:
    return NominatimGeocoder(
        base_url="https://nominatim.test",
        user_agent="StoreLocatorTests/1.0",
        transport=httpx.MockTransport(handler),
    )


def test_nominatim_geocode_parses_first_result():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        seen["agent"] = request.headers["User-Agent"]
        return httpx.Response(200, json=[{"lat": "45.5231", "lon": "-122.6765", "display_name": "Portland"}])

    coordinates = asyncio.run(_nominatim(handler).geocode("Portland, OR"))

    assert coordinates == PORTLAND
    assert seen["path"] == "/search"
    assert seen["params"] == {"format": "json", "q": "Portland, OR", "limit": "1"}
    assert seen["agent"] == "StoreLocatorTests/1.0"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json=[]),
        httpx.Response(503, text="busy"),
        httpx.Response(200, json={"error": "bad request"}),
        httpx.Response(200, json=[{"display_name": "no coordinates"}]),
    ],
)
def test_nominatim_geocode_failures(response):
    geocoder = _nominatim(lambda request: response)

    with pytest.raises(GeocodeFailed):
        asyncio.run(geocoder.geocode("Nowhere"))


def test_nominatim_suggestions():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["addressdetails"] == "1"
        return httpx.Response(
            200,
            json=[{"display_name": "Portland, Oregon, USA"}, {"display_name": "Portland, Maine, USA"}, {}],
        )

    suggestions = asyncio.run(_nominatim(handler).suggest("Portl"))

    assert [item.label for item in suggestions] == ["Portland, Oregon, USA", "Portland, Maine, USA"]


def test_debouncer_ignores_short_queries():
    geocoder = DummyGeocoder()
    debouncer = SuggestionDebouncer(geocoder, delay_ms=0, min_chars=3)

    assert asyncio.run(debouncer.suggest("Po")) == []
    assert geocoder.suggest_calls == []


def test_debouncer_only_looks_up_latest_query():
    geocoder = DummyGeocoder()
    debouncer = SuggestionDebouncer(geocoder, delay_ms=50, min_chars=3)

    async def type_quickly():
        return await asyncio.gather(debouncer.suggest("Port"), debouncer.suggest("Portland"))

    first, second = asyncio.run(type_quickly())

    assert first == []
    assert [item.value for item in second] == ["Portland, Oregon"]
    assert geocoder.suggest_calls == ["Portland"]
