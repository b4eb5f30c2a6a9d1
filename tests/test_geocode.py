"""Tests for the forward/reverse geocoding tools."""

import asyncio

import httpx
import pytest

from gpt_agent.tools import ToolRegistry, geocode
from gpt_agent.tools.geocode import (
    ReverseGeocodeParams,
    forward_geocode,
    reverse_geocode,
    reverse_geocode_tool,
)
from gpt_agent.utils.config import reset_config

WHITE_HOUSE = {
    "place_id": 297401436,
    "lat": "38.897699700000004",
    "lon": "-77.03655315",
    "display_name": "White House, 1600, Pennsylvania Avenue Northwest, Washington, 20500, United States",
    "class": "office",
    "type": "government",
    "importance": 0.6347,
}


def test_forward_geocode_maps_results(fake_http) -> None:
    requests = fake_http(geocode, lambda request: httpx.Response(200, json=[WHITE_HOUSE]))

    result = asyncio.run(forward_geocode({"address": "1600 Pennsylvania Avenue NW, Washington, DC"}))
    data = result.to_dict()

    assert data["type"] == "forward"
    assert data["query"] == "1600 Pennsylvania Avenue NW, Washington, DC"
    assert data["results"] == [{
        "place_id": 297401436,
        "display_name": WHITE_HOUSE["display_name"],
        "lat": "38.897699700000004",
        "lon": "-77.03655315",
        "importance": 0.6347,
        "class": "office",
        "type": "government",
    }]
    assert "error" not in data

    assert requests[0].url.path == "/search"
    assert requests[0].url.params["q"] == "1600 Pennsylvania Avenue NW, Washington, DC"
    assert requests[0].url.params["api_key"] == "test-key"


def test_reverse_geocode_drops_ranking_fields(fake_http) -> None:
    raw = dict(WHITE_HOUSE, address={"road": "Pennsylvania Avenue Northwest", "city": "Washington"})
    requests = fake_http(geocode, lambda request: httpx.Response(200, json=raw))

    result = asyncio.run(reverse_geocode({"latitude": 38.8977, "longitude": -77.0365}))
    data = result.to_dict()

    assert data["type"] == "reverse"
    assert data["query"] == "38.8977, -77.0365"
    place = data["results"][0]
    assert place["address"]["city"] == "Washington"
    assert "importance" not in place
    assert "class" not in place
    assert "type" not in place

    assert requests[0].url.path == "/reverse"
    assert requests[0].url.params["lat"] == "38.8977"
    assert requests[0].url.params["lon"] == "-77.0365"


@pytest.mark.parametrize(
    "latitude, longitude, message",
    [
        (91, 0, "Latitude must be between -90 and 90 degrees"),
        (-90.5, 0, "Latitude must be between -90 and 90 degrees"),
        (0, 181, "Longitude must be between -180 and 180 degrees"),
    ],
)
def test_out_of_range_coordinates_make_no_request(fake_http, latitude, longitude, message) -> None:
    requests = fake_http(geocode, lambda request: httpx.Response(200, json={}))

    with pytest.raises(ValueError, match=message):
        asyncio.run(reverse_geocode({"latitude": latitude, "longitude": longitude}))

    assert requests == []


def test_out_of_range_through_registry_is_failed_result(fake_http) -> None:
    requests = fake_http(geocode, lambda request: httpx.Response(200, json={}))
    registry = ToolRegistry()
    registry.register(reverse_geocode_tool, reverse_geocode)

    result = asyncio.run(registry.execute("reverse_geocode", {"latitude": 91, "longitude": 0}))

    assert not result.success
    assert result.error == "Latitude must be between -90 and 90 degrees"
    assert requests == []


def test_non_numeric_coordinates() -> None:
    with pytest.raises(TypeError, match="Latitude and longitude must be numbers"):
        ReverseGeocodeParams.from_params({"latitude": "38.9", "longitude": -77.0})
    with pytest.raises(TypeError):
        ReverseGeocodeParams.from_params({"latitude": True, "longitude": 0})
    with pytest.raises(TypeError):
        ReverseGeocodeParams.from_params({"latitude": 10})


def test_boundaries_are_valid() -> None:
    args = ReverseGeocodeParams.from_params({"latitude": -90, "longitude": 180})
    assert (args.latitude, args.longitude) == (-90, 180)


def test_missing_api_key_is_an_error_result(fake_http, monkeypatch) -> None:
    monkeypatch.delenv("GEOCODE_API_KEY")
    reset_config()
    requests = fake_http(geocode, lambda request: httpx.Response(200, json=[]))

    result = asyncio.run(forward_geocode({"address": "Paris"}))

    assert result.results == []
    assert "GEOCODE_API_KEY" in result.error
    assert requests == []


def test_http_error_is_an_error_result(fake_http) -> None:
    fake_http(geocode, lambda request: httpx.Response(401, json={"error": "invalid key"}))

    result = asyncio.run(forward_geocode({"address": "Paris"}))

    assert result.results == []
    assert result.error == "Geocoding API error: 401 Unauthorized"
