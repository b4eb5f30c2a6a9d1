"""Tests for the check_weather tool with faked Open-Meteo endpoints."""

import asyncio

import httpx
import pytest

from gpt_agent.tools import ToolRegistry, weather
from gpt_agent.tools.weather import (
    WeatherParams,
    check_weather,
    describe_weather_code,
    location_variants,
    weather_tool,
)

PARIS_FRANCE = {
    "name": "Paris", "latitude": 48.85341, "longitude": 2.3488,
    "country": "France", "admin1": "Île-de-France",
}
PARIS_TEXAS = {
    "name": "Paris", "latitude": 33.66094, "longitude": -95.55551,
    "country": "United States", "admin1": "Texas",
}
PARIS_TENNESSEE = {
    "name": "Paris", "latitude": 36.302, "longitude": -88.32671,
    "country": "United States", "admin1": "Tennessee",
}

FORECAST = {
    "latitude": 48.86,
    "longitude": 2.3399997,
    "timezone": "Europe/Paris",
    "current": {
        "time": "2026-10-18T14:00",
        "interval": 900,
        "temperature_2m": 14.2,
        "relative_humidity_2m": 71,
        "apparent_temperature": 12.9,
        "is_day": 1,
        "precipitation": 0.0,
        "rain": 0.0,
        "showers": 0.0,
        "snowfall": 0.0,
        "weather_code": 2,
        "cloud_cover": 40,
        "pressure_msl": 1015.3,
        "surface_pressure": 1008.1,
        "wind_speed_10m": 11.5,
        "wind_direction_10m": 230,
        "wind_gusts_10m": 24.1,
    },
}


def open_meteo(geocoding_results, forecast=FORECAST):
    """
    Build a fake Open-Meteo handler.

    geocoding_results is either a list (returned for every name) or a
    function name -> list.
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "geocoding-api.open-meteo.com":
            name = request.url.params["name"]
            results = geocoding_results(name) if callable(geocoding_results) else geocoding_results
            return httpx.Response(200, json={"results": results} if results else {})
        if request.url.host == "api.open-meteo.com":
            return httpx.Response(200, json=forecast)
        return httpx.Response(404)

    return handler


def _forecast_requests(requests):
    return [r for r in requests if r.url.host == "api.open-meteo.com"]


def test_weather_code_table() -> None:
    assert describe_weather_code(0) == "Clear sky"
    assert describe_weather_code(99) == "Thunderstorm with heavy hail"
    assert describe_weather_code(12) == "Unknown"


def test_location_variants_order() -> None:
    assert location_variants("Austin,  Texas, USA") == [
        "Austin,  Texas, USA",
        "Austin  Texas USA",
        "Austin",
        "Austin, Texas, USA",
    ]


def test_single_candidate_returns_weather(fake_http) -> None:
    """One geocoding match goes straight to the forecast."""
    requests = fake_http(weather, open_meteo([PARIS_FRANCE]))

    result = asyncio.run(check_weather({"location": "Paris"}))
    data = result.to_dict()

    assert data["temperature"] == 14.2
    assert data["humidity"] == 71
    assert data["wind_speed"] == 11.5
    assert data["weather_description"] == "Partly cloudy"
    assert data["unit"] == "celsius"
    assert data["is_day"] is True
    assert data["timezone"] == "Europe/Paris"
    assert "multiple_locations" not in data
    assert "error" not in data

    forecast = _forecast_requests(requests)
    assert len(forecast) == 1
    assert forecast[0].url.params["latitude"] == "48.85341"
    assert forecast[0].url.params["temperature_unit"] == "celsius"


def test_multiple_candidates_ask_for_disambiguation(fake_http) -> None:
    """Several unfiltered matches give numbered choices and no forecast call."""
    requests = fake_http(weather, open_meteo([PARIS_FRANCE, PARIS_TEXAS, PARIS_TENNESSEE]))

    result = asyncio.run(check_weather({"location": "Paris"}))

    assert result.error.startswith('Multiple locations found for "Paris".')
    assert [loc["id"] for loc in result.multiple_locations] == [1, 2, 3]
    assert result.multiple_locations[1] == {
        "id": 2,
        "name": "Paris",
        "country": "United States",
        "admin1": "Texas",
        "latitude": 33.66094,
        "longitude": -95.55551,
    }
    assert result.temperature is None
    assert _forecast_requests(requests) == []


def test_region_keyword_picks_single_match(fake_http) -> None:
    """'Paris, Texas' narrows the candidates down to the Texan one."""
    requests = fake_http(weather, open_meteo([PARIS_FRANCE, PARIS_TEXAS, PARIS_TENNESSEE]))

    result = asyncio.run(check_weather({"location": "Paris, Texas", "unit": "fahrenheit"}))

    assert result.multiple_locations is None
    forecast = _forecast_requests(requests)
    assert len(forecast) == 1
    assert forecast[0].url.params["latitude"] == "33.66094"
    assert forecast[0].url.params["temperature_unit"] == "fahrenheit"


def test_region_keyword_with_several_matches_still_asks(fake_http) -> None:
    """'USA' matches two candidates, so the user still has to choose."""
    requests = fake_http(weather, open_meteo([PARIS_FRANCE, PARIS_TEXAS, PARIS_TENNESSEE]))

    result = asyncio.run(check_weather({"location": "Paris USA"}))

    assert len(result.multiple_locations) == 3
    assert _forecast_requests(requests) == []


def test_falls_back_to_first_comma_segment(fake_http) -> None:
    austin = {"name": "Austin", "latitude": 30.26715, "longitude": -97.74306,
              "country": "United States", "admin1": "Texas"}
    requests = fake_http(weather, open_meteo(lambda name: [austin] if name == "Austin" else []))

    result = asyncio.run(check_weather({"location": "Austin, Texas, USA"}))

    assert result.error is None
    names = [r.url.params["name"] for r in requests if r.url.host == "geocoding-api.open-meteo.com"]
    assert names == ["Austin, Texas, USA", "Austin Texas USA", "Austin"]


def test_failed_variant_is_skipped(fake_http) -> None:
    """An HTTP error on one variant moves on to the next one."""

    def geocoder(request: httpx.Request) -> httpx.Response:
        if request.url.host == "geocoding-api.open-meteo.com":
            if request.url.params["name"] == "Paris, France":
                return httpx.Response(500)
            return httpx.Response(200, json={"results": [PARIS_FRANCE]})
        return httpx.Response(200, json=FORECAST)

    fake_http(weather, geocoder)

    result = asyncio.run(check_weather({"location": "Paris, France"}))

    assert result.error is None
    assert result.temperature == 14.2


def test_location_not_found_is_an_error_result(fake_http) -> None:
    fake_http(weather, open_meteo([]))

    result = asyncio.run(check_weather({"location": "Atlantis"}))
    data = result.to_dict()

    assert data["error"].startswith("Location not found: Atlantis")
    assert data["weather_description"] == "Error"
    assert data["temperature"] == 0
    assert data["coordinates"] == {"latitude": 0, "longitude": 0}
    assert data["timezone"] == "UTC"


def test_forecast_failure_is_an_error_result(fake_http) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "geocoding-api.open-meteo.com":
            return httpx.Response(200, json={"results": [PARIS_FRANCE]})
        return httpx.Response(503)

    fake_http(weather, handler)

    result = asyncio.run(check_weather({"location": "Paris"}))

    assert result.error == "Weather API error: 503 Service Unavailable"
    assert result.weather_description == "Error"


def test_invalid_arguments_raise() -> None:
    with pytest.raises(TypeError):
        WeatherParams.from_params({"location": 42})
    with pytest.raises(TypeError):
        WeatherParams.from_params({})
    with pytest.raises(ValueError):
        WeatherParams.from_params({"location": "Paris", "unit": "kelvin"})


def test_invalid_unit_through_registry() -> None:
    registry = ToolRegistry()
    registry.register(weather_tool, check_weather)

    result = asyncio.run(registry.execute("check_weather", {"location": "Paris", "unit": "kelvin"}))

    assert not result.success
    assert result.error == 'Unit must be either "celsius" or "fahrenheit"'


def test_declaration() -> None:
    params = weather_tool.parameters
    assert weather_tool.name == "check_weather"
    assert params["required"] == ["location"]
    assert params["properties"]["unit"]["enum"] == ["celsius", "fahrenheit"]
