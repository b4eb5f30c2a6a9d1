"""
Weather Tool
============

Current weather for a free-text location, using the Open-Meteo APIs
(no API key needed):

- Geocoding: https://geocoding-api.open-meteo.com/v1/search
- Forecast:  https://api.open-meteo.com/v1/forecast

Location resolution:
    The location is looked up as typed first, then with commas removed, then
    only the part before the first comma, then with whitespace collapsed.
    The first variant that returns candidates wins.

    One candidate: use it.
    Several candidates: keep the ones whose region or country matches a
    region keyword in the query (e.g. "Paris, Texas"). If exactly one is
    left, use it; otherwise return the numbered candidates so the model can
    ask the user which one they meant. That answer is a normal result, not
    a failure, and no forecast is fetched for it.

Expected failures (location not found, API down) come back as a result with
"error" set and zeroed readings, so the model always gets the same shape.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timezone

from gpt_agent.tools import ToolDefinition, create_tool_schema, http_client
from gpt_agent.utils.logger import Logger

logger = Logger("Tools").child("Weather")

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

UNITS = ("celsius", "fahrenheit")

CURRENT_VARIABLES = ",".join([
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "is_day",
    "precipitation",
    "rain",
    "showers",
    "snowfall",
    "weather_code",
    "cloud_cover",
    "pressure_msl",
    "surface_pressure",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
])

# WMO weather interpretation codes
WEATHER_CODES: dict[int, str] = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}

# (keyword in the query, candidate field, text the field must contain).
# Only these regions are recognized when narrowing down several candidates.
REGION_KEYWORDS: list[tuple[str, str, str]] = [
    ("california", "admin1", "california"),
    ("texas", "admin1", "texas"),
    ("united states", "country", "united states"),
    ("usa", "country", "united states"),
    ("colombia", "country", "colombia"),
    ("guatemala", "country", "guatemala"),
    ("venezuela", "country", "venezuela"),
]


class LocationNotFoundError(RuntimeError):
    """Raised when no variant of the location returns a geocoding candidate."""


class WeatherAPIError(RuntimeError):
    """Raised when an Open-Meteo endpoint answers with an HTTP error."""


def describe_weather_code(code: int) -> str:
    """Human-readable text for a WMO weather code ("Unknown" if unmapped)."""
    return WEATHER_CODES.get(code, "Unknown")


@dataclass(frozen=True)
class WeatherParams:
    """Arguments of check_weather."""
    location: str
    unit: str = "celsius"

    @classmethod
    def from_params(cls, params: dict) -> "WeatherParams":
        location = params.get("location")
        if not location or not isinstance(location, str):
            raise TypeError("Location is required and must be a string")

        unit = params.get("unit") or "celsius"
        if unit not in UNITS:
            raise ValueError('Unit must be either "celsius" or "fahrenheit"')

        return cls(location=location, unit=unit)


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LocationCandidate:
    """One numbered geocoding match offered to the user."""
    id: int
    name: str
    country: str | None
    admin1: str | None
    latitude: float
    longitude: float


@dataclass(frozen=True)
class Disambiguation:
    candidates: list[LocationCandidate]
    message: str


@dataclass
class WeatherResult:
    """
    Result of check_weather.

    A disambiguation result only has location, multiple_locations and error.
    """
    location: str
    coordinates: dict | None = None
    temperature: float | None = None
    unit: str | None = None
    weather_code: int | None = None
    weather_description: str | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    wind_direction: float | None = None
    pressure: float | None = None
    cloud_cover: float | None = None
    is_day: bool | None = None
    timezone: str | None = None
    last_updated: str | None = None
    multiple_locations: list[dict] | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to a dict, leaving out fields that were never set."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def failed(cls, location: str, unit: str, message: str) -> "WeatherResult":
        """A well-formed result with neutral readings and the error message."""
        return cls(
            location=location,
            coordinates={"latitude": 0, "longitude": 0},
            temperature=0,
            unit=unit,
            weather_code=0,
            weather_description="Error",
            humidity=0,
            wind_speed=0,
            wind_direction=0,
            pressure=0,
            cloud_cover=0,
            is_day=False,
            timezone="UTC",
            last_updated=datetime.now(timezone.utc).isoformat(),
            error=message,
        )


def location_variants(location: str) -> list[str]:
    """The spellings of a location tried against the geocoder, in order."""
    return [
        location,
        location.replace(",", ""),
        location.split(",")[0],
        " ".join(location.split()),
    ]


def _matches_region(query: str, candidate: dict) -> bool:
    query_lower = query.lower()
    for keyword, field_name, expected in REGION_KEYWORDS:
        value = (candidate.get(field_name) or "").lower()
        if keyword in query_lower and expected in value:
            return True
    return False


def select_candidate(query: str, variant: str, results: list[dict]) -> Coordinates | Disambiguation:
    """
    Pick the geocoding candidate for a query, or ask for disambiguation.

    Args:
        query: The location exactly as the user gave it
        variant: The spelling that produced the results
        results: Raw Open-Meteo geocoding results (at least one)
    """
    if len(results) == 1:
        only = results[0]
        logger.debug(f"Found location: {only.get('name')} ({only['latitude']}, {only['longitude']})")
        return Coordinates(only["latitude"], only["longitude"])

    matches = [result for result in results if _matches_region(query, result)]
    if len(matches) == 1:
        match = matches[0]
        logger.debug(
            f"Found exact match: {match.get('name')}, {match.get('admin1')}, "
            f"{match.get('country')} ({match['latitude']}, {match['longitude']})"
        )
        return Coordinates(match["latitude"], match["longitude"])

    logger.debug(f"Found {len(results)} locations, need user selection")
    candidates = [
        LocationCandidate(
            id=index,
            name=result.get("name", ""),
            country=result.get("country"),
            admin1=result.get("admin1"),
            latitude=result["latitude"],
            longitude=result["longitude"],
        )
        for index, result in enumerate(results, start=1)
    ]
    return Disambiguation(
        candidates=candidates,
        message=(
            f'Multiple locations found for "{variant}". Please specify which one you mean '
            f"by providing more details like country, state, or region."
        ),
    )


async def geocode_location(location: str) -> Coordinates | Disambiguation:
    """
    Resolve a free-text location with the Open-Meteo geocoder.

    Raises:
        LocationNotFoundError: If no variant returns any candidate
    """
    logger.debug(f"Geocoding location: {location}")
    variants = location_variants(location)

    async with http_client() as client:
        for variant in variants:
            logger.debug(f'Trying location variant: "{variant}"')
            try:
                response = await client.get(GEOCODING_URL, params={
                    "name": variant,
                    "count": 5,
                    "language": "en",
                    "format": "json",
                })
                if response.status_code >= 400:
                    raise WeatherAPIError(
                        f"Geocoding API error: {response.status_code} {response.reason_phrase}"
                    )
                data = response.json()
            except Exception as e:
                logger.warning(f'Failed to geocode variant "{variant}": {e}')
                continue

            results = data.get("results") or []
            if results:
                return select_candidate(location, variant, results)

    raise LocationNotFoundError(
        f"Location not found: {location}. Tried variants: {', '.join(variants)}"
    )


async def fetch_weather(coordinates: Coordinates, unit: str) -> dict:
    """
    Fetch current conditions for a coordinate pair.

    Returns:
        The raw Open-Meteo forecast response
    """
    logger.debug(
        f"Fetching weather data for coordinates: "
        f"{coordinates.latitude}, {coordinates.longitude} ({unit})"
    )
    async with http_client() as client:
        response = await client.get(FORECAST_URL, params={
            "latitude": coordinates.latitude,
            "longitude": coordinates.longitude,
            "current": CURRENT_VARIABLES,
            "temperature_unit": unit,
            "wind_speed_unit": "kmh",
            "precipitation_unit": "mm",
            "timezone": "auto",
        })

    if response.status_code >= 400:
        raise WeatherAPIError(f"Weather API error: {response.status_code} {response.reason_phrase}")

    data = response.json()
    logger.debug("Weather API output", data)
    return data


async def check_weather(params: dict) -> WeatherResult:
    """
    Get the current weather for a location.

    Raises only for invalid arguments; lookup failures are reported in the
    result's "error" field.
    """
    args = WeatherParams.from_params(params)
    logger.debug("Weather tool called", {"location": args.location, "unit": args.unit})

    try:
        resolved = await geocode_location(args.location)

        if isinstance(resolved, Disambiguation):
            return WeatherResult(
                location=args.location,
                multiple_locations=[asdict(candidate) for candidate in resolved.candidates],
                error=resolved.message,
            )

        data = await fetch_weather(resolved, args.unit)
        current = data["current"]

        result = WeatherResult(
            location=args.location,
            coordinates={"latitude": data["latitude"], "longitude": data["longitude"]},
            temperature=current["temperature_2m"],
            unit=args.unit,
            weather_code=current["weather_code"],
            weather_description=describe_weather_code(current["weather_code"]),
            humidity=current["relative_humidity_2m"],
            wind_speed=current["wind_speed_10m"],
            wind_direction=current["wind_direction_10m"],
            pressure=current["pressure_msl"],
            cloud_cover=current["cloud_cover"],
            is_day=current["is_day"] == 1,
            timezone=data.get("timezone"),
            last_updated=current.get("time"),
        )
        logger.debug("Weather tool output", result.to_dict())
        return result

    except Exception as e:
        logger.error(f"Weather lookup failed for {args.location}", e)
        return WeatherResult.failed(args.location, args.unit, str(e) or "Unknown error occurred")


weather_tool = ToolDefinition(
    name="check_weather",
    description=(
        "Get current weather information for a location using Open-Meteo API. "
        "If multiple locations are found during geocoding, choose the most likely one, "
        "but then inform the user that there are multiple locations. Number the locations "
        "and ask the user if they mean one of these locations."
    ),
    parameters=create_tool_schema(
        {
            "location": {
                "type": "string",
                "description": (
                    "The location to check weather for (city, country, or coordinates). "
                    "Be specific if there are multiple places with the same name - include "
                    "country, state, or region to avoid ambiguity."
                )
            },
            "unit": {
                "type": "string",
                "enum": list(UNITS),
                "description": "Temperature unit (defaults to celsius)"
            }
        },
        required=["location"]
    )
)
