"""
Geocoding Tools
===============

Address <-> coordinate conversion with the geocode.maps.co API
(OpenStreetMap Nominatim data):

- forward_geocode: free-text address -> candidate places
- reverse_geocode: latitude/longitude -> nearest known place

An API key is required (GEOCODE_API_KEY). Without one, or when the API is
unreachable, the tools return an empty result list with "error" set.
Out-of-range coordinates are a caller mistake and raise before any request
is made.
"""

from dataclasses import dataclass, field, asdict
from typing import Any

from gpt_agent.tools import ToolDefinition, create_tool_schema, http_client
from gpt_agent.utils.config import get_config
from gpt_agent.utils.logger import Logger

logger = Logger("Tools").child("Geocode")

GEOCODE_API = "https://geocode.maps.co"


class GeocodeAPIError(RuntimeError):
    """Raised when the geocoding API is not configured or answers with an error."""


@dataclass(frozen=True)
class ForwardGeocodeParams:
    address: str

    @classmethod
    def from_params(cls, params: dict) -> "ForwardGeocodeParams":
        address = params.get("address")
        if not address or not isinstance(address, str):
            raise TypeError("Address is required and must be a string")
        return cls(address=address)


@dataclass(frozen=True)
class ReverseGeocodeParams:
    latitude: float
    longitude: float

    @classmethod
    def from_params(cls, params: dict) -> "ReverseGeocodeParams":
        latitude = params.get("latitude")
        longitude = params.get("longitude")

        # bool is an int subclass, but true/false are not coordinates
        for value in (latitude, longitude):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError("Latitude and longitude must be numbers")

        if latitude < -90 or latitude > 90:
            raise ValueError("Latitude must be between -90 and 90 degrees")
        if longitude < -180 or longitude > 180:
            raise ValueError("Longitude must be between -180 and 180 degrees")

        return cls(latitude=latitude, longitude=longitude)

    @property
    def query(self) -> str:
        return f"{self.latitude}, {self.longitude}"


@dataclass
class Place:
    """A single geocoding match."""
    place_id: int | None
    display_name: str | None
    lat: str | None
    lon: str | None
    address: dict | None = None
    importance: float | None = None
    place_class: str | None = None
    type: str | None = None

    @classmethod
    def from_osm(cls, raw: dict) -> "Place":
        return cls(
            place_id=raw.get("place_id"),
            display_name=raw.get("display_name"),
            lat=raw.get("lat"),
            lon=raw.get("lon"),
            address=raw.get("address"),
            importance=raw.get("importance"),
            place_class=raw.get("class"),
            type=raw.get("type"),
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        # "class" is a keyword in Python but the field name the API uses
        data["class"] = data.pop("place_class")
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class GeocodeResult:
    """Result of forward_geocode and reverse_geocode."""
    query: str
    type: str  # "forward" or "reverse"
    results: list[Place] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "query": self.query,
            "type": self.type,
            "results": [place.to_dict() for place in self.results],
        }
        if self.error is not None:
            data["error"] = self.error
        return data


async def _make_geocode_request(endpoint: str, params: dict) -> Any:
    """
    Call a geocode.maps.co endpoint with the configured API key.

    Args:
        endpoint: "search" or "reverse"
        params: Query parameters, without the API key

    Returns:
        The decoded JSON response
    """
    api_key = get_config().tools.geocode_api_key
    if not api_key:
        raise GeocodeAPIError("GEOCODE_API_KEY environment variable is required for geocoding")

    url = f"{GEOCODE_API}/{endpoint}"
    logger.debug(f"Connecting to geocode API ({url})", params)

    async with http_client() as client:
        response = await client.get(url, params={**params, "api_key": api_key})

    if response.status_code >= 400:
        raise GeocodeAPIError(f"Geocoding API error: {response.status_code} {response.reason_phrase}")

    data = response.json()
    logger.debug("Geocode API output", {"response": data})
    return data


async def forward_geocode(params: dict) -> GeocodeResult:
    """Convert an address to candidate places with coordinates."""
    args = ForwardGeocodeParams.from_params(params)
    logger.debug("Forward geocode tool called", {"address": args.address})

    try:
        raw_results = await _make_geocode_request("search", {"q": args.address})
        return GeocodeResult(
            query=args.address,
            type="forward",
            results=[Place.from_osm(raw) for raw in raw_results],
        )
    except Exception as e:
        logger.error(f"Forward geocode failed: {args.address}", e)
        return GeocodeResult(query=args.address, type="forward", error=str(e) or "Unknown error occurred")


async def reverse_geocode(params: dict) -> GeocodeResult:
    """Convert a latitude/longitude pair to the nearest known place."""
    args = ReverseGeocodeParams.from_params(params)
    logger.debug("Reverse geocode tool called", {"latitude": args.latitude, "longitude": args.longitude})

    try:
        raw = await _make_geocode_request("reverse", {"lat": args.latitude, "lon": args.longitude})
        place = Place.from_osm(raw)
        # The reverse endpoint carries no ranking fields
        place.importance = None
        place.place_class = None
        place.type = None
        return GeocodeResult(query=args.query, type="reverse", results=[place])
    except Exception as e:
        logger.error(f"Reverse geocode failed: {args.query}", e)
        return GeocodeResult(query=args.query, type="reverse", error=str(e) or "Unknown error occurred")


forward_geocode_tool = ToolDefinition(
    name="forward_geocode",
    description="Convert an address to geographic coordinates (latitude and longitude)",
    parameters=create_tool_schema(
        {
            "address": {
                "type": "string",
                "description": 'The address to geocode (e.g., "1600 Pennsylvania Avenue NW, Washington, DC")'
            }
        },
        required=["address"]
    )
)


reverse_geocode_tool = ToolDefinition(
    name="reverse_geocode",
    description="Convert geographic coordinates (latitude and longitude) to an address",
    parameters=create_tool_schema(
        {
            "latitude": {
                "type": "number",
                "description": "The latitude coordinate (decimal degrees)"
            },
            "longitude": {
                "type": "number",
                "description": "The longitude coordinate (decimal degrees)"
            }
        },
        required=["latitude", "longitude"]
    )
)
