"""
Tools System
============

Tools are the capabilities the model may ask the assistant to run:

- check_weather: current conditions for a place (Open-Meteo)
- forward_geocode / reverse_geocode: address <-> coordinates (geocode.maps.co)
- web_search: search results from a local SearxNG instance
- get: the readable text of a web page (Playwright)

How Tools Work:
1. Each tool declares a name, a description and a JSON Schema for its
   parameters. The declarations are sent to the model on every call.
2. The model answers with tool calls naming a tool and its JSON arguments.
3. The registry looks the tool up and runs its handler.
4. The handler's result (or the error it raised) comes back as a ToolResult,
   which is serialized into a "tool" message for the model.

The registry is the fault boundary: whatever a handler raises is turned into
a failed ToolResult, so one misbehaving tool can never abort the
conversation.

This module provides:
- ToolDefinition: the declared name, description and parameter schema
- ToolResult: standardized result of running a tool
- ToolRegistry: name -> (definition, handler) mapping with safe execution
- create_tool_schema / http_client: helpers shared by the tool modules
- register_builtin_tools: registers the fixed tool set on a registry
"""

import inspect
import json
from dataclasses import dataclass, field, is_dataclass, asdict
from typing import Any, Awaitable, Callable

import httpx

from gpt_agent.utils.config import get_config
from gpt_agent.utils.logger import Logger

logger = Logger("Tools")

# A handler takes the decoded JSON arguments and returns a result record.
# Handlers may be plain functions or coroutines.
ToolHandler = Callable[[dict], Awaitable[Any] | Any]


def to_jsonable(value: Any) -> Any:
    """
    Convert a tool result into plain JSON-compatible data.

    Result records expose to_dict(); other dataclasses are converted with
    asdict(); everything else is passed through unchanged.
    """
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return value


@dataclass
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        success: Whether the tool executed without raising
        data: The handler's return value (varies by tool)
        error: Error message if success is False
    """
    success: bool
    data: Any = None
    error: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "data": to_jsonable(self.data),
            "error": self.error
        }

    def to_message(self) -> str:
        """
        Format as the content of a "tool" message for the model.

        Successful results carry the result payload; anything else
        (failure, or success with no payload) carries {"error": ...}.
        """
        if self.success and self.data is not None:
            return json.dumps(to_jsonable(self.data), default=str)
        return json.dumps({"error": self.error})


@dataclass(frozen=True)
class ToolDefinition:
    """
    Declaration of a tool: what the model sees.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (shown to the model)
        parameters: JSON Schema object describing the arguments

    Example:
        weather_tool = ToolDefinition(
            name="check_weather",
            description="Get current weather information for a location",
            parameters=create_tool_schema(
                {"location": {"type": "string", "description": "City or place"}},
                required=["location"],
            ),
        )
    """
    name: str
    description: str
    parameters: dict = field(default_factory=dict)

    def to_openai_function(self) -> dict:
        """
        Convert to OpenAI function calling format.

        Returns:
            Dict in the format expected by the chat completions "tools" list
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


@dataclass(frozen=True)
class RegisteredTool:
    """A definition paired with the handler that implements it."""
    definition: ToolDefinition
    handler: ToolHandler


def create_tool_schema(properties: dict, required: list[str] | None = None) -> dict:
    """
    Build the JSON Schema object for a tool's parameters.

    All tool parameters are wrapped in a single object.

    Args:
        properties: Parameter name -> property schema
        required: Names of the mandatory parameters

    Returns:
        {"type": "object", "properties": ..., "required": [...]}
    """
    return {
        "type": "object",
        "properties": properties,
        "required": list(required or []),
    }


def http_client() -> httpx.AsyncClient:
    """
    Create the HTTP client used by the tool modules.

    Every outbound tool request shares the timeout from HTTP_TIMEOUT_SECONDS.
    Use it as an async context manager:

        async with http_client() as client:
            response = await client.get(url, params=...)
    """
    timeout = get_config().tools.http_timeout_seconds
    return httpx.AsyncClient(timeout=timeout, follow_redirects=True)


class ToolRegistry:
    """
    Registry of the tools available to the model.

    The registry is built once at start-up and only read afterwards.
    Registering a name twice replaces the earlier entry, so re-running
    initialization is harmless.

    Example:
        registry = ToolRegistry()
        registry.register(weather_tool, check_weather)

        result = await registry.execute("check_weather", {"location": "Paris"})
        declarations = registry.all_declarations()
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._tools: dict[str, RegisteredTool] = {}

    def register(self, definition: ToolDefinition, handler: ToolHandler) -> None:
        """
        Register a tool under definition.name.

        Args:
            definition: The tool's name, description and parameter schema
            handler: The function that runs the tool
        """
        if definition.name in self._tools:
            logger.debug(f"Replacing tool: {definition.name}")
        self._tools[definition.name] = RegisteredTool(definition, handler)
        logger.debug(f"Registered tool: {definition.name}")

    def get(self, name: str) -> RegisteredTool | None:
        """Get a registered tool by exact name, or None."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        """Check if a tool with this name is registered."""
        return name in self._tools

    def describe(self, name: str) -> ToolDefinition | None:
        """
        Get the declaration of a tool without exposing its handler.

        Args:
            name: The tool name

        Returns:
            The ToolDefinition, or None if not found
        """
        entry = self._tools.get(name)
        return entry.definition if entry else None

    def all_declarations(self) -> list[dict]:
        """
        Get every tool in OpenAI function format.

        Returns:
            List of function declarations for the chat completions API
        """
        return [entry.definition.to_openai_function() for entry in self._tools.values()]

    def list_names(self) -> list[str]:
        """Get list of all tool names, in registration order."""
        return list(self._tools.keys())

    def size(self) -> int:
        """Number of registered tools."""
        return len(self._tools)

    async def execute(self, name: str, params: dict) -> ToolResult:
        """
        Execute a tool by name.

        Never raises: an unknown name or any exception from the handler is
        returned as a failed ToolResult.

        Args:
            name: The tool name
            params: Decoded arguments to pass to the handler

        Returns:
            ToolResult wrapping the handler's return value or its error
        """
        entry = self.get(name)
        if not entry:
            return ToolResult(success=False, error=f"Tool '{name}' not found")

        try:
            logger.info(f"Executing tool: {name}")
            result = entry.handler(params)
            if inspect.isawaitable(result):
                result = await result
            return ToolResult(success=True, data=result)
        except Exception as e:
            logger.error(f"Tool execution failed: {name}", e)
            return ToolResult(success=False, error=str(e) or type(e).__name__)


def register_builtin_tools(registry: ToolRegistry) -> None:
    """
    Register the fixed tool set on a registry.

    The tool modules import this package, so they are imported here rather
    than at module level.
    """
    from gpt_agent.tools import geocode, page_fetch, weather, websearch

    registry.register(weather.weather_tool, weather.check_weather)
    registry.register(geocode.forward_geocode_tool, geocode.forward_geocode)
    registry.register(geocode.reverse_geocode_tool, geocode.reverse_geocode)
    registry.register(websearch.web_search_tool, websearch.web_search)
    registry.register(page_fetch.get_tool, page_fetch.get_page)

    logger.info(f"Registered {registry.size()} tools")


__all__ = [
    "ToolDefinition",
    "ToolHandler",
    "ToolResult",
    "ToolRegistry",
    "create_tool_schema",
    "http_client",
    "register_builtin_tools",
    "to_jsonable",
]
