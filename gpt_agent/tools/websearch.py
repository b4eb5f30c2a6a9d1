"""
Web Search Tool
===============

Searches the web through a locally hosted SearxNG instance
(SEARXNG_URL, default http://localhost:8080) using its JSON API:

    GET /search?q=<query>&format=json

The JSON output format has to be enabled in SearxNG's settings.yml
(search.formats: [html, json]).

Only the first numResults hits are returned (default 5), numbered from 1 so
the model can ask the user to pick one. Infoboxes (e.g. Wikipedia
summaries) and related-query suggestions are passed through. A failed
request gives zero results with "error" set.
"""

from dataclasses import dataclass, field, asdict
from typing import Any

from gpt_agent.tools import ToolDefinition, create_tool_schema, http_client
from gpt_agent.utils.config import get_config
from gpt_agent.utils.logger import Logger

logger = Logger("Tools").child("WebSearch")

DEFAULT_NUM_RESULTS = 5


class SearchAPIError(RuntimeError):
    """Raised when SearxNG answers with an HTTP error."""


@dataclass(frozen=True)
class WebSearchParams:
    query: str
    num_results: int = DEFAULT_NUM_RESULTS

    @classmethod
    def from_params(cls, params: dict) -> "WebSearchParams":
        query = params.get("query")
        if not query or not isinstance(query, str):
            raise TypeError("Query is required and must be a string")

        num_results = params.get("numResults")
        if num_results is None:
            num_results = DEFAULT_NUM_RESULTS
        if isinstance(num_results, bool) or not isinstance(num_results, (int, float)):
            raise TypeError("numResults must be a number")

        return cls(query=query, num_results=max(int(num_results), 0))


@dataclass
class SearchHit:
    number: int
    title: str
    url: str
    content: str
    engine: str | None = None
    published_date: str | None = None
    thumbnail: str | None = None


@dataclass
class Infobox:
    title: str | None
    content: str | None
    image: str | None = None
    urls: list[dict] = field(default_factory=list)


@dataclass
class WebSearchResult:
    """Result of web_search."""
    query: str
    total_results: int
    results: list[SearchHit] = field(default_factory=list)
    infoboxes: list[Infobox] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        def compact(item: Any) -> dict:
            return {key: value for key, value in asdict(item).items() if value is not None}

        data: dict[str, Any] = {
            "query": self.query,
            "total_results": self.total_results,
            "results": [compact(hit) for hit in self.results],
            "infoboxes": [compact(box) for box in self.infoboxes],
            "suggestions": self.suggestions,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def parse_searx_response(data: dict, num_results: int) -> WebSearchResult:
    """Normalize a SearxNG JSON response into a WebSearchResult."""
    hits = [
        SearchHit(
            number=index,
            title=raw.get("title", ""),
            url=raw.get("url", ""),
            content=raw.get("content", ""),
            engine=raw.get("engine"),
            published_date=raw.get("publishedDate") or None,
            thumbnail=raw.get("thumbnail") or None,
        )
        for index, raw in enumerate(data.get("results", [])[:num_results], start=1)
    ]

    infoboxes = [
        Infobox(
            title=raw.get("infobox"),
            content=raw.get("content"),
            image=raw.get("img_src") or None,
            urls=raw.get("urls") or [],
        )
        for raw in data.get("infoboxes") or []
    ]

    return WebSearchResult(
        query=data.get("query", ""),
        total_results=data.get("number_of_results", 0),
        results=hits,
        infoboxes=infoboxes,
        suggestions=list(data.get("suggestions") or []),
    )


async def web_search(params: dict) -> WebSearchResult:
    """Search the web with SearxNG and return the top results."""
    args = WebSearchParams.from_params(params)
    logger.debug(f"Performing web search: {args.query}")

    url = f"{get_config().tools.searxng_url}/search"

    try:
        logger.debug(f"Connecting to SearxNG API ({url})")
        async with http_client() as client:
            response = await client.get(url, params={"q": args.query, "format": "json"})

        if response.status_code >= 400:
            raise SearchAPIError(f"SearxNG API error: {response.status_code} {response.reason_phrase}")

        result = parse_searx_response(response.json(), args.num_results)
        if not result.query:
            result.query = args.query

        logger.debug(f"Web search returned {len(result.results)} results")
        return result

    except Exception as e:
        logger.error(f"Web search failed: {args.query}", e)
        return WebSearchResult(
            query=args.query,
            total_results=0,
            error=str(e) or "Unknown error occurred",
        )


web_search_tool = ToolDefinition(
    name="web_search",
    description="Perform a web search using SearxNG and return a list of results",
    parameters=create_tool_schema(
        {
            "query": {
                "type": "string",
                "description": "The search query to perform"
            },
            "numResults": {
                "type": "number",
                "description": f"The number of results to return (default is {DEFAULT_NUM_RESULTS})"
            }
        },
        required=["query"]
    )
)
