"""Tests for the SearxNG web search tool."""

import asyncio

import httpx
import pytest

from gpt_agent.tools import websearch
from gpt_agent.tools.websearch import WebSearchParams, web_search


def searx_payload(count: int = 8) -> dict:
    return {
        "query": "python release",
        "number_of_results": 123000,
        "results": [
            {
                "title": f"Result {i}",
                "url": f"https://example.com/{i}",
                "content": f"Snippet {i}",
                "engine": "duckduckgo",
                "publishedDate": "2026-10-01T00:00:00" if i == 1 else None,
            }
            for i in range(1, count + 1)
        ],
        "infoboxes": [
            {
                "infobox": "Python (programming language)",
                "content": "Python is a high-level programming language.",
                "img_src": "https://upload.example/python.png",
                "urls": [{"title": "Official site", "url": "https://www.python.org"}],
            }
        ],
        "suggestions": ["python 3.14 release", "python changelog"],
    }


def test_default_returns_first_five(fake_http) -> None:
    requests = fake_http(websearch, lambda request: httpx.Response(200, json=searx_payload()))

    result = asyncio.run(web_search({"query": "python release"}))
    data = result.to_dict()

    assert [hit["number"] for hit in data["results"]] == [1, 2, 3, 4, 5]
    assert data["results"][0]["published_date"] == "2026-10-01T00:00:00"
    assert "published_date" not in data["results"][1]
    assert data["total_results"] == 123000
    assert "error" not in data

    assert str(requests[0].url).startswith("http://searx.test/search")
    assert requests[0].url.params["q"] == "python release"
    assert requests[0].url.params["format"] == "json"


def test_num_results(fake_http) -> None:
    fake_http(websearch, lambda request: httpx.Response(200, json=searx_payload()))

    result = asyncio.run(web_search({"query": "python release", "numResults": 2}))

    assert [hit.title for hit in result.results] == ["Result 1", "Result 2"]


def test_fewer_hits_than_requested(fake_http) -> None:
    fake_http(websearch, lambda request: httpx.Response(200, json=searx_payload(count=3)))

    result = asyncio.run(web_search({"query": "python release", "numResults": 10}))

    assert len(result.results) == 3


def test_infoboxes_and_suggestions(fake_http) -> None:
    fake_http(websearch, lambda request: httpx.Response(200, json=searx_payload()))

    data = asyncio.run(web_search({"query": "python"})).to_dict()

    assert data["infoboxes"] == [{
        "title": "Python (programming language)",
        "content": "Python is a high-level programming language.",
        "image": "https://upload.example/python.png",
        "urls": [{"title": "Official site", "url": "https://www.python.org"}],
    }]
    assert data["suggestions"] == ["python 3.14 release", "python changelog"]


def test_unreachable_instance_is_an_error_result(fake_http) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    fake_http(websearch, refuse)

    data = asyncio.run(web_search({"query": "anything"})).to_dict()

    assert data["query"] == "anything"
    assert data["total_results"] == 0
    assert data["results"] == []
    assert data["error"] == "Connection refused"


def test_http_error_is_an_error_result(fake_http) -> None:
    fake_http(websearch, lambda request: httpx.Response(403))

    result = asyncio.run(web_search({"query": "anything"}))

    assert result.results == []
    assert result.error == "SearxNG API error: 403 Forbidden"


def test_invalid_arguments() -> None:
    with pytest.raises(TypeError):
        WebSearchParams.from_params({})
    with pytest.raises(TypeError):
        WebSearchParams.from_params({"query": "x", "numResults": "five"})
    assert WebSearchParams.from_params({"query": "x"}).num_results == 5
