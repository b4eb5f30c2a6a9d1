"""
GPT Agent - Tool-Calling Command-Line Assistant
===============================================

Forwards your requests to a chat model, runs the tools the model asks for
and prints the final answer.

This package provides:
- Assistant bridge: the model/tool orchestration loop
- Tool registry with fault isolation
- Tools for weather, geocoding, web search and page fetching
- A terminal client with persistent conversation history
"""

__version__ = "1.0.0"
