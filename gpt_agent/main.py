"""
GPT Agent - Main Entry Point
============================

This is the main entry point for the assistant. It:
1. Parses the command line
2. Loads configuration and sets up logging
3. Builds the tool registry, model client and assistant bridge
4. Answers one request, or runs the interactive loop

Run with:
    python -m gpt_agent.main "What's the weather in Paris?"

Or after installing:
    gpt-agent                 # interactive, "." to exit
    gpt-agent "Search for the latest Python release"
"""

import argparse
import asyncio
import sys

from openai import OpenAIError

from gpt_agent.agent.core import AssistantBridge, AssistantError
from gpt_agent.agent.llm import ModelClient
from gpt_agent.client.cli import print_line, run_interactive, run_turn
from gpt_agent.memory.history import HistoryStore
from gpt_agent.tools import ToolRegistry
from gpt_agent.utils.config import Config, get_config
from gpt_agent.utils.logger import Colors, Logger, set_debug_file, set_level

main_logger = Logger("Main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gpt-agent",
        description="Command-line assistant with weather, geocoding, web search and page tools",
    )
    parser.add_argument(
        "prompt",
        nargs="?",
        help="Request to answer once; omit to start the interactive loop",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        type=str.lower,
        default=None,
        help="Terminal log level (default from env LOG_LEVEL)",
    )
    return parser


def build_bridge(config: Config) -> AssistantBridge:
    """
    Create the registry, model client and bridge, and register the tools.

    Raises:
        ValueError: If OPENAI_API_KEY is missing
    """
    registry = ToolRegistry()
    model = ModelClient.from_config(registry, config)
    bridge = AssistantBridge(
        registry,
        model,
        max_tool_rounds=config.agent.max_tool_rounds,
        parallel_tools=config.agent.parallel_tools,
    )
    bridge.initialize()
    return bridge


async def main(argv: list[str] | None = None) -> int:
    """
    Main async entry point.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    config = get_config()
    set_level(args.log_level or config.log_level)
    set_debug_file(config.debug_log_file if config.debug else None)

    try:
        bridge = build_bridge(config)
    except (ValueError, FileNotFoundError) as e:
        main_logger.error("Failed to start", e)
        return 1

    store = HistoryStore(config.history.path)

    if args.prompt is not None:
        try:
            await run_turn(bridge, store, args.prompt)
        except (AssistantError, OpenAIError) as e:
            print_line(str(e), Colors.ERROR)
            return 1
        return 0

    await run_interactive(bridge, store)
    return 0


def run() -> None:
    """
    Synchronous entry point.

    This is called when running with the `gpt-agent` command.
    """
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
