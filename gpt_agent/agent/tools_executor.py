"""
Tool Executor
=============

Runs the tool calls of one model round.

The executor:
1. Decodes each call's JSON arguments
2. Executes the tool through the registry
3. Formats each result as a "tool" message

Malformed arguments never raise: they become a failed result, just like a
tool that raised, so the model sees the problem and can retry.

Results always come back in the order the model listed the calls, whether
the calls ran one after another (execute_all) or concurrently
(execute_parallel), because each "tool" message has to line up with its
call.
"""

import asyncio
import json
from dataclasses import dataclass

from gpt_agent.agent.messages import ToolCall, tool_message
from gpt_agent.tools import ToolRegistry, ToolResult
from gpt_agent.utils.logger import Logger

logger = Logger("ToolExecutor")


@dataclass
class ToolCallResult:
    """
    Result of executing a tool call.

    Attributes:
        tool_call_id: The ID the model gave the tool call
        name: The tool name
        result: The tool result
    """
    tool_call_id: str
    name: str
    result: ToolResult

    def to_openai_message(self) -> dict:
        """Format as a tool result message for the conversation."""
        return tool_message(self.tool_call_id, self.result.to_message())


def parse_arguments(tool_call: ToolCall) -> dict:
    """
    Decode a tool call's argument string.

    An empty string means no arguments.

    Raises:
        ValueError: If the string is not valid JSON or not a JSON object
    """
    if not tool_call.arguments.strip():
        return {}
    try:
        arguments = json.loads(tool_call.arguments)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid arguments for tool '{tool_call.name}': {e}") from e
    if not isinstance(arguments, dict):
        raise ValueError(
            f"Invalid arguments for tool '{tool_call.name}': expected a JSON object, "
            f"got {type(arguments).__name__}"
        )
    return arguments


class ToolExecutor:
    """
    Executes tools called by the model.

    Example:
        executor = ToolExecutor(registry)
        results = await executor.execute_all(reply.tool_calls)

        for result in results:
            messages.append(result.to_openai_message())
    """

    def __init__(self, registry: ToolRegistry):
        """
        Args:
            registry: The registry to dispatch calls to
        """
        self.registry = registry

    async def execute_one(self, tool_call: ToolCall) -> ToolCallResult:
        """
        Execute a single tool call.

        Args:
            tool_call: The tool call to execute

        Returns:
            ToolCallResult with the execution result
        """
        logger.info(f"Executing tool: {tool_call.name}")

        try:
            arguments = parse_arguments(tool_call)
        except ValueError as e:
            logger.warning(str(e))
            result = ToolResult(success=False, error=str(e))
        else:
            logger.debug(f"Arguments for {tool_call.name}", arguments)
            result = await self.registry.execute(tool_call.name, arguments)

        if result.success:
            logger.debug(f"Tool {tool_call.name} succeeded")
        else:
            logger.warning(f"Tool {tool_call.name} failed: {result.error}")

        return ToolCallResult(
            tool_call_id=tool_call.id,
            name=tool_call.name,
            result=result
        )

    async def execute_all(self, tool_calls: list[ToolCall]) -> list[ToolCallResult]:
        """
        Execute tool calls one after another, in order.

        Args:
            tool_calls: List of tool calls to execute

        Returns:
            List of ToolCallResults in the same order
        """
        results = []

        for tool_call in tool_calls:
            result = await self.execute_one(tool_call)
            results.append(result)

        return results

    async def execute_parallel(self, tool_calls: list[ToolCall]) -> list[ToolCallResult]:
        """
        Execute tool calls concurrently.

        Results are returned in the same order as the calls.
        """
        tasks = [self.execute_one(tc) for tc in tool_calls]
        results = await asyncio.gather(*tasks)

        return list(results)

    def format_results_for_messages(self, results: list[ToolCallResult]) -> list[dict]:
        """Format tool results as messages for the next model call."""
        return [result.to_openai_message() for result in results]
