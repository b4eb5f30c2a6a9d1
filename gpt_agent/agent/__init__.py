"""
Agent System
============

The agent turns a user message into a final answer:
1. Sends the conversation and the tool declarations to the model
2. Runs the tools the model asks for
3. Feeds the results back until the model answers in plain text

This module provides:
- AssistantBridge: the model/tool orchestration loop
- ModelClient: the chat completions call
- ToolExecutor: argument decoding and dispatch of one round of tool calls
"""

from gpt_agent.agent.core import AssistantBridge, AssistantError, AssistantTurn, MaxToolRoundsExceeded
from gpt_agent.agent.llm import ModelClient
from gpt_agent.agent.tools_executor import ToolExecutor

__all__ = [
    "AssistantBridge",
    "AssistantError",
    "AssistantTurn",
    "MaxToolRoundsExceeded",
    "ModelClient",
    "ToolExecutor",
]
