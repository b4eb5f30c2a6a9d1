"""
Assistant Bridge
================

The orchestration loop between the model and the tools.

    Conversation (history + user message)
         │
         ▼
    ┌─► AWAITING_MODEL: call the model with the whole conversation
    │        │
    │   ┌─── Has Tool Calls? ───┐
    │   │                       │
    │   Yes                     No
    │   │                       │
    │   ▼                       ▼
    │   DISPATCHING_TOOLS      DONE: return the reply
    │   append the assistant message,
    │   run every call in model order,
    │   append one "tool" message per call
    │   │
    └───┘

Failure policy:
- A failed tool call is just another tool message; the model decides what
  to tell the user.
- No reply from the model aborts the turn with AssistantError; it is not
  retried.
- More than max_tool_rounds tool rounds aborts the turn with
  MaxToolRoundsExceeded, so a model that keeps asking for tools can't loop
  forever.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from gpt_agent.agent.messages import AssistantMessage
from gpt_agent.agent.tools_executor import ToolExecutor
from gpt_agent.tools import ToolRegistry, register_builtin_tools
from gpt_agent.utils.logger import Logger

if TYPE_CHECKING:
    from gpt_agent.agent.llm import ModelClient

logger = Logger("Bridge")


class AssistantError(RuntimeError):
    """Raised when a turn can't produce an answer (no or invalid model reply)."""


class MaxToolRoundsExceeded(AssistantError):
    """Raised when the model is still requesting tools after max_tool_rounds rounds."""


class BridgeState(Enum):
    AWAITING_MODEL = "awaiting_model"
    DISPATCHING_TOOLS = "dispatching_tools"
    DONE = "done"


@dataclass
class AssistantTurn:
    """
    Outcome of one user turn.

    Attributes:
        reply: The model's final message (no tool calls)
        messages: The full conversation, ending with the final reply
        rounds: Number of tool rounds that ran
    """
    reply: AssistantMessage
    messages: list[dict]
    rounds: int


@dataclass
class ToolBridgeInfo:
    registered_tools: list[str]
    total_tools: int
    openai_tools: list[dict]


class AssistantBridge:
    """
    Drives the model/tool conversation to a final answer.

    Example:
        registry = ToolRegistry()
        bridge = AssistantBridge(registry, ModelClient.from_config(registry, config))

        turn = await bridge.run_assistant_with_tools(history + [user_message(text)])
        print(turn.reply.content)
    """

    DEFAULT_MAX_TOOL_ROUNDS = 10

    def __init__(
        self,
        registry: ToolRegistry,
        model: "ModelClient",
        max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS,
        parallel_tools: bool = False,
        register_tools: Callable[[ToolRegistry], None] = register_builtin_tools
    ):
        """
        Args:
            registry: Registry the tools are registered on and dispatched through
            model: Client used for every model call
            max_tool_rounds: Tool rounds allowed per turn before giving up
            parallel_tools: Run the calls of a round concurrently
            register_tools: Populates the registry on initialize()
        """
        self.registry = registry
        self.model = model
        self.max_tool_rounds = max_tool_rounds
        self.parallel_tools = parallel_tools
        self.tool_executor = ToolExecutor(registry)
        self._register_tools = register_tools
        self._initialized = False
        self.state = BridgeState.DONE

    def initialize(self) -> None:
        """Register the tools. Safe to call more than once."""
        if self._initialized:
            return

        self._register_tools(self.registry)
        logger.info(f"Assistant bridge initialized with tools: {self.registry.list_names()}")
        self._initialized = True

    def _enter(self, state: BridgeState) -> None:
        logger.debug(f"State: {self.state.value} -> {state.value}")
        self.state = state

    async def run_assistant_with_tools(self, messages: list[dict]) -> AssistantTurn:
        """
        Run the model/tool loop until the model answers without tool calls.

        Args:
            messages: History plus the new user message (no system prompt);
                the list is copied, not modified

        Returns:
            AssistantTurn with the final reply and the full conversation

        Raises:
            AssistantError: If the model returns no message
            MaxToolRoundsExceeded: If the round limit is reached
        """
        self.initialize()
        conversation = list(messages)
        rounds = 0

        while True:
            self._enter(BridgeState.AWAITING_MODEL)
            reply = await self.model.complete(conversation)
            if reply is None:
                raise AssistantError("No assistant response")

            if not reply.wants_tools:
                conversation.append(reply.to_openai_message())
                self._enter(BridgeState.DONE)
                logger.info(f"Turn finished after {rounds} tool round(s)")
                return AssistantTurn(reply=reply, messages=conversation, rounds=rounds)

            if rounds >= self.max_tool_rounds:
                self._enter(BridgeState.DONE)
                raise MaxToolRoundsExceeded(
                    f"Model still requesting tools after {self.max_tool_rounds} rounds"
                )

            rounds += 1
            self._enter(BridgeState.DISPATCHING_TOOLS)
            logger.info(
                f"Round {rounds}: model requested {len(reply.tool_calls)} tool call(s): "
                f"{[call.name for call in reply.tool_calls]}"
            )

            if self.parallel_tools:
                results = await self.tool_executor.execute_parallel(reply.tool_calls)
            else:
                results = await self.tool_executor.execute_all(reply.tool_calls)

            # The assistant's request goes in before its results
            conversation.append(reply.to_openai_message())
            conversation.extend(self.tool_executor.format_results_for_messages(results))

    def get_registered_tools(self) -> list[str]:
        """Names of all registered tools."""
        return self.registry.list_names()

    def get_tool_info(self) -> ToolBridgeInfo:
        """Names, count and OpenAI declarations of the registered tools."""
        return ToolBridgeInfo(
            registered_tools=self.registry.list_names(),
            total_tools=self.registry.size(),
            openai_tools=self.registry.all_declarations(),
        )
