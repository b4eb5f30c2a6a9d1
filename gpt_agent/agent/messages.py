"""
Conversation Messages
=====================

The conversation is a list of chat-completions message dicts:

    {"role": "system", "content": ...}
    {"role": "user", "content": ...}
    {"role": "assistant", "content": ..., "tool_calls": [...]}
    {"role": "tool", "tool_call_id": ..., "content": "<json>"}

Order matters and the list only grows. Every "tool" message answers one
tool call of the assistant message right before it.

The model's reply is parsed into AssistantMessage/ToolCall so the loop
doesn't depend on the OpenAI SDK's response classes.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ToolCall:
    """
    A tool call requested by the model.

    Attributes:
        id: The tool call ID (for matching results)
        name: The tool name
        arguments: The raw JSON argument string, exactly as the model sent it
    """
    id: str
    name: str
    arguments: str

    def to_openai(self) -> dict:
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


@dataclass(frozen=True)
class AssistantMessage:
    """
    A reply from the model: text, tool calls, or both.

    Attributes:
        content: The text of the reply, if any
        tool_calls: Tool calls in the order the model listed them
    """
    content: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)

    @property
    def wants_tools(self) -> bool:
        return bool(self.tool_calls)

    def to_openai_message(self) -> dict:
        """Format as an assistant message to append to the conversation."""
        message: dict[str, Any] = {"role": "assistant", "content": self.content}
        if self.tool_calls:
            message["tool_calls"] = [call.to_openai() for call in self.tool_calls]
        return message

    @classmethod
    def from_openai(cls, message: Any) -> "AssistantMessage":
        """
        Build from an OpenAI SDK ChatCompletionMessage.

        Only function tool calls are kept; the tools we declare are all
        functions.
        """
        calls = []
        for tc in message.tool_calls or []:
            function = getattr(tc, "function", None)
            if function is None:
                continue
            calls.append(ToolCall(id=tc.id, name=function.name, arguments=function.arguments or ""))
        return cls(content=message.content, tool_calls=calls)


def user_message(content: str) -> dict:
    return {"role": "user", "content": content}


def tool_message(tool_call_id: str, content: str) -> dict:
    return {"role": "tool", "tool_call_id": tool_call_id, "content": content}
