"""
Conversation History
====================

Persists the conversation between runs as a JSON list of
{"role": ..., "content": ...} messages (default: data/history.json).

Only the user's messages and the assistant's final answers are stored;
tool calls and tool results stay inside the turn that produced them.

The file is read at the start of a turn and rewritten in full at the end.
A failed turn writes nothing, so it leaves no trace in the history.
"""

import json
from dataclasses import dataclass
from pathlib import Path

from gpt_agent.utils.logger import Logger

logger = Logger("History")


@dataclass
class Message:
    """
    A single stored message.

    Attributes:
        role: "user" or "assistant"
        content: The message text
    """
    role: str
    content: str

    def to_dict(self) -> dict:
        """Convert to dictionary format for LLM API calls."""
        return {
            "role": self.role,
            "content": self.content,
        }


class HistoryStore:
    """
    JSON file storage for the conversation history.

    Example:
        store = HistoryStore(Path("data/history.json"))
        history = store.load()
        ...
        store.append_turn(history, "What's the weather in Paris?", "<p>It's sunny.</p>")
    """

    def __init__(self, path: Path):
        """
        Args:
            path: Location of the JSON history file
        """
        self.path = path

    def _ensure_file(self) -> None:
        """Create the parent directory and an empty history if missing."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self.path.write_text(json.dumps([], indent=2), encoding="utf-8")

    def load(self) -> list[dict]:
        """
        Load the stored messages.

        Returns:
            Messages in chronological order, as chat message dicts
        """
        self._ensure_file()
        history = json.loads(self.path.read_text(encoding="utf-8")) or []
        logger.debug(f"Loaded {len(history)} messages from {self.path}")
        return history

    def save(self, history: list[dict]) -> None:
        """Rewrite the history file with history."""
        self._ensure_file()
        self.path.write_text(json.dumps(history, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.debug(f"Saved {len(history)} messages to {self.path}")

    def append_turn(self, history: list[dict], user_text: str, answer: str) -> list[dict]:
        """
        Save history plus one completed turn.

        Args:
            history: The messages loaded at the start of the turn
            user_text: What the user asked
            answer: The assistant's final answer

        Returns:
            The updated history
        """
        updated = [
            *history,
            Message("user", user_text).to_dict(),
            Message("assistant", answer).to_dict(),
        ]
        self.save(updated)
        return updated

    def clear(self) -> None:
        """Forget the whole conversation."""
        self.save([])
