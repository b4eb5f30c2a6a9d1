"""
Memory
======

On-disk conversation history shared across runs.
"""

from gpt_agent.memory.history import HistoryStore, Message

__all__ = ["HistoryStore", "Message"]
