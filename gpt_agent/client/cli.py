"""
CLI Client
==========

Terminal side of the assistant:

- reads the user's request (one-shot or an interactive loop ending at ".")
- runs a turn through the assistant bridge with the stored history
- renders the assistant's HTML answer as colored terminal text
- saves the turn to the history file once it succeeded
"""

import re
from typing import Callable

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from openai import OpenAIError

from gpt_agent.agent.core import AssistantBridge, AssistantError, AssistantTurn
from gpt_agent.agent.messages import user_message
from gpt_agent.memory.history import HistoryStore
from gpt_agent.utils.logger import Colors, Logger

logger = Logger("CLI")

EXIT_SENTINEL = "."

BOLD = "\033[1m"
ITALIC = "\033[3m"
UNDERLINE = "\033[4m"
LINK = "\033[94m"  # Bright blue
CODE = "\033[36m"  # Cyan

_BLOCK_TAGS = {"p", "div", "section", "article", "header", "footer", "table", "tr", "pre", "blockquote"}
_HEADING_TAGS = {"h1", "h2", "h3", "h4", "h5", "h6"}


def print_line(text: str, color: str = "") -> None:
    """Print a line, optionally wrapped in an ANSI color."""
    if color:
        print(f"{color}{text}{Colors.RESET}")
    else:
        print(text)


def _render_children(tag: Tag) -> str:
    return "".join(_render_node(child) for child in tag.children)


def _render_list(tag: Tag) -> str:
    lines = []
    ordered = tag.name == "ol"
    items = [child for child in tag.children if isinstance(child, Tag) and child.name == "li"]
    for number, item in enumerate(items, start=1):
        marker = f"{number}." if ordered else "•"
        lines.append(f"{marker} {_render_children(item).strip()}")
    return "\n" + "\n".join(lines) + "\n\n"


def _render_node(node) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return re.sub(r"\s+", " ", str(node))
    if not isinstance(node, Tag):
        return ""

    name = node.name
    if name in ("script", "style"):
        return ""
    if name == "br":
        return "\n"
    if name in ("b", "strong"):
        return f"{BOLD}{_render_children(node)}{Colors.RESET}"
    if name in ("i", "em"):
        return f"{ITALIC}{_render_children(node)}{Colors.RESET}"
    if name == "code":
        return f"{CODE}{_render_children(node)}{Colors.RESET}"
    if name == "a":
        text = _render_children(node).strip()
        href = node.get("href")
        if href and href != text:
            return f"{UNDERLINE}{LINK}{text}{Colors.RESET} {Colors.DIM}({href}){Colors.RESET}"
        return f"{UNDERLINE}{LINK}{text}{Colors.RESET}"
    if name in ("ul", "ol"):
        return _render_list(node)
    if name in _HEADING_TAGS:
        return f"\n{BOLD}{UNDERLINE}{_render_children(node).strip()}{Colors.RESET}\n\n"
    if name in _BLOCK_TAGS:
        return f"\n{_render_children(node).strip()}\n\n"
    return _render_children(node)


def html_to_cli(html: str) -> str:
    """
    Render an HTML answer as ANSI-formatted terminal text.

    Plain text without tags comes back unchanged apart from whitespace.
    """
    soup = BeautifulSoup(html, "html.parser")
    text = _render_children(soup)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def get_user_input(question: str) -> str | None:
    """
    Prompt for input.

    Returns:
        The trimmed input, or None if input ended (Ctrl+D / Ctrl+C)
    """
    try:
        return input(f"{Colors.WARNING}{question}{Colors.RESET}").strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return None


async def run_turn(
    bridge: AssistantBridge,
    store: HistoryStore,
    user_text: str,
    output: Callable[[str], None] = print
) -> AssistantTurn:
    """
    Process one user request end-to-end.

    Loads the history, runs the model/tool loop, prints the answer and
    saves the turn. Nothing is saved if the turn fails.

    Raises:
        AssistantError: If there is no input or the model gives no usable answer
    """
    if not user_text:
        raise AssistantError("No user input provided")

    history = store.load()

    print(f"{Colors.DIM}Thinking...{Colors.RESET}", end="\r", flush=True)
    try:
        turn = await bridge.run_assistant_with_tools([*history, user_message(user_text)])
    finally:
        print(" " * len("Thinking..."), end="\r", flush=True)

    content = turn.reply.content
    if not content or not isinstance(content, str):
        raise AssistantError("No response from the assistant")

    output(html_to_cli(content))

    store.append_turn(history, user_text, content)
    return turn


async def run_interactive(bridge: AssistantBridge, store: HistoryStore) -> None:
    """
    Keep asking for requests until the user enters "." (or input ends).

    A failed turn is reported and the loop goes on; the history is left
    as it was before the failed turn.
    """
    while True:
        user_text = get_user_input(f'Enter your request (or "{EXIT_SENTINEL}" to exit): ')
        if user_text is None or user_text == EXIT_SENTINEL:
            return
        if not user_text:
            continue

        try:
            await run_turn(bridge, store, user_text)
        except (AssistantError, OpenAIError) as e:
            logger.error("Turn failed", e)
            print_line(str(e), Colors.ERROR)
