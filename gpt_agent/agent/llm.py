"""
Model Client
============

The only place that talks to the chat completions API.

Every call sends:
1. the system prompt, ahead of everything else
2. the full conversation so far (the API keeps no state between calls)
3. every registered tool declaration, with tool_choice="auto"

and returns the model's single reply as an AssistantMessage, or None if the
API returned no choices.
"""

from pathlib import Path

from openai import AsyncOpenAI

from gpt_agent.agent.messages import AssistantMessage
from gpt_agent.tools import ToolRegistry
from gpt_agent.utils.config import Config, require_openai_key
from gpt_agent.utils.logger import Logger

logger = Logger("Model")


SYSTEM_PROMPT = """You are a helpful command-line assistant with access to tools.

Your capabilities:
- Check the current weather for any location (check_weather)
- Convert addresses to coordinates and back (forward_geocode, reverse_geocode)
- Search the web for current information (web_search)
- Read the content of a web page (get)

Guidelines:
- Use tools whenever the answer depends on live data; never invent readings or search results
- If a tool returns an error, explain it briefly and suggest what the user can try
- If check_weather returns multiple_locations, list them numbered and ask which one was meant
- After a web search, list the results numbered and offer to open one of them with get
- Be concise

Format every answer as simple HTML for a terminal renderer: use <p>, <b>, <i>,
<ul>/<ol>/<li>, <h1>-<h3> and <a href="..."> only. Do not use Markdown.
"""


def load_system_prompt(path: Path | None) -> str:
    """
    Return the system prompt: the contents of path when given, else the built-in one.

    Raises:
        FileNotFoundError: If path is given but does not exist
    """
    if path is None:
        return SYSTEM_PROMPT
    if not path.exists():
        raise FileNotFoundError(f"System prompt file not found: {path}")
    return path.read_text(encoding="utf-8")


class ModelClient:
    """
    Wraps the chat completions call with the system prompt and tool declarations.

    Example:
        client = ModelClient(registry, api_key="sk-...", model="gpt-4o")
        reply = await client.complete([{"role": "user", "content": "Hi"}])
        print(reply.content)
    """

    def __init__(
        self,
        registry: ToolRegistry,
        api_key: str,
        model: str = "gpt-4o",
        system_prompt: str = SYSTEM_PROMPT,
        timeout: float = 60.0
    ):
        """
        Args:
            registry: Source of the tool declarations sent on every call
            api_key: OpenAI API key
            model: Chat model name
            system_prompt: Instruction placed ahead of the conversation
            timeout: Per-request timeout in seconds
        """
        self.registry = registry
        self.model = model
        self.system_prompt = system_prompt
        self.openai = AsyncOpenAI(api_key=api_key, timeout=timeout)

        logger.debug(f"Model client initialized with model: {self.model}")

    @classmethod
    def from_config(cls, registry: ToolRegistry, config: Config) -> "ModelClient":
        """Build a client from configuration; requires OPENAI_API_KEY."""
        return cls(
            registry,
            api_key=config.openai.api_key or require_openai_key(),
            model=config.openai.model,
            system_prompt=load_system_prompt(config.openai.system_prompt_file),
            timeout=config.openai.timeout_seconds,
        )

    def build_messages(self, conversation: list[dict]) -> list[dict]:
        """Prepend the system prompt to the conversation."""
        return [{"role": "system", "content": self.system_prompt}, *conversation]

    async def complete(self, conversation: list[dict]) -> AssistantMessage | None:
        """
        Ask the model for its next message.

        Args:
            conversation: All messages so far, without the system prompt

        Returns:
            The model's reply, or None if the response had no choices
        """
        tools = self.registry.all_declarations()
        logger.debug(f"Calling {self.model} with {len(conversation)} messages and {len(tools)} tools")

        request: dict = {"model": self.model, "messages": self.build_messages(conversation)}
        # The API rejects an empty tools list
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"

        response = await self.openai.chat.completions.create(**request)

        if not response.choices:
            return None
        return AssistantMessage.from_openai(response.choices[0].message)
