"""Tests for the command-line entry point."""

import asyncio

from gpt_agent import main as main_module
from gpt_agent.agent.core import AssistantBridge
from gpt_agent.agent.messages import AssistantMessage
from gpt_agent.tools import ToolRegistry


class OneReplyModel:
    def __init__(self, reply):
        self.reply = reply

    async def complete(self, conversation):
        return self.reply


def test_parser() -> None:
    args = main_module.build_parser().parse_args(["What's the weather?", "--log-level", "DEBUG"])

    assert args.prompt == "What's the weather?"
    assert args.log_level == "debug"
    assert main_module.build_parser().parse_args([]).prompt is None


def test_missing_api_key_exits_with_error(monkeypatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    assert asyncio.run(main_module.main(["hello"])) == 1


def test_build_bridge_registers_tools(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("MAX_TOOL_ROUNDS", "4")

    bridge = main_module.build_bridge(main_module.get_config())

    assert bridge.max_tool_rounds == 4
    assert bridge.get_tool_info().total_tools == 5


def test_one_shot_prompt(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setenv("HISTORY_FILE", str(tmp_path / "history.json"))

    def fake_bridge(config):
        model = OneReplyModel(AssistantMessage(content="<p>Sunny</p>"))
        return AssistantBridge(ToolRegistry(), model, register_tools=lambda registry: None)

    monkeypatch.setattr(main_module, "build_bridge", fake_bridge)

    assert asyncio.run(main_module.main(["Weather?"])) == 0
    assert "Sunny" in capsys.readouterr().out


def test_one_shot_failure_exit_code(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("HISTORY_FILE", str(tmp_path / "history.json"))

    def fake_bridge(config):
        return AssistantBridge(ToolRegistry(), OneReplyModel(None), register_tools=lambda registry: None)

    monkeypatch.setattr(main_module, "build_bridge", fake_bridge)

    assert asyncio.run(main_module.main(["Weather?"])) == 1
