import asyncio
import io
import unittest
from contextlib import redirect_stdout
from typing import Any
from unittest.mock import patch

from loguru import logger

import search_chatbot.__main__ as cli
from search_chatbot.app_config import RuntimeEnv
from search_chatbot.bootstrap import AppRuntime
from search_chatbot.chatbot import Chatbot
from search_chatbot.conversation_store import ConversationStore
from search_chatbot.models import Message, Role
from search_chatbot.tool_registry import ToolRegistry
from search_chatbot.turn_engine import TurnEngine


class _ScriptedProvider:
    def __init__(self, responses: list) -> None:
        self._responses = list(responses)
        self.requests: list[list[Message]] = []
        self.closed = False

    async def chat(self, model, temperature, messages, tools, *, tool_choice="auto"):
        self.requests.append(list(messages))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self) -> None:
        self.closed = True


class _NoopSearchTool:
    @property
    def name(self) -> str:
        return "webSearch"

    @property
    def description(self) -> str:
        return "search"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {"type": "object"}

    async def execute(self, arguments: str) -> str:
        return ""


def _runtime(provider: _ScriptedProvider) -> AppRuntime:
    registry = ToolRegistry([_NoopSearchTool()])
    engine = TurnEngine(provider=provider, tool_registry=registry, model="m", temperature=0.5)
    store = ConversationStore(lambda: "persona")
    return AppRuntime(
        chatbot=Chatbot(store, engine),
        turn_engine=engine,
        store=store,
        provider=provider,
        tool_registry=registry,
        log_descriptions=[],
    )


class TerminalLoopTests(unittest.TestCase):
    def _run(self, lines: list, provider: _ScriptedProvider, api_key: str = "key") -> tuple[str, AppRuntime]:
        runtime = _runtime(provider)
        env = RuntimeEnv(provider_api_key=api_key, provider_env_var="GROQ_API_KEY", tavily_api_key=None)
        out = io.StringIO()
        with (
            patch.object(cli, "load_dotenv"),
            patch.object(cli, "load_json_config", return_value={}),
            patch.object(cli, "resolve_runtime_env", return_value=env),
            patch.object(cli, "bootstrap_runtime", return_value=runtime),
            patch("builtins.input", side_effect=lines),
            redirect_stdout(out),
        ):
            asyncio.run(cli.main())
        return out.getvalue(), runtime

    def test_bye_prints_farewell_without_completion(self) -> None:
        provider = _ScriptedProvider([])
        output, _ = self._run(["Bye", "never read"], provider)

        self.assertTrue(output.rstrip().endswith("Goodbye!"))
        self.assertEqual([], provider.requests)
        self.assertTrue(provider.closed)

    def test_eof_and_interrupt_exit(self) -> None:
        for signal in (EOFError, KeyboardInterrupt):
            provider = _ScriptedProvider([])
            output, _ = self._run([signal], provider)
            self.assertNotIn("Goodbye!", output)
            self.assertEqual([], provider.requests)
            self.assertTrue(provider.closed)

    def test_answers_are_printed_and_history_grows_locally(self) -> None:
        provider = _ScriptedProvider([Message.assistant("Paris"), Message.assistant("Berlin")])
        output, runtime = self._run(["capital of France?", "and Germany?", "bye"], provider)

        self.assertIn("assistant> Paris", output)
        self.assertIn("assistant> Berlin", output)
        self.assertEqual(2, len(provider.requests))
        self.assertEqual(2, len(provider.requests[0]))
        self.assertEqual(
            [Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.USER],
            [m.role for m in provider.requests[1]],
        )
        self.assertEqual(0, len(runtime.store))

    def test_blank_line_is_sent_to_model(self) -> None:
        provider = _ScriptedProvider([Message.assistant("Did you mean to say something?")])
        self._run(["", "bye"], provider)
        self.assertEqual(Message.user(""), provider.requests[0][-1])

    def test_failed_turn_is_logged_and_loop_continues(self) -> None:
        provider = _ScriptedProvider([ConnectionError("completion service down"), Message.assistant("back")])
        errors: list[str] = []
        sink_id = logger.add(errors.append, level="ERROR", format="{message}")
        try:
            output, _ = self._run(["first", "second", "bye"], provider)
        finally:
            logger.remove(sink_id)

        self.assertEqual(1, len(errors))
        self.assertIn("completion service down", errors[0])
        self.assertIn("assistant> back", output)
        self.assertEqual(2, len(provider.requests))

    def test_missing_api_key_exits(self) -> None:
        provider = _ScriptedProvider([])
        with self.assertRaises(SystemExit) as ctx:
            self._run(["hello"], provider, api_key="")
        self.assertEqual(1, ctx.exception.code)
        self.assertEqual([], provider.requests)


if __name__ == "__main__":
    unittest.main()
