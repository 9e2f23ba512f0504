from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from loguru import logger

from search_chatbot.models import Message
from search_chatbot.provider import LLMProvider
from search_chatbot.tool_registry import ToolRegistry, UnknownToolError

FAREWELL_MESSAGE = "Goodbye!"
EMPTY_ANSWER_MESSAGE = "Sorry! Can you retry later ?"
RETRIES_EXHAUSTED_MESSAGE = "Sorry! We couldn't find the answer to your question.Can you retry?"

DEFAULT_MAX_RETRIES = 5


class TurnState(str, Enum):
    AWAITING_COMPLETION = "awaiting_completion"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"
    RETRIES_EXHAUSTED = "retries_exhausted"
    FAREWELL = "farewell"


@dataclass(frozen=True)
class TurnResult:
    answer: str
    state: TurnState
    completion_calls: int


class TurnEngine:
    """Runs one user turn: completion calls interleaved with tool calls.

    ``max_retries`` bounds the number of tool rounds, so a turn makes at most
    ``max_retries + 1`` completion calls. Completion errors propagate; tool
    errors are reported back to the model as tool output.
    """

    def __init__(
        self,
        *,
        provider: LLMProvider,
        tool_registry: ToolRegistry,
        model: str,
        temperature: float,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> None:
        self._provider = provider
        self._tool_registry = tool_registry
        self._tool_schemas = tool_registry.schemas()
        self._model = model
        self._temperature = temperature
        self._max_retries = max_retries

    async def run(self, *, messages: list[Message], user_message: str) -> TurnResult:
        """Append the turn to ``messages`` in place and return its answer."""
        messages.append(Message.user(user_message))

        if user_message.lower() == "bye":
            return TurnResult(FAREWELL_MESSAGE, TurnState.FAREWELL, 0)

        count = 0
        while True:
            if count > self._max_retries:
                logger.warning(
                    f"No final answer after {count} completion call(s); giving up on this turn"
                )
                return TurnResult(RETRIES_EXHAUSTED_MESSAGE, TurnState.RETRIES_EXHAUSTED, count)
            count += 1

            response = await self._provider.chat(
                self._model,
                self._temperature,
                messages,
                self._tool_schemas,
                tool_choice="auto",
            )

            if response is not None:
                messages.append(response)

            if response is None or not response.tool_calls:
                return TurnResult(
                    (response.content if response else None) or EMPTY_ANSWER_MESSAGE,
                    TurnState.DONE,
                    count,
                )

            tool_names = ", ".join(tc.name for tc in response.tool_calls)
            logger.info(f"Running {tool_names} (round {count}/{self._max_retries + 1})")
            await self.execute_tools(messages, response)

    async def execute_tools(self, messages: list[Message], response: Message) -> None:
        for tool_call in response.tool_calls:
            try:
                result = await self._tool_registry.invoke(tool_call.name, tool_call.arguments)
            except UnknownToolError:
                logger.warning(f"Model requested unknown tool {tool_call.name!r}")
                result = f'Error: unknown tool "{tool_call.name}"'
            messages.append(Message.tool(tool_call.id, result))
