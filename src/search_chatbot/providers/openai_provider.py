from __future__ import annotations

from typing import Any

import openai
from loguru import logger
from tenacity import retry

from search_chatbot.models import Message, ToolCall
from search_chatbot.providers.common import default_retry_kwargs

_TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.APITimeoutError,
)


def _to_openai_messages(messages: list[Message]) -> list[dict]:
    return [m.to_dict() for m in messages]


def _from_openai_message(raw: Any) -> Message:
    """Convert an SDK ``ChatCompletionMessage`` into an assistant Message."""
    tool_calls = [
        ToolCall(
            id=tc.id,
            name=tc.function.name,
            arguments=tc.function.arguments or "",
        )
        for tc in (raw.tool_calls or [])
    ]
    return Message.assistant(raw.content, tool_calls)


class OpenAIProvider:
    """Chat completions over any OpenAI-compatible endpoint (Groq by default)."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        retry_attempts: int = 1,
    ):
        self._client = openai.AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._create = retry(**default_retry_kwargs(_TRANSIENT_ERRORS, retry_attempts))(
            self._create_completion
        )

    async def _create_completion(self, **kwargs: Any) -> Any:
        return await self._client.chat.completions.create(**kwargs)

    async def chat(
        self,
        model: str,
        temperature: float,
        messages: list[Message],
        tools: list[dict],
        *,
        tool_choice: str = "auto",
    ) -> Message | None:
        """Request one completion; returns the assistant message, or None when
        the response carries no choices."""
        oai_messages = _to_openai_messages(messages)
        logger.debug(
            f"API request: model={model}, temperature={temperature}, "
            f"messages={len(oai_messages)}, tools={len(tools)}"
        )
        kwargs: dict = dict(
            model=model,
            temperature=temperature,
            messages=oai_messages,
        )
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = tool_choice

        response = await self._create(**kwargs)

        choices = getattr(response, "choices", None) or []
        if not choices or choices[0].message is None:
            logger.warning("API response contained no message")
            return None

        message = _from_openai_message(choices[0].message)
        logger.debug(
            f"API response: finish_reason={choices[0].finish_reason}, "
            f"text_len={len(message.content or '')}, tool_calls={len(message.tool_calls)}"
        )
        return message

    async def close(self) -> None:
        await self._client.close()
