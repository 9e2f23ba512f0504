from typing import Protocol, runtime_checkable

from search_chatbot.models import Message

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


@runtime_checkable
class LLMProvider(Protocol):
    async def chat(
        self,
        model: str,
        temperature: float,
        messages: list[Message],
        tools: list[dict],
        *,
        tool_choice: str = "auto",
    ) -> Message | None:
        """Return the assistant message of one completion, or None if absent."""
        ...

    async def close(self) -> None: ...


def create_provider(
    provider_name: str,
    api_key: str,
    *,
    base_url: str | None = None,
    retry_attempts: int = 1,
) -> LLMProvider:
    """Factory: create an LLMProvider by name."""
    from search_chatbot.providers.openai_provider import OpenAIProvider

    name = provider_name.strip().lower()
    if name == "groq":
        return OpenAIProvider(api_key, base_url=base_url or GROQ_BASE_URL, retry_attempts=retry_attempts)
    if name == "openai":
        return OpenAIProvider(api_key, base_url=base_url, retry_attempts=retry_attempts)
    raise ValueError(f"Unknown provider: {provider_name!r}. Supported: 'groq', 'openai'")
