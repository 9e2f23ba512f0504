from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from search_chatbot.app_config import AppConfig, RuntimeEnv
from search_chatbot.chatbot import Chatbot
from search_chatbot.conversation_store import ConversationStore
from search_chatbot.logging_config import setup_logging
from search_chatbot.provider import LLMProvider, create_provider
from search_chatbot.system_prompt import get_system_prompt
from search_chatbot.tool_registry import ToolRegistry, get_all
from search_chatbot.turn_engine import TurnEngine


@dataclass
class AppRuntime:
    chatbot: Chatbot
    turn_engine: TurnEngine
    store: ConversationStore
    provider: LLMProvider
    tool_registry: ToolRegistry
    log_descriptions: list[str]

    async def shutdown(self) -> None:
        self.store.close()
        await self.provider.close()
        logger.info("Runtime shut down")


def bootstrap_runtime(app: AppConfig, env: RuntimeEnv) -> AppRuntime:
    log_descriptions = setup_logging(level=app.log_level, consumers=app.log_consumers)

    provider = create_provider(
        app.provider_name,
        env.provider_api_key,
        base_url=app.base_url,
        retry_attempts=app.completion_retry_attempts,
    )
    tool_registry = ToolRegistry(get_all(env.tavily_api_key, app.search_max_results))
    turn_engine = TurnEngine(
        provider=provider,
        tool_registry=tool_registry,
        model=app.model,
        temperature=app.temperature,
        max_retries=app.max_retries,
    )
    store = ConversationStore(get_system_prompt, ttl_seconds=app.conversation_ttl_seconds)

    logger.info(
        f"Runtime ready: provider={app.provider_name}, model={app.model}, "
        f"tools={tool_registry.names}"
    )

    return AppRuntime(
        chatbot=Chatbot(store, turn_engine),
        turn_engine=turn_engine,
        store=store,
        provider=provider,
        tool_registry=tool_registry,
        log_descriptions=log_descriptions,
    )
