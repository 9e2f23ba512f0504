from __future__ import annotations

from loguru import logger

from search_chatbot.conversation_store import ConversationStore
from search_chatbot.turn_engine import TurnEngine, TurnState


class Chatbot:
    def __init__(self, store: ConversationStore, turn_engine: TurnEngine) -> None:
        self._store = store
        self._turn_engine = turn_engine

    async def generate(self, user_message: str, conversation_id: str) -> str:
        with logger.contextualize(conversation_id=conversation_id):
            messages = self._store.get(conversation_id)
            result = await self._turn_engine.run(messages=messages, user_message=user_message)

            # Exhausted turns are persisted as well.
            if result.state in (TurnState.DONE, TurnState.RETRIES_EXHAUSTED):
                self._store.put(conversation_id, messages)

            logger.debug(
                f"{result.state.value} after {result.completion_calls} completion call(s), "
                f"{len(messages)} message(s)"
            )
            return result.answer
