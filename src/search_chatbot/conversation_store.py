from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from search_chatbot.models import Message

DEFAULT_TTL_SECONDS = 60 * 60 * 24


@dataclass
class _Entry:
    messages: list[Message]
    expires_at: float


class ConversationStore:
    """In-memory message history per conversation id, expiring after a fixed TTL.

    ``put`` resets the expiry; ``get`` does not. Not safe for concurrent turns on
    the same conversation id: the last ``put`` wins.
    """

    def __init__(
        self,
        system_prompt_factory: Callable[[], str],
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._system_prompt_factory = system_prompt_factory
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def get(self, conversation_id: str) -> list[Message]:
        entry = self._entries.get(conversation_id)
        if entry is not None and entry.expires_at <= self._clock():
            logger.debug(f"Conversation {conversation_id} expired")
            del self._entries[conversation_id]
            entry = None
        if entry is None:
            return [Message.system(self._system_prompt_factory())]
        return list(entry.messages)

    def put(self, conversation_id: str, messages: list[Message]) -> None:
        self._entries[conversation_id] = _Entry(
            messages=list(messages),
            expires_at=self._clock() + self._ttl_seconds,
        )

    def prune_expired(self) -> int:
        now = self._clock()
        expired = [cid for cid, entry in self._entries.items() if entry.expires_at <= now]
        for cid in expired:
            del self._entries[cid]
        if expired:
            logger.debug(f"Pruned {len(expired)} expired conversation(s)")
        return len(expired)

    def __contains__(self, conversation_id: object) -> bool:
        entry = self._entries.get(conversation_id)  # type: ignore[arg-type]
        return entry is not None and entry.expires_at > self._clock()

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if entry.expires_at > now)

    def close(self) -> None:
        if self._entries:
            logger.info(f"Discarding {len(self._entries)} in-memory conversation(s)")
        self._entries.clear()
