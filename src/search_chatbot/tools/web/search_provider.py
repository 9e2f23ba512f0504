from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SearchResult:
    title: str
    url: str
    content: str


@runtime_checkable
class SearchProvider(Protocol):
    @property
    def provider_name(self) -> str: ...

    async def search(self, query: str, max_results: int) -> list[SearchResult]:
        """Return search results. Raises on errors (caller handles formatting)."""
        ...
