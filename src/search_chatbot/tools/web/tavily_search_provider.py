import httpx

from search_chatbot.tools.web.search_provider import SearchResult

_TAVILY_SEARCH_URL = "https://api.tavily.com/search"
_TIMEOUT_SECONDS = 30


class TavilySearchProvider:
    def __init__(
        self,
        api_key: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._transport = transport

    @property
    def provider_name(self) -> str:
        return "Tavily"

    async def search(self, query: str, max_results: int) -> list[SearchResult]:
        if not self._api_key:
            raise RuntimeError("TAVILY_API_KEY is not configured")

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "query": query,
            "max_results": max_results,
            "search_depth": "basic",
        }

        async with httpx.AsyncClient(timeout=_TIMEOUT_SECONDS, transport=self._transport) as client:
            response = await client.post(_TAVILY_SEARCH_URL, headers=headers, json=payload)

        if response.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {response.status_code} from Tavily Search API",
                request=response.request,
                response=response,
            )

        data = response.json()
        raw_results = data.get("results") or []

        return [
            SearchResult(
                title=r.get("title") or "(no title)",
                url=r.get("url") or "",
                content=r.get("content") or "",
            )
            for r in raw_results
        ]
