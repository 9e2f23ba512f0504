import json
from typing import Any

from loguru import logger

from search_chatbot.tool_registry import ToolName
from search_chatbot.tools.web.search_provider import SearchProvider

SEARCH_ERROR_MESSAGE = "There was some error fetching the results. Please try again."

_DEFAULT_MAX_RESULTS = 5


def _parse_search_topic(arguments: str) -> str:
    """Pull ``searchTopic`` out of the model's argument JSON.

    Models occasionally send the bare topic instead of an object; that text is
    then used as the query unchanged.
    """
    try:
        parsed = json.loads(arguments)
    except (json.JSONDecodeError, TypeError):
        return arguments

    if isinstance(parsed, dict):
        topic = parsed.get("searchTopic")
        if isinstance(topic, str):
            return topic
    elif isinstance(parsed, str):
        return parsed
    return arguments


class WebSearchTool:
    def __init__(self, provider: SearchProvider, max_results: int = _DEFAULT_MAX_RESULTS) -> None:
        self._provider = provider
        self._max_results = max_results

    @property
    def name(self) -> str:
        return ToolName.WEB_SEARCH.value

    @property
    def description(self) -> str:
        return "Search the web for the relevant information the user has asked for"

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "searchTopic": {
                    "type": "string",
                    "description": "The topic to search for",
                },
            },
            "required": ["searchTopic"],
        }

    async def execute(self, arguments: str) -> str:
        search_topic = _parse_search_topic(arguments)
        logger.info("Searching the web for information...")

        try:
            results = await self._provider.search(search_topic, self._max_results)
            combined = "\n\n".join(result.content for result in results)
        except Exception as ex:
            logger.error(f"{self._provider.provider_name} search failed for {search_topic!r}: {ex}")
            return SEARCH_ERROR_MESSAGE

        logger.debug(f"{self._provider.provider_name} returned {len(results)} result(s)")
        return combined
