from __future__ import annotations

from enum import Enum
from typing import Any

from loguru import logger

from search_chatbot.tool import Tool


class ToolName(str, Enum):
    WEB_SEARCH = "webSearch"


class UnknownToolError(LookupError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name!r}")
        self.tool_name = tool_name


class ToolRegistry:
    """Closed set of tools the model may call, keyed by ``ToolName``."""

    def __init__(self, tools: list[Tool]) -> None:
        self._tools: dict[ToolName, Tool] = {}
        for tool in tools:
            key = ToolName(tool.name)
            if key in self._tools:
                raise ValueError(f"Duplicate tool registration: {tool.name!r}")
            self._tools[key] = tool

    @property
    def names(self) -> list[str]:
        return [name.value for name in self._tools]

    def schemas(self) -> list[dict[str, Any]]:
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.input_schema,
                },
            }
            for tool in self._tools.values()
        ]

    def resolve(self, tool_name: str) -> Tool:
        try:
            return self._tools[ToolName(tool_name)]
        except (ValueError, KeyError):
            raise UnknownToolError(tool_name) from None

    async def invoke(self, tool_name: str, arguments: str) -> str:
        tool = self.resolve(tool_name)
        logger.debug(f"Invoking tool {tool_name} with arguments={arguments[:200]}")
        return await tool.execute(arguments)


def get_all(
    tavily_api_key: str | None = None,
    search_max_results: int = 5,
) -> list[Tool]:
    from search_chatbot.tools.web.tavily_search_provider import TavilySearchProvider
    from search_chatbot.tools.web.web_search_tool import WebSearchTool

    # A missing key is not checked here; it fails at first search and is
    # reported to the model as an ordinary tool error.
    provider = TavilySearchProvider(tavily_api_key or "")
    return [WebSearchTool(provider, max_results=search_max_results)]
