"""A web search tool backed by a pluggable search provider."""

from __future__ import annotations

from typing import Any, Iterable

from agentsdk.provider import SearchProvider, SearchResult
from agentsdk.toolkit import Tool, ToolContext, ToolResult, ToolTier

__all__ = ["WebSearchTool", "format_search_results"]

DEFAULT_MAX_RESULTS = 10


def format_search_results(query: str, results: Iterable[SearchResult]) -> str:
    """Format search results as numbered plain text."""
    results = list(results)
    if not results:
        return f"No results found for: {query}"

    lines = [f"Search results for: {query}", ""]
    for number, result in enumerate(results, start=1):
        lines.append(f"{number}. {result.title}")
        lines.append(f"   URL: {result.url}")
        if result.snippet:
            lines.append(f"   {result.snippet}")
        if result.published_date is not None:
            lines.append(f"   Published: {result.published_date}")
        lines.append("")
    return "\n".join(lines) + "\n"


def _requested_max(value: Any, default: int) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return default


class WebSearchTool(Tool):
    """Searches the web through a :class:`SearchProvider`."""

    def __init__(self, provider: SearchProvider, max_results: int = DEFAULT_MAX_RESULTS) -> None:
        self.provider = provider
        self.max_results = max_results

    def name(self) -> str:
        return "web_search"

    def description(self) -> str:
        return (
            "Search the web for current information. "
            "Returns titles, URLs, and snippets from search results."
        )

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "The search query"},
                "max_results": {
                    "type": "integer",
                    "description": "Maximum number of results to return (default 10)",
                },
            },
            "required": ["query"],
        }

    def tier(self) -> ToolTier:
        return ToolTier.OBSERVE

    async def execute(self, ctx: ToolContext[Any], params: dict[str, Any]) -> ToolResult:
        """Run the search; raise ValueError when the query is missing."""
        query = params.get("query")
        if not isinstance(query, str):
            raise ValueError("Missing 'query' parameter")

        max_results = _requested_max(params.get("max_results"), self.max_results)
        response = await self.provider.search(query, max_results)

        return ToolResult(
            success=True,
            output=format_search_results(response.query, response.results),
            data=response.to_dict(),
        )