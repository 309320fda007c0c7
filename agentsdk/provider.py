"""Search providers and the result types they return."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

__all__ = [
    "BRAVE_SEARCH_URL",
    "SearchError",
    "SearchResult",
    "SearchResponse",
    "SearchProvider",
    "BraveSearchProvider",
]

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


class SearchError(RuntimeError):
    """Raised when a search request fails or its response cannot be read."""


@dataclass
class SearchResult:
    """A single search hit."""

    title: str
    url: str
    snippet: str
    published_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "published_date": self.published_date,
        }


@dataclass
class SearchResponse:
    """The results of one search query."""

    query: str
    results: list[SearchResult] = field(default_factory=list)
    total_results: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "query": self.query,
            "results": [result.to_dict() for result in self.results],
            "total_results": self.total_results,
        }


class SearchProvider(ABC):
    """A search engine backend."""

    @abstractmethod
    async def search(self, query: str, max_results: int) -> SearchResponse:
        """Run ``query`` and return at most ``max_results`` results."""

    @abstractmethod
    def provider_name(self) -> str:
        """Short name of the provider, for logging."""


def _optional_str(value: Any, what: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise SearchError(f"Failed to parse Brave Search API response: {what} is not a string")
    return value


def _required_str(item: dict[str, Any], key: str) -> str:
    value = item.get(key)
    if not isinstance(value, str):
        raise SearchError(f"Failed to parse Brave Search API response: missing field '{key}'")
    return value


def _parse_brave(payload: Any, query: str) -> SearchResponse:
    if not isinstance(payload, dict):
        raise SearchError("Failed to parse Brave Search API response: expected an object")

    results: list[SearchResult] = []
    web = payload.get("web")
    if web is not None:
        if not isinstance(web, dict) or not isinstance(web.get("results"), list):
            raise SearchError("Failed to parse Brave Search API response: bad 'web' section")
        for item in web["results"]:
            if not isinstance(item, dict):
                raise SearchError("Failed to parse Brave Search API response: bad result")
            results.append(
                SearchResult(
                    title=_required_str(item, "title"),
                    url=_required_str(item, "url"),
                    snippet=_optional_str(item.get("description"), "description") or "",
                    published_date=_optional_str(item.get("age"), "age"),
                )
            )

    query_section = payload.get("query")
    if query_section is None:
        query_str = query
    elif isinstance(query_section, dict):
        query_str = _required_str(query_section, "original")
    else:
        raise SearchError("Failed to parse Brave Search API response: bad 'query' section")

    return SearchResponse(query=query_str, results=results, total_results=None)


class BraveSearchProvider(SearchProvider):
    """Web search through the Brave Search API.

    Pass an ``httpx.AsyncClient`` to reuse a configured client; otherwise a
    fresh client is opened for each search.
    """

    def __init__(self, api_key: str, client: httpx.AsyncClient | None = None) -> None:
        self._api_key = api_key
        self._client = client

    async def search(self, query: str, max_results: int) -> SearchResponse:
        """Query the Brave Search API."""
        if self._client is not None:
            response = await self._send(self._client, query, max_results)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._send(client, query, max_results)

        if not response.is_success:
            status = f"{response.status_code} {response.reason_phrase}".strip()
            raise SearchError(f"Brave Search API error: {status} - {response.text}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise SearchError(f"Failed to parse Brave Search API response: {exc}") from exc
        return _parse_brave(payload, query)

    async def _send(
        self, client: httpx.AsyncClient, query: str, max_results: int
    ) -> httpx.Response:
        try:
            return await client.get(
                BRAVE_SEARCH_URL,
                headers={
                    "X-Subscription-Token": self._api_key,
                    "Accept": "application/json",
                },
                params={
                    "q": query,
                    "count": str(max_results),
                    "text_decorations": "false",
                },
            )
        except httpx.HTTPError as exc:
            raise SearchError(f"Failed to send request to Brave Search API: {exc}") from exc

    def provider_name(self) -> str:
        return "brave"