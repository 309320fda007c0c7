import pytest

from agentsdk.provider import SearchError, SearchProvider, SearchResponse, SearchResult
from agentsdk.search import WebSearchTool, format_search_results
from agentsdk.toolkit import ToolContext, ToolTier


class MockSearchProvider(SearchProvider):
    def __init__(self, results):
        self.results = list(results)
        self.calls = []

    async def search(self, query, max_results):
        self.calls.append((query, max_results))
        return SearchResponse(
            query=query,
            results=self.results[:max_results],
            total_results=len(self.results),
        )

    def provider_name(self):
        return "mock"


class FailingProvider(SearchProvider):
    async def search(self, query, max_results):
        raise SearchError("provider down")

    def provider_name(self):
        return "failing"


def _numbered(count):
    names = ["First", "Second", "Third"]
    return [
        SearchResult(
            title=f"Result {i}",
            url=f"https://example.com/{i}",
            snippet=names[i - 1],
        )
        for i in range(1, count + 1)
    ]


@pytest.fixture
def ctx():
    return ToolContext(app=None)


def test_web_search_tool_metadata():
    tool = WebSearchTool(MockSearchProvider([]))
    assert tool.name() == "web_search"
    assert "Search the web" in tool.description()
    assert tool.tier() is ToolTier.OBSERVE


def test_web_search_tool_input_schema():
    schema = WebSearchTool(MockSearchProvider([])).input_schema()
    assert schema["type"] == "object"
    assert isinstance(schema["properties"]["query"], dict)
    assert "query" in schema["required"]


@pytest.mark.asyncio
async def test_web_search_tool_execute(ctx):
    results = [
        SearchResult(
            title="Rust Programming",
            url="https://rust-lang.org",
            snippet="A language empowering everyone",
        ),
        SearchResult(
            title="Rust by Example",
            url="https://doc.rust-lang.org/rust-by-example",
            snippet="Learn Rust by example",
            published_date="2024-01-01",
        ),
    ]
    tool = WebSearchTool(MockSearchProvider(results))
    result = await tool.execute(ctx, {"query": "rust programming"})

    assert result.success
    assert "Rust Programming" in result.output
    assert "rust-lang.org" in result.output
    assert result.data["query"] == "rust programming"
    assert len(result.data["results"]) == 2
    assert result.data["total_results"] == 2


@pytest.mark.asyncio
async def test_web_search_tool_with_max_results(ctx):
    tool = WebSearchTool(MockSearchProvider(_numbered(3)), max_results=2)
    result = await tool.execute(ctx, {"query": "test"})

    assert result.success
    assert "Result 1" in result.output
    assert "Result 2" in result.output
    assert "Result 3" not in result.output


@pytest.mark.asyncio
async def test_web_search_tool_override_max_results(ctx):
    provider = MockSearchProvider(_numbered(2))
    tool = WebSearchTool(provider)
    result = await tool.execute(ctx, {"query": "test", "max_results": 1})

    assert result.success
    assert "Result 1" in result.output
    assert "Result 2" not in result.output
    assert provider.calls == [("test", 1)]


@pytest.mark.asyncio
async def test_web_search_tool_default_max_results_is_ten(ctx):
    provider = MockSearchProvider([])
    await WebSearchTool(provider).execute(ctx, {"query": "x"})
    assert provider.calls == [("x", 10)]


@pytest.mark.asyncio
async def test_web_search_tool_ignores_invalid_max_results(ctx):
    provider = MockSearchProvider([])
    tool = WebSearchTool(provider, max_results=4)
    await tool.execute(ctx, {"query": "x", "max_results": -1})
    await tool.execute(ctx, {"query": "x", "max_results": "3"})
    assert provider.calls == [("x", 4), ("x", 4)]


@pytest.mark.asyncio
async def test_web_search_tool_no_results(ctx):
    tool = WebSearchTool(MockSearchProvider([]))
    result = await tool.execute(ctx, {"query": "nonexistent query xyz"})

    assert result.success
    assert "No results found" in result.output


@pytest.mark.asyncio
async def test_web_search_tool_missing_query(ctx):
    tool = WebSearchTool(MockSearchProvider([]))
    with pytest.raises(ValueError, match="query"):
        await tool.execute(ctx, {})


@pytest.mark.asyncio
async def test_web_search_tool_provider_error_propagates(ctx):
    tool = WebSearchTool(FailingProvider())
    with pytest.raises(SearchError, match="provider down"):
        await tool.execute(ctx, {"query": "x"})


def test_format_search_results_empty():
    output = format_search_results("test", [])
    assert output == "No results found for: test"


def test_format_search_results_with_data():
    results = [
        SearchResult(
            title="Title One",
            url="https://one.com",
            snippet="Snippet one",
            published_date="2024-01-15",
        ),
        SearchResult(title="Title Two", url="https://two.com", snippet=""),
    ]
    output = format_search_results("query", results)

    assert "Search results for: query" in output
    assert "1. Title One" in output
    assert "https://one.com" in output
    assert "Snippet one" in output
    assert "2024-01-15" in output
    assert "2. Title Two" in output


def test_format_search_results_layout():
    results = [
        SearchResult(
            title="Title One",
            url="https://one.com",
            snippet="Snippet one",
            published_date="2024-01-15",
        ),
        SearchResult(title="Title Two", url="https://two.com", snippet=""),
    ]
    expected = (
        "Search results for: query\n\n"
        "1. Title One\n"
        "   URL: https://one.com\n"
        "   Snippet one\n"
        "   Published: 2024-01-15\n\n"
        "2. Title Two\n"
        "   URL: https://two.com\n\n"
    )
    assert format_search_results("query", results) == expected