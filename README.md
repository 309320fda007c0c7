# agentsdk

Ready-made tools for LLM agents, written on asyncio. Each tool has a name, a
description, a JSON input schema and a tier, and is run with `await tool.execute(ctx, params)`.
It gives back a `ToolResult`.

## Included tools

- `WebSearchTool` runs a web search through any `SearchProvider`. `BraveSearchProvider`
  ships with the package.
- `LinkFetchTool` fetches a web page and turns it into plain text. Before any request,
  `UrlValidator` checks the URL. It blocks:
  - plain HTTP, unless it is allowed;
  - localhost and private, loopback and link-local addresses;
  - cloud metadata endpoints.
- `AskUserQuestionTool` lets the agent ask the user a question and wait for the answer.
  The question and the answer pass over asyncio queues.

## Installation

```
pip install agentsdk
```

Install the test extras with `pip install agentsdk[test]`.

## Web search

```python
import asyncio

from agentsdk.provider import BraveSearchProvider
from agentsdk.search import WebSearchTool
from agentsdk.toolkit import ToolContext


async def main():
    tool = WebSearchTool(BraveSearchProvider(api_key="placeholder"), max_results=5)
    result = await tool.execute(ToolContext(), {"query": "python asyncio"})
    print(result.output)


asyncio.run(main())
```

## Fetching a page safely

```python
from agentsdk.fetch import FetchFormat, LinkFetchTool
from agentsdk.security import UrlValidator

validator = UrlValidator(allowed_domains=["example.com"])
tool = LinkFetchTool(validator=validator, default_format=FetchFormat.TEXT)

result = await tool.execute(ctx, {"url": "https://example.com/docs"})
if not result.success:
    print(result.output)  # e.g. "Failed to fetch URL: HTTPS required, ..."
```

If a URL is rejected, `UrlValidator.validate` raises `UrlValidationError`.

## Asking the user

```python
from agentsdk.user_interaction import AskUserQuestionTool, QuestionResponse

tool, requests, responses = AskUserQuestionTool.with_channels(10)


async def ui():
    question = await requests.get()
    print(question.question)
    await responses.put(QuestionResponse.answered("Blue"))
```

`QuestionResponse.skipped()` stands for a cancelled question. The tool then gives back
a failed `ToolResult`.

## Writing your own tool

Subclass `agentsdk.toolkit.Tool` and implement `name`, `description`,
`input_schema`, `tier` and the async `execute(ctx, params)`. There are two ways to
build the result: `ToolResult.ok(...)` and `ToolResult.error(...)`.