"""A tool that fetches web pages and returns their content as text."""

from __future__ import annotations

import enum
import textwrap
from html.parser import HTMLParser
from typing import Any

import httpx

from agentsdk.security import UrlValidationError, UrlValidator
from agentsdk.toolkit import Tool, ToolContext, ToolResult, ToolTier

__all__ = [
    "MAX_CONTENT_SIZE",
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
    "FetchError",
    "FetchFormat",
    "LinkFetchTool",
    "html_to_text",
]

MAX_CONTENT_SIZE = 1024 * 1024
DEFAULT_TIMEOUT = 30.0
USER_AGENT = "Mozilla/5.0 (compatible; AgentSDK/1.0)"
_WRAP_WIDTH = 80


class FetchError(RuntimeError):
    """Raised when a page cannot be fetched or is unacceptable."""


class FetchFormat(enum.Enum):
    """Output format for fetched content."""

    TEXT = "text"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, value: str) -> FetchFormat | None:
        """Parse a format name case-insensitively; None when unknown."""
        lowered = value.lower()
        if lowered == "text":
            return cls.TEXT
        if lowered in ("markdown", "md"):
            return cls.MARKDOWN
        return None


_SKIPPED = {"script", "style", "head", "noscript", "template"}
_HEADINGS = {f"h{level}": level for level in range(1, 7)}
_BLOCKS = {
    "p", "div", "section", "article", "header", "footer", "main", "nav", "aside",
    "blockquote", "ul", "ol", "table", "tr", "form", "body", "html", "figure",
    "dl", "dt", "dd", "br", "hr",
}
_STRONG = {"strong", "b"}
_EMPHASIS = {"em", "i"}


class _HtmlRenderer(HTMLParser):
    def __init__(self, fmt: FetchFormat, width: int) -> None:
        super().__init__(convert_charrefs=True)
        self._markdown = fmt is FetchFormat.MARKDOWN
        self._width = width
        self._paragraphs: list[str] = []
        self._buffer: list[str] = []
        self._prefix = ""
        self._skip = 0
        self._pre = 0
        self._links: list[str | None] = []

    def render(self) -> str:
        self._flush()
        return "\n\n".join(self._paragraphs) + "\n" if self._paragraphs else ""

    def _flush(self) -> None:
        raw = "".join(self._buffer)
        self._buffer.clear()
        prefix, self._prefix = self._prefix, ""
        if self._pre:
            text = raw.strip("\n")
            if text.strip():
                self._paragraphs.append(text)
            return
        text = " ".join(raw.split())
        if text:
            self._paragraphs.append(
                textwrap.fill(
                    prefix + text,
                    self._width,
                    subsequent_indent=" " * len(prefix),
                    break_long_words=False,
                    break_on_hyphens=False,
                )
            )

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in _SKIPPED:
            self._skip += 1
            return
        if self._skip:
            return
        if tag in _HEADINGS:
            self._flush()
            if self._markdown:
                self._prefix = "#" * _HEADINGS[tag] + " "
        elif tag == "li":
            self._flush()
            self._prefix = "* "
        elif tag == "pre":
            self._flush()
            self._pre += 1
        elif tag in _BLOCKS:
            self._flush()
            if tag == "hr" and self._markdown:
                self._paragraphs.append("---")
        elif self._markdown and tag == "a":
            href = dict(attrs).get("href")
            self._links.append(href)
            if href:
                self._buffer.append("[")
        elif self._markdown and tag in _STRONG:
            self._buffer.append("**")
        elif self._markdown and tag in _EMPHASIS:
            self._buffer.append("*")

    def handle_endtag(self, tag: str) -> None:
        if tag in _SKIPPED:
            self._skip = max(0, self._skip - 1)
            return
        if self._skip:
            return
        if tag == "pre":
            self._flush()
            self._pre = max(0, self._pre - 1)
        elif tag in _HEADINGS or tag == "li" or (tag in _BLOCKS and tag not in ("br", "hr")):
            self._flush()
        elif self._markdown and tag == "a" and self._links:
            href = self._links.pop()
            if href:
                self._buffer.append(f"]({href})")
        elif self._markdown and tag in _STRONG:
            self._buffer.append("**")
        elif self._markdown and tag in _EMPHASIS:
            self._buffer.append("*")

    def handle_data(self, data: str) -> None:
        if not self._skip:
            self._buffer.append(data)


def html_to_text(html: str, fmt: FetchFormat = FetchFormat.TEXT) -> str:
    """Convert HTML to readable text or markdown; return the input if it cannot be parsed."""
    renderer = _HtmlRenderer(fmt, _WRAP_WIDTH)
    try:
        renderer.feed(html)
        renderer.close()
    except Exception:  # noqa: BLE001 - malformed markup falls back to the raw document
        return html
    return renderer.render()


class LinkFetchTool(Tool):
    """Fetches web pages, guarded by a :class:`UrlValidator` against SSRF.

    Pass an ``httpx.AsyncClient`` to reuse a configured client; otherwise a
    client with a 30 second timeout is opened for each fetch.
    """

    def __init__(
        self,
        validator: UrlValidator | None = None,
        client: httpx.AsyncClient | None = None,
        default_format: FetchFormat = FetchFormat.TEXT,
    ) -> None:
        self.validator = validator if validator is not None else UrlValidator()
        self.client = client
        self.default_format = default_format

    async def fetch_url(self, url: str, fmt: FetchFormat) -> str:
        """Fetch ``url`` and return its content in ``fmt``.

        Raises UrlValidationError for refused URLs and FetchError for failed fetches.
        """
        target = self.validator.validate(url).geturl()
        if self.client is not None:
            return await self._fetch(self.client, target, fmt)
        async with httpx.AsyncClient(
            timeout=DEFAULT_TIMEOUT,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        ) as client:
            return await self._fetch(client, target, fmt)

    async def _fetch(self, client: httpx.AsyncClient, url: str, fmt: FetchFormat) -> str:
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch URL: {exc}") from exc

        if not response.is_success:
            status = f"{response.status_code} {response.reason_phrase}".strip()
            raise FetchError(f"HTTP error: {status}")

        declared = response.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > MAX_CONTENT_SIZE:
            raise FetchError(
                f"Content too large: {declared} bytes (max {MAX_CONTENT_SIZE} bytes)"
            )

        content_type = response.headers.get("content-type", "text/html")
        body = response.content
        if len(body) > MAX_CONTENT_SIZE:
            raise FetchError(
                f"Content too large: {len(body)} bytes (max {MAX_CONTENT_SIZE} bytes)"
            )

        text = body.decode("utf-8", errors="replace")
        if "text/html" in content_type or "application/xhtml" in content_type:
            return html_to_text(text, fmt)
        return text

    def name(self) -> str:
        return "link_fetch"

    def description(self) -> str:
        return (
            "Fetch and read web page content. Returns the page content as text or markdown. "
            "Includes SSRF protection to prevent access to internal resources."
        )

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "url": {
                    "type": "string",
                    "description": "The URL to fetch (must be HTTPS)",
                },
                "format": {
                    "type": "string",
                    "enum": ["text", "markdown"],
                    "description": "Output format (default: text)",
                },
            },
            "required": ["url"],
        }

    def tier(self) -> ToolTier:
        return ToolTier.OBSERVE

    async def execute(self, ctx: ToolContext[Any], params: dict[str, Any]) -> ToolResult:
        """Fetch the page; raise ValueError when the URL is missing."""
        url = params.get("url")
        if not isinstance(url, str):
            raise ValueError("Missing 'url' parameter")

        requested = params.get("format")
        fmt = FetchFormat.parse(requested) if isinstance(requested, str) else None
        if fmt is None:
            fmt = self.default_format

        try:
            content = await self.fetch_url(url, fmt)
        except (UrlValidationError, FetchError) as exc:
            return ToolResult(
                success=False,
                output=f"Failed to fetch URL: {exc}",
                data={"url": url, "error": str(exc)},
            )
        return ToolResult(
            success=True,
            output=content,
            data={"url": url, "format": fmt.value},
        )