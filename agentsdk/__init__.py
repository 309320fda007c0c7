"""Tools for LLM agents: web search, safe link fetching and user questions."""

__version__ = "0.2.0"

__all__ = [
    "fetch",
    "provider",
    "search",
    "security",
    "toolkit",
    "user_interaction",
]