"""Core tool abstractions shared by every agent tool."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

__all__ = ["ToolTier", "ToolResult", "ToolContext", "Tool"]

AppT = TypeVar("AppT")


class ToolTier(enum.Enum):
    """How much oversight a tool needs before it runs."""

    OBSERVE = "Observe"
    CONFIRM = "Confirm"

    def __str__(self) -> str:
        return self.value


@dataclass
class ToolResult:
    """Outcome of a tool execution."""

    success: bool
    output: str
    data: Any = None
    duration_ms: int | None = None

    @classmethod
    def ok(cls, output: str, data: Any = None) -> ToolResult:
        """Build a successful result."""
        return cls(success=True, output=output, data=data)

    @classmethod
    def error(cls, output: str, data: Any = None) -> ToolResult:
        """Build a failed result."""
        return cls(success=False, output=output, data=data)


@dataclass
class ToolContext(Generic[AppT]):
    """Context handed to a tool when it runs; carries the application state."""

    app: AppT


class Tool(ABC):
    """Base class for tools an agent can call."""

    @abstractmethod
    def name(self) -> str:
        """Name the model uses to call the tool."""

    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""

    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON schema describing the tool's input."""

    @abstractmethod
    def tier(self) -> ToolTier:
        """Oversight tier of the tool."""

    @abstractmethod
    async def execute(self, ctx: ToolContext[Any], params: dict[str, Any]) -> ToolResult:
        """Run the tool with the given input."""