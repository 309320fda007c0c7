"""Confirmation and question exchanges between an agent and its user."""

from __future__ import annotations

import asyncio
import enum
from dataclasses import dataclass, field, replace
from typing import Any

from agentsdk.toolkit import Tool, ToolContext, ToolResult, ToolTier

__all__ = [
    "ConfirmationRequest",
    "ConfirmationResponse",
    "QuestionOption",
    "QuestionRequest",
    "QuestionResponse",
    "AskUserQuestionTool",
]


@dataclass
class ConfirmationRequest:
    """A request for the user to confirm a tool execution."""

    tool_name: str
    description: str
    input_preview: str
    tier: str
    context: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.tier, ToolTier):
            self.tier = self.tier.value

    def with_context(self, context: str) -> ConfirmationRequest:
        """Return a copy carrying the agent's recent reasoning."""
        return replace(self, context=context)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "tool_name": self.tool_name,
            "description": self.description,
            "input_preview": self.input_preview,
            "tier": self.tier,
            "context": self.context,
        }


class ConfirmationResponse(str, enum.Enum):
    """The user's answer to a confirmation request."""

    APPROVED = "approved"
    DENIED = "denied"
    APPROVE_ALL = "approve_all"

    def __str__(self) -> str:
        return self.value


@dataclass
class QuestionOption:
    """One choice in a multiple-choice question."""

    label: str
    description: str | None = None


@dataclass
class QuestionRequest:
    """A question from the agent; no options means free-form input."""

    question: str
    header: str | None = None
    options: list[QuestionOption] = field(default_factory=list)
    multi_select: bool = False

    def with_header(self, header: str) -> QuestionRequest:
        """Return a copy with a header."""
        return replace(self, header=header)

    def with_multi_select(self) -> QuestionRequest:
        """Return a copy that allows selecting several options."""
        return replace(self, multi_select=True)


@dataclass
class QuestionResponse:
    """The user's answer to a question."""

    answer: str
    cancelled: bool = False

    @classmethod
    def answered(cls, answer: str) -> QuestionResponse:
        """A response carrying an answer."""
        return cls(answer=answer, cancelled=False)

    @classmethod
    def skipped(cls) -> QuestionResponse:
        """A response for a question the user cancelled."""
        return cls(answer="", cancelled=True)


_INVALID = "Invalid input for ask_user tool"


def _optional_str(params: dict[str, Any], key: str) -> str | None:
    value = params.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{_INVALID}: '{key}' must be a string")
    return value


def _parse_options(raw: Any) -> list[QuestionOption]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"{_INVALID}: 'options' must be an array")
    options = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("label"), str):
            raise ValueError(f"{_INVALID}: each option needs a string 'label'")
        options.append(
            QuestionOption(label=item["label"], description=_optional_str(item, "description"))
        )
    return options


def _parse_request(params: Any) -> QuestionRequest:
    if not isinstance(params, dict):
        raise ValueError(f"{_INVALID}: expected an object")
    question = params.get("question")
    if not isinstance(question, str):
        raise ValueError(f"{_INVALID}: missing field 'question'")
    multi_select = params.get("multi_select", False)
    if not isinstance(multi_select, bool):
        raise ValueError(f"{_INVALID}: 'multi_select' must be a boolean")
    return QuestionRequest(
        question=question,
        header=_optional_str(params, "header"),
        options=_parse_options(params.get("options")),
        multi_select=multi_select,
    )


class AskUserQuestionTool(Tool):
    """Lets the agent ask the user a question and wait for the answer.

    Questions are put on ``requests``; answers are taken from ``responses``.
    """

    def __init__(
        self,
        requests: asyncio.Queue[QuestionRequest],
        responses: asyncio.Queue[QuestionResponse],
    ) -> None:
        self.requests = requests
        self.responses = responses
        self._receive_lock = asyncio.Lock()

    @classmethod
    def with_channels(
        cls, buffer_size: int
    ) -> tuple[
        AskUserQuestionTool, asyncio.Queue[QuestionRequest], asyncio.Queue[QuestionResponse]
    ]:
        """Create a tool with fresh queues.

        Returns ``(tool, request_queue, response_queue)``: the UI reads
        questions from the first queue and puts answers on the second.
        """
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")
        requests: asyncio.Queue[QuestionRequest] = asyncio.Queue(maxsize=buffer_size)
        responses: asyncio.Queue[QuestionResponse] = asyncio.Queue(maxsize=buffer_size)
        return cls(requests, responses), requests, responses

    def name(self) -> str:
        return "ask_user"

    def description(self) -> str:
        return (
            "Ask the user a question to get clarification, preferences, or choices. "
            "Use this when you need user input before proceeding. For yes/no confirmations "
            "of dangerous operations, tool confirmation will be shown automatically - "
            "use this tool for open-ended questions or when offering choices."
        )

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "required": ["question"],
            "properties": {
                "question": {
                    "type": "string",
                    "description": "The question to ask the user. Be clear and specific.",
                },
                "header": {
                    "type": "string",
                    "description": (
                        "Optional short header/category (e.g., 'Auth method', "
                        "'Library choice')"
                    ),
                },
                "options": {
                    "type": "array",
                    "description": "Optional list of choices for multiple-choice questions",
                    "items": {
                        "type": "object",
                        "required": ["label"],
                        "properties": {
                            "label": {
                                "type": "string",
                                "description": "The option text to display",
                            },
                            "description": {
                                "type": "string",
                                "description": "Optional explanation of this option",
                            },
                        },
                    },
                },
                "multi_select": {
                    "type": "boolean",
                    "description": "Whether multiple options can be selected (default: false)",
                },
            },
        }

    def tier(self) -> ToolTier:
        return ToolTier.OBSERVE

    async def execute(self, ctx: ToolContext[Any], params: dict[str, Any]) -> ToolResult:
        """Send the question and wait for the answer; raise ValueError on bad input."""
        request = _parse_request(params)
        await self.requests.put(request)
        async with self._receive_lock:
            response = await self.responses.get()

        if response.cancelled:
            return ToolResult.error("User cancelled the question without providing an answer.")
        return ToolResult.ok(f"User answered: {response.answer}")