"""Chat message helpers, request parameters and the response interface."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any, Optional, Union

from chat_relay.types.tool import ToolCallInfo, ToolCallRequest, ToolCallResult

__all__ = [
    "Role",
    "ChatMessage",
    "system_message",
    "user_message",
    "assistant_message",
    "tool_message",
    "ChatParams",
    "ChatReply",
    "BaseChatResponse",
]


class Role(StrEnum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


# Type alias for chat messages; the keys follow the OpenAI chat format.
ChatMessage = dict[str, Any]


def system_message(content: str) -> ChatMessage:
    return {"role": Role.SYSTEM.value, "content": content}


def user_message(content: str) -> ChatMessage:
    return {"role": Role.USER.value, "content": content}


def assistant_message(
    content: Optional[str] = None,
    tool_calls: Optional[list[ToolCallRequest]] = None,
) -> ChatMessage:
    """Build an assistant message carrying either text or tool invocation requests."""
    message: ChatMessage = {"role": Role.ASSISTANT.value, "content": content}
    if tool_calls:
        message["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {
                    "name": call.name,
                    "arguments": json.dumps(call.arguments),
                },
            }
            for call in tool_calls
        ]
    return message


def tool_message(result: ToolCallResult) -> ChatMessage:
    """Build the tool-role message answering invocation ``result.id``."""
    return {"role": Role.TOOL.value, "tool_call_id": result.id, "content": result.content}


@dataclass
class ChatParams:
    """Parameters for chat completion requests with utility methods."""

    # Tool parameters
    tools: Optional[list[dict[str, Any]]] = None
    tool_choice: Optional[Union[str, dict[str, Any]]] = None

    # Provider-specific parameters
    extra_params: Optional[dict[str, Any]] = None

    def as_dict(self, exclude_none: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary, optionally excluding None values.

        Args:
            exclude_none: If True, exclude fields with None values

        Returns:
            Dictionary representation of the params
        """
        result = asdict(self)
        if exclude_none:
            return {k: v for k, v in result.items() if v is not None}
        return result


@dataclass
class ChatReply:
    """What one chat turn produced: reply text and, optionally, the tool that fired."""

    text: str
    tool_call: Optional[ToolCallInfo] = None
    # Extra invocations the provider asked for in the same turn and that were not run.
    ignored_tool_calls: list[ToolCallRequest] = field(default_factory=list)

    def as_payload(self) -> dict[str, Any]:
        return {
            "response": self.text,
            "toolCall": self.tool_call.as_dict() if self.tool_call else None,
        }


class BaseChatResponse(ABC):
    """
    Abstract base class that all completion response wrappers must implement.
    Defines a consistent interface for handling responses, including error cases.
    """

    @property
    @abstractmethod
    def is_error(self) -> bool: ...

    @property
    @abstractmethod
    def error_message(self) -> Optional[str]: ...

    @property
    @abstractmethod
    def raw_response(self):
        """Access to the underlying provider response object."""
        ...

    @abstractmethod
    def get_response_content(self) -> str: ...

    @abstractmethod
    def raise_for_error(self) -> None: ...

    @abstractmethod
    def get_tool_calls(self) -> list[ToolCallRequest] | None:
        """
        Extract tool calls from the response.

        Returns:
            List of ToolCallRequest objects if tool calls are present, None otherwise.
        """
        ...

    def extract_by_path(self, path: str, default: Any = None) -> Any:
        """
        Extract a value from the response using a dot-notation path.

        Args:
            path: Dot-notation path like "choices.0.message.content"
            default: Default value if path doesn't exist

        Returns:
            The extracted value or default
        """
        if self.is_error or not self.raw_response:
            return default

        current = self.raw_response
        for part in path.split("."):
            if part.isdigit():
                try:
                    current = current[int(part)]
                except (IndexError, TypeError):
                    return default
            else:
                if hasattr(current, part):
                    current = getattr(current, part)
                elif isinstance(current, dict) and part in current:
                    current = current[part]
                else:
                    return default
        return current

    def __bool__(self) -> bool:
        return not self.is_error
