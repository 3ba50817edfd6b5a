from .chat import (
    BaseChatResponse,
    ChatMessage,
    ChatParams,
    ChatReply,
    Role,
    assistant_message,
    system_message,
    tool_message,
    user_message,
)
from .tool import ToolCallInfo, ToolCallRequest, ToolCallResult

__all__ = [
    "BaseChatResponse",
    "ChatMessage",
    "ChatParams",
    "ChatReply",
    "Role",
    "assistant_message",
    "system_message",
    "tool_message",
    "user_message",
    "ToolCallInfo",
    "ToolCallRequest",
    "ToolCallResult",
]
