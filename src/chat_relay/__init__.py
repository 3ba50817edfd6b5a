"""
Chat Relay - chat endpoint with local tools, a remote completion provider and
an offline fallback.
"""

from ._exceptions import (
    ChatRelayError,
    InvalidArgumentsError,
    InvalidRequestError,
    OfflineFailure,
    PriceFetchError,
    ProviderError,
    ToolError,
    ToolExecutionError,
    UnknownToolError,
)
from .config import Settings
from .conversation import ConversationStore, Transcript
from .factory import create_llm
from .offline import OfflineResponder, OfflineRules
from .orchestrator import Orchestrator
from .providers import Provider
from .service import ChatService
from .tools import ToolRegistry
from .types import ChatReply, ToolCallInfo, ToolCallRequest, ToolCallResult

__version__ = "0.1.0"

__all__ = [
    "ChatRelayError",
    "InvalidArgumentsError",
    "InvalidRequestError",
    "OfflineFailure",
    "PriceFetchError",
    "ProviderError",
    "ToolError",
    "ToolExecutionError",
    "UnknownToolError",
    "Settings",
    "ConversationStore",
    "Transcript",
    "create_llm",
    "OfflineResponder",
    "OfflineRules",
    "Orchestrator",
    "Provider",
    "ChatService",
    "ToolRegistry",
    "ChatReply",
    "ToolCallInfo",
    "ToolCallRequest",
    "ToolCallResult",
]
