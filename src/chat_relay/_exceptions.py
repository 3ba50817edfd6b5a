"""
Error taxonomy for chat-relay, plus translation of noisy provider tracebacks
into a single `ProviderError` that keeps the original exception attached.
"""

from __future__ import annotations

import logging
from typing import Final, Optional, Type

from openai import APIConnectionError, APIError, RateLimitError

__all__: tuple[str, ...] = (
    "ChatRelayError",
    "InvalidRequestError",
    "ToolError",
    "UnknownToolError",
    "InvalidArgumentsError",
    "ToolExecutionError",
    "PriceFetchError",
    "ProviderError",
    "OfflineFailure",
    "classify_error",
)


class ChatRelayError(RuntimeError):
    """Base class for every error raised by chat-relay."""


class InvalidRequestError(ChatRelayError):
    """The inbound chat request is malformed."""


class ToolError(ChatRelayError):
    """Base class for tool registry failures.

    Attributes:
        tool_name: Name the caller asked for.
    """

    tool_name: str

    def __init__(self, tool_name: str, message: str) -> None:
        super().__init__(message)
        self.tool_name = tool_name


class UnknownToolError(ToolError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(tool_name, f"Unknown tool: {tool_name!r}")


class InvalidArgumentsError(ToolError):
    def __init__(self, tool_name: str, reason: str) -> None:
        super().__init__(tool_name, f"Invalid arguments for {tool_name}: {reason}")
        self.reason = reason


class ToolExecutionError(ToolError):
    def __init__(self, tool_name: str, reason: str) -> None:
        super().__init__(tool_name, f"Tool {tool_name} failed: {reason}")
        self.reason = reason


class PriceFetchError(ToolExecutionError):
    """The price index answered with an error status or an unusable payload."""

    def __init__(self, coin: str, reason: str) -> None:
        super().__init__("get_crypto_price", f"Failed to fetch price for {coin}: {reason}")
        self.coin = coin


class ProviderError(ChatRelayError):
    """Remote completion failed or came back in a shape we cannot use.

    Attributes:
        original_exc: The underlying SDK exception, if any.
    """

    original_exc: Optional[BaseException]

    def __init__(self, message: str, original_exc: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.original_exc = original_exc
        if original_exc is not None:
            self.__cause__ = original_exc


class OfflineFailure(ChatRelayError):
    """The offline fallback could not produce a reply either."""


CONN_ERRORS: Final[tuple[Type[Exception], ...]] = (
    APIConnectionError,
    TimeoutError,
    ConnectionError,
)


def classify_error(
    exc: Exception,
    logger: Optional[logging.Logger] = None,
) -> ProviderError:
    """Wrap an SDK exception in ProviderError with a friendly, concise message."""
    log = logger or logging.getLogger("chat_relay.exceptions")

    if isinstance(exc, ProviderError):
        return exc
    if isinstance(exc, RateLimitError):
        msg = "Rate-limit exceeded, please retry later"
    elif isinstance(exc, CONN_ERRORS):
        msg = "Connection problem, unable to reach the completion provider"
    elif isinstance(exc, APIError):
        status = getattr(exc, "status_code", "unknown")
        msg = f"Provider reported an error ({status})"
    else:
        msg = exc.__class__.__name__

    log.warning("Wrapping provider exception: %s", msg, exc_info=exc)
    return ProviderError(f"{msg}: {exc}", exc)
