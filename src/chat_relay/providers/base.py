"""Base class for completion providers."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence, Type

from chat_relay._exceptions import classify_error
from chat_relay.types.chat import BaseChatResponse, ChatMessage, ChatParams

__all__ = ["BaseAsyncLLM"]


class BaseAsyncLLM(ABC):
    """
    Base class for all completion providers. All implementations are async-first.
    """

    def __init__(
        self,
        model: str,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> None:
        """
        Initializes the base client.

        Args:
            model: The identifier of the model to be used.
            logger: Optional logger instance. If None, a logger named after
                    this module will be used.
            name: Optional name for this component, used in logging.
                  If None, defaults to the concrete class's name.
        """
        self.model = model
        self.logger = logger or logging.getLogger(__name__)
        self.name = name if name is not None else self.__class__.__name__

    @abstractmethod
    async def _chat_impl(
        self,
        messages: Sequence[ChatMessage],
        params: ChatParams,
    ) -> Any:
        """
        Send the conversation to the provider and return its raw response.

        Args:
            messages: The conversation history, oldest first.
            params: Parameters for the chat completion request.
        """
        ...

    @property
    @abstractmethod
    def wrapper_class(self) -> Type[BaseChatResponse]:
        """BaseChatResponse subclass for this provider."""
        ...

    async def chat(
        self,
        messages: Sequence[ChatMessage],
        *,
        params: ChatParams | None = None,
    ) -> BaseChatResponse:
        """
        Send chat, catching exceptions and wrapping responses uniformly.

        Failures come back as an error wrapper; call ``raise_for_error`` to
        turn them into a ``ProviderError``.
        """
        final_params = params or ChatParams()
        try:
            raw = await self._chat_impl(messages, final_params)
        except Exception as exc:
            return self._wrap_error(exc)
        return self._wrap_response(raw)

    def _wrap_error(self, exc: Exception) -> BaseChatResponse:
        """Wrap exception into an error response wrapper."""
        error = classify_error(exc, self.logger)
        return self.wrapper_class(error_message=str(error), error=error)

    def _wrap_response(self, raw: Any) -> BaseChatResponse:
        """Wrap raw provider response into a response wrapper."""
        return self.wrapper_class(raw_response=raw)

    def _log(self, message: str, level: int = logging.INFO) -> None:
        self.logger.log(level, f"[{self.name}] {message}")

    # --- lifecycle ---------------------------------------------------------
    async def aclose(self) -> None:
        """
        Close the underlying async HTTP client. Safe to call multiple times.
        """
        client = getattr(self, "_client", None)
        close = getattr(client, "close", None)
        if close:
            await close()
