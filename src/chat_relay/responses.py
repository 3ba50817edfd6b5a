from __future__ import annotations

import json
import logging
from logging import Logger
from typing import Optional

from openai.types.chat import ChatCompletion

from chat_relay._exceptions import ProviderError
from chat_relay.types.chat import BaseChatResponse
from chat_relay.types.tool import ToolCallRequest

_logger: Logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())


class GroqResponse(BaseChatResponse):
    """Response wrapper for OpenAI-compatible chat completions (Groq)."""
    _logger: Logger = _logger

    def __init__(
        self,
        raw_response: ChatCompletion | None = None,
        *,
        error_message: str | None = None,
        error: ProviderError | None = None,
    ) -> None:
        # exactly one of these must be non-None
        if (raw_response is None) == (error_message is None):
            raise ValueError("Provide exactly one of 'raw_response' or 'error_message'")
        self._response = raw_response
        self._error_message = error_message
        self._error = error

    @property
    def is_error(self) -> bool:
        return self._error_message is not None

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def raw_response(self) -> ChatCompletion | None:
        return self._response

    def get_response_content(self) -> str:
        if self.is_error or self._response is None:
            return ""
        content: Optional[str] = self.extract_by_path("choices.0.message.content")
        return content if content is not None else ""

    def get_tool_calls(self) -> list[ToolCallRequest] | None:
        """Extract tool calls from the first choice.

        Raises:
            ProviderError: if a tool call carries arguments that are not a JSON object.
        """
        if self.is_error or not self._response:
            return None

        message = self.extract_by_path("choices.0.message")
        if message is None or not message.tool_calls:
            return None

        calls: list[ToolCallRequest] = []
        for tc in message.tool_calls:
            raw_args = tc.function.arguments
            arguments = {}

            if isinstance(raw_args, dict):
                arguments = raw_args
            elif isinstance(raw_args, str) and raw_args.strip():
                try:
                    arguments = json.loads(raw_args)
                except json.JSONDecodeError as exc:
                    self._logger.warning("Bad JSON in tool call: %s", raw_args)
                    raise ProviderError(
                        f"Malformed arguments for tool call {tc.function.name}", exc
                    ) from exc
            if not isinstance(arguments, dict):
                raise ProviderError(
                    f"Arguments for tool call {tc.function.name} are not an object"
                )

            calls.append(
                ToolCallRequest(id=tc.id, name=tc.function.name, arguments=arguments)
            )
        return calls or None

    def raise_for_error(self) -> None:
        if self.is_error:
            if self._error is not None:
                raise self._error
            raise ProviderError(self._error_message or "Provider call failed")
