"""
Tool-calling loop against the remote completion provider.

One incoming message costs at most two round-trips:

1. send the transcript plus the tool catalogue (``tool_choice="auto"``);
2. if the model asked for a tool, run the first requested invocation,
   append its JSON result and send the transcript again without tools.

Any provider or tool failure surfaces as ``ProviderError``. The tool request
is recorded only together with its result, so a failed tool leaves just the
user message behind; other messages already appended stay in the transcript.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from chat_relay._exceptions import ProviderError, ToolError
from chat_relay.conversation import Transcript
from chat_relay.providers.base import BaseAsyncLLM
from chat_relay.tools.registry import ToolRegistry
from chat_relay.types import (
    BaseChatResponse,
    ChatParams,
    ChatReply,
    ToolCallInfo,
    ToolCallResult,
    assistant_message,
    tool_message,
    user_message,
)

__all__ = ["Orchestrator"]


class Orchestrator:
    def __init__(
        self,
        llm: BaseAsyncLLM,
        registry: ToolRegistry,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.llm = llm
        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)

    async def run(self, message: str, transcript: Transcript) -> ChatReply:
        """Answer *message*, threading any tool call through *transcript*.

        Raises:
            ProviderError: a round-trip failed, came back without a message,
                or the requested tool could not be run.
        """
        transcript.append(user_message(message))

        first = await self._complete(
            transcript,
            ChatParams(tools=self.registry.catalogue(), tool_choice="auto"),
        )
        calls = first.get_tool_calls()

        if not calls:
            content = first.get_response_content()
            if content:
                transcript.append(assistant_message(content))
            return ChatReply(text=content)

        call, *ignored = calls
        if ignored:
            # Only one invocation per turn is honoured for now.
            self.logger.warning(
                "Provider requested %d tool calls; running %s, ignoring %s",
                len(calls),
                call.name,
                [extra.name for extra in ignored],
            )

        try:
            result = await self.registry.invoke(call.name, call.arguments)
        except ToolError as exc:
            raise ProviderError(f"Tool call {call.name} failed: {exc}", exc) from exc

        # request and result are appended as a pair
        transcript.append(assistant_message(first.get_response_content() or None, [call]))
        transcript.append(tool_message(ToolCallResult(call.id, json.dumps(result))))

        final = await self._complete(transcript, ChatParams())
        content = final.get_response_content()
        if content:
            transcript.append(assistant_message(content))

        return ChatReply(
            text=content,
            tool_call=ToolCallInfo(call.name, call.arguments),
            ignored_tool_calls=list(ignored),
        )

    async def _complete(self, transcript: Transcript, params: ChatParams) -> BaseChatResponse:
        response = await self.llm.chat(transcript.messages, params=params)
        response.raise_for_error()
        if response.extract_by_path("choices.0.message") is None:
            raise ProviderError("Provider response contained no message")
        return response
