from __future__ import annotations

import logging
from typing import Any, Optional, Self, Sequence, Type

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion

from chat_relay.config import DEFAULT_GROQ_BASE_URL
from chat_relay.responses import GroqResponse
from chat_relay.types.chat import BaseChatResponse, ChatMessage, ChatParams

from .base import BaseAsyncLLM


class OpenAICompatibleAdapter:
    """Adapter for converting generic requests to the OpenAI chat format."""

    def build_messages(self, messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
        """Convert generic ChatMessage to the provider's expected format."""
        provider_messages: list[dict[str, Any]] = []

        for msg in messages:
            provider_msg: dict[str, Any] = {"role": msg["role"]}

            if msg.get("content") is not None:
                provider_msg["content"] = msg["content"]

            # Assistant messages that request tools
            if msg.get("tool_calls"):
                provider_msg["tool_calls"] = msg["tool_calls"]
                # content must be null when tool_calls is present
                if "content" not in provider_msg:
                    provider_msg["content"] = None

            # Tool result messages
            if msg.get("tool_call_id"):
                provider_msg["tool_call_id"] = msg["tool_call_id"]

            if msg.get("name"):
                provider_msg["name"] = msg["name"]

            if "content" not in provider_msg and not provider_msg.get("tool_calls"):
                provider_msg["content"] = ""

            provider_messages.append(provider_msg)

        return provider_messages

    def build_params(self, params: ChatParams) -> dict[str, Any]:
        """Convert ChatParams to API keyword arguments."""
        base_params = params.as_dict(exclude_none=True)
        extras = base_params.pop("extra_params", None) or {}
        for k, v in extras.items():
            base_params.setdefault(k, v)
        return base_params


class GroqLLM(BaseAsyncLLM):
    """
    Groq implementation via its OpenAI-compatible endpoint (async-only).

    Use ``GroqLLM.from_client`` when you already have an ``AsyncOpenAI`` instance.
    """

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        timeout: float = 60.0,
        max_retries: int = 0,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
        base_url: str = DEFAULT_GROQ_BASE_URL,
    ) -> None:
        super().__init__(model=model, logger=logger, name=name)
        self.api_key = api_key
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        self._adapter = OpenAICompatibleAdapter()

    # Alternate constructor
    @classmethod
    def from_client(
        cls,
        model: str,
        client: AsyncOpenAI,
        *,
        logger: Optional[logging.Logger] = None,
        name: Optional[str] = None,
    ) -> Self:
        """
        Wrap an existing ``AsyncOpenAI`` client already configured
        with Groq's base URL.
        """
        if not isinstance(client, AsyncOpenAI):
            raise TypeError(
                f"GroqLLM.from_client expects AsyncOpenAI; got {type(client).__name__}"
            )

        self = cls.__new__(cls)  # bypass __init__
        BaseAsyncLLM.__init__(self, model=model, logger=logger, name=name)
        self.api_key = client.api_key
        self._client = client
        self._adapter = OpenAICompatibleAdapter()
        return self

    @property
    def wrapper_class(self) -> Type[BaseChatResponse]:
        """Response wrapper class for Groq."""
        return GroqResponse

    async def _chat_impl(
        self,
        messages: Sequence[ChatMessage],
        params: ChatParams,
    ) -> ChatCompletion:
        """Core implementation for Groq chat requests."""
        args = {
            "model": self.model,
            "messages": self._adapter.build_messages(messages),
            **self._adapter.build_params(params),
        }

        self._log(
            f"Sending {len(args['messages'])} messages to Groq model {self.model}"
            f" (tools: {len(params.tools or [])})"
        )
        response: ChatCompletion = await self._client.chat.completions.create(**args)
        return response
