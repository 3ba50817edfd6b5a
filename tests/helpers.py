"""Shared test doubles: scripted provider, completion builder, fake price index."""

from __future__ import annotations

import json
from typing import Any, Callable, Sequence

import httpx
from openai.types.chat import ChatCompletion

from chat_relay.providers.base import BaseAsyncLLM
from chat_relay.responses import GroqResponse
from chat_relay.tools.crypto import PriceClient
from chat_relay.types import ChatMessage, ChatParams


def make_completion(
    content: str | None = None,
    tool_calls: Sequence[tuple[str, str, Any]] = (),
) -> ChatCompletion:
    """Build a ChatCompletion; tool_calls are ``(id, name, arguments)`` triples.

    Arguments given as a dict are JSON-encoded, strings are passed verbatim.
    """
    message: dict[str, Any] = {"role": "assistant", "content": content}
    if tool_calls:
        message["tool_calls"] = [
            {
                "id": call_id,
                "type": "function",
                "function": {
                    "name": name,
                    "arguments": args if isinstance(args, str) else json.dumps(args),
                },
            }
            for call_id, name, args in tool_calls
        ]
    return ChatCompletion.model_validate(
        {
            "id": "cmpl-test",
            "object": "chat.completion",
            "created": 0,
            "model": "llama-3.1-8b-instant",
            "choices": [
                {
                    "index": 0,
                    "finish_reason": "tool_calls" if tool_calls else "stop",
                    "message": message,
                }
            ],
        }
    )


class ScriptedLLM(BaseAsyncLLM):
    """Provider that replays canned completions (or raises canned exceptions)."""

    def __init__(self, *responses: ChatCompletion | Exception) -> None:
        super().__init__(model="llama-3.1-8b-instant")
        self._responses = list(responses)
        self.calls: list[tuple[list[ChatMessage], ChatParams]] = []
        self.closed = False

    @property
    def wrapper_class(self) -> type[GroqResponse]:
        return GroqResponse

    async def _chat_impl(self, messages: Sequence[ChatMessage], params: ChatParams) -> Any:
        self.calls.append((list(messages), params))
        if not self._responses:
            raise AssertionError("ScriptedLLM ran out of responses")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True


def price_client(
    handler: Callable[[httpx.Request], httpx.Response] | None = None,
    *,
    prices: dict[str, float] | None = None,
) -> PriceClient:
    """PriceClient backed by httpx.MockTransport.

    With *prices*, answers like the real index: known ids get ``{"usd": ...}``,
    unknown ids are left out of the payload.
    """
    if handler is None:
        table = prices or {}

        def handler(request: httpx.Request) -> httpx.Response:
            ids = request.url.params.get("ids", "")
            return httpx.Response(
                200, json={coin: {"usd": table[coin]} for coin in ids.split(",") if coin in table}
            )

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return PriceClient("https://prices.test/simple/price", client=client)


def failing_price_client(status_code: int = 503) -> PriceClient:
    return price_client(lambda request: httpx.Response(status_code, text="unavailable"))
