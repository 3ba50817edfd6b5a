"""
Request-level policy: online orchestration when a provider key is set,
the offline responder otherwise, and degradation between the two.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from chat_relay._exceptions import (
    InvalidRequestError,
    OfflineFailure,
    PriceFetchError,
    ProviderError,
)
from chat_relay.config import Settings
from chat_relay.conversation import ConversationStore
from chat_relay.factory import llm_from_settings
from chat_relay.offline import OfflineResponder, OfflineRules
from chat_relay.orchestrator import Orchestrator
from chat_relay.providers.base import BaseAsyncLLM
from chat_relay.tools.crypto import PriceClient
from chat_relay.tools.registry import ToolRegistry
from chat_relay.types import ChatReply

__all__ = ["ChatService", "FALLBACK_NOTE"]

logger = logging.getLogger(__name__)

FALLBACK_NOTE = (
    "\n\n[Note: Groq API call failed; you are seeing the offline/tool-based "
    "fallback response instead.]"
)


def validate_message(body: Any) -> str:
    """Pull a non-empty ``message`` string out of a decoded request body."""
    message = body.get("message") if isinstance(body, dict) else None
    if not message or not isinstance(message, str):
        raise InvalidRequestError("Missing 'message' field in request body.")
    return message


class ChatService:
    """Answers chat messages; one instance serves the whole process."""

    def __init__(
        self,
        settings: Settings,
        *,
        registry: Optional[ToolRegistry] = None,
        store: Optional[ConversationStore] = None,
        rules: Optional[OfflineRules] = None,
        llm_factory: Optional[Callable[[Settings], BaseAsyncLLM]] = None,
    ) -> None:
        self.settings = settings
        self.registry = registry or ToolRegistry(
            PriceClient(settings.price_api_url, timeout=settings.price_timeout)
        )
        self.store = store or ConversationStore()
        self.offline = OfflineResponder(self.registry, rules)
        self._llm_factory = llm_factory or llm_from_settings
        self._llm: Optional[BaseAsyncLLM] = None
        self._orchestrator: Optional[Orchestrator] = None

    @property
    def provider_configured(self) -> bool:
        return self.settings.groq_configured

    def _get_orchestrator(self) -> Orchestrator:
        # The provider client is built once, on first online request.
        if self._orchestrator is None:
            self._llm = self._llm_factory(self.settings)
            self._orchestrator = Orchestrator(self._llm, self.registry)
        return self._orchestrator

    async def reply(self, message: str, session_id: Optional[str] = None) -> ChatReply:
        """Answer one message.

        Raises:
            InvalidRequestError: *message* is empty or not a string.
            OfflineFailure: the offline path failed (after a provider failure,
                if there was one).
        """
        message = validate_message({"message": message})

        if not self.provider_configured:
            return await self._offline(message)

        try:
            return await self._get_orchestrator().run(message, self.store.get(session_id))
        except ProviderError as exc:
            logger.error("Error in chat (Groq path): %s", exc)
            try:
                fallback = await self._offline(message)
            except OfflineFailure as fallback_exc:
                raise OfflineFailure(str(exc) or str(fallback_exc)) from fallback_exc

        fallback.text += FALLBACK_NOTE
        return fallback

    async def _offline(self, message: str) -> ChatReply:
        try:
            return await self.offline.respond(message)
        except PriceFetchError as exc:
            logger.warning("Price lookup failed offline: %s", exc)
            return self.offline.price_unavailable(exc.coin)
        except Exception as exc:
            logger.exception("Error in chat (offline fallback)")
            raise OfflineFailure("Offline demo failed.") from exc

    async def aclose(self) -> None:
        if self._llm is not None:
            await self._llm.aclose()
        await self.registry.aclose()
