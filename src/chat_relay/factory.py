from __future__ import annotations

import logging
from typing import Type

from openai import AsyncOpenAI

from chat_relay.config import Settings
from chat_relay.providers import Provider, get_api_key
from chat_relay.providers.base import BaseAsyncLLM
from chat_relay.providers.groq import GroqLLM

# map Provider enum to its implementation
_LLM_REGISTRY: dict[Provider, Type[GroqLLM]] = {
    Provider.GROQ: GroqLLM,
}


def create_llm(
    provider: Provider,
    model: str,
    *,
    api_key: str | None = None,
    client: AsyncOpenAI | None = None,
    logger: logging.Logger | None = None,
    **provider_kwargs: object,
) -> BaseAsyncLLM:
    """
    Factory for creating a completion provider.

    Args:
        provider: Which provider to use.
        model: Model identifier (e.g. "llama-3.1-8b-instant").
        api_key: Overrides automatic lookup; if omitted, pulled from env.
        client: Optional pre-configured ``AsyncOpenAI`` instance to use.
        logger: Optional custom logger.
        **provider_kwargs: Any extra args to pass through (timeout, max_retries, base_url).
    """
    try:
        llm_cls = _LLM_REGISTRY[provider]
    except KeyError as exc:
        raise ValueError(f"Unsupported provider: {provider}") from exc

    if client is not None:  # use caller-supplied client verbatim
        return llm_cls.from_client(model, client, logger=logger)

    key = api_key or get_api_key(provider)
    return llm_cls(model, api_key=key, logger=logger, **provider_kwargs)


def llm_from_settings(settings: Settings, logger: logging.Logger | None = None) -> BaseAsyncLLM:
    """Build the Groq client described by *settings*."""
    return create_llm(
        Provider.GROQ,
        settings.groq_model,
        api_key=settings.groq_api_key,
        logger=logger,
        timeout=settings.groq_timeout,
        max_retries=settings.groq_max_retries,
        base_url=settings.groq_base_url,
    )
