from __future__ import annotations

import os
from enum import StrEnum
from typing import Final

__all__ = ["Provider", "get_api_key"]


class Provider(StrEnum):
    GROQ = "groq"


_ENV_VARS: Final[dict[Provider, str]] = {
    Provider.GROQ: "GROQ_API_KEY",
}


def get_api_key(provider: Provider) -> str:
    """Return the API key for *provider* or raise RuntimeError."""
    try:
        env_var = _ENV_VARS[provider]
    except KeyError:
        raise RuntimeError(f"No config for {provider!s}") from None

    key = os.environ.get(env_var, "").strip()
    if not key:
        raise RuntimeError(f"{env_var} missing")
    return key
