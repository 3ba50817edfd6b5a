"""Environment-backed settings for chat-relay.

``Settings.from_env`` loads a ``.env`` file through python-dotenv without
overriding variables already present in the process environment, so that
shell exports (and pytest ``monkeypatch``) take precedence.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, TypeVar

from dotenv import find_dotenv, load_dotenv

__all__ = ["Settings", "DEFAULT_MODEL", "DEFAULT_GROQ_BASE_URL", "DEFAULT_PRICE_API_URL"]

DEFAULT_MODEL = "llama-3.1-8b-instant"
DEFAULT_GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_PRICE_API_URL = "https://api.coingecko.com/api/v3/simple/price"

T = TypeVar("T")


def _env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_parsed(name: str, default: T, parse: Callable[[str], T]) -> T:
    raw = _env_str(name)
    if raw is None:
        return default
    try:
        return parse(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a {parse.__name__}, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the relay and its HTTP front end."""

    groq_api_key: Optional[str] = None
    groq_model: str = DEFAULT_MODEL
    groq_base_url: str = DEFAULT_GROQ_BASE_URL
    groq_timeout: float = 60.0
    # The orchestrator never retries; SDK-level retries stay off unless asked for.
    groq_max_retries: int = 0
    price_api_url: str = DEFAULT_PRICE_API_URL
    price_timeout: float = 15.0
    host: str = "0.0.0.0"
    port: int = 3000
    port_attempts: int = 10
    static_dir: Path = Path("public")
    log_level: str = "INFO"

    @property
    def groq_configured(self) -> bool:
        return bool(self.groq_api_key)

    @classmethod
    def from_env(cls, env_file: Optional[Path | str] = None) -> "Settings":
        """Load settings from the environment, reading ``.env`` first if present."""
        load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

        return cls(
            groq_api_key=_env_str("GROQ_API_KEY"),
            groq_model=_env_str("GROQ_MODEL", DEFAULT_MODEL),
            groq_base_url=_env_str("GROQ_BASE_URL", DEFAULT_GROQ_BASE_URL),
            groq_timeout=_env_parsed("GROQ_TIMEOUT", 60.0, float),
            groq_max_retries=_env_parsed("GROQ_MAX_RETRIES", 0, int),
            price_api_url=_env_str("PRICE_API_URL", DEFAULT_PRICE_API_URL),
            price_timeout=_env_parsed("PRICE_TIMEOUT", 15.0, float),
            host=_env_str("HOST", "0.0.0.0"),
            port=_env_parsed("PORT", 3000, int),
            port_attempts=_env_parsed("PORT_ATTEMPTS", 10, int),
            static_dir=Path(_env_str("STATIC_DIR", "public")),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )
