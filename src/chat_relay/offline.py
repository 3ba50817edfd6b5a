"""
Rule-based responder used when no completion provider is configured or the
provider call failed.

Incoming text is classified once into an ``OfflineIntent`` (sum, primality or
price lookup, first match wins) and the matching tool runs directly through
the ``ToolRegistry``. The regex heuristics live in ``OfflineRules`` so that
alternative matching behaviour is an explicit configuration choice.
"""

from __future__ import annotations

import logging
from decimal import Decimal
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional, Pattern

from chat_relay.tools.crypto import usd_price
from chat_relay.tools.registry import PriceArgs, PrimeArgs, SumArgs, ToolArgs, ToolKind, ToolRegistry
from chat_relay.types import ChatReply, ToolCallInfo

__all__ = [
    "HELP_TEXT",
    "IntentKind",
    "OfflineIntent",
    "OfflineRules",
    "OfflineResponder",
    "format_number",
]

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Offline demo mode is active because GROQ_API_KEY is not set.\n"
    "Try:\n"
    "- Calculate 1234 + 5678\n"
    "- Is 9973 prime?\n"
    "- Bitcoin price\n"
    "\nTo enable full AI chat, add GROQ_API_KEY to a .env file and restart the server."
)

_NUMBER = r"-?\d+(?:\.\d+)?"


def _compile(*patterns: str) -> tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


@dataclass(frozen=True)
class OfflineRules:
    """Matching heuristics for the offline responder.

    Attributes:
        sum_pattern: Two capture groups, one per operand.
        prime_keyword: Substring (case-insensitive) that selects the primality intent.
        prime_pattern: First match's group 1 is the number to test.
        price_triggers: Any match selects the price intent.
        coin_aliases: Ordered ``(coin id, pattern)`` pairs checked before adjacency.
        coin_patterns: Ordered patterns whose group 1 is a coin id next to "price".
        help_text: Reply when nothing matches.
    """

    sum_pattern: Pattern[str] = re.compile(rf"({_NUMBER})\s*\+\s*({_NUMBER})")
    prime_keyword: str = "prime"
    prime_pattern: Pattern[str] = re.compile(rf"({_NUMBER})")
    price_triggers: tuple[Pattern[str], ...] = field(
        default_factory=lambda: _compile(
            r"price", r"crypto", r"bitcoin", r"ethereum", r"\bbtc\b", r"\beth\b"
        )
    )
    coin_aliases: tuple[tuple[str, Pattern[str]], ...] = field(
        default_factory=lambda: (
            ("bitcoin", re.compile(r"bitcoin|\bbtc\b", re.IGNORECASE)),
            ("ethereum", re.compile(r"ethereum|\beth\b", re.IGNORECASE)),
        )
    )
    coin_patterns: tuple[Pattern[str], ...] = field(
        default_factory=lambda: _compile(
            r"price\s+of\s+([a-z0-9-]+)", r"([a-z0-9-]+)\s+price"
        )
    )
    help_text: str = HELP_TEXT


class IntentKind(StrEnum):
    SUM = "sum"
    PRIME = "prime"
    PRICE = "price"


@dataclass(frozen=True)
class OfflineIntent:
    kind: IntentKind
    args: ToolArgs


def format_number(value: int | float) -> str:
    """Render a number in positional notation, without a trailing ``.0``."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        # repr keeps the shortest round-tripping digits, "f" drops the exponent
        return format(Decimal(repr(value)), "f")
    return str(value)


def _to_number(token: str) -> int | float:
    return float(token) if "." in token else int(token)


class OfflineResponder:
    """Answers sum, primality and price questions without a remote model."""

    def __init__(
        self,
        registry: ToolRegistry,
        rules: Optional[OfflineRules] = None,
    ) -> None:
        self.registry = registry
        self.rules = rules or OfflineRules()

    def classify(self, message: str) -> Optional[OfflineIntent]:
        """Return the first matching intent, or None."""
        rules = self.rules
        lower = message.lower()

        m = rules.sum_pattern.search(message)
        if m:
            return OfflineIntent(
                IntentKind.SUM, SumArgs(_to_number(m.group(1)), _to_number(m.group(2)))
            )

        if rules.prime_keyword in lower:
            m = rules.prime_pattern.search(message)
            if m:
                return OfflineIntent(IntentKind.PRIME, PrimeArgs(_to_number(m.group(1))))

        if any(trigger.search(lower) for trigger in rules.price_triggers):
            coin = self._resolve_coin(lower)
            if coin:
                return OfflineIntent(IntentKind.PRICE, PriceArgs(coin))

        return None

    def _resolve_coin(self, lower: str) -> Optional[str]:
        for coin, alias in self.rules.coin_aliases:
            if alias.search(lower):
                return coin
        for pattern in self.rules.coin_patterns:
            m = pattern.search(lower)
            if m:
                return m.group(1)
        return None

    async def respond(self, message: str) -> ChatReply:
        """Answer *message* from the matched intent, or with the help text.

        Raises:
            PriceFetchError: the price intent matched and the lookup failed.
        """
        intent = self.classify(message)
        if intent is None:
            return ChatReply(text=self.rules.help_text)

        logger.debug("Offline intent %s: %s", intent.kind, intent.args)
        args = intent.args

        if isinstance(args, SumArgs):
            total = await self.registry.invoke(ToolKind.SUM, {"num1": args.num1, "num2": args.num2})
            return ChatReply(
                text=(
                    f"Result: {format_number(args.num1)} + {format_number(args.num2)}"
                    f" = {format_number(total)}"
                ),
                tool_call=ToolCallInfo(ToolKind.SUM.value, {"num1": args.num1, "num2": args.num2}),
            )

        if isinstance(args, PrimeArgs):
            prime = await self.registry.invoke(ToolKind.CHECK_PRIME, {"number": args.number})
            return ChatReply(
                text=f"{format_number(args.number)} is {'' if prime else 'not '}a prime number.",
                tool_call=ToolCallInfo(ToolKind.CHECK_PRIME.value, {"number": args.number}),
            )

        payload = await self.registry.invoke(ToolKind.GET_CRYPTO_PRICE, {"coin": args.coin})
        usd = usd_price(payload, args.coin)
        if usd is None:
            return self.price_unavailable(args.coin)
        return ChatReply(
            text=f"{args.coin.upper()} price: ${format_number(usd)} USD",
            tool_call=ToolCallInfo(ToolKind.GET_CRYPTO_PRICE.value, {"coin": args.coin}),
        )

    @staticmethod
    def price_unavailable(coin: str) -> ChatReply:
        return ChatReply(
            text=f'I couldn\'t find a USD price for "{coin}". Try: bitcoin, ethereum.',
            tool_call=ToolCallInfo(ToolKind.GET_CRYPTO_PRICE.value, {"coin": coin}),
        )
