"""
Closed registry of the tools the relay can run.

Tool names form an enum and every tool has its own argument record, so a
provider-supplied name or payload is either resolved to one of the known
variants or rejected with ``UnknownToolError`` / ``InvalidArgumentsError``
before anything executes.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, fields
from enum import StrEnum
from typing import Any, Awaitable, Callable, Final, Union

from chat_relay._exceptions import (
    InvalidArgumentsError,
    ToolError,
    ToolExecutionError,
    UnknownToolError,
)
from chat_relay.tools.arithmetic import add, is_prime
from chat_relay.tools.crypto import PriceClient

__all__ = [
    "ToolKind",
    "SumArgs",
    "PrimeArgs",
    "PriceArgs",
    "ToolArgs",
    "ToolSpec",
    "ToolRegistry",
]

logger = logging.getLogger(__name__)


class ToolKind(StrEnum):
    SUM = "sum"
    CHECK_PRIME = "check_prime"
    GET_CRYPTO_PRICE = "get_crypto_price"


@dataclass(frozen=True, slots=True)
class SumArgs:
    num1: int | float
    num2: int | float


@dataclass(frozen=True, slots=True)
class PrimeArgs:
    number: int | float


@dataclass(frozen=True, slots=True)
class PriceArgs:
    coin: str


ToolArgs = Union[SumArgs, PrimeArgs, PriceArgs]

# JSON-schema type name -> accepted Python types
_SCHEMA_TYPES: Final[dict[str, tuple[type, ...]]] = {
    "number": (int, float),
    "string": (str,),
}


@dataclass(frozen=True)
class ToolSpec:
    """A tool as advertised to the provider plus the code that runs it."""

    kind: ToolKind
    description: str
    parameters: dict[str, str]
    args_type: type
    executable: Callable[[Any], Union[Any, Awaitable[Any]]]
    param_descriptions: dict[str, str] | None = None
    # CPU-bound executables run in a worker thread
    blocking: bool = False

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def required(self) -> frozenset[str]:
        return frozenset(f.name for f in fields(self.args_type))

    def as_function(self) -> dict[str, Any]:
        """OpenAI-compatible ``{"type": "function", ...}`` catalogue entry."""
        properties: dict[str, Any] = {}
        for param, schema_type in self.parameters.items():
            prop: dict[str, Any] = {"type": schema_type}
            if self.param_descriptions and param in self.param_descriptions:
                prop["description"] = self.param_descriptions[param]
            properties[param] = prop
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": sorted(self.required),
                },
            },
        }

    def parse(self, arguments: Any) -> ToolArgs:
        """Validate a raw payload against the parameter schema."""
        if not isinstance(arguments, dict):
            raise InvalidArgumentsError(self.name, "arguments must be an object")

        unknown = set(arguments) - set(self.parameters)
        if unknown:
            raise InvalidArgumentsError(self.name, f"unexpected {sorted(unknown)}")
        missing = self.required - set(arguments)
        if missing:
            raise InvalidArgumentsError(self.name, f"missing {sorted(missing)}")

        for param, value in arguments.items():
            accepted = _SCHEMA_TYPES[self.parameters[param]]
            # bool is an int subclass but never a valid number here
            if isinstance(value, bool) or not isinstance(value, accepted):
                raise InvalidArgumentsError(
                    self.name, f"{param} must be a {self.parameters[param]}"
                )
        return self.args_type(**arguments)


class ToolRegistry:
    """Fixed set of tools: ``sum``, ``check_prime`` and ``get_crypto_price``."""

    def __init__(self, price_client: PriceClient | None = None) -> None:
        self.price_client = price_client or PriceClient()
        specs = (
            ToolSpec(
                kind=ToolKind.SUM,
                description="Returns the sum of two numbers",
                parameters={"num1": "number", "num2": "number"},
                args_type=SumArgs,
                executable=lambda args: add(args.num1, args.num2),
            ),
            ToolSpec(
                kind=ToolKind.CHECK_PRIME,
                description="Checks whether a number is prime",
                parameters={"number": "number"},
                args_type=PrimeArgs,
                executable=lambda args: is_prime(args.number),
                blocking=True,
            ),
            ToolSpec(
                kind=ToolKind.GET_CRYPTO_PRICE,
                description="Gets current crypto price in USD",
                parameters={"coin": "string"},
                args_type=PriceArgs,
                executable=lambda args: self.price_client.get_price(args.coin),
                param_descriptions={"coin": "Cryptocurrency name like bitcoin, ethereum"},
            ),
        )
        self._specs: dict[ToolKind, ToolSpec] = {spec.kind: spec for spec in specs}

    def list_specs(self) -> tuple[ToolSpec, ...]:
        return tuple(self._specs.values())

    def catalogue(self) -> list[dict[str, Any]]:
        """The specs rendered as the provider's callable-function list."""
        return [spec.as_function() for spec in self._specs.values()]

    def resolve(self, name: str) -> ToolSpec:
        try:
            return self._specs[ToolKind(name)]
        except ValueError:
            raise UnknownToolError(name) from None

    async def invoke(self, name: str, arguments: Any) -> Any:
        """Validate *arguments* for tool *name*, run it and return its value.

        Raises:
            UnknownToolError: *name* is not one of the registry's tools.
            InvalidArgumentsError: the payload does not fit the schema.
            ToolExecutionError: the tool itself failed.
        """
        spec = self.resolve(name)
        parsed = spec.parse(arguments)
        logger.info("Function called: %s %s", spec.name, arguments)

        try:
            if spec.blocking:
                result = await asyncio.to_thread(spec.executable, parsed)
            else:
                result = spec.executable(parsed)
            if inspect.isawaitable(result):
                result = await result
        except ToolError:
            raise
        except Exception as exc:
            raise ToolExecutionError(spec.name, str(exc)) from exc
        return result

    async def aclose(self) -> None:
        await self.price_client.aclose()
