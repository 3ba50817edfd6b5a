"""Local tools the relay can run on the model's behalf."""

from .arithmetic import add, is_prime
from .crypto import PriceClient, usd_price
from .registry import (
    PriceArgs,
    PrimeArgs,
    SumArgs,
    ToolArgs,
    ToolKind,
    ToolRegistry,
    ToolSpec,
)

__all__ = [
    "add",
    "is_prime",
    "PriceClient",
    "usd_price",
    "PriceArgs",
    "PrimeArgs",
    "SumArgs",
    "ToolArgs",
    "ToolKind",
    "ToolRegistry",
    "ToolSpec",
]
