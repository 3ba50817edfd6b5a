"""
Provider-neutral dataclasses for client-side tool use.

They are intentionally minimal: everything provider-specific lives in the
provider adapter and the response wrapper.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

__all__ = ["ToolCallRequest", "ToolCallResult", "ToolCallInfo"]


@dataclass(slots=True)
class ToolCallRequest:
    """A request emitted by the model to call a local tool."""
    id: str
    name: str
    arguments: dict[str, Any]


@dataclass(slots=True)
class ToolCallResult:
    """Payload to send back to the model after the tool finished running."""
    id: str                     # must match the request id
    content: str


@dataclass(frozen=True, slots=True)
class ToolCallInfo:
    """Which tool fired for a reply, as surfaced to HTTP callers."""
    name: str
    args: dict[str, Any]

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "args": dict(self.args)}
