"""Conversation state: append-only transcripts scoped by session id."""

from __future__ import annotations

from typing import Iterator, Optional

from chat_relay.types import ChatMessage, Role, system_message

__all__ = ["SYSTEM_PROMPT", "DEFAULT_SESSION", "Transcript", "ConversationStore"]

SYSTEM_PROMPT = (
    "You are an AI robot agent that can optionally call tools to do math, check if a "
    "number is prime, or fetch crypto prices. When you use tools, clearly explain what "
    "you did and include the result in natural language."
)

DEFAULT_SESSION = "default"


class Transcript:
    """Ordered conversation history that always opens with the system instruction.

    Messages are only ever appended. A tool message is accepted only when it
    answers an invocation requested by an earlier assistant message that has
    not been answered yet.
    """

    def __init__(self, system_prompt: str = SYSTEM_PROMPT) -> None:
        self._messages: list[ChatMessage] = [system_message(system_prompt)]
        self._pending_calls: set[str] = set()

    def append(self, message: ChatMessage) -> None:
        role = message.get("role")
        if role not in {r.value for r in Role} or role == Role.SYSTEM:
            raise ValueError(f"Cannot append message with role {role!r}")

        if role == Role.TOOL:
            call_id = message.get("tool_call_id")
            if call_id not in self._pending_calls:
                raise ValueError(f"Tool message {call_id!r} answers no pending request")
            self._pending_calls.discard(call_id)
        elif role == Role.ASSISTANT:
            for call in message.get("tool_calls") or ():
                self._pending_calls.add(call["id"])

        self._messages.append(message)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def pending_tool_calls(self) -> frozenset[str]:
        return frozenset(self._pending_calls)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self._messages)


class ConversationStore:
    """In-memory transcripts keyed by session id; lives as long as the process."""

    def __init__(self, system_prompt: str = SYSTEM_PROMPT) -> None:
        self.system_prompt = system_prompt
        self._sessions: dict[str, Transcript] = {}

    def get(self, session_id: Optional[str] = None) -> Transcript:
        key = session_id or DEFAULT_SESSION
        transcript = self._sessions.get(key)
        if transcript is None:
            transcript = self._sessions[key] = Transcript(self.system_prompt)
        return transcript

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions
