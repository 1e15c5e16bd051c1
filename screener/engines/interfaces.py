from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from screener.conversation import Message


@dataclass(frozen=True)
class TurnReply:
    text: str
    finished: bool = False
    show_contact_link: bool = False


class TurnEngine(Protocol):
    def opening(self) -> TurnReply:
        """Return the first assistant message of a new conversation."""

    async def reply(self, text: str, history: Sequence[Message]) -> TurnReply:
        """Return the next assistant turn for ``text`` given the prior messages."""
