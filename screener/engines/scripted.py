from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from screener.conversation import Message
from screener.engines.interfaces import TurnEngine, TurnReply
from screener.flow.machine import QualificationFlow


@dataclass
class ScriptedEngine(TurnEngine):
    """Deterministic engine driven by the local step table."""

    flow: QualificationFlow = field(default_factory=QualificationFlow)

    def opening(self) -> TurnReply:
        return TurnReply(text=self.flow.opening_message())

    async def reply(self, text: str, history: Sequence[Message]) -> TurnReply:
        _ = history
        outcome = self.flow.advance(text)
        if outcome is None:
            raise RuntimeError("Conversation already finished")
        return TurnReply(
            text=outcome.message,
            finished=outcome.finished,
            show_contact_link=outcome.show_contact_link,
        )
