from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import openai

from screener.conversation import Message, to_chat_messages
from screener.engines.interfaces import TurnEngine, TurnReply
from screener.flow.steps import STEPS, StepId
from screener.llm.openai import MalformedReplyError, StructuredOpenAI
from screener.llm.prompt import build_system_prompt

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "Desculpe, tive um probleminha para responder agora 😅 Pode mandar sua mensagem de novo?"


class DelegatedEngine(TurnEngine):
    """Engine that hands the whole flow to the LLM on every turn."""

    def __init__(
        self,
        llm: StructuredOpenAI,
        system_prompt: Optional[str] = None,
        opening_text: Optional[str] = None,
        apology: str = APOLOGY_MESSAGE,
    ) -> None:
        self.llm = llm
        self.system_prompt = system_prompt or build_system_prompt()
        self.opening_text = opening_text or STEPS[StepId.START].message
        self.apology = apology

    def opening(self) -> TurnReply:
        return TurnReply(text=self.opening_text)

    async def reply(self, text: str, history: Sequence[Message]) -> TurnReply:
        messages = [
            {"role": "system", "content": self.system_prompt},
            *to_chat_messages(history),
            {"role": "user", "content": text},
        ]
        try:
            payload = await self.llm.generate_json(messages)
            return _parse_reply(payload)
        except (openai.APIError, MalformedReplyError) as e:
            logger.error(f"LLM turn failed, sending apology: {e}")
            return TurnReply(text=self.apology)


def _parse_reply(payload: Dict[str, Any]) -> TurnReply:
    text = payload.get("reply")
    if not isinstance(text, str) or not text.strip():
        raise MalformedReplyError("Reply payload has no 'reply' text")
    finished = payload.get("finished", False)
    show_contact_link = payload.get("show_contact_link", False)
    if not isinstance(finished, bool) or not isinstance(show_contact_link, bool):
        raise MalformedReplyError("Reply flags must be booleans")
    # The link is only ever offered as the closing message.
    return TurnReply(
        text=text.strip(),
        finished=finished or show_contact_link,
        show_contact_link=show_contact_link,
    )
