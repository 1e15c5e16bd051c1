from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from screener.conversation import Message, Role
from screener.engines.interfaces import TurnEngine, TurnReply

logger = logging.getLogger(__name__)

MessageCallback = Callable[[Message], None]


class TypingDelay:
    def __init__(self, base_s: float = 1.0, chars_per_s: float = 0.0, max_s: float = 4.0) -> None:
        self.base_s = base_s
        self.chars_per_s = chars_per_s
        self.max_s = max_s

    def delay_for(self, text: str) -> float:
        if self.chars_per_s <= 0:
            return self.base_s
        return min(self.base_s + len(text) / self.chars_per_s, max(self.max_s, self.base_s))


class ChatSession:
    """
    One screening conversation between a lead and a turn engine.

    Holds the append-only message log and the finished / contact-link
    flags. Each accepted user turn appends exactly one user message and,
    after the typing delay, exactly one assistant message.
    """

    def __init__(
        self,
        engine: TurnEngine,
        typing: Optional[TypingDelay] = None,
        on_message: Optional[MessageCallback] = None,
    ) -> None:
        self.engine = engine
        self.typing = typing or TypingDelay()
        self.on_message = on_message
        self.messages: List[Message] = []
        self.finished = False
        self.show_contact_link = False
        self.is_typing = False
        self.closed = False
        self._pending: Optional[asyncio.Task] = None

    @property
    def accepts_input(self) -> bool:
        return not (self.finished or self.is_typing or self.closed)

    async def start(self) -> Optional[Message]:
        """Send the opening message if the conversation is still empty."""
        if self.messages or self.closed or self.is_typing:
            return None
        opening = self.engine.opening()
        return await self._deliver(self._emit_after_delay(opening))

    async def send(self, text: str) -> Optional[Message]:
        """
        Submit a user reply and wait for the assistant's answer.

        Returns the assistant message, or None when the input was rejected
        or the session was closed while the reply was pending.
        """
        text = text.strip()
        if not text:
            return None
        if not self.accepts_input:
            logger.warning(
                "input_rejected",
                extra={
                    "finished": self.finished,
                    "typing": self.is_typing,
                    "closed": self.closed,
                },
            )
            return None

        history = list(self.messages)
        self._append(Message(role=Role.USER, text=text))
        logger.info("turn_received", extra={"text": text})
        return await self._deliver(self._respond(text, history))

    def close(self) -> None:
        """Tear the session down; a pending reply is cancelled and never appended."""
        self.closed = True
        if self._pending is not None and not self._pending.done():
            logger.debug("Cancelling pending reply")
            self._pending.cancel()

    async def _deliver(self, coro) -> Optional[Message]:
        self.is_typing = True
        self._pending = asyncio.ensure_future(coro)
        try:
            return await self._pending
        except asyncio.CancelledError:
            if self.closed:
                return None
            raise
        finally:
            self.is_typing = False
            self._pending = None

    async def _respond(self, text: str, history: List[Message]) -> Message:
        reply = await self.engine.reply(text, history)
        return await self._emit_after_delay(reply)

    async def _emit_after_delay(self, reply: TurnReply) -> Message:
        await asyncio.sleep(self.typing.delay_for(reply.text))
        message = Message(role=Role.ASSISTANT, text=reply.text)
        self._append(message)
        if reply.show_contact_link:
            self.show_contact_link = True
        if reply.finished:
            self.finished = True
            logger.info(
                "conversation_finished",
                extra={"show_contact_link": self.show_contact_link},
            )
        return message

    def _append(self, message: Message) -> None:
        self.messages.append(message)
        if self.on_message is not None:
            self.on_message(message)
