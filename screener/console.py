"""Interactive terminal chat host."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from screener.conversation import Message, Role
from screener.session import ChatSession

logger = logging.getLogger(__name__)

WriteCallback = Callable[[str], None]


def format_message(message: Message) -> str:
    speaker = "Você" if message.role == Role.USER else "William"
    return f"[{message.display_time}] {speaker}: {message.text}"


async def _read_line(prompt: str) -> Optional[str]:
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, input, prompt)
    except EOFError:
        return None


async def run_console(
    session: ChatSession,
    contact_url: str,
    read_line: Callable[[str], Awaitable[Optional[str]]] = _read_line,
    write: WriteCallback = print,
) -> None:
    """Chat on stdin/stdout until the conversation ends or input closes."""
    def show(message: Message) -> None:
        if message.role == Role.ASSISTANT:
            write(format_message(message))

    session.on_message = show
    await session.start()

    while not session.finished:
        line = await read_line("> ")
        if line is None:
            logger.info("Input closed; ending console session.")
            break
        await session.send(line)

    if session.show_contact_link:
        write(f"Falar com o William no WhatsApp: {contact_url}")
    elif session.finished:
        write("Conversa encerrada.")
    session.close()
