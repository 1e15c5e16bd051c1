import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from tenacity import RetryError

from screener.console import format_message, run_console
from screener.conversation import Message, Role
from screener.engines import ScriptedEngine
from screener.flow import STEPS, StepId
from screener.livekit_host import LiveKitChatHost, decode_text_payload, encode_message, encode_status
from screener.main import main
from screener.session import ChatSession

CONTACT_URL = "https://wa.me/5511994760149?text=oi"


def _scripted_reader(lines):
    pending = list(lines)

    async def read_line(prompt):
        return pending.pop(0) if pending else None

    return read_line


@pytest.mark.parametrize("data, expected", [
    (b"sim", "sim"),
    (json.dumps({"type": "text", "text": "não"}).encode("utf-8"), "não"),
    (json.dumps({"type": "audio_chunk", "data": "AAAA"}).encode("utf-8"), None),
    (b"\xff\xfe", None),
    (b"42", "42"),
])
def test_decode_text_payload(data, expected):
    assert decode_text_payload(data) == expected


def test_encode_message_and_status(no_delay):
    message = Message(role=Role.ASSISTANT, text="oi")
    assert json.loads(encode_message(message)) == {
        "type": "text",
        "role": "assistant",
        "text": "oi",
        "time": message.display_time,
    }

    session = ChatSession(ScriptedEngine(), typing=no_delay)
    session.finished = True
    assert json.loads(encode_status(session, CONTACT_URL)) == {"type": "status", "finished": True}
    session.show_contact_link = True
    assert json.loads(encode_status(session, CONTACT_URL))["url"] == CONTACT_URL


def test_format_message():
    message = Message(role=Role.USER, text="sim")
    assert format_message(message) == f"[{message.display_time}] Você: sim"


@pytest.mark.asyncio
async def test_console_qualified_run_prints_contact_link(scripted_session):
    output = []
    await run_console(
        scripted_session,
        CONTACT_URL,
        read_line=_scripted_reader(["sim", "a", "xyz", "a", "a"]),
        write=output.append,
    )

    assert scripted_session.show_contact_link
    assert output[0].endswith(STEPS[StepId.START].message)
    assert output[-1] == f"Falar com o William no WhatsApp: {CONTACT_URL}"
    assert scripted_session.closed


@pytest.mark.asyncio
async def test_console_stops_when_input_closes(scripted_session):
    output = []
    await run_console(scripted_session, CONTACT_URL, read_line=_scripted_reader(["sim"]), write=output.append)

    assert not scripted_session.finished
    assert CONTACT_URL not in output[-1]


@pytest.mark.asyncio
async def test_livekit_host_routes_text_to_participant_session(mocker, no_delay):
    room = mocker.patch("screener.livekit_host.rtc.Room").return_value
    room.local_participant.publish_data = AsyncMock()
    host = LiveKitChatHost(lambda: ChatSession(ScriptedEngine(), typing=no_delay), CONTACT_URL)
    participant = SimpleNamespace(identity="lead-1")

    host._on_participant_connected(participant)
    await asyncio.gather(*host._tasks)
    await host._handle_text("lead-1", host.sessions["lead-1"], "nao")

    published = [json.loads(call.args[0]) for call in room.local_participant.publish_data.await_args_list]
    texts = [payload["text"] for payload in published if payload["type"] == "text"]
    assert STEPS[StepId.START].message in texts
    assert STEPS[StepId.END].message in texts
    assert published[-1] == {"type": "status", "finished": True}

    host._on_participant_disconnected(participant)
    assert "lead-1" not in host.sessions


def test_main_reports_missing_llm_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    assert main(["console", "--engine", "llm"]) == 2


def test_main_reports_failed_livekit_connect(mocker):
    mocker.patch("screener.main.run_livekit", new_callable=AsyncMock, side_effect=RetryError(mocker.Mock()))
    assert main(["livekit"]) == 1
