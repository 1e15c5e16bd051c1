"""Bridge that runs one screening session per LiveKit room participant."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Callable, Dict, Optional, Set

from livekit import api, rtc
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from screener.conversation import Message
from screener.session import ChatSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ChatSession]


def decode_text_payload(data: bytes) -> Optional[str]:
    try:
        decoded = data.decode("utf-8")
    except UnicodeDecodeError:
        return None
    try:
        payload = json.loads(decoded)
    except json.JSONDecodeError:
        return decoded
    if not isinstance(payload, dict):
        return decoded
    if payload.get("type") == "text" and isinstance(payload.get("text"), str):
        return payload["text"]
    return None


def encode_message(message: Message) -> bytes:
    return json.dumps({"type": "text", **message.to_dict()}).encode("utf-8")


def encode_status(session: ChatSession, contact_url: str) -> bytes:
    payload = {"type": "status", "finished": session.finished}
    if session.show_contact_link:
        payload = {"type": "contact_link", "finished": True, "url": contact_url}
    return json.dumps(payload).encode("utf-8")


def build_token(api_key: str, api_secret: str, room_name: str, identity: str) -> str:
    return (
        api.AccessToken(api_key, api_secret)
        .with_identity(identity)
        .with_name(identity)
        .with_grants(
            api.VideoGrants(
                room_join=True,
                room=room_name,
            )
        )
        .to_jwt()
    )


class LiveKitChatHost:
    """
    Routes text data packets between room participants and their sessions.

    Sessions live only while the participant is connected; a disconnect
    closes the session and drops it.
    """

    def __init__(self, session_factory: SessionFactory, contact_url: str) -> None:
        self.session_factory = session_factory
        self.contact_url = contact_url
        self.room = rtc.Room()
        self.sessions: Dict[str, ChatSession] = {}
        self._tasks: Set[asyncio.Task] = set()

        self.room.on("participant_connected", self._on_participant_connected)
        self.room.on("participant_disconnected", self._on_participant_disconnected)
        self.room.on("data_received", self._on_data_received)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(rtc.ConnectError),
    )
    async def connect(self, url: str, token: str) -> None:
        logger.info(f"Connecting to LiveKit at {url}...")
        await self.room.connect(url, token)
        logger.info("Connected to LiveKit room")
        for participant in self.room.remote_participants.values():
            self._on_participant_connected(participant)

    async def disconnect(self) -> None:
        for session in self.sessions.values():
            session.close()
        self.sessions.clear()
        await self.room.disconnect()
        logger.info("Disconnected from LiveKit room")

    def _on_participant_connected(self, participant: rtc.RemoteParticipant) -> None:
        identity = participant.identity
        if identity in self.sessions:
            return
        session = self.session_factory()
        self.sessions[identity] = session
        logger.info("participant_join", extra={"participant_id": identity})
        self._spawn(self._start_session(identity, session))

    def _on_participant_disconnected(self, participant: rtc.RemoteParticipant) -> None:
        session = self.sessions.pop(participant.identity, None)
        if session is not None:
            session.close()
        logger.info("participant_leave", extra={"participant_id": participant.identity})

    def _on_data_received(self, packet: rtc.DataPacket) -> None:
        if packet.participant is None:
            return
        identity = packet.participant.identity
        text = decode_text_payload(packet.data)
        if text is None:
            logger.warning("Received unsupported payload.")
            return
        session = self.sessions.get(identity)
        if session is None:
            logger.warning("message_without_session", extra={"participant_id": identity})
            return
        self._spawn(self._handle_text(identity, session, text))

    async def _start_session(self, identity: str, session: ChatSession) -> None:
        opening = await session.start()
        if opening is not None:
            await self._publish(identity, encode_message(opening))

    async def _handle_text(self, identity: str, session: ChatSession, text: str) -> None:
        reply = await session.send(text)
        if reply is None:
            return
        await self._publish(identity, encode_message(reply))
        if session.finished:
            await self._publish(identity, encode_status(session, self.contact_url))

    async def _publish(self, identity: str, payload: bytes) -> bool:
        if self.room.local_participant is None:
            logger.warning("No local participant available to publish responses.")
            return False
        try:
            await self.room.local_participant.publish_data(
                payload,
                reliable=True,
                destination_identities=[identity],
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception("publish_failure", extra={"participant_id": identity})
            return False
        return True

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
