from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Sequence


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    role: Role
    text: str
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def display_time(self) -> str:
        return self.created_at.strftime("%H:%M")

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role.value, "text": self.text, "time": self.display_time}


def to_chat_messages(messages: Sequence[Message]) -> List[Dict[str, str]]:
    """Convert the message log into chat-completion message dicts."""
    return [{"role": message.role.value, "content": message.text} for message in messages]
