"""
Conversation transcript for one chat panel.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """A single chat line. Immutable once created."""
    text: str
    sender: Sender
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "sender": self.sender.value,
            "timestamp": self.timestamp.isoformat(),
        }


class ConversationLog:
    """Append-only, chronologically ordered list of messages."""

    def __init__(self):
        self._messages: list[Message] = []

    def append(self, text: str, sender: Sender) -> Message:
        message = Message(text=text, sender=sender)
        self._messages.append(message)
        return message

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __getitem__(self, index: int) -> Message:
        return self._messages[index]
