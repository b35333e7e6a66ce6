# sheetchat/core/message.py

import random
import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from sheetchat.core.errors import ConfigurationError, MessageTooLong

MAX_MESSAGE_LENGTH = 1000
SPIN_SYMBOLS = ["➉︎", "❤︎", "☮︎", "☆︎"]


class MessageType(str, Enum):
    TEXT = "text"
    SPIN = "spin"


class Message(BaseModel):
    """One chat message. This is exactly what gets encrypted into a row."""

    model_config = ConfigDict(frozen=True)

    author: str
    text: str = Field(max_length=MAX_MESSAGE_LENGTH)
    ts: int  # epoch milliseconds
    type: MessageType = MessageType.TEXT

    def to_payload(self) -> dict:
        return {
            "author": self.author,
            "text": self.text,
            "ts": self.ts,
            "type": self.type.value,
        }


def now_ms() -> int:
    return int(time.time() * 1000)


def build_message(author: str, text: str, type=MessageType.TEXT, ts: int | None = None) -> Message:
    """Validate user input and create a Message stamped with the current time."""
    text = (text or "").strip()
    if not text:
        raise ConfigurationError("Message is empty.")
    if len(text) > MAX_MESSAGE_LENGTH:
        raise MessageTooLong(f"Message too long (max {MAX_MESSAGE_LENGTH} characters).")
    if not author:
        raise ConfigurationError("Author name is required.")

    return Message(
        author=author,
        text=text,
        ts=now_ms() if ts is None else ts,
        type=MessageType(type),
    )


def spin_text(rng: random.Random | None = None) -> str:
    """Three random slot symbols, formatted like "| a | b | c |"."""
    rng = rng or random
    a, b, c = (rng.choice(SPIN_SYMBOLS) for _ in range(3))
    return f"| {a} | {b} | {c} |"
