from __future__ import annotations

import random

import pytest
from pydantic import ValidationError

from sheetchat.core.errors import ConfigurationError, MessageTooLong
from sheetchat.core.message import (
    MAX_MESSAGE_LENGTH,
    SPIN_SYMBOLS,
    MessageType,
    build_message,
    spin_text,
)


def test_build_message_strips_and_stamps():
    msg = build_message("bob", "  hi  ")
    assert msg.text == "hi"
    assert msg.author == "bob"
    assert msg.type is MessageType.TEXT
    assert msg.ts > 1_600_000_000_000


def test_build_message_accepts_exactly_the_limit():
    assert len(build_message("bob", "a" * MAX_MESSAGE_LENGTH).text) == 1000


def test_build_message_rejects_1001_chars():
    with pytest.raises(MessageTooLong):
        build_message("bob", "a" * 1001)


def test_build_message_rejects_empty():
    with pytest.raises(ConfigurationError):
        build_message("bob", "   ")


def test_message_is_immutable():
    msg = build_message("bob", "hi", ts=5)
    with pytest.raises(ValidationError):
        msg.text = "changed"


def test_payload_shape():
    msg = build_message("bob", "hi", type="spin", ts=42)
    assert msg.to_payload() == {"author": "bob", "text": "hi", "ts": 42, "type": "spin"}


def test_spin_text_uses_three_known_symbols():
    text = spin_text(random.Random(7))
    parts = [p.strip() for p in text.strip("|").split("|")]
    assert len(parts) == 3
    assert all(p in SPIN_SYMBOLS for p in parts)
    assert text.startswith("| ") and text.endswith(" |")
