"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import json

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from sheetchat.core.crypto import derive_key
from sheetchat.core.errors import TransportError
from sheetchat.core.rate_limit import limiter


class MemoryRowStore:
    """In-memory RowStore that counts calls and can be told to fail."""

    def __init__(self, rows=None):
        self.rows = [list(r) for r in (rows or [])]
        self.list_calls = 0
        self.append_calls = 0
        self.fail_reads = False
        self.fail_appends = False

    def list_rows(self):
        self.list_calls += 1
        if self.fail_reads:
            raise TransportError("Sheet read failed (503)")
        return [list(r) for r in self.rows]

    def append_row(self, values):
        self.append_calls += 1
        if self.fail_appends:
            raise TransportError("Append failed (500)")
        self.rows.append(list(values))


@pytest.fixture(scope="session")
def room_key() -> bytes:
    return derive_key("correct horse battery staple")


@pytest.fixture(scope="session")
def other_key() -> bytes:
    return derive_key("a different room")


@pytest.fixture()
def memory_store() -> MemoryRowStore:
    return MemoryRowStore([["id", "ts", "ciphertext", "version"]])


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def service_key_json(rsa_private_key) -> str:
    pem = rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")
    return json.dumps({
        "type": "service_account",
        "client_email": "chat-bot@example-project.iam.gserviceaccount.com",
        "private_key": pem,
        "token_uri": "https://oauth2.googleapis.com/token",
    })


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield


@pytest.fixture()
def make_store():
    """Factory for MemoryRowStore, for tests that need custom rows."""
    return MemoryRowStore
