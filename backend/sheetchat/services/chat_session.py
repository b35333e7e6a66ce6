# sheetchat/services/chat_session.py

import logging
import threading
import uuid

from sheetchat.core.crypto import decrypt_payload, derive_key, encrypt_payload
from sheetchat.core.errors import (
    ConfigurationError,
    ConnectError,
    NotConnectedError,
    SheetChatError,
    TransportError,
)
from sheetchat.core.message import Message, MessageType, build_message, spin_text
from sheetchat.infra.google_auth import ServiceAccount
from sheetchat.models.row import PROTOCOL_VERSION, Row
from sheetchat.services.poller import Poller

logger = logging.getLogger(__name__)


class ChatSession:
    """
    A connected chat room.

    Holds the derived key and the local view of the remote append-only log:
    how many rows have been processed and which row ids were already shown.
    Built by connect(), torn down by disconnect().
    """

    def __init__(self, store, key: bytes, author: str):
        self.store = store
        self.author = author
        self._key = key

        self.last_seen_count = 0
        self.seen_ids: set[str] = set()
        self.messages: list[Message] = []
        self.last_error: str | None = None

        self._lock = threading.Lock()
        self._listeners = []
        self._poller = None

    # =========================
    # LIFECYCLE
    # =========================

    @classmethod
    def connect(cls, service_key: str, user_name: str, seed: str, store_factory) -> "ChatSession":
        """
        Parse the credential, derive the room key, open the store and load
        existing messages. store_factory(account) must return a RowStore and
        should fail fast if the credential cannot get a token.
        """
        service_key = (service_key or "").strip()
        user_name = (user_name or "").strip()
        if not service_key or not user_name or not seed:
            raise ConfigurationError("Please provide all fields.")

        account = ServiceAccount.from_json(service_key)

        try:
            key = derive_key(seed)
            store = store_factory(account)
            session = cls(store, key, user_name)
            session.load_initial()
        except SheetChatError as e:
            logger.error("Connect failed for %s: %s", account.client_email, e)
            raise ConnectError("Invalid service account key or no table access") from e

        logger.info("Connected as %s (%d messages loaded)", user_name, len(session.messages))
        return session

    @property
    def connected(self) -> bool:
        return self._key is not None

    def start_polling(self, interval: float) -> Poller:
        if self._poller is None:
            self._poller = Poller(self, interval)
            self._poller.start()
        return self._poller

    def disconnect(self):
        if self._poller is not None:
            self._poller.stop()
            self._poller = None

        with self._lock:
            self._key = None
            self.seen_ids.clear()
            self.messages.clear()
            self.last_seen_count = 0
        self._listeners.clear()
        logger.info("Disconnected %s", self.author)

    def on_message(self, callback):
        """Register callback(message) for every message shown."""
        self._listeners.append(callback)

    # =========================
    # SYNC
    # =========================

    def load_initial(self) -> list[Message]:
        rows = self.store.list_rows()
        with self._lock:
            shown = self._process(rows, 0)
            self.last_seen_count = len(rows)
        self._notify(shown)
        return shown

    def poll(self) -> list[Message]:
        """
        One tick of the sync loop. A failed fetch is recorded in last_error
        and the next tick simply tries again.
        """
        if not self.connected:
            return []

        try:
            rows = self.store.list_rows()
        except TransportError as e:
            logger.warning("Poll failed: %s", e)
            self.last_error = str(e)
            return []

        with self._lock:
            if len(rows) <= self.last_seen_count:
                return []
            shown = self._process(rows, self.last_seen_count)
            self.last_seen_count = len(rows)
        self._notify(shown)
        return shown

    def _process(self, rows, start: int) -> list[Message]:
        shown = []
        for index in range(start, len(rows)):
            row = Row.from_values(rows[index])
            if not row.is_supported() or row.id in self.seen_ids:
                continue

            message = decrypt_payload(row.ciphertext, self._key)
            if message is None:
                logger.debug("Skipping row %d (%s): cannot decrypt", index, row.id)
                continue

            self.seen_ids.add(row.id)
            self.messages.append(message)
            shown.append(message)
        return shown

    def _notify(self, shown: list[Message]):
        # Never under self._lock: listeners may call back into send/poll
        for message in shown:
            for callback in list(self._listeners):
                callback(message)

    # =========================
    # SEND
    # =========================

    def send(self, text: str, type=MessageType.TEXT) -> Message | None:
        """
        Encrypt and append one message. Empty text is ignored; too long text
        raises MessageTooLong before anything touches the network.
        """
        if not self.connected:
            raise NotConnectedError("Not connected.")

        self.last_error = None
        if not (text or "").strip():
            return None

        message = build_message(self.author, text, type)
        ciphertext = encrypt_payload(message, self._key)
        row = Row(id=str(uuid.uuid4()), ts=str(message.ts), ciphertext=ciphertext, version=PROTOCOL_VERSION)

        # Register the id first so a poll running concurrently skips our own row
        with self._lock:
            self.seen_ids.add(row.id)

        try:
            self.store.append_row(row.to_values())
        except TransportError as e:
            logger.error("Send failed: %s", e)
            with self._lock:
                self.seen_ids.discard(row.id)
            self.last_error = "Failed to send message."
            raise TransportError("Failed to send message.") from e

        with self._lock:
            self.messages.append(message)
        self._notify([message])
        return message

    def spin(self) -> Message | None:
        return self.send(spin_text(), MessageType.SPIN)
