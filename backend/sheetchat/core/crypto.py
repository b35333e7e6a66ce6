from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from pydantic import ValidationError
import base64
import binascii
import json
import logging
import os

from sheetchat.core.errors import ConfigurationError
from sheetchat.core.message import Message

logger = logging.getLogger(__name__)

# Protocol constants. Every client of a room must use the same values.
KDF_SALT = b"ghpages-chat-v1"
KDF_ITERATIONS = 100_000
KEY_LENGTH = 32
NONCE_SIZE = 12
TAG_SIZE = 16

# ---------- KEY DERIVATION ----------

def derive_key(seed: str) -> bytes:
    """
    PBKDF2-HMAC-SHA256(seed) → 32-byte AES-256 key
    """
    if not seed:
        raise ConfigurationError("Seed phrase is required.")

    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=KDF_SALT,
        iterations=KDF_ITERATIONS,
    ).derive(seed.encode("utf-8"))


# ---------- ENCRYPTION ----------

def encrypt_payload(message: Message, key: bytes) -> str:
    """
    AES-GCM → base64(nonce (12) + ciphertext + tag (16))
    """
    plaintext = json.dumps(
        message.to_payload(), separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")

    aesgcm = AESGCM(key)
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)
    return base64.b64encode(nonce + ciphertext).decode("ascii")


def decrypt_payload(ciphertext_b64: str, key: bytes) -> Message | None:
    """
    Decrypt a base64 envelope. Returns None instead of raising so that one
    corrupt row never blocks the rest.
    """
    try:
        data = base64.b64decode(ciphertext_b64, validate=True)
        if len(data) < NONCE_SIZE + TAG_SIZE:
            logger.debug("Envelope too short (%d bytes)", len(data))
            return None

        nonce = data[:NONCE_SIZE]
        ciphertext = data[NONCE_SIZE:]
        plaintext = AESGCM(key).decrypt(nonce, ciphertext, None)
        return Message.model_validate(json.loads(plaintext.decode("utf-8")))
    except InvalidTag:
        logger.debug("Envelope failed authentication (wrong key or tampered)")
    except (binascii.Error, UnicodeDecodeError, ValidationError, ValueError, TypeError) as e:
        logger.debug("Envelope could not be decoded: %s", e)
    return None
