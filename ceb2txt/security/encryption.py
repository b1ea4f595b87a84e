from __future__ import annotations

import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from ceb2txt.errors import DecryptionError

logger = logging.getLogger(__name__)

KDF_ITERATIONS = 1024
KEY_LENGTH = 16
TAG_LENGTH = 16


def derive_key(password: str, salt: bytes) -> bytes:
    """PBKDF2-HMAC-SHA1 with 1024 rounds and a 128 bit output."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA1(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=KDF_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


def decrypt_payload(key: bytes, iv: bytes, ciphertext: bytes) -> bytes:
    """Authenticate and decrypt an AES-GCM payload whose tag trails the ciphertext."""
    if len(ciphertext) < TAG_LENGTH:
        logger.debug("Ciphertext of %d bytes is shorter than the GCM tag", len(ciphertext))
        raise DecryptionError()
    try:
        return AESGCM(key).decrypt(iv, ciphertext, None)
    except InvalidTag as exc:
        logger.debug("GCM authentication tag mismatch")
        raise DecryptionError() from exc
    except ValueError as exc:
        logger.debug("Cipher rejected parameters: %s", exc)
        raise DecryptionError() from exc


def encrypt_payload(key: bytes, iv: bytes, plaintext: bytes) -> bytes:
    return AESGCM(key).encrypt(iv, plaintext, None)
