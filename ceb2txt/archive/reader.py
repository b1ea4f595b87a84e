from __future__ import annotations

import gzip
import io
import logging
import zlib
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from ceb2txt.errors import DecryptionError
from ceb2txt.security.encryption import decrypt_payload, derive_key

from .header import read_header
from .types import ArchiveHeader

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class EncryptedArchive:
    path: Path
    header: ArchiveHeader
    ciphertext: bytes

    def decrypt(self, password: str) -> bytes:
        key = derive_key(password, self.header.salt)
        plaintext = decrypt_payload(key, self.header.iv, self.ciphertext)
        logger.info("Decrypted %d bytes of compressed content from %s", len(plaintext), self.path)
        return plaintext

    def iter_lines(self, password: str) -> Iterator[str]:
        return iter_lines(self.decrypt(password))


def open_archive(path: Path | str) -> EncryptedArchive:
    """Read the header of a backup file and keep the ciphertext that follows it."""
    archive_path = Path(path)
    with archive_path.open("rb") as fp:
        header = read_header(fp)
        ciphertext = fp.read()
    logger.info(
        "Opened backup of %s created by %s at %s",
        header.jid,
        header.app,
        header.created_at.isoformat(),
    )
    return EncryptedArchive(path=archive_path, header=header, ciphertext=ciphertext)


def iter_lines(compressed: bytes) -> Iterator[str]:
    """Gunzip and decode content lazily, one line at a time without terminators."""
    stream = io.TextIOWrapper(
        gzip.GzipFile(fileobj=io.BytesIO(compressed), mode="rb"),
        encoding="utf-8",
        newline=None,
    )
    try:
        with stream:
            for line in stream:
                yield line.rstrip("\n")
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as exc:
        logger.debug("Decompression failed: %s: %s", type(exc).__name__, exc)
        raise DecryptionError() from exc
