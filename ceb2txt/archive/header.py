from __future__ import annotations

import io
import logging
import struct
from typing import BinaryIO

from ceb2txt.errors import MalformedHeaderError, UnsupportedVersionError

from .jid import Jid
from .types import IV_LENGTH, SALT_LENGTH, ArchiveHeader

logger = logging.getLogger(__name__)

SUPPORTED_VERSION = 1
MAX_STRING_LENGTH = 0xFFFF


class _HeaderReader:
    """Big-endian field reader over a binary stream."""

    def __init__(self, buffer: BinaryIO):
        self.buf = buffer

    def read_exact(self, length: int) -> bytes:
        data = self.buf.read(length)
        if len(data) < length:
            raise MalformedHeaderError("Backup header is truncated.")
        return data

    def read_fmt(self, fmt: str):
        fmt = ">" + fmt
        return struct.unpack(fmt, self.read_exact(struct.calcsize(fmt)))[0]

    def read_int32(self) -> int:
        return self.read_fmt("i")

    def read_int64(self) -> int:
        return self.read_fmt("q")

    def read_str(self) -> str:
        length = self.read_fmt("H")
        return _decode_modified_utf8(self.read_exact(length))


def _decode_modified_utf8(data: bytes) -> str:
    # DataOutputStream.writeUTF encodes NUL as C0 80 and astral characters as surrogate pairs.
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        text = data.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
        return text.encode("utf-16", "surrogatepass").decode("utf-16")
    except UnicodeError as exc:
        raise MalformedHeaderError("Backup header contains undecodable text.") from exc


def _encode_str(value: str) -> bytes:
    data = value.encode("utf-8")
    if len(data) > MAX_STRING_LENGTH:
        raise ValueError(f"Header string is too long ({len(data)} bytes).")
    return struct.pack(">H", len(data)) + data


def read_header(source: BinaryIO | bytes) -> ArchiveHeader:
    """Read the fixed-layout header at the start of a backup archive.

    When ``source`` is a stream it is left positioned at the first byte of
    the ciphertext.
    """
    stream = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else source
    reader = _HeaderReader(stream)

    version = reader.read_int32()
    if version > SUPPORTED_VERSION:
        raise UnsupportedVersionError(version, SUPPORTED_VERSION)
    app = reader.read_str()
    address = reader.read_str()
    timestamp = reader.read_int64()
    iv = reader.read_exact(IV_LENGTH)
    salt = reader.read_exact(SALT_LENGTH)

    try:
        jid = Jid.parse(address)
    except ValueError as exc:
        raise MalformedHeaderError(f"Backup header carries an invalid address: {exc}") from exc

    header = ArchiveHeader(app=app, jid=jid, timestamp=timestamp, iv=iv, salt=salt, version=version)
    logger.debug("Read %s", header.describe())
    return header


def write_header(header: ArchiveHeader) -> bytes:
    if len(header.iv) != IV_LENGTH:
        raise ValueError(f"IV must be {IV_LENGTH} bytes, got {len(header.iv)}.")
    if len(header.salt) != SALT_LENGTH:
        raise ValueError(f"Salt must be {SALT_LENGTH} bytes, got {len(header.salt)}.")
    return b"".join(
        [
            struct.pack(">i", header.version),
            _encode_str(header.app),
            _encode_str(str(header.jid.bare)),
            struct.pack(">q", header.timestamp),
            header.iv,
            header.salt,
        ]
    )
