from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ceb2txt.archive.jid import Jid


class MessageType(enum.IntEnum):
    TEXT = 0
    IMAGE = 1
    FILE = 2
    STATUS = 3
    PRIVATE = 4
    PRIVATE_FILE = 5
    RTP_SESSION = 6


class MessageStatus(enum.IntEnum):
    RECEIVED = 0
    UNSEND = 1
    SEND = 2
    SEND_FAILED = 3
    WAITING = 5
    OFFERED = 6
    SEND_RECEIVED = 7
    SEND_DISPLAYED = 8


class ConversationMode(enum.IntEnum):
    SINGLE = 0
    MULTI = 1


FILE_TYPES = frozenset({MessageType.IMAGE, MessageType.FILE, MessageType.PRIVATE_FILE})


INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)


def _parse_number(value: str, bits: int = 64) -> Optional[int]:
    """Strict signed decimal of at most ``bits`` bits, ``None`` otherwise."""
    if not INTEGER_PATTERN.fullmatch(value):
        return None
    number = int(value)
    limit = 1 << (bits - 1)
    if not -limit <= number < limit:
        return None
    return number


def _parse_int(value: str, bits: int = 64) -> int:
    number = _parse_number(value, bits)
    return 0 if number is None else number


@dataclass(slots=True)
class Account:
    uuid: str
    username: str | None
    server: str
    resource: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Account":
        return cls(
            uuid=row["uuid"],
            username=row["username"],
            server=row["server"],
            resource=row["resource"],
        )

    @property
    def jid(self) -> Jid:
        return Jid(domain=self.server, local=self.username or None, resource=self.resource or None)


@dataclass(slots=True)
class Conversation:
    uuid: str
    mode: int
    contact_jid: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Conversation":
        return cls(uuid=row["uuid"], mode=row["mode"] or 0, contact_jid=row["contactJid"])

    @property
    def is_group_chat(self) -> bool:
        return self.mode == ConversationMode.MULTI

    @property
    def contact(self) -> Jid:
        return Jid.parse(self.contact_jid)


@dataclass(slots=True)
class Message:
    conversation_uuid: str
    time_sent: int
    status: int
    body: str | None
    type: int
    counterpart: str | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Message":
        return cls(
            conversation_uuid=row["conversationUuid"],
            time_sent=row["timeSent"] or 0,
            status=row["status"] or 0,
            body=row["body"],
            type=row["type"] or 0,
            counterpart=row["counterpart"],
        )

    @property
    def is_received(self) -> bool:
        return self.status == MessageStatus.RECEIVED

    @property
    def is_file_or_image(self) -> bool:
        return self.type in FILE_TYPES

    @property
    def counterpart_jid(self) -> Optional[Jid]:
        return Jid.parse_or_none(self.counterpart)

    def file_params(self) -> "FileTransferParams":
        return FileTransferParams.parse(self.body)

    def call_status(self) -> "CallSessionStatus":
        return CallSessionStatus.parse(self.body)


@dataclass(slots=True)
class FileTransferParams:
    url: str = ""
    size: int = 0
    width: int = 0
    height: int = 0
    runtime: int = 0

    @classmethod
    def parse(cls, body: str | None) -> "FileTransferParams":
        """Decode the ``|`` separated file descriptor stored in a message body."""
        params = cls()
        parts = body.split("|") if body else []
        # Trailing empty fields are not counted by the producer.
        while parts and parts[-1] == "":
            parts.pop()
        count = len(parts)
        if count == 1:
            size = _parse_number(parts[0])
            if size is None:
                params.url = parts[0]
            else:
                params.size = size
        elif count == 3:
            params.size = _parse_int(parts[0])
            params.width = _parse_int(parts[1], bits=32)
            params.height = _parse_int(parts[2], bits=32)
        elif count in (2, 4, 5):
            params.url = parts[0]
            params.size = _parse_int(parts[1])
            if count >= 4:
                params.width = _parse_int(parts[2], bits=32)
                params.height = _parse_int(parts[3], bits=32)
            if count == 5:
                params.runtime = _parse_int(parts[4], bits=32)
        return params


@dataclass(frozen=True, slots=True)
class CallSessionStatus:
    successful: bool
    duration: int

    @classmethod
    def parse(cls, body: str | None) -> "CallSessionStatus":
        """Decode ``<successful>:<duration ms>`` as stored for call messages."""
        parts = (body or "").split(":", 1)
        duration = _parse_int(parts[1]) if len(parts) == 2 else 0
        return cls(successful=parts[0].lower() == "true", duration=duration)

    def __str__(self) -> str:
        return f"{str(self.successful).lower()}:{self.duration}"
