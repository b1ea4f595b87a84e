from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from .jid import Jid

IV_LENGTH = 12
SALT_LENGTH = 16


@dataclass(frozen=True, slots=True)
class ArchiveHeader:
    app: str
    jid: Jid
    timestamp: int
    iv: bytes
    salt: bytes
    version: int = 1

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    def describe(self) -> str:
        return (
            f"ArchiveHeader(version={self.version}, app={self.app}, jid={self.jid}, "
            f"timestamp={self.timestamp}, iv={self.iv.hex()}, salt={self.salt.hex()})"
        )
