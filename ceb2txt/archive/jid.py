from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

UNSAFE_CHARACTERS = frozenset("/\\\x00")


@dataclass(frozen=True, slots=True)
class Jid:
    """An XMPP address of the form ``[local@]domain[/resource]``."""

    domain: str
    local: Optional[str] = None
    resource: Optional[str] = None

    def __post_init__(self) -> None:
        # Local and domain parts name output directories.
        if not self.domain:
            raise ValueError("Address has no domain part.")
        for part in (self.local, self.domain):
            if part is None:
                continue
            if part in (".", "..") or any(ch in part for ch in UNSAFE_CHARACTERS):
                raise ValueError(f"Address part {part!r} is not a valid name.")

    @classmethod
    def parse(cls, value: str) -> "Jid":
        if not value:
            raise ValueError("Address must not be empty.")
        address, slash, resource = value.partition("/")
        if slash and not resource:
            raise ValueError(f"Address {value!r} has an empty resource part.")
        local, at, domain = address.rpartition("@")
        if at and not local:
            raise ValueError(f"Address {value!r} has an empty local part.")
        if not domain:
            raise ValueError(f"Address {value!r} has no domain part.")
        return cls(domain=domain, local=local or None, resource=resource or None)

    @classmethod
    def parse_or_none(cls, value: str | None) -> Optional["Jid"]:
        if value is None:
            return None
        try:
            return cls.parse(value)
        except ValueError:
            return None

    @property
    def bare(self) -> "Jid":
        if self.resource is None:
            return self
        return Jid(domain=self.domain, local=self.local)

    @property
    def resource_or_empty(self) -> str:
        return self.resource or ""

    def __str__(self) -> str:
        text = f"{self.local}@{self.domain}" if self.local else self.domain
        if self.resource:
            text = f"{text}/{self.resource}"
        return text
