from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from pathlib import Path

from sqlalchemy import Connection, select

from ceb2txt.db.entities import Account, Conversation, Message
from ceb2txt.db.schema import accounts, conversations, messages
from ceb2txt.errors import BackupImportError

from .formatting import format_date, render_line

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RenderSummary:
    account: Account
    conversations: int = 0
    files: list[Path] = field(default_factory=list)

    @property
    def output_pattern(self) -> str:
        return f"{self.account.jid.bare}/*/*.txt"


def load_account(conn: Connection) -> Account:
    row = conn.execute(
        select(accounts.c.uuid, accounts.c.username, accounts.c.server, accounts.c.resource).limit(1)
    ).mappings().first()
    if row is None:
        raise BackupImportError("Backup contains no account.")
    account = Account.from_row(row)
    try:
        account.jid
    except ValueError as exc:
        raise BackupImportError(f"Account {account.uuid} has an invalid address: {exc}") from exc
    return account


def load_conversations(conn: Connection, account: Account) -> list[Conversation]:
    rows = conn.execute(
        select(conversations.c.uuid, conversations.c.mode, conversations.c.contactJid).where(
            conversations.c.accountUuid == account.uuid
        )
    ).mappings()
    return [Conversation.from_row(row) for row in rows]


def load_messages(conn: Connection, conversation: Conversation) -> list[Message]:
    rows = conn.execute(
        select(
            messages.c.conversationUuid,
            messages.c.body,
            messages.c.status,
            messages.c.timeSent,
            messages.c.counterpart,
            messages.c.type,
        )
        .where(messages.c.conversationUuid == conversation.uuid)
        .order_by(messages.c.timeSent)
    ).mappings()
    return [Message.from_row(row) for row in rows]


def conversation_directory(output_dir: Path, account: Account, conversation: Conversation) -> Path:
    try:
        contact = conversation.contact.bare
    except ValueError as exc:
        raise BackupImportError(
            f"Conversation {conversation.uuid} has an invalid contact address: {exc}"
        ) from exc
    kind = "group" if conversation.is_group_chat else "1on1"
    return output_dir / str(account.jid.bare) / kind / str(contact)


def write_conversation(
    directory: Path,
    conversation: Conversation,
    message_list: list[Message],
    tz: tzinfo | None = None,
) -> list[Path]:
    """Write one file per run of messages sharing a calendar date.

    Messages must already be ordered by time; runs are not merged.
    """
    written: list[Path] = []
    group = conversation.is_group_chat
    for date, run in itertools.groupby(message_list, key=lambda m: format_date(m.time_sent, tz)):
        path = directory / f"{date}.txt"
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fp:
            for message in run:
                fp.write(render_line(message, group, tz) + "\n")
        written.append(path)
    return written


def render_transcripts(conn: Connection, output_dir: Path | str = ".", tz: tzinfo | None = None) -> RenderSummary:
    base = Path(output_dir)
    account = load_account(conn)
    summary = RenderSummary(account=account)
    for conversation in load_conversations(conn, account):
        message_list = load_messages(conn, conversation)
        directory = conversation_directory(base, account, conversation)
        files = write_conversation(directory, conversation, message_list, tz)
        logger.info(
            "Wrote %d messages of %s into %d files",
            len(message_list),
            conversation.contact_jid,
            len(files),
        )
        summary.files.extend(files)
        summary.conversations += 1
    return summary
