"""
Shared fixtures: an in-memory store and a small backup with two conversations.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from ceb2txt.archive.writer import new_header, write_archive
from ceb2txt.db.session import open_store
from ceb2txt.parsers import ContentFormat, Row

PASSWORD = "correct horse battery staple"
ACCOUNT_JID = "juliet@example.com"


def ms(*args: int) -> int:
    """Epoch milliseconds for a UTC wall-clock time."""
    return int(datetime(*args, tzinfo=timezone.utc).timestamp() * 1000)


def message_row(uuid, conversation, sent, body, status=0, type_=0, counterpart=None) -> Row:
    return Row(
        "messages",
        {
            "uuid": uuid,
            "conversationUuid": conversation,
            "timeSent": sent,
            "counterpart": counterpart,
            "body": body,
            "status": status,
            "type": type_,
        },
    )


@pytest.fixture
def utc():
    return timezone.utc


@pytest.fixture
def store():
    with open_store("sqlite://") as conn:
        yield conn


@pytest.fixture
def sample_rows() -> list[Row]:
    return [
        Row(
            "accounts",
            {"uuid": "acc-1", "username": "juliet", "server": "example.com", "resource": "phone", "password": "x"},
        ),
        Row("conversations", {"uuid": "c-1on1", "accountUuid": "acc-1", "contactJid": "romeo@example.net", "mode": 0}),
        Row(
            "conversations",
            {"uuid": "c-group", "accountUuid": "acc-1", "contactJid": "garden@conference.example.net", "mode": 1},
        ),
        Row("conversations", {"uuid": "c-other", "accountUuid": "acc-2", "contactJid": "nurse@example.net", "mode": 0}),
        # deliberately out of time order
        message_row("m-3", "c-1on1", ms(2023, 5, 2, 8, 0), "Morning"),
        message_row("m-1", "c-1on1", ms(2023, 5, 1, 9, 30), "Hi"),
        message_row("m-2", "c-1on1", ms(2023, 5, 1, 21, 5), "Bye\nnow", status=2),
        message_row(
            "m-4",
            "c-group",
            ms(2023, 5, 1, 12, 0),
            "hello all",
            counterpart="garden@conference.example.net/anna",
        ),
        message_row("m-5", "c-other", ms(2023, 5, 1, 12, 0), "not rendered"),
        Row("prekeys", {"account": "acc-1", "id": "1", "key": "AAAA"}),
    ]


@pytest.fixture
def archive_factory(tmp_path, sample_rows):
    def _build(content_format=ContentFormat.ROWS, rows=None, password=PASSWORD, name="backup.ceb"):
        header = new_header(ACCOUNT_JID, timestamp=ms(2023, 6, 1, 0, 0))
        return write_archive(tmp_path / name, header, password, sample_rows if rows is None else rows, content_format)

    return _build
