from __future__ import annotations

import json

import pytest

from ceb2txt.archive.writer import dump_rows
from ceb2txt.errors import BackupImportError
from ceb2txt.parsers import ContentFormat, import_rows
from ceb2txt.services import TranscriptRecovery
from ceb2txt.transcripts import render_transcripts
from conftest import PASSWORD


def _read(path):
    return path.read_text(encoding="utf-8")


def test_messages_are_split_per_day(store, sample_rows, tmp_path, utc):
    import_rows(store, [dump_rows(sample_rows)])
    summary = render_transcripts(store, tmp_path, utc)

    assert summary.conversations == 2
    assert summary.output_pattern == "juliet@example.com/*/*.txt"

    chat = tmp_path / "juliet@example.com" / "1on1" / "romeo@example.net"
    assert sorted(p.name for p in chat.iterdir()) == ["2023-05-01.txt", "2023-05-02.txt"]
    assert _read(chat / "2023-05-01.txt") == "09:30 <- Hi\n21:05 -> Bye\n" + " " * 9 + "now\n"
    assert _read(chat / "2023-05-02.txt") == "08:00 <- Morning\n"

    group = tmp_path / "juliet@example.com" / "group" / "garden@conference.example.net"
    assert _read(group / "2023-05-01.txt") == "12:00 anna <- hello all\n"

    assert len(summary.files) == 3
    assert not (tmp_path / "juliet@example.com" / "1on1" / "nurse@example.net").exists()


def test_conversation_without_messages_is_counted(store, tmp_path, utc):
    rows = [
        {"table": "accounts", "values": {"uuid": "acc-1", "username": "juliet", "server": "example.com"}},
        {"table": "conversations", "values": {"uuid": "c-1", "accountUuid": "acc-1", "contactJid": "romeo@example.net", "mode": 0}},
    ]
    import_rows(store, [json.dumps(rows)])
    summary = render_transcripts(store, tmp_path, utc)
    assert summary.conversations == 1
    assert summary.files == []


def test_missing_account_fails(store, tmp_path):
    with pytest.raises(BackupImportError, match="no account"):
        render_transcripts(store, tmp_path)


@pytest.mark.parametrize("content_format", [ContentFormat.ROWS, ContentFormat.STATEMENTS])
def test_recovery_pipeline(archive_factory, tmp_path, utc, content_format):
    out = tmp_path / "out"
    recovery = TranscriptRecovery(output_dir=out, tz=utc)
    archive = recovery.open(archive_factory(content_format))
    result = recovery.recover(archive, PASSWORD)

    assert result.imported.format is content_format
    assert result.rendered.conversations == 2
    assert (out / "juliet@example.com" / "1on1" / "romeo@example.net" / "2023-05-02.txt").exists()


def _account_rows(server="example.com", contact="romeo@example.net", sent=1_000):
    return [
        {"table": "accounts", "values": {"uuid": "acc-1", "username": "juliet", "server": server}},
        {"table": "conversations", "values": {"uuid": "c-1", "accountUuid": "acc-1", "contactJid": contact, "mode": 0}},
        {"table": "messages", "values": {"uuid": "m-1", "conversationUuid": "c-1", "timeSent": sent, "body": "hi"}},
    ]


def test_contact_cannot_leave_output_directory(store, tmp_path, utc):
    out = tmp_path / "out"
    import_rows(store, [json.dumps(_account_rows(contact="../../../escape"))])
    with pytest.raises(BackupImportError, match="invalid contact address"):
        render_transcripts(store, out, utc)
    assert [p for p in tmp_path.rglob("*") if p.is_file()] == []


def test_account_server_must_be_a_valid_name(store, tmp_path, utc):
    import_rows(store, [json.dumps(_account_rows(server="../x"))])
    with pytest.raises(BackupImportError, match="invalid address"):
        render_transcripts(store, tmp_path / "out", utc)
    assert not (tmp_path / "x").exists()


def test_message_time_out_of_range_fails(store, tmp_path, utc):
    import_rows(store, [json.dumps(_account_rows(sent=10**17))])
    with pytest.raises(BackupImportError, match="out of range"):
        render_transcripts(store, tmp_path, utc)
