from __future__ import annotations

import pytest
from sqlalchemy import text

from ceb2txt.errors import BackupImportError, MalformedRowError
from ceb2txt.parsers import import_statements, iter_statements


def test_statement_split_inside_literal_is_joined():
    lines = ["INSERT INTO accounts VALUES ('a", "b')"]
    assert list(iter_statements(lines)) == ["INSERT INTO accounts VALUES ('a\nb')"]


def test_balanced_lines_are_separate_statements():
    lines = ["INSERT INTO t VALUES ('a')", "INSERT INTO t VALUES ('b')"]
    assert list(iter_statements(lines)) == lines


def test_literal_may_span_several_lines():
    lines = ["INSERT INTO t VALUES ('one", "two", "three')", "INSERT INTO t VALUES ('four')"]
    assert list(iter_statements(lines)) == [
        "INSERT INTO t VALUES ('one\ntwo\nthree')",
        "INSERT INTO t VALUES ('four')",
    ]


def test_escaped_quotes_keep_parity():
    lines = ["INSERT INTO t VALUES ('it''s')"]
    assert list(iter_statements(lines)) == lines


def test_blank_lines_between_statements_are_skipped():
    lines = ["", "INSERT INTO t VALUES (1)", "   ", "INSERT INTO t VALUES (2)"]
    assert list(iter_statements(lines)) == ["INSERT INTO t VALUES (1)", "INSERT INTO t VALUES (2)"]


def test_blank_line_inside_literal_is_kept():
    lines = ["INSERT INTO t VALUES ('a", "", "b')"]
    assert list(iter_statements(lines)) == ["INSERT INTO t VALUES ('a\n\nb')"]


def test_unterminated_statement_fails():
    with pytest.raises(MalformedRowError):
        list(iter_statements(["INSERT INTO t VALUES ('never closed"]))


def test_statements_are_executed_verbatim(store):
    lines = [
        "INSERT INTO accounts(uuid,username,server) VALUES('acc-1','juliet','example.com')",
        "INSERT INTO messages(uuid,conversationUuid,body) VALUES('m-1','c-1','what? :name",
        "second line')",
    ]
    assert import_statements(store, lines) == 2
    body = store.execute(text("SELECT body FROM messages WHERE uuid = 'm-1'")).scalar_one()
    assert body == "what? :name\nsecond line"
    assert store.execute(text("SELECT username FROM accounts")).scalar_one() == "juliet"


def test_failing_statement_aborts_import(store):
    lines = [
        "INSERT INTO prekeys(account,id,key) VALUES('acc-1','1','k')",
        "INSERT INTO nowhere(x) VALUES(1)",
        "INSERT INTO prekeys(account,id,key) VALUES('acc-1','2','k')",
    ]
    with pytest.raises(BackupImportError, match="Statement 2 failed"):
        import_statements(store, lines)
    assert store.execute(text("SELECT count(*) FROM prekeys")).scalar_one() == 1
