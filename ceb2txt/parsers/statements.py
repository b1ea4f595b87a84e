from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from sqlalchemy import Connection
from sqlalchemy.exc import DBAPIError

from ceb2txt.errors import BackupImportError, MalformedRowError

logger = logging.getLogger(__name__)

QUOTE = "'"


def iter_statements(lines: Iterable[str]) -> Iterator[str]:
    """Group physical lines into complete statements.

    A statement is complete once it holds an even number of single quotes;
    an odd count means a string literal continues on the next line.
    """
    pending: list[str] = []
    quotes = 0
    for line in lines:
        if not pending and not line.strip():
            continue
        pending.append(line)
        quotes += line.count(QUOTE)
        if quotes % 2 == 0:
            yield "\n".join(pending)
            pending = []
            quotes = 0
    if pending:
        raise MalformedRowError(
            f"Backup content ended inside an unterminated statement: {pending[0][:80]!r}"
        )


def import_statements(conn: Connection, lines: Iterable[str]) -> int:
    """Execute every statement of the legacy format verbatim."""
    executed = 0
    for statement in iter_statements(lines):
        try:
            conn.exec_driver_sql(statement)
        except DBAPIError as exc:
            raise BackupImportError(f"Statement {executed + 1} failed: {exc.orig}") from exc
        executed += 1
    logger.info("Executed %d statements", executed)
    return executed
