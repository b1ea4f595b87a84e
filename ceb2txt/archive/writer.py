from __future__ import annotations

import gzip
import logging
import os
import time
from collections.abc import Iterable
from pathlib import Path

import orjson

from ceb2txt.parsers.base import ContentFormat, Row
from ceb2txt.security.encryption import derive_key, encrypt_payload

from .header import write_header
from .jid import Jid
from .types import IV_LENGTH, SALT_LENGTH, ArchiveHeader

logger = logging.getLogger(__name__)

DEFAULT_APP = "Conversations"


def new_header(jid: Jid | str, app: str = DEFAULT_APP, timestamp: int | None = None) -> ArchiveHeader:
    """Build a header with fresh random IV and salt."""
    if isinstance(jid, str):
        jid = Jid.parse(jid)
    return ArchiveHeader(
        app=app,
        jid=jid.bare,
        timestamp=int(time.time() * 1000) if timestamp is None else timestamp,
        iv=os.urandom(IV_LENGTH),
        salt=os.urandom(SALT_LENGTH),
    )


def _sql_literal(value: object) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    return "'" + str(value).replace("'", "''") + "'"


def dump_statements(rows: Iterable[Row]) -> str:
    lines = []
    for row in rows:
        columns = ",".join(row.values)
        literals = ",".join(_sql_literal(value) for value in row.values.values())
        lines.append(f"INSERT INTO {row.table}({columns}) VALUES({literals})")
    return "\n".join(lines) + "\n" if lines else ""


def dump_rows(rows: Iterable[Row]) -> str:
    payload = [{"table": row.table, "values": row.values} for row in rows]
    return orjson.dumps(payload).decode("utf-8")


def build_archive(
    header: ArchiveHeader,
    password: str,
    rows: Iterable[Row],
    content_format: ContentFormat = ContentFormat.ROWS,
) -> bytes:
    """Serialize, compress and encrypt rows into a complete backup file image."""
    if content_format is ContentFormat.ROWS:
        content = dump_rows(rows)
    else:
        content = dump_statements(rows)
    return build_archive_from_text(header, password, content)


def build_archive_from_text(header: ArchiveHeader, password: str, content: str) -> bytes:
    key = derive_key(password, header.salt)
    compressed = gzip.compress(content.encode("utf-8"))
    return write_header(header) + encrypt_payload(key, header.iv, compressed)


def write_archive(
    path: Path | str,
    header: ArchiveHeader,
    password: str,
    rows: Iterable[Row],
    content_format: ContentFormat = ContentFormat.ROWS,
) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(build_archive(header, password, rows, content_format))
    logger.info("Wrote %s backup for %s to %s", content_format.value, header.jid, target)
    return target
