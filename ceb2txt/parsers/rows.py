from __future__ import annotations

import json
import logging
import re
from collections import Counter
from collections.abc import Iterable, Iterator
from typing import Any

from sqlalchemy import Connection, text
from sqlalchemy.exc import DBAPIError

from ceb2txt.errors import (
    BackupImportError,
    MalformedRowError,
    UnsupportedColumnError,
    UnsupportedTableError,
)

from .base import Row, Value

logger = logging.getLogger(__name__)

TABLE_ALLOW_LIST = frozenset(
    {
        "accounts",
        "conversations",
        "messages",
        "prekeys",
        "signed_prekeys",
        "sessions",
        "identities",
    }
)
COLUMN_PATTERN = re.compile(r"^[a-zA-Z_]+$")
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _next_chunk(source: Iterator[str]) -> str | None:
    line = next(source, None)
    return None if line is None else line + "\n"


def iter_json_items(lines: Iterable[str]) -> Iterator[Any]:
    """Stream the elements of a top-level JSON array spread over ``lines``."""
    decoder = json.JSONDecoder()
    source = iter(lines)
    buf = ""
    idx = 0
    in_array = False
    expect_item = True
    after_comma = False

    while True:
        if idx >= len(buf):
            chunk = _next_chunk(source)
            if chunk is None:
                raise MalformedRowError("Unexpected end of backup content while reading rows.")
            buf = buf[idx:] + chunk
            idx = 0
            continue

        ch = buf[idx]
        if ch.isspace():
            idx += 1
            continue

        if not in_array:
            if ch != "[":
                raise MalformedRowError("Backup content did not begin with an array.")
            in_array = True
            idx += 1
            continue

        if ch == "]":
            if after_comma:
                raise MalformedRowError("Unexpected ']' after ',' in row array.")
            return
        if not expect_item:
            if ch != ",":
                raise MalformedRowError(f"Expected ',' between rows, got {ch!r}.")
            expect_item = True
            after_comma = True
            idx += 1
            continue

        try:
            item, next_idx = decoder.raw_decode(buf, idx)
        except json.JSONDecodeError as exc:
            # Only an item cut off at the end of the buffer can be completed by reading on.
            chunk = None if buf[exc.pos :].strip() else _next_chunk(source)
            if chunk is None:
                snippet = buf[idx : idx + 200]
                raise MalformedRowError(f"Failed to decode row before end of content: {snippet!r}") from None
            buf = buf[idx:] + chunk
            idx = 0
            continue

        yield item
        idx = next_idx
        expect_item = False
        after_comma = False


def _typed_value(column: str, value: Any) -> Value:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not value.is_integer():
            raise MalformedRowError(f"Column {column} holds a non-integral number {value!r}.")
        value = int(value)
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise MalformedRowError(f"Column {column} holds {value}, which does not fit in 64 bits.")
        return value
    if isinstance(value, str):
        return value
    raise MalformedRowError(f"Column {column} holds an unsupported {type(value).__name__} value.")


def parse_row(item: Any) -> Row:
    """Validate one ``{"table": ..., "values": {...}}`` element."""
    if not isinstance(item, dict):
        raise MalformedRowError(f"Expected a row object, got {type(item).__name__}.")
    keys = list(item)
    if not keys or keys[0] != "table":
        raise MalformedRowError("Expected key 'table'")
    if len(keys) < 2 or keys[1] != "values":
        raise MalformedRowError("Expected key 'values'")
    if len(keys) > 2:
        raise MalformedRowError(f"Unexpected keys after 'values': {keys[2:]}")

    table = item["table"]
    if not isinstance(table, str):
        raise MalformedRowError("Row table name must be a string.")
    if table not in TABLE_ALLOW_LIST:
        raise UnsupportedTableError(table)

    raw_values = item["values"]
    if not isinstance(raw_values, dict):
        raise MalformedRowError(f"Row values for {table} must be an object.")
    values: dict[str, Value] = {}
    for column, value in raw_values.items():
        if not COLUMN_PATTERN.match(column):
            raise UnsupportedColumnError(column)
        values[column] = _typed_value(column, value)
    return Row(table=table, values=values)


def build_insert(row: Row) -> str:
    """Render the insert for a validated row; values stay bound parameters."""
    if not row.values:
        return f"INSERT INTO {row.table} DEFAULT VALUES"
    columns = ", ".join(row.values)
    params = ", ".join(f":{column}" for column in row.values)
    return f"INSERT INTO {row.table} ({columns}) VALUES ({params})"


def iter_rows(lines: Iterable[str]) -> Iterator[Row]:
    for item in iter_json_items(lines):
        yield parse_row(item)


def import_rows(conn: Connection, lines: Iterable[str]) -> Counter:
    """Insert every structured row, aborting on the first invalid one."""
    tables: Counter = Counter()
    for row in iter_rows(lines):
        try:
            conn.execute(text(build_insert(row)), row.values)
        except DBAPIError as exc:
            raise BackupImportError(f"Insert into {row.table} failed: {exc.orig}") from exc
        tables[row.table] += 1
    logger.info("Imported %d rows: %s", sum(tables.values()), dict(tables))
    return tables
