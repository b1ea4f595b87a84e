from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import Connection

from .base import ContentFormat, ImportSummary, Row, detect_format
from .rows import import_rows, iter_rows, parse_row
from .statements import import_statements, iter_statements

logger = logging.getLogger(__name__)


def import_backup(conn: Connection, lines: Iterable[str]) -> ImportSummary:
    """Detect the content format once and import every row into ``conn``."""
    content_format, stream = detect_format(lines)
    logger.info("Detected %s backup content", content_format.value)
    summary = ImportSummary(format=content_format)
    if content_format is ContentFormat.ROWS:
        summary.tables = import_rows(conn, stream)
        summary.executed = sum(summary.tables.values())
    else:
        summary.executed = import_statements(conn, stream)
    return summary


__all__ = [
    "ContentFormat",
    "ImportSummary",
    "Row",
    "detect_format",
    "import_backup",
    "import_rows",
    "import_statements",
    "iter_rows",
    "iter_statements",
    "parse_row",
]
