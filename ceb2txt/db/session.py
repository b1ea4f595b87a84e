from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Connection, Engine, create_engine

from ceb2txt.config import get_settings
from ceb2txt.db.schema import metadata

logger = logging.getLogger(__name__)


def create_store_engine(dsn: str | None = None) -> Engine:
    settings = get_settings()
    return create_engine(dsn or settings.store.dsn)


@contextmanager
def open_store(dsn: str | None = None) -> Iterator[Connection]:
    """Yield a connection to a store whose schema has been created.

    The default store lives in memory and disappears with the connection.
    """
    engine = create_store_engine(dsn)
    try:
        with engine.begin() as conn:
            metadata.create_all(conn)
            logger.debug("Created store schema with tables %s", sorted(metadata.tables))
            yield conn
    finally:
        engine.dispose()
