from __future__ import annotations


class BackupError(Exception):
    """Base class for every fatal failure while recovering a backup."""


class HeaderError(BackupError):
    """Raised when the archive header cannot be used."""


class MalformedHeaderError(HeaderError):
    """Raised when the header is truncated or carries garbled fields."""


class UnsupportedVersionError(HeaderError):
    """Raised when the header declares a newer format than this tool understands."""

    def __init__(self, version: int, supported: int):
        super().__init__(
            f"Backup file version was {version} but only versions up to {supported} are supported"
        )
        self.version = version
        self.supported = supported


class DecryptionError(BackupError):
    """Raised when the payload fails authentication or decompression.

    The two causes are indistinguishable to the operator on purpose; the
    underlying exception stays available as ``__cause__``.
    """

    def __init__(self, message: str = "Wrong password or corrupt backup file"):
        super().__init__(message)


class BackupImportError(BackupError):
    """Raised when decrypted content cannot be imported into the store."""


class UnsupportedTableError(BackupImportError):
    """Raised when a structured row names a table outside the allow-list."""

    def __init__(self, table: str):
        super().__init__(f"{table} is not recognized for import")
        self.table = table


class UnsupportedColumnError(BackupImportError):
    """Raised when a structured row carries a column name that is not a plain identifier."""

    def __init__(self, column: str):
        super().__init__(f"Unexpected column name {column}")
        self.column = column


class MalformedRowError(BackupImportError):
    """Raised when backup content does not have the expected shape."""
