from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from typing import Optional

from ceb2txt.archive import EncryptedArchive, open_archive
from ceb2txt.config import get_settings
from ceb2txt.db.session import open_store
from ceb2txt.parsers import ImportSummary, import_backup
from ceb2txt.transcripts import RenderSummary, render_transcripts

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RecoveryResult:
    imported: ImportSummary
    rendered: RenderSummary


class TranscriptRecovery:
    """Run decrypt, import and render for a single backup archive."""

    def __init__(
        self,
        output_dir: Optional[Path | str] = None,
        tz: Optional[tzinfo] = None,
        store_dsn: Optional[str] = None,
    ):
        settings = get_settings()
        self.output_dir = Path(output_dir or settings.output.base_path)
        self.tz = tz if tz is not None else settings.output.tzinfo()
        self.store_dsn = store_dsn or settings.store.dsn

    def open(self, path: Path | str) -> EncryptedArchive:
        """
        Read the archive header.

        Raises:
            HeaderError: If the header is malformed or from a newer version
            OSError: If the file cannot be read
        """
        return open_archive(path)

    def recover(self, archive: EncryptedArchive, password: str) -> RecoveryResult:
        """
        Decrypt the archive, import it into a fresh store and write transcripts.

        Raises:
            DecryptionError: On a wrong password or a corrupt payload
            BackupImportError: If the content cannot be imported
        """
        lines = archive.iter_lines(password)
        with open_store(self.store_dsn) as conn:
            imported = import_backup(conn, lines)
            logger.info("Imported %d entries from %s", imported.executed, archive.path)
            rendered = render_transcripts(conn, self.output_dir, self.tz)
        logger.info("Rendered %d conversations into %d files", rendered.conversations, len(rendered.files))
        return RecoveryResult(imported=imported, rendered=rendered)
