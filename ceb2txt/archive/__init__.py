from .header import SUPPORTED_VERSION, read_header, write_header
from .jid import Jid
from .reader import EncryptedArchive, iter_lines, open_archive
from .types import ArchiveHeader

__all__ = [
    "SUPPORTED_VERSION",
    "ArchiveHeader",
    "EncryptedArchive",
    "Jid",
    "iter_lines",
    "open_archive",
    "read_header",
    "write_header",
]
