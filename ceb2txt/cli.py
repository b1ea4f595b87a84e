#!/usr/bin/env python3
"""
Recover chat transcripts from an encrypted Conversations backup (.ceb)
"""

import argparse
import getpass
import logging
import sys
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ceb2txt.config import get_settings
from ceb2txt.errors import (
    BackupImportError,
    DecryptionError,
    HeaderError,
    UnsupportedVersionError,
)
from ceb2txt.services import TranscriptRecovery

logger = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = _ArgumentParser(
        prog="ceb2txt",
        description="Convert an encrypted Conversations backup into plain text transcripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Write transcripts below the current directory
  ceb2txt juliet@example.com.ceb

  # Write them somewhere else, using UTC dates
  ceb2txt backup.ceb --output-dir ./transcripts --timezone UTC
        """,
    )
    parser.add_argument("archive", help="Path to the .ceb backup file")
    parser.add_argument("--output-dir", help="Directory receiving <account>/*/*.txt (default: settings)")
    parser.add_argument("--timezone", help="IANA time zone used for dates and times (default: local)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser


def _fail(message):
    print(message, file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.logging.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    tz = None
    if args.timezone:
        try:
            tz = ZoneInfo(args.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            _fail(f"Unknown time zone {args.timezone}")

    archive_path = Path(args.archive)
    recovery = TranscriptRecovery(output_dir=args.output_dir, tz=tz)

    try:
        try:
            archive = recovery.open(archive_path)
        except UnsupportedVersionError as e:
            _fail(f"{archive_path.absolute()} was created by a newer version: {e}")
        except (HeaderError, OSError) as e:
            logger.debug("Header rejected: %s", e)
            _fail(f"{archive_path.absolute()} does not seem to be a valid backup file")

        password = getpass.getpass(f"Enter password for {archive.header.jid.bare}: ")

        try:
            result = recovery.recover(archive, password)
        except DecryptionError as e:
            _fail(str(e))
        except BackupImportError as e:
            _fail(f"Could not import backup: {e}")

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        sys.exit(130)

    rendered = result.rendered
    print(f"{rendered.conversations} conversations have been written to {rendered.output_pattern}")


if __name__ == "__main__":
    main()
