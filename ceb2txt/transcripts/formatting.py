from __future__ import annotations

from datetime import datetime, tzinfo

from ceb2txt.db.entities import Message, MessageType
from ceb2txt.errors import BackupImportError

P2P_FILE_PLACEHOLDER = "[file received over P2P (Jingle)]"
# "HH:mm " plus the arrow and its trailing space.
BODY_INDENT = 9


def _local_datetime(timestamp: int, tz: tzinfo | None = None) -> datetime:
    try:
        return datetime.fromtimestamp(timestamp / 1000, tz=tz)
    except (ValueError, OverflowError, OSError) as exc:
        raise BackupImportError(f"Message time {timestamp} is out of range.") from exc


def format_date(timestamp: int, tz: tzinfo | None = None) -> str:
    return _local_datetime(timestamp, tz).strftime("%Y-%m-%d")


def format_time(timestamp: int, tz: tzinfo | None = None) -> str:
    return _local_datetime(timestamp, tz).strftime("%H:%M")


def render_body(message: Message) -> str:
    if message.is_file_or_image:
        params = message.file_params()
        return params.url or P2P_FILE_PLACEHOLDER
    if message.type == MessageType.RTP_SESSION:
        status = message.call_status()
        if not status.successful:
            return "Missed call"
        direction = "Incoming" if message.is_received else "Outgoing"
        if status.duration <= 0:
            # The producer renders outgoing calls without duration with a trailing space.
            return "Incoming call" if message.is_received else "Outgoing call "
        return f"{direction} call. Duration {status.duration // 1000} seconds"
    return message.body or ""


def nickname(message: Message, group: bool) -> str:
    if not group:
        return ""
    counterpart = message.counterpart_jid
    return counterpart.resource_or_empty if counterpart else ""


def render_line(message: Message, group: bool, tz: tzinfo | None = None) -> str:
    """Format ``HH:mm [nick ]<arrow> body`` with continuation lines aligned under the body."""
    nick = nickname(message, group)
    prefix = f"{nick} " if nick else ""
    arrow = "<-" if message.is_received else "->"
    indent = " " * (BODY_INDENT + len(nick) + (1 if nick else 0))
    body = render_body(message).replace("\n", "\n" + indent)
    return f"{format_time(message.time_sent, tz)} {prefix}{arrow} {body}"
