from .entities import (
    Account,
    CallSessionStatus,
    Conversation,
    FileTransferParams,
    Message,
    MessageStatus,
    MessageType,
)
from .session import open_store

__all__ = [
    "Account",
    "CallSessionStatus",
    "Conversation",
    "FileTransferParams",
    "Message",
    "MessageStatus",
    "MessageType",
    "open_store",
]
