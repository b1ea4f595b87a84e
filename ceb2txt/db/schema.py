from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()

# Column sets follow the producing application's own database so that both
# backup formats can be imported verbatim.

accounts = Table(
    "accounts",
    metadata,
    Column("uuid", Text, primary_key=True),
    Column("username", Text),
    Column("server", Text),
    Column("password", Text),
    Column("display_name", Text),
    Column("status", Integer),
    Column("status_message", Text),
    Column("rosterversion", Text),
    Column("options", Integer),
    Column("avatar", Text),
    Column("keys", Text),
    Column("hostname", Text),
    Column("port", Integer),
    Column("resource", Text),
    Column("pinned_mechanism", Text),
    Column("pinned_channel_binding", Text),
    Column("fast_mechanism", Text),
    Column("fast_token", Text),
)

conversations = Table(
    "conversations",
    metadata,
    Column("uuid", Text),
    Column("accountUuid", Text),
    Column("name", Text),
    Column("contactUuid", Text),
    Column("contactJid", Text),
    Column("created", Integer),
    Column("status", Integer),
    Column("mode", Integer),
    Column("attributes", Text),
)

messages = Table(
    "messages",
    metadata,
    Column("uuid", Text),
    Column("conversationUuid", Text),
    Column("timeSent", Integer),
    Column("counterpart", Text),
    Column("trueCounterpart", Text),
    Column("body", Text),
    Column("encryption", Integer),
    Column("status", Integer),
    Column("type", Integer),
    Column("relativeFilePath", Text),
    Column("serverMsgId", Text),
    Column("axolotl_fingerprint", Text),
    Column("carbon", Integer),
    Column("edited", Integer),
    Column("read", Integer),
    Column("oob", Integer),
    Column("errorMsg", Text),
    Column("readByMarkers", Text),
    Column("markable", Integer),
    Column("remoteMsgId", Text),
    Column("deleted", Integer),
    Column("bodyLanguage", Text),
    Column("reactions", Text),
    Column("occupantId", Integer),
)

prekeys = Table(
    "prekeys",
    metadata,
    Column("account", Text),
    Column("id", Text),
    Column("key", Text),
)

signed_prekeys = Table(
    "signed_prekeys",
    metadata,
    Column("account", Text),
    Column("id", Text),
    Column("key", Text),
)

sessions = Table(
    "sessions",
    metadata,
    Column("account", Text),
    Column("name", Text),
    Column("device_id", Text),
    Column("key", Text),
)

identities = Table(
    "identities",
    metadata,
    Column("account", Text),
    Column("name", Text),
    Column("ownkey", Text),
    Column("fingerprint", Text),
    Column("certificate", Text),
    Column("trust", Integer),
    Column("active", Integer),
    Column("last_activation", Integer),
    Column("key", Text),
)
