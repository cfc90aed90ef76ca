"""SQLite connections for the service's databases and id-list encoding."""

import json
import logging
import os
import sqlite3

log = logging.getLogger(__name__)

_MEMORY = ":memory:"


def encode_ids(ids):
    """Encode a list of integer ids as compact JSON, ``None`` as ``null``."""
    if ids is None:
        return "null"
    return json.dumps([int(i) for i in ids], separators=(",", ":"))


def decode_ids(text):
    """Decode a stored id list; empty or ``null`` values give an empty list."""
    if not text:
        return []
    value = json.loads(text)
    if value is None:
        return []
    return [int(i) for i in value]


class Database:
    """The account, post, chat, dm and vp databases held in one directory."""

    _FILES = {
        "account": "account.db",
        "post": "post.db",
        "chat": "chat.db",
        "dm": "dm_1.db",
        "vp": "vp.db",
    }

    def __init__(self, db_path):
        log.info("orm loading...")
        self.account = self.post = self.chat = self.dm = self.vp = None
        try:
            for attr, name in self._FILES.items():
                setattr(self, attr, self._connect(db_path, name))
            self._create_chat_table()
        except Exception:
            self.close()
            raise
        log.info("orm finished loading...")

    @staticmethod
    def _connect(db_path, name):
        target = _MEMORY if db_path == _MEMORY else os.path.join(db_path, name)
        conn = sqlite3.connect(target)
        conn.row_factory = sqlite3.Row
        log.info("orm to %s (sqlite3)", name)
        return conn

    def _create_chat_table(self):
        # Chat records live in the post database.
        with self.post:
            self.post.execute(
                "CREATE TABLE IF NOT EXISTS chat ("
                "id INTEGER PRIMARY KEY AUTOINCREMENT, "
                "account_id INTEGER UNIQUE, "
                "text TEXT, "
                "date TIMESTAMP)"
            )

    def close(self):
        """Close every open connection."""
        for attr in self._FILES:
            conn = getattr(self, attr)
            if conn is not None:
                conn.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
        return False


def init_engine(db_path):
    """Open all databases under ``db_path``."""
    return Database(db_path)