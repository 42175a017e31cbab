# nearcare/core/store.py
"""
Durable local key-value storage.

Stands in for the browser's local storage: values are JSON documents keyed by
a fixed name (``allFacilities``, ``userLocation``). Backed by sqlite so the
last search and last location survive restarts.
"""
import json
import sqlite3
import time
from typing import Any, Optional

from nearcare.core.config import settings

ALL_FACILITIES_KEY = "allFacilities"
USER_LOCATION_KEY = "userLocation"


class LocalStore:
    def __init__(self, path: Optional[str] = None):
        self._path = path or settings.store_path
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute("""CREATE TABLE IF NOT EXISTS kv (
            key TEXT PRIMARY KEY,
            value TEXT,
            ts INTEGER
        )""")
        self._conn.commit()

    def get(self, key: str) -> Optional[Any]:
        cur = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
        row = cur.fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def set(self, key: str, value: Any) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO kv(key, value, ts) VALUES(?,?,?)",
            (key, json.dumps(value, ensure_ascii=False), int(time.time())),
        )
        self._conn.commit()

    def remove(self, key: str) -> None:
        self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        self._conn.commit()

    def clear(self) -> None:
        self._conn.execute("DELETE FROM kv")
        self._conn.commit()

    def __contains__(self, key: str) -> bool:
        cur = self._conn.execute("SELECT 1 FROM kv WHERE key = ?", (key,))
        return cur.fetchone() is not None

    def close(self) -> None:
        self._conn.close()
