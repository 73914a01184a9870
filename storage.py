from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Callable, Iterable, Optional

from core.models import Channel

# Persistance SQLite clé/valeur : l'annuaire est un blob JSON sous une clé fixe.

CHANNELS_KEY = "saved_channels"


class Storage:
    """Wrapper léger autour de sqlite3 (une table kv, aucune dépendance réseau)."""
    def __init__(self, db_path: str | Path = "data/iptv.db"):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        # WAL pour réduire le locking entre lecture UI et écriture après refresh.
        con = sqlite3.connect(self.db_path)
        con.execute("PRAGMA journal_mode=WAL;")
        return con

    def _init_db(self) -> None:
        con = self._connect()
        try:
            con.executescript(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key   TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT DEFAULT (datetime('now'))
                );
                """
            )
            con.commit()
        finally:
            con.close()

    def get_value(self, key: str) -> Optional[str]:
        con = self._connect()
        try:
            row = con.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
            return row[0] if row else None
        finally:
            con.close()

    def set_value(self, key: str, value: str) -> None:
        con = self._connect()
        try:
            con.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, datetime('now'))
                ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """,
                (key, value),
            )
            con.commit()
        finally:
            con.close()

    def delete_value(self, key: str) -> None:
        con = self._connect()
        try:
            con.execute("DELETE FROM kv WHERE key=?", (key,))
            con.commit()
        finally:
            con.close()


class ChannelCache:
    """
    Dernier annuaire valide, un seul emplacement (dernière écriture gagnante).
    Best-effort : les erreurs de lecture/écriture sont journalisées, jamais levées.
    """
    def __init__(self, storage: Storage, key: str = CHANNELS_KEY, log: Callable[..., None] | None = None):
        self.storage = storage
        self.key = key
        self.log = log or (lambda s, level="INFO": None)

    def save(self, channels: Iterable[Channel]) -> None:
        try:
            blob = json.dumps([ch.to_dict() for ch in channels], ensure_ascii=False)
            self.storage.set_value(self.key, blob)
        except (TypeError, ValueError, AttributeError, sqlite3.Error) as e:
            self.log(f"Cache: écriture ignorée ({type(e).__name__}: {e})", level="WARN")

    def load(self) -> Optional[list[Channel]]:
        try:
            raw = self.storage.get_value(self.key)
        except sqlite3.Error as e:
            self.log(f"Cache: lecture KO ({e})", level="WARN")
            return None
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("cache payload is not a list")
            return [Channel.from_dict(d) for d in data]
        except ValueError as e:
            # json.JSONDecodeError hérite de ValueError
            self.log(f"Cache: contenu invalide ignoré ({e})", level="WARN")
            return None

    def clear(self) -> None:
        try:
            self.storage.delete_value(self.key)
        except sqlite3.Error as e:
            self.log(f"Cache: suppression KO ({e})", level="WARN")
