from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from .codec import json_to_state, state_to_json
from .state import AssignmentState

LOGGER = logging.getLogger(__name__)

DEFAULT_SNAPSHOT = 'default'


def _writable_db_path(db_path: str) -> str:
    """Returns db_path with its directory created, or the same file name under
    ASSIGN_DB_DIR or /tmp when that directory cannot be created."""
    directory = os.path.dirname(db_path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        return db_path
    except PermissionError:
        LOGGER.warning("cannot create %s; falling back", directory)
    fallback = os.getenv("ASSIGN_DB_DIR") or "/tmp"
    os.makedirs(fallback, exist_ok=True)
    return os.path.join(fallback, os.path.basename(db_path) or "assignments.db")


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the snapshots table exists."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS snapshots (
            name TEXT PRIMARY KEY,
            payload TEXT NOT NULL,
            saved_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def db_store_snapshot(db_path: str, state: AssignmentState, name: str = DEFAULT_SNAPSHOT) -> None:
    """Stores the whole state as one JSON payload, replacing any previous one under name."""
    resolved = _writable_db_path(db_path)
    conn = sqlite3.connect(resolved)
    try:
        _ensure_db(conn)
        payload = json.dumps(state_to_json(state), separators=(',', ':'))
        conn.execute(
            "INSERT OR REPLACE INTO snapshots (name, payload, saved_at) VALUES (?, ?, ?)",
            (name, payload, datetime.now(timezone.utc).isoformat(timespec='seconds')),
        )
        conn.commit()
    finally:
        conn.close()


def db_load_snapshot(db_path: str, name: str = DEFAULT_SNAPSHOT) -> Optional[AssignmentState]:
    """Loads a stored state, or None when nothing was saved under name."""
    resolved = _writable_db_path(db_path)
    conn = sqlite3.connect(resolved)
    try:
        _ensure_db(conn)
        row = conn.execute("SELECT payload FROM snapshots WHERE name = ?", (name,)).fetchone()
    finally:
        conn.close()
    if not row:
        return None
    return json_to_state(json.loads(row[0]))


class SnapshotGateway:
    """Persistence gateway backed by a single sqlite file."""

    def __init__(self, db_path: str, name: str = DEFAULT_SNAPSHOT) -> None:
        self.db_path = db_path
        self.name = name

    def load(self) -> Optional[AssignmentState]:
        return db_load_snapshot(self.db_path, self.name)

    def save(self, state: AssignmentState) -> bool:
        try:
            db_store_snapshot(self.db_path, state, self.name)
        except sqlite3.Error as e:
            LOGGER.warning("snapshot save to %s failed: %s", self.db_path, e)
            return False
        return True
