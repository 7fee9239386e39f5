"""
Database connection management.
"""
import sqlite3
import logging
import threading
from pathlib import Path
from typing import Optional

from .. import config
from ..exceptions import StoreError
from .schema import init_schema

class DBManager:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        # Only one reconciliation pass may write at a time.
        # WAL mode lets queries keep reading while it runs.
        self._write_lock = threading.Lock()

    def connect(self) -> sqlite3.Connection:
        """
        Connects to the SQLite database and configures pragmas.
        Creates the parent directory of an on-disk catalog if needed.
        """
        if self._conn:
            return self._conn

        logging.debug(f"Connecting to database: {self.db_path}")
        try:
            if str(self.db_path) != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, timeout=config.BUSY_TIMEOUT_MS / 1000.0)
            conn.execute(f"PRAGMA busy_timeout={config.BUSY_TIMEOUT_MS};")
            for pragma in config.SQLITE_PRAGMAS:
                conn.execute(pragma)

            # Ensure schema exists
            init_schema(conn)
        except (sqlite3.Error, OSError) as e:
            raise StoreError(f"cannot open catalog {self.db_path}: {e}") from e

        self._conn = conn
        return self._conn

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def write_lock(self) -> threading.Lock:
        """Serializes reconciliation passes within this process."""
        return self._write_lock
