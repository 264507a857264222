# server_engine/database/db_manager.py

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
from server_engine.core.logging import get_logger

MEMORY = ":memory:"


class DatabaseManager:
    """
    SQLite storage for the server.
    One connection per thread; the game loop only ever uses its own.
    """

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.local = threading.local()
        self.logger = get_logger()

        db_name = str(self.config.get("database", "server.db"))
        if db_name != MEMORY and not db_name.endswith(".db"):
            db_name += ".db"
        self.db_path = db_name

    @property
    def connection(self) -> sqlite3.Connection:
        conn = getattr(self.local, 'connection', None)
        if conn is None:
            conn = self._open()
            self.local.connection = conn
        return conn

    def _open(self) -> sqlite3.Connection:
        if self.db_path != MEMORY:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as err:
            self.logger.critical(f"Cannot open SQLite database {self.db_path}: {err}")
            raise

        conn.row_factory = sqlite3.Row
        self.logger.info(f"Connected to SQLite database: {self.db_path}")
        return conn

    def connect(self):
        """Open the connection for the calling thread."""
        return self.connection

    def disconnect(self):
        """Close the calling thread's connection, if open."""
        conn = getattr(self.local, 'connection', None)
        if conn is None:
            return
        conn.close()
        self.local.connection = None
        self.logger.info("Disconnected from SQLite")

    def execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self.connection.execute(query, params)
        except sqlite3.Error as err:
            self.logger.error(f"Query failed: {err}")
            self.logger.debug(f"Query: {query} Params: {params}")
            raise

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        row = self.execute(query, params).fetchone()
        return dict(row) if row is not None else None

    def fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        return [dict(row) for row in self.execute(query, params).fetchall()]

    def commit(self):
        self.connection.commit()

    def rollback(self):
        self.connection.rollback()

    @contextmanager
    def transaction(self) -> Iterator['DatabaseManager']:
        """Commit on success, roll back and re-raise on error."""
        try:
            yield self
        except Exception:
            self.rollback()
            raise
        else:
            self.commit()
