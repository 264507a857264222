# server_engine/database/queries.py

import time
from typing import List, Optional
from server_engine.database.db_manager import DatabaseManager
from server_engine.core.logging import get_logger

logger = get_logger()

class PreparedQueries:
    """
    Collection of prepared queries.
    Keeps SQL out of the services that use it.
    """

    def __init__(self, db: DatabaseManager):
        self.db = db

    def _write(self, action: str, query: str, params: tuple) -> int:
        """Run one statement in its own transaction. Returns affected rows."""
        try:
            with self.db.transaction():
                return self.db.execute(query, params).rowcount
        except Exception as e:
            logger.error(f"Failed to {action}: {e}")
            raise

    # Data file queries
    def get_data_file(self, file_key: str) -> Optional[str]:
        """Raw JSON payload for a data file, or None."""
        row = self.db.fetch_one(
            "SELECT payload_json FROM data_files WHERE file_key = ?",
            (file_key,)
        )
        return row['payload_json'] if row else None

    def put_data_file(self, file_key: str, payload_json: str):
        """Insert or replace a data file."""
        self._write(
            f"write data file {file_key}",
            """INSERT OR REPLACE INTO data_files (file_key, payload_json, updated_at)
               VALUES (?, ?, ?)""",
            (file_key, payload_json, int(time.time()))
        )

    def delete_data_file(self, file_key: str) -> bool:
        return self._write(
            f"delete data file {file_key}",
            "DELETE FROM data_files WHERE file_key = ?",
            (file_key,)
        ) > 0

    # Permission queries
    def grant_permission(self, user_id: str, permission: str):
        self._write(
            f"grant {permission} to {user_id}",
            """INSERT OR IGNORE INTO user_permissions (user_id, permission, granted_at)
               VALUES (?, ?, ?)""",
            (user_id, permission, int(time.time()))
        )

    def revoke_permission(self, user_id: str, permission: str):
        self._write(
            f"revoke {permission} from {user_id}",
            "DELETE FROM user_permissions WHERE user_id = ? AND permission = ?",
            (user_id, permission)
        )

    def get_user_permissions(self, user_id: str) -> List[str]:
        rows = self.db.fetch_all(
            "SELECT permission FROM user_permissions WHERE user_id = ?",
            (user_id,)
        )
        return [row['permission'] for row in rows]
