# server_engine/database/schema.py

from server_engine.core.logging import get_logger

logger = get_logger()

DATA_FILES = """
    CREATE TABLE IF NOT EXISTS data_files (
        file_key TEXT PRIMARY KEY,
        payload_json TEXT NOT NULL,
        updated_at INTEGER NOT NULL
    )
"""

USER_PERMISSIONS = """
    CREATE TABLE IF NOT EXISTS user_permissions (
        user_id TEXT NOT NULL,
        permission TEXT NOT NULL,
        granted_at INTEGER NOT NULL,
        PRIMARY KEY (user_id, permission)
    )
"""


class DatabaseSchema:
    """Tables for plugin data files and granted permissions."""

    @staticmethod
    def create_tables(db_manager):
        try:
            with db_manager.transaction():
                db_manager.execute(DATA_FILES)
                db_manager.execute(USER_PERMISSIONS)
        except Exception as e:
            logger.error(f"Failed to create tables: {e}")
            raise
        logger.info("Database tables created/verified")
