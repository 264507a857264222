# server_engine/database/datafile.py

import json
from typing import Any, Optional
from server_engine.database.queries import PreparedQueries
from server_engine.core.logging import get_logger

logger = get_logger()


class DataFileSystem:
    """
    Key -> JSON document store for plugin data.
    Writes go straight to the database.
    """

    def __init__(self, queries: PreparedQueries):
        self.queries = queries

    def read_object(self, key: str, default: Any = None) -> Any:
        """Load a document, or default when missing or unreadable."""
        payload = self.queries.get_data_file(key)
        if payload is None:
            return default

        try:
            return json.loads(payload)
        except ValueError as e:
            logger.error(f"Data file '{key}' is corrupt, ignoring it: {e}")
            return default

    def write_object(self, key: str, value: Any):
        """Replace a document."""
        self.queries.put_data_file(key, json.dumps(value))

    def exists(self, key: str) -> bool:
        return self.queries.get_data_file(key) is not None

    def delete(self, key: str) -> bool:
        return self.queries.delete_data_file(key)
