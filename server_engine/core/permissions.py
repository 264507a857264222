# server_engine/core/permissions.py

from typing import Dict, Set
from server_engine.database.queries import PreparedQueries
from server_engine.core.logging import get_logger

logger = get_logger()


class PermissionManager:
    """
    Permission registry and per-user grants.
    Grants are stored in the database so they survive restarts.
    """

    def __init__(self, queries: PreparedQueries):
        self.queries = queries
        self._registered: Dict[str, object] = {}  # permission -> owning plugin
        self._cache: Dict[str, Set[str]] = {}

    def register_permission(self, name: str, owner: object):
        name = name.lower()
        if name in self._registered and self._registered[name] is not owner:
            logger.warning(f"Permission '{name}' is already registered by another owner")
            return
        self._registered[name] = owner

    def unregister_owner(self, owner: object):
        for name in [n for n, o in self._registered.items() if o is owner]:
            del self._registered[name]

    def permission_exists(self, name: str) -> bool:
        return name.lower() in self._registered

    def user_has_permission(self, user_id: str, name: str) -> bool:
        return name.lower() in self._grants(user_id)

    def grant_user_permission(self, user_id: str, name: str) -> bool:
        name = name.lower()
        if not self.permission_exists(name):
            logger.warning(f"Cannot grant unknown permission '{name}' to {user_id}")
            return False
        self.queries.grant_permission(user_id, name)
        self._grants(user_id).add(name)
        return True

    def revoke_user_permission(self, user_id: str, name: str):
        name = name.lower()
        self.queries.revoke_permission(user_id, name)
        self._grants(user_id).discard(name)

    def _grants(self, user_id: str) -> Set[str]:
        if user_id not in self._cache:
            self._cache[user_id] = set(self.queries.get_user_permissions(user_id))
        return self._cache[user_id]
