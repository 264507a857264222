# dancing_npc/permissions.py

from server_engine.components.player import PlayerController

USE = "dancingnpc.use"

PERMISSIONS = [
    USE,
]


def register_permissions(plugin):
    for permission in PERMISSIONS:
        plugin.server.permissions.register_permission(permission, plugin)


def has_permission(plugin, player, permission: str) -> bool:
    controller = player.get_component(PlayerController)
    if controller is None:
        return False
    return plugin.server.permissions.user_has_permission(controller.user_id_string, permission)
