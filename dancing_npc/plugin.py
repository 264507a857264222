# dancing_npc/plugin.py

from server_engine.components.player import PlayerController
from server_engine.ecs.entity import Entity
from server_engine.plugins.plugin import Plugin

from dancing_npc.commands import DanceCommand
from dancing_npc.config import PLUGIN_VERSION, PluginConfig
from dancing_npc.gear import GEAR_CORE_PLUGIN, GearCoreProvider
from dancing_npc.gestures import configured_gestures
from dancing_npc.lang import register_messages
from dancing_npc.permissions import register_permissions
from dancing_npc.registry import NPCRegistry


class DancingNPC(Plugin):
    """Lets players spawn npcs that loop dance gestures."""

    name = "DancingNPC"
    title = "Dancing NPC"
    author = "VisEntities"
    version = PLUGIN_VERSION
    description = "Allows players to spawn an npc that performs various dance gestures."

    def __init__(self):
        super().__init__()
        self.config = None
        self.gear = None
        self.registry = None
        self.command = None

    def init(self):
        self.config = PluginConfig(self.server.plugin_config_path(self.name), self.version)

        register_messages(self)
        register_permissions(self)

        # Warn about typos in the configured list early
        configured_gestures(self.server.gestures, self.config.gestures)

        self.gear = GearCoreProvider(self.server.plugins, GEAR_CORE_PLUGIN)
        self.registry = NPCRegistry(
            self.server,
            self.gear,
            max_per_owner=self.config.max_npcs_per_player,
            sight_distance=self.config.line_of_sight_distance,
            owner=self,
        )

        self.command = DanceCommand(self)
        if not self.server.commands.add_chat_command(self.config.chat_command, self, self.command.handle):
            raise RuntimeError(f"Chat command '/{self.config.chat_command}' is taken")

        restored = self.registry.rehydrate_from_storage()
        self.puts(f"Restored {restored} dancing npcs")

    def unload(self):
        if self.registry is not None:
            self.registry.shutdown()
        self.registry = None
        self.command = None
        self.gear = None
        self.config = None

    # Hooks

    def on_entity_kill(self, entity: Entity):
        if self.registry is not None:
            self.registry.on_entity_killed(entity)

    def on_plugin_loaded(self, plugin: Plugin):
        # Gear that could not be applied at startup goes on once GearCore shows up
        if plugin.name == GEAR_CORE_PLUGIN and self.registry is not None:
            applied = self.registry.reapply_gear()
            if applied:
                self.puts(f"Applied gear to {applied} dancing npcs")

    # Messages

    def get_message(self, player: Entity, key: str, *args) -> str:
        controller = player.get_component(PlayerController)
        message = self.server.lang.get_message(key, self, controller.user_id_string)
        if args:
            message = message.format(*args)
        return message

    def send_message(self, player: Entity, key: str, *args):
        player.get_component(PlayerController).reply(self.get_message(player, key, *args))
