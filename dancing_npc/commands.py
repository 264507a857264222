# dancing_npc/commands.py

from typing import Callable, Dict, List, Optional

from server_engine.components.player import PlayerController
from server_engine.core.logging import get_logger
from server_engine.ecs.entity import Entity
from server_engine.rendering.animator import GestureConfig
from server_engine.scene.transform import Transform
from server_engine.utils.math import wrap_degrees

from dancing_npc import permissions
from dancing_npc.errors import CapacityError, NotFoundError, SpawnError
from dancing_npc.gear import GearResult, pick_random
from dancing_npc.gestures import is_index_token, resolve_gesture
from dancing_npc.lang import NONE_LABEL, Lang

logger = get_logger()


class DanceCommand:
    """
    Handler for the plugin's chat command and its subcommands.
    Every subcommand validates its input before touching the registry.
    """

    def __init__(self, plugin):
        self.plugin = plugin
        self.subcommands: Dict[str, Callable[[Entity, List[str]], None]] = {
            "add": self.cmd_add,
            "setdance": self.cmd_set_dance,
            "setgear": self.cmd_set_gear,
            "remove": self.cmd_remove,
            "clear": self.cmd_clear,
            "dances": self.cmd_dances,
            "gear": self.cmd_gear,
            "help": self.cmd_help,
        }

    @property
    def registry(self):
        return self.plugin.registry

    @property
    def config(self):
        return self.plugin.config

    def reply(self, player: Entity, key: str, *args):
        self.plugin.send_message(player, key, *args)

    def handle(self, player: Entity, command: str, args: List[str]):
        if player is None or player.get_component(PlayerController) is None:
            return

        if not permissions.has_permission(self.plugin, player, permissions.USE):
            self.reply(player, Lang.NoPermission)
            return

        subcommand = args[0].lower() if args else "help"
        handler = self.subcommands.get(subcommand, self.cmd_help)

        try:
            handler(player, args[1:])
        except NotFoundError as e:
            self._reply_not_found(player, e)
        except CapacityError as e:
            self.reply(player, Lang.MaxNPCsReached, e.limit)
        except SpawnError as e:
            self.plugin.print_warning(f"Spawn for {player.get_component(PlayerController).display_name} failed: {e}")
            self.reply(player, Lang.SpawnFailed)

    def _reply_not_found(self, player: Entity, error: NotFoundError):
        if error.kind == NotFoundError.GESTURE:
            if is_index_token(error.name):
                self.reply(player, Lang.GestureIndexOutOfRange, error.name, self.config.chat_command)
            elif error.name:
                self.reply(player, Lang.GestureNotFound, error.name)
            else:
                self.reply(player, Lang.NoGesturesConfigured)
        elif error.kind == NotFoundError.GEAR_SET:
            self.reply(player, Lang.GearSetNotFound, error.name)
        else:
            self.reply(player, Lang.NoNPCInSight)

    # Validation

    def _resolve_gesture(self, token: Optional[str]) -> GestureConfig:
        if token is None:
            token = pick_random(self.config.gestures)
            if token is None:
                raise NotFoundError(NotFoundError.GESTURE)

        configured = self.config.gestures
        gesture = resolve_gesture(self.plugin.server.gestures, configured, token)
        if gesture is None:
            if is_index_token(token) and 0 < int(token) <= len(configured):
                # In range, so the configured name itself is unknown
                raise NotFoundError(NotFoundError.GESTURE, configured[int(token) - 1])
            raise NotFoundError(NotFoundError.GESTURE, token)
        return gesture

    def _resolve_gear_set(self, name: Optional[str]) -> Optional[str]:
        """Gear sets are only checked while the gear plugin is there to check them."""
        if name is None:
            return None

        gear = self.plugin.gear
        if gear.available and not gear.exists(name):
            raise NotFoundError(NotFoundError.GEAR_SET, name)
        return name

    def _target(self, player: Entity) -> Entity:
        handle = self.registry.find_owned_by_player_in_sight(player)
        if handle is None:
            raise NotFoundError(NotFoundError.NPC)
        return handle

    def _report_gear(self, player: Entity, name: Optional[str], result: Optional[GearResult]):
        if result is GearResult.UNAVAILABLE:
            self.reply(player, Lang.GearNotApplied, name)
        elif result is GearResult.FAILED:
            self.reply(player, Lang.GearFailed, name)

    # Subcommands

    def cmd_add(self, player: Entity, args: List[str]):
        gesture = self._resolve_gesture(args[0] if args else None)
        gear_set = self._resolve_gear_set(args[1] if len(args) > 1 else pick_random(self.config.gear_sets))
        gear_label = gear_set or NONE_LABEL

        target = self.registry.find_owned_by_player_in_sight(player)
        if target is not None:
            self.registry.change_gesture(target, gesture)
            gear_result = self.registry.change_gear(target, gear_set) if gear_set else None
            self.reply(player, Lang.GestureUpdatedOnExistingNPC, gesture.convar_name, gear_label)
            self._report_gear(player, gear_set, gear_result)
            return

        controller = player.get_component(PlayerController)
        transform = player.get_component(Transform)
        # Face back towards the player who spawned it
        yaw = wrap_degrees(transform.get_yaw() + 180.0)

        spawned = self.registry.create_npc(
            controller.user_id,
            transform.get_world_position(),
            yaw,
            gesture,
            gear_set,
        )
        self.reply(player, Lang.GesturePlayedOnNewNPC, gesture.convar_name, gear_label)
        self._report_gear(player, gear_set, spawned.gear)

    def cmd_set_dance(self, player: Entity, args: List[str]):
        if not args:
            self.reply(player, Lang.MissingArgument, self.config.chat_command, "setdance <gesture>")
            return

        gesture = self._resolve_gesture(args[0])
        target = self._target(player)
        self.registry.change_gesture(target, gesture)
        self.reply(player, Lang.GestureChanged, gesture.convar_name)

    def cmd_set_gear(self, player: Entity, args: List[str]):
        if not args:
            self.reply(player, Lang.MissingArgument, self.config.chat_command, "setgear <gear set>")
            return

        gear_set = self._resolve_gear_set(" ".join(args))
        target = self._target(player)
        result = self.registry.change_gear(target, gear_set)
        if result is GearResult.APPLIED:
            self.reply(player, Lang.GearChanged, gear_set)
        else:
            self._report_gear(player, gear_set, result)

    def cmd_remove(self, player: Entity, args: List[str]):
        target = self._target(player)
        self.registry.remove_npc(target, purge_from_storage=True)
        self.reply(player, Lang.NPCRemoved)

    def cmd_clear(self, player: Entity, args: List[str]):
        owner_id = player.get_component(PlayerController).user_id
        handles = self.registry.owned_by(owner_id)
        if not handles:
            self.reply(player, Lang.NoNPCsToClear)
            return

        removed = sum(1 for handle in handles if self.registry.remove_npc(handle, purge_from_storage=True))
        self.reply(player, Lang.NPCsCleared, removed)

    def cmd_dances(self, player: Entity, args: List[str]):
        entries = [self._message(player, Lang.GestureListEntry, index, name)
                   for index, name in enumerate(self.config.gestures, start=1)]
        self._reply_list(player, Lang.GestureList, entries)

    def cmd_gear(self, player: Entity, args: List[str]):
        entries = [self._message(player, Lang.GearListEntry, name) for name in self.config.gear_sets]
        self._reply_list(player, Lang.GearList, entries)

    def cmd_help(self, player: Entity, args: List[str]):
        self.reply(player, Lang.Help, self.config.chat_command)

    def _message(self, player: Entity, key: str, *args) -> str:
        return self.plugin.get_message(player, key, *args)

    def _reply_list(self, player: Entity, header_key: str, entries: List[str]):
        lines = [self._message(player, header_key)]
        lines.extend(entries or [self._message(player, Lang.ListEmpty)])
        player.get_component(PlayerController).reply("\n".join(lines))
