"""Shared fixtures: a headless server on a throwaway database, players, and a fake GearCore."""

import pytest

from server_engine.components.player import Inventory, PlayerController
from server_engine.core.server import Server
from server_engine.plugins.plugin import Plugin
from server_engine.scene.transform import Transform

from dancing_npc import permissions
from dancing_npc.plugin import DancingNPC


class FakeGearCore(Plugin):
    """Stand-in for the GearCore plugin: gear sets are lists of item names."""

    name = "GearCore"
    title = "Gear Core"
    version = "1.0.0"

    def __init__(self, gear_sets=None):
        super().__init__()
        self.gear_sets = gear_sets if gear_sets is not None else {
            "hazmat suit": ["hazmatsuit"],
            "egg suit": ["attire.egg.suit"],
            "scientist": ["hazmatsuit_scientist", "rifle.ak"],
        }
        self.equipped = []

    def gear_set_exists(self, name):
        return name in self.gear_sets

    def equip_gear_set(self, entity, name, clear_inventory=True):
        items = self.gear_sets.get(name)
        inventory = entity.get_component(Inventory)
        if items is None or inventory is None:
            return False
        if clear_inventory:
            inventory.clear()
        for item in items:
            inventory.give(item, "wear")
        self.equipped.append((entity, name))
        return True


@pytest.fixture
def server(tmp_path, monkeypatch):
    """Initialized server whose database, config and plugin files live in tmp_path."""
    monkeypatch.chdir(tmp_path)
    srv = Server(str(tmp_path / "server.json"))
    srv.initialize()
    yield srv
    srv.shutdown()


@pytest.fixture
def restart(tmp_path):
    """Build a second server over the same files, as after a restart."""
    servers = []

    def _restart(old_server):
        old_server.shutdown()
        srv = Server(str(tmp_path / "server.json"))
        srv.initialize()
        servers.append(srv)
        return srv

    yield _restart
    for srv in servers:
        srv.shutdown()


@pytest.fixture
def gear_core():
    return FakeGearCore()


@pytest.fixture
def plugin(server):
    dancing = DancingNPC()
    assert server.plugins.load(dancing)
    return dancing


@pytest.fixture
def plugin_with_gear(server, gear_core):
    assert server.plugins.load(gear_core)
    dancing = DancingNPC()
    assert server.plugins.load(dancing)
    return dancing


def place(player, position, yaw=0.0, pitch=0.0):
    """Move a player and point their view."""
    transform = player.get_component(Transform)
    transform.set_world_position(position)
    transform.set_yaw(yaw)
    player.get_component(PlayerController).look(yaw, pitch)


@pytest.fixture
def make_player(server):
    """Factory for connected players, allowed to use the plugin by default."""

    def _make(user_id, name=None, position=(0.0, 0.0, 0.0), yaw=0.0, allowed=True):
        player = server.spawn_player(user_id, name or f"Player{user_id}", position, yaw)
        if allowed:
            server.permissions.grant_user_permission(str(user_id), permissions.USE)
        return player

    return _make


def messages(player):
    return player.get_component(PlayerController).messages


def last_message(player):
    return player.get_component(PlayerController).last_message
