"""Tests for gesture lookup and the per-NPC gesture loop."""

import pytest

from server_engine.rendering.animator import Animator, GestureCatalog, GestureConfig
from server_engine.resources.prefab import PREFAB_PLAYER

from dancing_npc.gestures import GestureScheduler, configured_gestures, is_index_token, resolve_gesture

CONFIGURED = ["shrug", "victory", "wave", "cabbagepatch"]


@pytest.fixture
def catalog():
    return GestureCatalog()


@pytest.fixture
def loops(server):
    return GestureScheduler(server.scheduler, server.world)


@pytest.fixture
def npc(server):
    entity = server.create_entity(PREFAB_PLAYER, (0.0, 5.0, 0.0))
    server.world.spawn(entity)
    return entity


def plays(entity):
    return entity.get_component(Animator).play_count


class TestResolveGesture:

    def test_name_is_case_insensitive(self, catalog):
        assert resolve_gesture(catalog, CONFIGURED, "WaVe").convar_name == "wave"

    def test_unconfigured_catalog_name_still_resolves(self, catalog):
        assert resolve_gesture(catalog, CONFIGURED, "clap").convar_name == "clap"

    def test_index_is_one_based(self, catalog):
        assert resolve_gesture(catalog, CONFIGURED, "1").convar_name == "shrug"
        assert resolve_gesture(catalog, CONFIGURED, "4").convar_name == "cabbagepatch"

    @pytest.mark.parametrize("token", ["0", "5", "99"])
    def test_index_out_of_range(self, catalog, token):
        assert resolve_gesture(catalog, CONFIGURED, token) is None
        assert is_index_token(token)

    def test_unknown_name(self, catalog):
        assert resolve_gesture(catalog, CONFIGURED, "moonwalk") is None
        assert not is_index_token("moonwalk")

    def test_empty_token(self, catalog):
        assert resolve_gesture(catalog, CONFIGURED, "") is None

    def test_configured_gestures_skips_unknown(self, catalog):
        gestures = configured_gestures(catalog, ["wave", "moonwalk", "shrug"])
        assert [g.convar_name for g in gestures] == ["wave", "shrug"]

    def test_catalog_lists_stock_gestures(self, catalog):
        assert len(catalog) == len(catalog.all_gestures) == 10
        assert "CLAP" in catalog

    def test_catalog_rejects_non_positive_duration(self, catalog):
        with pytest.raises(ValueError):
            catalog.add(GestureConfig(99, "freeze", 0.0))


class TestGestureScheduler:

    def test_plays_immediately_then_every_duration(self, server, loops, npc):
        wave = server.gestures.find("wave")
        loops.start_loop(npc, wave)
        assert plays(npc) == 1

        server.advance(wave.duration * 3 + 0.01)
        assert plays(npc) == 4
        assert npc.get_component(Animator).current_gesture is wave

    def test_restart_keeps_single_loop(self, server, loops, npc):
        wave = server.gestures.find("wave")
        shrug = server.gestures.find("shrug")

        first = loops.start_loop(npc, wave)
        second = loops.start_loop(npc, shrug)

        assert not first.active
        assert len(loops.timers) == 1
        assert loops.active_gesture(npc) is shrug
        assert first not in server.scheduler.active_timers

        server.advance(shrug.duration + 0.01)
        assert npc.get_component(Animator).current_gesture is shrug

    def test_cancel_stops_playing(self, server, loops, npc):
        wave = server.gestures.find("wave")
        loops.start_loop(npc, wave)

        assert loops.cancel_loop(npc)
        assert not loops.cancel_loop(npc)

        server.advance(wave.duration * 2)
        assert plays(npc) == 1

    def test_loop_ends_itself_when_npc_dies(self, server, loops, npc):
        wave = server.gestures.find("wave")
        timer = loops.start_loop(npc, wave)
        npc.destroyed = True

        server.advance(wave.duration + 0.01)
        assert not timer.active
        assert not loops.is_looping(npc)

    def test_dead_npc_gets_no_loop(self, server, loops, npc):
        server.world.destroy_entity(npc)
        assert loops.start_loop(npc, server.gestures.find("wave")) is None
        assert loops.timers == {}

    def test_custom_interval(self, server, loops, npc):
        loops.start_loop(npc, server.gestures.find("cabbagepatch"), interval=1.0)
        server.advance(2.01)
        assert plays(npc) == 3
