"""Tests for collider registration and raycast filtering."""

import numpy as np
import pytest

from server_engine.ecs.component import Component
from server_engine.ecs.registry import ComponentRegistry, register_component
from server_engine.physics.collider import BoxCollider, Collider, SphereCollider
from server_engine.physics.layers import Layers
from server_engine.resources.prefab import PREFAB_PLAYER
from server_engine.scene.transform import Transform
from server_engine.utils.math import view_direction, yaw_from_direction


def spawn_box(server, position, layer=Layers.DEFAULT, trigger=False, size=(1.0, 1.0, 2.0)):
    entity = server.world.create_entity("box")
    transform = entity.add_component(Transform())
    transform.set_world_position(position)
    collider = entity.add_component(Collider(BoxCollider(np.array(size))))
    collider.layer = layer
    collider.trigger = trigger
    server.world.spawn(entity)
    return entity


def spawn_character(server, position):
    entity = server.create_entity(PREFAB_PLAYER, position)
    server.world.spawn(entity)
    return entity


EYE = np.array([0.0, 0.0, 1.5])
FORWARD = np.array([0.0, 1.0, 0.0])
PLAYERS = Layers.mask(Layers.PLAYER_SERVER)


class TestLayers:

    def test_mask(self):
        assert Layers.mask(Layers.PLAYER_SERVER) == 1 << 17
        assert Layers.mask(0, 1) == 0b11

    def test_mask_rejects_bad_index(self):
        with pytest.raises(ValueError):
            Layers.mask(32)


class TestMath:

    def test_yaw_zero_looks_along_y(self):
        assert np.allclose(view_direction(0.0), [0.0, 1.0, 0.0], atol=1e-6)
        assert np.allclose(view_direction(90.0), [-1.0, 0.0, 0.0], atol=1e-6)

    def test_yaw_round_trip(self):
        assert yaw_from_direction(view_direction(135.0)) == pytest.approx(135.0)

    def test_transform_yaw(self):
        transform = Transform()
        transform.set_yaw(270.0)
        assert transform.get_yaw() == pytest.approx(270.0, abs=1e-3)


class TestRaycast:

    def test_hits_character_in_front(self, server):
        npc = spawn_character(server, (0.0, 3.0, 0.0))

        hit = server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS)
        assert hit is not None
        assert hit.entity is npc
        assert 2.0 < hit.distance < 3.0
        assert hit.fraction == pytest.approx(hit.distance / 10.0)
        assert hit.layer == Layers.PLAYER_SERVER

    def test_respects_max_distance(self, server):
        spawn_character(server, (0.0, 12.0, 0.0))
        assert server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS) is None

    def test_layer_mask_filters(self, server):
        spawn_box(server, (0.0, 2.0, 1.0), layer=Layers.DEPLOYED)
        npc = spawn_character(server, (0.0, 4.0, 0.0))

        hit = server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS)
        assert hit.entity is npc

        hit = server.physics.raycast(EYE, FORWARD, 10.0)
        assert hit.entity is not npc

    def test_triggers_ignored(self, server):
        spawn_box(server, (0.0, 2.0, 1.0), layer=Layers.PLAYER_SERVER, trigger=True)
        npc = spawn_character(server, (0.0, 4.0, 0.0))

        assert server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS).entity is npc
        hit = server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS, ignore_triggers=False)
        assert hit.entity is not npc

    def test_closest_hit_wins(self, server):
        near = spawn_character(server, (0.0, 3.0, 0.0))
        spawn_character(server, (0.0, 6.0, 0.0))

        assert server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS).entity is near

    def test_ignores_caster(self, server):
        caster = spawn_character(server, (0.0, 0.0, 0.0))
        npc = spawn_character(server, (0.0, 3.0, 0.0))

        hit = server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS, ignore=caster)
        assert hit.entity is npc

    def test_moved_body_is_found_at_new_position(self, server):
        npc = spawn_character(server, (0.0, 3.0, 0.0))
        npc.get_component(Transform).set_world_position((5.0, 5.0, 0.0))

        assert server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS) is None

    def test_destroyed_entity_no_longer_hit(self, server):
        npc = spawn_character(server, (0.0, 3.0, 0.0))
        server.world.destroy_entity(npc)

        assert not server.physics.has_collider(npc)
        assert server.physics.raycast(EYE, FORWARD, 10.0, PLAYERS) is None

    def test_zero_direction(self, server):
        spawn_character(server, (0.0, 3.0, 0.0))
        assert server.physics.raycast(EYE, np.zeros(3), 10.0) is None

    def test_sphere_collider(self, server):
        ball = server.world.create_entity("ball")
        ball.add_component(Transform()).set_world_position((0.0, 4.0, 1.5))
        ball.add_component(Collider(SphereCollider(0.5)))
        server.world.spawn(ball)

        hit = server.physics.raycast(EYE, FORWARD, 10.0)
        assert hit.entity is ball
        assert hit.distance == pytest.approx(3.5, abs=1e-3)


class TestComponentRegistry:

    def test_stock_components_registered(self):
        for name in ("Transform", "Collider", "Animator", "PlayerController", "Inventory"):
            assert name in ComponentRegistry.names()

    def test_name_clash_rejected(self):
        with pytest.raises(ValueError):
            @register_component("Transform")
            class Impostor(Component):
                pass

        assert ComponentRegistry.get("Transform") is Transform

    def test_component_belongs_to_one_entity(self, server):
        transform = Transform()
        first = server.world.create_entity("a")
        first.add_component(transform)
        assert transform.entity is first

        with pytest.raises(ValueError):
            server.world.create_entity("b").add_component(transform)
