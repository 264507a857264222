# server_engine/physics/physics_world.py

from typing import Dict, Optional
import numpy as np
from server_engine.ecs.entity import Entity
from server_engine.physics.collider import Collider, BoxCollider, SphereCollider, CapsuleCollider
from server_engine.physics.layers import Layers
from server_engine.physics.raycast import RaycastHit
from server_engine.scene.transform import Transform
from server_engine.core.logging import get_logger

logger = get_logger()


class _Body:
    """Bookkeeping for one collider registered with Bullet."""

    def __init__(self, node, entity: Entity, revision: int):
        self.node = node
        self.entity = entity
        self.revision = revision


class PhysicsWorld:
    """
    Collision query world.
    Colliders of spawned entities live here as static Bullet bodies
    (triggers as ghosts); the server only needs scene queries.
    """

    def __init__(self, config: dict = None):
        self.gravity = np.array([0.0, 0.0, -9.81], dtype=np.float32)
        if config and 'gravity' in config:
            self.gravity = np.array(config['gravity'], dtype=np.float32)

        self._bodies: Dict[int, _Body] = {}

        # Panda3D Bullet physics integration
        self._bullet_world = None

    def initialize(self):
        """Initialize physics backend."""
        from panda3d.bullet import BulletWorld
        from panda3d.core import Vec3

        self._bullet_world = BulletWorld()
        self._bullet_world.setGravity(Vec3(float(self.gravity[0]), float(self.gravity[1]), float(self.gravity[2])))
        logger.info("Physics backend initialized")

    @property
    def initialized(self) -> bool:
        return self._bullet_world is not None

    def add_collider(self, entity: Entity) -> bool:
        """Register an entity's collider. Returns False if it has none."""
        if self._bullet_world is None:
            logger.warning(f"Physics not initialized, entity {entity.id} has no collision")
            return False

        collider = entity.get_component(Collider)
        transform = entity.get_component(Transform)
        if collider is None or transform is None:
            return False

        if entity.id in self._bodies:
            self.remove_collider(entity)

        node = self._create_node(entity, collider)
        if node is None:
            return False

        node.setTransform(self._make_transform_state(transform))
        self._bullet_world.attach(node)
        self._bodies[entity.id] = _Body(node, entity, transform.revision)
        return True

    def remove_collider(self, entity: Entity):
        """Unregister an entity's collider, if any."""
        body = self._bodies.pop(entity.id, None)
        if body is None:
            return

        if self._bullet_world is not None:
            self._bullet_world.remove(body.node)
        body.node.clearPythonTag('entity')

    def has_collider(self, entity: Entity) -> bool:
        return entity.id in self._bodies

    def sync_transforms(self):
        """Re-seat bodies whose Transform changed since they were attached."""
        for body in list(self._bodies.values()):
            transform = body.entity.get_component(Transform)
            if transform is None or transform.revision == body.revision:
                continue

            # Static bodies keep their broadphase bounds, so re-attach to move them
            self._bullet_world.remove(body.node)
            body.node.setTransform(self._make_transform_state(transform))
            self._bullet_world.attach(body.node)
            body.revision = transform.revision

    def _create_node(self, entity: Entity, collider: Collider):
        """Create a Bullet node for the collider."""
        from panda3d.bullet import BulletRigidBodyNode, BulletGhostNode
        from panda3d.core import BitMask32, TransformState, Point3

        shape = self._create_bullet_shape(collider)
        if shape is None:
            logger.warning(f"Unsupported collider shape {type(collider.shape).__name__} on entity {entity.id}")
            return None

        if collider.trigger:
            node = BulletGhostNode(f"Trigger_{entity.id}")
        else:
            node = BulletRigidBodyNode(f"Body_{entity.id}")
            node.setMass(0.0)

        offset = collider.offset
        node.addShape(shape, TransformState.makePos(Point3(float(offset[0]), float(offset[1]), float(offset[2]))))
        node.setIntoCollideMask(BitMask32.bit(collider.layer))
        node.setPythonTag('entity', entity)
        return node

    def _create_bullet_shape(self, collider: Collider):
        """Create Bullet collision shape from Collider component."""
        from panda3d.bullet import BulletBoxShape, BulletSphereShape, BulletCapsuleShape, ZUp
        from panda3d.core import Vec3

        shape = None

        if isinstance(collider.shape, BoxCollider):
            half_extents = collider.shape.size * 0.5
            shape = BulletBoxShape(Vec3(float(half_extents[0]), float(half_extents[1]), float(half_extents[2])))

        elif isinstance(collider.shape, SphereCollider):
            shape = BulletSphereShape(collider.shape.radius)

        elif isinstance(collider.shape, CapsuleCollider):
            # BulletCapsuleShape takes the cylindrical part height
            cyl_height = max(0.0, collider.shape.height - 2 * collider.shape.radius)
            shape = BulletCapsuleShape(collider.shape.radius, cyl_height, ZUp)

        return shape

    def _make_transform_state(self, transform: Transform):
        from panda3d.core import TransformState, Quat, Point3

        pos = transform.get_world_position()
        rot = transform.get_world_rotation()
        p_quat = Quat(float(rot[3]), float(rot[0]), float(rot[1]), float(rot[2]))
        p_pos = Point3(float(pos[0]), float(pos[1]), float(pos[2]))
        return TransformState.makePos(p_pos).compose(TransformState.makeQuat(p_quat))

    def raycast(self, origin: np.ndarray, direction: np.ndarray, max_distance: float,
                layer_mask: int = Layers.ALL, ignore_triggers: bool = True,
                ignore: Optional[Entity] = None) -> Optional[RaycastHit]:
        """
        Cast a ray and return the closest hit, or None.

        Args:
            origin: Ray start position
            direction: Ray direction (normalized here)
            max_distance: Maximum ray distance
            layer_mask: Only colliders on these layers are considered
            ignore_triggers: Skip trigger volumes
            ignore: Entity to skip (usually the caster's own body)
        """
        if self._bullet_world is None:
            return None

        from panda3d.core import Point3, BitMask32

        direction = np.asarray(direction, dtype=np.float64)
        length = np.linalg.norm(direction)
        if length == 0 or max_distance <= 0:
            return None

        self.sync_transforms()

        origin = np.asarray(origin, dtype=np.float64)
        direction = direction / length
        end = origin + direction * max_distance

        mask = BitMask32.allOn() if layer_mask == Layers.ALL else BitMask32(layer_mask)
        result = self._bullet_world.rayTestAll(
            Point3(float(origin[0]), float(origin[1]), float(origin[2])),
            Point3(float(end[0]), float(end[1]), float(end[2])),
            mask
        )

        closest = None
        for i in range(result.getNumHits()):
            hit = result.getHit(i)
            entity = hit.getNode().getPythonTag('entity')
            if entity is None or entity is ignore:
                continue

            collider = entity.get_component(Collider)
            if ignore_triggers and collider is not None and collider.trigger:
                continue

            if closest is None or hit.getHitFraction() < closest[0].getHitFraction():
                closest = (hit, entity, collider)

        if closest is None:
            return None

        hit, entity, collider = closest
        hit_point = hit.getHitPos()
        hit_normal = hit.getHitNormal()
        fraction = float(hit.getHitFraction())
        return RaycastHit(
            entity=entity,
            collider=collider,
            point=np.array([hit_point.x, hit_point.y, hit_point.z], dtype=np.float32),
            normal=np.array([hit_normal.x, hit_normal.y, hit_normal.z], dtype=np.float32),
            fraction=fraction,
            distance=fraction * max_distance
        )

    def shutdown(self):
        for body in list(self._bodies.values()):
            self.remove_collider(body.entity)
        self._bullet_world = None
        logger.info("Physics world shutdown")
