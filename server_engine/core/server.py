# server_engine/core/server.py

import time
from pathlib import Path
from typing import Optional

import numpy as np

from server_engine.core.config import Config
from server_engine.core.lang import LangManager
from server_engine.core.logging import get_logger, set_console_level
from server_engine.core.permissions import PermissionManager
from server_engine.core.scheduler import Scheduler
from server_engine.core.time import TimeManager
from server_engine.commands.chat import ChatCommandRegistry
from server_engine.components.player import PlayerController
from server_engine.database.datafile import DataFileSystem
from server_engine.database.db_manager import DatabaseManager
from server_engine.database.queries import PreparedQueries
from server_engine.database.schema import DatabaseSchema
from server_engine.ecs.entity import Entity
from server_engine.ecs.world import World
from server_engine.physics.collider_system import ColliderSystem
from server_engine.physics.physics_world import PhysicsWorld
from server_engine.plugins.plugin import PluginManager
from server_engine.rendering.animator import GestureCatalog
from server_engine.resources.prefab import PREFAB_PLAYER, create_default_library
from server_engine.scene.transform import Transform


class Server:
    """
    Headless game server.
    Owns the world, physics queries, timers, storage and plugins;
    everything runs on one thread, driven by tick().
    """

    def __init__(self, config_path: str = "server.json"):
        self.config = Config(config_path)

        self.logger = get_logger()
        set_console_level(self.config.get('server.log_level', 'INFO'))
        self.logger.info("Initializing server")

        self.running = False
        self.initialized = False

        # Core subsystems
        self.time = TimeManager(tick_rate=self.config.get('server.tick_rate', 1 / 30.0))
        self.scheduler = Scheduler(self.time)
        self.prefabs = create_default_library()
        self.world = World(self.prefabs)
        self.physics = PhysicsWorld(self.config.data['physics'])
        self.gestures = GestureCatalog()

        # Storage
        self.db = DatabaseManager(self.config.data['database'])
        self.queries = PreparedQueries(self.db)
        self.data_files = DataFileSystem(self.queries)

        # Services for plugins
        self.permissions = PermissionManager(self.queries)
        self.lang = LangManager()
        self.commands = ChatCommandRegistry()
        self.plugins = PluginManager(self)

    def initialize(self):
        """Bring up physics and storage. Plugins load after this."""
        if self.initialized:
            return

        self.logger.info("Initializing subsystems")
        try:
            self.physics.initialize()
            self.world.add_system(ColliderSystem(self.physics))
            self.world.add_destroy_listener(self._on_entity_destroyed)

            self.db.connect()
            DatabaseSchema.create_tables(self.db)
        except Exception as e:
            self.logger.critical(f"Initialization failed: {e}", exc_info=True)
            raise

        self.initialized = True

    def plugin_config_path(self, plugin_name: str) -> Path:
        return Path(self.config.get('plugins.config_dir', 'config')) / f"{plugin_name}.json"

    # Entities

    def create_entity(self, prefab_id: str, position) -> Optional[Entity]:
        """Instantiate a prefab at position. The caller spawns it."""
        return self.world.create_from_prefab(prefab_id, np.asarray(position, dtype=np.float32))

    def spawn_player(self, user_id: int, display_name: str, position, yaw: float = 0.0) -> Entity:
        """Connect a player character."""
        entity = self.create_entity(PREFAB_PLAYER, position)
        if entity is None:
            raise RuntimeError("Player prefab is not registered")

        controller = entity.get_component(PlayerController)
        controller.user_id = user_id
        controller.display_name = display_name
        controller.connected = True
        controller.look(yaw)
        entity.get_component(Transform).set_yaw(yaw)

        self.world.spawn(entity)
        self.logger.info(f"Player {display_name} ({user_id}) connected")
        return entity

    def find_player(self, user_id: int) -> Optional[Entity]:
        for entity in self.world.get_entities_with(PlayerController):
            controller = entity.get_component(PlayerController)
            if controller.connected and controller.user_id == user_id:
                return entity
        return None

    def handle_chat(self, player: Entity, text: str) -> bool:
        """Route a chat line from a player to the command registry."""
        return self.commands.handle(player, text)

    def _on_entity_destroyed(self, entity: Entity):
        self.plugins.call_hook("on_entity_kill", entity)

    # Loop

    def tick(self, dt: Optional[float] = None):
        """Advance server time by one step and run due work."""
        if dt is None:
            dt = self.time.tick_rate
        self.time.advance(dt)
        self.scheduler.run()
        self.world.update_systems(dt)

    def advance(self, seconds: float, step: Optional[float] = None):
        """Tick repeatedly until seconds of server time have passed."""
        step = step or self.time.tick_rate
        remaining = seconds
        while remaining > 1e-9:
            dt = min(step, remaining)
            self.tick(dt)
            remaining -= dt

    def run(self):
        """Real-time loop at the configured tick rate."""
        self.logger.info("Starting server loop")
        self.initialize()
        self.running = True
        self.time.tick()

        accumulator = 0.0
        max_frame_time = 0.25  # Prevent spiral of death

        try:
            while self.running:
                frame_time = min(self.time.tick(), max_frame_time)
                accumulator += frame_time

                while accumulator >= self.time.tick_rate:
                    try:
                        self.tick(self.time.tick_rate)
                    except Exception as e:
                        self.logger.error(f"Server tick failed: {e}", exc_info=True)
                    accumulator -= self.time.tick_rate

                time.sleep(max(0.0, self.time.tick_rate - accumulator))
        finally:
            self.shutdown()

    def shutdown(self):
        """Clean shutdown: plugins first, then the world and storage."""
        self.logger.info("Shutting down")
        self.running = False

        try:
            self.plugins.unload_all()
            self.scheduler.clear()
            self.world.clear()
            self.world.remove_destroy_listener(self._on_entity_destroyed)
            self.physics.shutdown()
            self.db.disconnect()
        except Exception as e:
            self.logger.error(f"Shutdown error: {e}", exc_info=True)

        self.initialized = False
        self.logger.info("Shutdown complete")

    def quit(self):
        """Request server exit."""
        self.logger.info("Server quit requested")
        self.running = False
