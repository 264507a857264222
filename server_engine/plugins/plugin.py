# server_engine/plugins/plugin.py

from typing import Any, Dict, List, Optional
from server_engine.core.logging import get_logger

logger = get_logger()


class Plugin:
    """
    Base class for server plugins.
    Subclasses override the hooks they care about: init, unload, on_entity_kill.
    """

    name = "Plugin"
    title = "Plugin"
    author = "Unknown"
    version = "0.0.0"
    description = ""

    def __init__(self):
        self.server = None
        self.is_loaded = False

    def init(self):
        pass

    def unload(self):
        pass

    def print_warning(self, message: str):
        logger.warning(f"[{self.title}] {message}")

    def puts(self, message: str):
        logger.info(f"[{self.title}] {message}")


def plugin_loaded(plugin: Optional[Plugin]) -> bool:
    """True if a plugin reference points at a loaded plugin."""
    return plugin is not None and plugin.is_loaded


class PluginManager:
    """
    Loads plugins into a server and dispatches hooks to them.
    A failing plugin is logged and left out, never fatal to the server.
    """

    def __init__(self, server):
        self.server = server
        self.plugins: Dict[str, Plugin] = {}

    def load(self, plugin: Plugin) -> bool:
        if plugin.name in self.plugins:
            logger.warning(f"Plugin {plugin.name} is already loaded")
            return True

        plugin.server = self.server
        self.plugins[plugin.name] = plugin
        try:
            plugin.init()
        except Exception as e:
            logger.error(f"Error loading plugin {plugin.name}: {e}", exc_info=True)
            self.plugins.pop(plugin.name)
            self._detach(plugin)
            plugin.server = None
            return False

        plugin.is_loaded = True
        logger.info(f"Loaded plugin {plugin.title} v{plugin.version} by {plugin.author}")
        self.call_hook("on_plugin_loaded", plugin)
        return True

    def unload(self, name: str) -> bool:
        plugin = self.plugins.get(name)
        if plugin is None:
            return False

        try:
            plugin.unload()
        except Exception as e:
            logger.error(f"Error unloading plugin {name}: {e}", exc_info=True)

        plugin.is_loaded = False
        self.plugins.pop(name)
        self._detach(plugin)
        plugin.server = None
        logger.info(f"Unloaded plugin {plugin.title}")
        self.call_hook("on_plugin_unloaded", plugin)
        return True

    def unload_all(self):
        for name in reversed(list(self.plugins.keys())):
            self.unload(name)

    def _detach(self, plugin: Plugin):
        """Drop everything the server holds on behalf of a plugin."""
        self.server.commands.remove_plugin_commands(plugin)
        self.server.scheduler.cancel_owned_by(plugin)
        self.server.permissions.unregister_owner(plugin)

    def get_plugin(self, name: str) -> Optional[Plugin]:
        return self.plugins.get(name)

    def call_hook(self, hook_name: str, *args) -> List[Any]:
        """Call hook_name on every loaded plugin that defines it."""
        results = []
        for plugin in list(self.plugins.values()):
            method = getattr(plugin, hook_name, None)
            if not callable(method):
                continue
            try:
                results.append(method(*args))
            except Exception as e:
                logger.error(f"Error in plugin {plugin.name} hook {hook_name}: {e}", exc_info=True)
        return results
