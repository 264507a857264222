# server_engine/commands/chat.py

import shlex
from typing import Any, Callable, Dict, List, Optional
from server_engine.core.logging import get_logger

logger = get_logger()

# handler(player_entity, command_name, args)
ChatHandler = Callable[[Any, str, List[str]], None]


class ChatCommandRegistry:
    """
    Slash commands typed in chat, owned by plugins.
    """

    def __init__(self):
        self.registered_commands: Dict[str, Dict[str, Any]] = {}

    def add_chat_command(self, name: str, plugin, handler: ChatHandler) -> bool:
        """Register /name for plugin. Returns False if another plugin owns it."""
        name = name.lower()
        existing = self.registered_commands.get(name)
        if existing and existing["plugin"] is not plugin:
            logger.warning(f"Chat command '/{name}' is already registered by {existing['plugin'].name}")
            return False

        self.registered_commands[name] = {
            "name": name,
            "plugin": plugin,
            "handler": handler,
        }
        return True

    def remove_chat_command(self, name: str) -> bool:
        return self.registered_commands.pop(name.lower(), None) is not None

    def remove_plugin_commands(self, plugin) -> int:
        names = [n for n, data in self.registered_commands.items() if data["plugin"] is plugin]
        for name in names:
            del self.registered_commands[name]
        return len(names)

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        return self.registered_commands.get(name.lower())

    @staticmethod
    def parse(text: str):
        """
        Split '/cmd arg "quoted arg"' into (cmd, args).
        Returns (None, []) when text is not a command.
        """
        if not text or not text.startswith("/"):
            return None, []

        try:
            parts = shlex.split(text[1:])
        except ValueError:
            # Unbalanced quotes, fall back to whitespace
            parts = text[1:].split()

        if not parts:
            return None, []
        return parts[0].lower(), parts[1:]

    def handle(self, player, text: str) -> bool:
        """Dispatch a chat line. Returns True if a command handled it."""
        name, args = self.parse(text)
        if name is None:
            return False

        data = self.registered_commands.get(name)
        if data is None:
            return False

        try:
            data["handler"](player, name, args)
        except Exception as e:
            logger.error(f"Chat command '/{name}' from {data['plugin'].name} failed: {e}", exc_info=True)
        return True
