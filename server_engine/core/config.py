# server_engine/core/config.py

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional
from server_engine.core.logging import get_logger

logger = get_logger()

class Config:
    """
    Server configuration management.
    Handles loading/saving settings from files.
    """

    def __init__(self, config_path: str = "server.json"):
        self.config_path = Path(config_path)
        self.data: Dict[str, Any] = {}
        # File contents as read, before defaults are applied. None if there was no usable file.
        self.raw_data: Optional[Dict[str, Any]] = None

        self.defaults = self.default_config()
        self.load()

    def default_config(self) -> Dict[str, Any]:
        """Default configuration."""
        return {
            'server': {
                'version': '1.0.0',
                'log_level': 'INFO',
                'tick_rate': 1 / 30.0,
            },
            'physics': {
                'gravity': [0.0, 0.0, -9.81],
            },
            'database': {
                'database': 'server.db',
            },
            'plugins': {
                'config_dir': 'config',
            },
        }

    def load(self):
        """Load configuration from file."""
        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    loaded_data = json.load(f)
                if not isinstance(loaded_data, dict):
                    raise ValueError("top level must be an object")

                # Merge with defaults (loaded values override defaults)
                self.raw_data = loaded_data
                self.data = self._deep_merge(copy.deepcopy(self.defaults), loaded_data)
                logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load configuration from {self.config_path}: {e}")
                self.raw_data = None
                self.data = copy.deepcopy(self.defaults)
        else:
            self.raw_data = None
            self.data = copy.deepcopy(self.defaults)
            logger.info(f"Configuration file not found, using defaults and creating {self.config_path}")
            self.save()

    def save(self):
        """Save configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
            logger.info(f"Saved configuration to {self.config_path}")
        except OSError as e:
            logger.error(f"Failed to save configuration to {self.config_path}: {e}")

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get configuration value by path.
        Example: config.get('database.database')
        """
        keys = path.split('.')
        value = self.data

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, path: str, value: Any):
        """
        Set configuration value by path.
        Example: config.set('server.log_level', 'DEBUG')
        """
        keys = path.split('.')
        data = self.data

        for key in keys[:-1]:
            if key not in data:
                data[key] = {}
            data = data[key]

        data[keys[-1]] = value

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Recursively merge override dict into base dict."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
