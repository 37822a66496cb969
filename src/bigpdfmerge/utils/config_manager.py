"""
BigPdfMerge - Configuration Manager

This module provides centralized JSON-based configuration management.
It handles loading, saving and upgrading the settings file.
"""

import copy
import json
import os
from typing import Any, Final

from bigpdfmerge.config import CONFIG_FILE_PATH, EXPORT_NAME_PREFIX
from bigpdfmerge.constants import DEFAULT_PREVIEW_WIDTH, PDFTOPPM_TIMEOUT_SECONDS
from bigpdfmerge.utils.logger import logger

# Default configuration values
DEFAULT_CONFIG: Final[dict[str, Any]] = {
    "version": 1,
    "export": {
        "name_prefix": EXPORT_NAME_PREFIX,
    },
    "preview": {
        "width": DEFAULT_PREVIEW_WIDTH,
        "timeout_seconds": PDFTOPPM_TIMEOUT_SECONDS,
    },
}


class ConfigManager:
    """Manages application configuration in JSON format.

    Settings are addressed with dot-separated paths such as
    ``"preview.width"``. Missing keys in an older file are filled in
    from ``DEFAULT_CONFIG`` on load.
    """

    def __init__(self, config_path: str | None = None) -> None:
        """Initialize the configuration manager.

        Args:
            config_path: Optional path to the configuration file.
                        Defaults to CONFIG_FILE_PATH.
        """
        self.config_path = config_path or CONFIG_FILE_PATH
        self._config: dict[str, Any] = {}

        config_dir = os.path.dirname(self.config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file or create default."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path, encoding="utf-8") as f:
                    self._config = json.load(f)
                logger.info("Configuration loaded from JSON")
                self._upgrade_config()
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading config: {e}")
                self._config = self._get_default_config()
        else:
            self._config = self._get_default_config()
            self.save()

    def _get_default_config(self) -> dict[str, Any]:
        return copy.deepcopy(DEFAULT_CONFIG)

    def _upgrade_config(self) -> None:
        """Add keys introduced by newer versions of the defaults."""
        self._merge_defaults(self._config, DEFAULT_CONFIG)
        current_version = self._config.get("version", 0)
        if current_version < DEFAULT_CONFIG["version"]:
            self._config["version"] = DEFAULT_CONFIG["version"]
            logger.info(f"Configuration upgraded to version {DEFAULT_CONFIG['version']}")

    def _merge_defaults(self, config: dict, defaults: dict) -> None:
        """Merge default values into config for missing keys.

        Args:
            config: Current configuration dictionary.
            defaults: Default configuration dictionary.
        """
        for key, value in defaults.items():
            if key not in config:
                config[key] = copy.deepcopy(value)
            elif isinstance(value, dict) and isinstance(config.get(key), dict):
                self._merge_defaults(config[key], value)

    def save(self) -> bool:
        """Save configuration to file.

        Returns:
            True if save was successful, False otherwise.
        """
        try:
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)
            logger.debug("Configuration saved to JSON")
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated path.

        Args:
            key_path: Dot-separated path to the config value (e.g., "preview.width")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value: Any = self._config
        for key in key_path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, key_path: str, value: Any, save_immediately: bool = True) -> None:
        """Set a configuration value by dot-separated path.

        Args:
            key_path: Dot-separated path to the config value
            value: Value to set
            save_immediately: Whether to save to file immediately
        """
        keys = key_path.split(".")
        config = self._config

        for key in keys[:-1]:
            if not isinstance(config.get(key), dict):
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

        if save_immediately:
            self.save()


# Singleton instance for global access
_config_manager: ConfigManager | None = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance.

    Returns:
        The singleton ConfigManager instance
    """
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
