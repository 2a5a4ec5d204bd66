# src/a11y_shell/core/managers/config_manager.py
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from a11y_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merges `overrides` into a copy of `base`."""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_settings_file(path: Union[str, Path]) -> Optional[Dict[str, Any]]:
    """Reads a user JSON settings file; None (after logging) when it is unusable."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            overrides = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load settings file %s: %s", path, e)
        return None

    if not isinstance(overrides, dict):
        logger.error("Settings file %s must contain a JSON object.", path)
        return None
    return overrides


def get_nested(config: Dict[str, Any], key_path: str, default: Optional[Any] = None) -> Any:
    """
    Safely retrieves a nested value from a settings dictionary.
    e.g., 'rules.contrast_threshold'.
    """
    value = config
    for key in key_path.split('.'):
        if isinstance(value, dict):
            value = value.get(key)
        else:
            return default
    return value if value is not None else default


def set_nested(config: Dict[str, Any], key_path: str, value: Any) -> bool:
    """
    Sets a nested value in a settings dictionary, cast to the type of the value
    it replaces when possible. e.g., 'engine.workers', '8'
    """
    keys = key_path.split('.')
    d = config
    for key in keys[:-1]:
        d = d.setdefault(key, {})
        if not isinstance(d, dict):
            logger.error("Cannot set value: '%s' is not a dictionary.", key)
            return False

    original_value = d.get(keys[-1])
    if isinstance(original_value, bool) and isinstance(value, str):
        value = value.strip().lower() in ("1", "true", "yes", "on")
    elif original_value is not None:
        try:
            value = type(original_value)(value)
        except (ValueError, TypeError):
            logger.warning(
                "Could not cast new value for '%s' to type %s. Storing as given.",
                key_path, type(original_value).__name__
            )

    d[keys[-1]] = value
    logger.debug("Configuration updated: %s = %s", key_path, value)
    return True


class ConfigManager:
    """
    A singleton class to manage the auditor's configuration.
    Defaults come from the packaged settings.json. Each run works on its own
    snapshot, optionally with a user file layered on top; the loaded defaults
    are only replaced by reset().
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._config: Dict[str, Any] = {}
        self.reset()

    def snapshot(self, path: Optional[Union[str, Path]] = None) -> Optional[Dict[str, Any]]:
        """
        Returns a deep copy of the configuration, optionally with a user settings
        file layered over it. The singleton itself is left untouched.

        Returns:
            The merged copy, or None if `path` could not be loaded.
        """
        settings = copy.deepcopy(self._config)
        if path is None:
            return settings

        overrides = _read_settings_file(path)
        if overrides is None:
            return None
        logger.debug("Settings merged from %s", path)
        return _deep_merge(settings, overrides)

    def reset(self):
        """Resets the in-memory configuration from the packaged settings.json file."""
        config_path = PathUtils.get_settings_file()
        try:
            if not config_path.exists():
                logger.warning("settings.json not found at %s. Using empty config.", config_path)
                self._config = {}
                return
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = json.load(f)
            logger.debug("Configuration has been (re)loaded from settings.json.")
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load settings.json: %s", e, exc_info=True)
            self._config = {}


# The global singleton instance that the entire application will use.
config_manager = ConfigManager()
