import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

from ..core import config


def _merge_settings(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively lays overrides over defaults, ignoring values whose type doesn't fit."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if key not in defaults:
            logger.debug(f"SETTINGS_MANAGER: Ignoring unknown setting '{key}'.")
            continue
        default_value = defaults[key]
        if isinstance(default_value, dict):
            if isinstance(value, dict):
                merged[key] = _merge_settings(default_value, value)
            else:
                logger.warning(f"SETTINGS_MANAGER: Setting '{key}' should be an object, got {type(value).__name__}. Using defaults.")
        elif isinstance(default_value, bool) and not isinstance(value, bool):
            logger.warning(f"SETTINGS_MANAGER: Setting '{key}' should be true/false, got {value!r}. Using default.")
        elif isinstance(default_value, str) and not (isinstance(value, str) and value):
            logger.warning(f"SETTINGS_MANAGER: Setting '{key}' should be a non-empty string, got {value!r}. Using default.")
        else:
            merged[key] = value
    return merged


def load_settings(settings_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the tool settings, layered over config.DEFAULT_SETTINGS.

    Recognised keys: php_binary, valet_binary,
                     xdebug.restart_valet (bool), xdebug.restart_timeout (seconds or null)
    """
    settings_file = settings_file if settings_file is not None else config.SETTINGS_FILE
    settings = copy.deepcopy(config.DEFAULT_SETTINGS)

    if not settings_file.is_file():
        logger.info(f"SETTINGS_MANAGER: Settings file {settings_file} not found. Using defaults.")
        return settings

    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e_json:
        logger.error(f"SETTINGS_MANAGER: Error decoding JSON from {settings_file}: {e_json}")
        return settings
    except OSError as e:
        logger.error(f"SETTINGS_MANAGER: Error reading settings from {settings_file}: {e}", exc_info=True)
        return settings

    if not isinstance(data, dict):
        logger.warning(f"SETTINGS_MANAGER: Invalid format in {settings_file}. Discarding content.")
        return settings

    settings = _merge_settings(settings, data)

    timeout = settings["xdebug"].get("restart_timeout")
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0):
        logger.warning(f"SETTINGS_MANAGER: Invalid restart_timeout {timeout!r}. Waiting without a timeout.")
        settings["xdebug"]["restart_timeout"] = None

    logger.debug(f"SETTINGS_MANAGER: Loaded settings from {settings_file}: {settings}")
    return settings
