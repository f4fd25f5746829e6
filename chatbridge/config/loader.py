from __future__ import annotations

import logging
import os
from pathlib import Path
import sys
from typing import Any, NoReturn

from dotenv import load_dotenv
import yaml

from .settings import PluginConfiguration
from .validator import validate_config, ConfigValidationError


DEFAULT_CONFIG_FILE = "config.yaml"
CONFIG_ENV_VAR = "CONFIG_PATH"

# Secrets may live in the environment (or a .env file) instead of config.yaml.
ENV_FALLBACKS = {
    "bot_token": "DISCORD_BOT_TOKEN",
    "api_key": "CHATBRIDGE_API_KEY",
}


def get_config_path(path: str | None = None) -> Path:
    """
    Explicit argument first, then $CONFIG_PATH, then ./config.yaml.
    """
    return Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE)


def _abort(msg: str, *args: Any) -> NoReturn:
    logging.error(msg, *args)
    sys.exit(1)


def _read_config_file(cfg_path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _abort("Config file not found: %s (start from config-example.yaml)", cfg_path)
    except yaml.YAMLError as e:
        _abort("YAML parsing error in %s: %s", cfg_path, e)

    if data is None:
        return {}
    if not isinstance(data, dict):
        _abort("Config root in %s must be a mapping, got %s", cfg_path, type(data).__name__)
    return data


def _apply_env_fallbacks(cfg: dict[str, Any]) -> dict[str, Any]:
    load_dotenv()
    for key, env_var in ENV_FALLBACKS.items():
        if not cfg.get(key) and os.environ.get(env_var):
            cfg[key] = os.environ[env_var]
    return cfg


def get_config(path: str | None = None) -> dict[str, Any]:
    """
    Public helper for loading configuration.

    - Respects CONFIG_PATH if set.
    - Fills bot_token / api_key from the environment when absent.
    - Validates the result; exits with error code 1 on failure.
    - Returns the raw dict; see load_plugin_configuration for the typed view.
    """
    cfg_path = get_config_path(path)
    cfg = _apply_env_fallbacks(_read_config_file(cfg_path))

    try:
        validate_config(cfg, str(cfg_path))
    except ConfigValidationError:
        sys.exit(1)

    return cfg


def load_plugin_configuration(path: str | None = None) -> tuple[PluginConfiguration, dict[str, Any]]:
    """
    Load config.yaml once and return (plugin configuration, raw mapping).

    The raw mapping still carries the host-level keys (bot_token, status_message).
    """
    cfg = get_config(path)
    return PluginConfiguration.from_mapping(cfg), cfg
