"""
YAML configuration validator for config.yaml.

Validates structure, required fields, and common misconfigurations.
"""

from __future__ import annotations

import logging
from numbers import Real
from typing import Any

from .settings import VARIANTS


logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when config validation fails."""
    pass


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def validate_config(cfg: dict[str, Any], config_path: str = "config.yaml") -> None:
    """
    Validate config.yaml structure and content.

    Every problem is collected first so the operator sees all of them at once.
    Warnings are logged but never fail validation.

    Args:
        cfg: The loaded config dictionary (after environment fallbacks)
        config_path: Path to config file (for error messages)

    Raises:
        ConfigValidationError: If validation fails
    """
    errors = []
    warnings = []

    # ── Check root structure ────────────────────────────────────────────────
    if not isinstance(cfg, dict):
        errors.append(f"Config root must be a mapping, got {type(cfg).__name__}")
        cfg = {}

    # ── Check required keys ─────────────────────────────────────────────────
    for key in ("bot_token", "api_key"):
        value = cfg.get(key)
        if not value:
            errors.append(f"Missing required key: '{key}'")
        elif not isinstance(value, str):
            errors.append(f"'{key}' must be a string, got {type(value).__name__}")

    # ── Variant and addresses ───────────────────────────────────────────────
    variant = cfg.get("variant")
    if variant is not None and variant not in VARIANTS:
        errors.append(
            f"Unknown variant '{variant}'. Valid variants: {', '.join(sorted(VARIANTS))}"
        )

    for key in ("api_address", "catalog_url"):
        if cfg.get(key) is None:
            continue
        url = cfg[key]
        if not isinstance(url, str):
            errors.append(f"'{key}' must be a string, got {type(url).__name__}")
        elif not url.startswith(("http://", "https://")):
            errors.append(f"'{key}' must be an http(s) URL, got '{url}'")

    # ── Command surface ─────────────────────────────────────────────────────
    trigger_word = cfg.get("trigger_word")
    if trigger_word is not None:
        if not isinstance(trigger_word, str) or not trigger_word:
            errors.append("'trigger_word' must be a non-empty string")
        elif any(ch.isspace() for ch in trigger_word):
            errors.append(f"'trigger_word' must not contain whitespace, got '{trigger_word}'")

    for key in ("model", "error_message", "pending_message", "system_prompt", "status_message"):
        value = cfg.get(key)
        if value is not None and not isinstance(value, str):
            errors.append(f"'{key}' must be a string, got {type(value).__name__}")

    if "picture_mode" in cfg and not isinstance(cfg["picture_mode"], bool):
        errors.append(
            f"'picture_mode' must be boolean, got {type(cfg['picture_mode']).__name__}"
        )

    # ── Sampling parameters ─────────────────────────────────────────────────
    ranges = {
        "temperature": (0, 2),
        "top_p": (0, 1),
        "frequency_penalty": (-2, 2),
        "presence_penalty": (-2, 2),
    }
    for key, (low, high) in ranges.items():
        if cfg.get(key) is None:
            continue
        value = cfg[key]
        if not _is_number(value):
            errors.append(f"'{key}' must be a number, got {type(value).__name__}")
        elif not low <= value <= high:
            warnings.append(f"'{key}' is {value}, outside the usual range [{low}, {high}]")

    if cfg.get("max_tokens") is not None:
        max_tokens = cfg["max_tokens"]
        if not isinstance(max_tokens, int) or isinstance(max_tokens, bool) or max_tokens <= 0:
            errors.append(f"'max_tokens' must be a positive integer, got {max_tokens!r}")

    if cfg.get("request_timeout") is not None:
        timeout = cfg["request_timeout"]
        if not _is_number(timeout) or timeout <= 0:
            errors.append(f"'request_timeout' must be a positive number, got {timeout!r}")

    # ── Stop sequences ──────────────────────────────────────────────────────
    if cfg.get("stop") is not None:
        stop = cfg["stop"]
        if not isinstance(stop, list):
            errors.append(
                f"'stop' must be a list, got {type(stop).__name__}. "
                f"Use: stop:\n  - \"###\""
            )
        else:
            for i, seq in enumerate(stop):
                if not isinstance(seq, str):
                    errors.append(f"'stop[{i}]' must be a string, got {type(seq).__name__}")
            if len(stop) > 4:
                warnings.append(f"'stop' has {len(stop)} entries; most providers accept at most 4")

    # ── Outbound headers ────────────────────────────────────────────────────
    if cfg.get("default_headers") is not None:
        headers = cfg["default_headers"]
        if not isinstance(headers, dict):
            errors.append(
                f"'default_headers' must be a mapping, got {type(headers).__name__}"
            )
        else:
            for name, value in headers.items():
                if not isinstance(name, str) or not isinstance(value, str):
                    errors.append(f"'default_headers.{name}' must map a string to a string")

    # ── Log warnings ────────────────────────────────────────────────────────
    for warning in warnings:
        logger.warning("Config warning: %s", warning)

    # ── Log errors and raise if any ─────────────────────────────────────────
    if errors:
        logger.error("=" * 70)
        logger.error("CONFIG VALIDATION FAILED (%s)", config_path)
        logger.error("=" * 70)
        for i, error in enumerate(errors, 1):
            logger.error("[%d] %s", i, error)
        logger.error("=" * 70)
        logger.error("Please fix the errors above and restart the bot.")
        logger.error("=" * 70)
        raise ConfigValidationError(f"Config validation failed with {len(errors)} error(s)")
