"""
Runtime configuration for gateway policies.

Values come from environment variables, falling back to a developer
override file at ~/.gateway_policies/dev.json, falling back to defaults:

    GATEWAY_POLICIES_INTERCEPTOR_TIMEOUT  default interceptor timeout (seconds)
    GATEWAY_POLICIES_VERBOSE              debug logging for the addon
    GATEWAY_POLICIES_FILE                 default policy file for the addon
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEV_CONFIG_PATH = Path("~/.gateway_policies/dev.json").expanduser()

DEFAULT_INTERCEPTOR_TIMEOUT = 30.0


def _load_dev_config(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Ignoring unreadable dev config {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring dev config {path}: expected a JSON object")
        return {}
    return data


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _parse_timeout(value: Any, default: float) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid interceptor timeout {value!r}, using {default}")
        return default
    if timeout <= 0:
        logger.warning(f"Interceptor timeout must be positive, using {default}")
        return default
    return timeout


class Config:
    """Resolved configuration values."""

    def __init__(
        self,
        environ: dict[str, str] | None = None,
        dev_config_path: Path | None = None,
    ):
        env = os.environ if environ is None else environ
        dev = _load_dev_config(dev_config_path or DEV_CONFIG_PATH)

        self.INTERCEPTOR_TIMEOUT: float = _parse_timeout(
            env.get(
                "GATEWAY_POLICIES_INTERCEPTOR_TIMEOUT",
                dev.get("interceptor_timeout", DEFAULT_INTERCEPTOR_TIMEOUT),
            ),
            DEFAULT_INTERCEPTOR_TIMEOUT,
        )
        self.VERBOSE: bool = _parse_bool(
            env.get("GATEWAY_POLICIES_VERBOSE", dev.get("verbose", False))
        )
        self.POLICIES_FILE: str = str(
            env.get("GATEWAY_POLICIES_FILE", dev.get("policies_file", ""))
        )


config = Config()
