"""
BridgeConfig — runtime configuration for the osascript bridge.

Every field has a working default for a stock DEVONthink install; each can
be overridden through an environment variable (see from_env) or a CLI flag.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

__all__ = ["BridgeConfig"]

logger = logging.getLogger(__name__)

_ENV_PREFIX = "DTPLUS_"


@dataclass
class BridgeConfig:
    """Runtime configuration for ScriptInvoker and the script builders."""
    osascript:     str   = "osascript"
    app_name:      str   = "DEVONthink"     # JXA Application() name, not a versioned alias
    app_id:        str   = "DNtp"           # AppleScript bundle identifier
    process_name:  str   = "DEVONthink"     # substring matched against running processes
    timeout:       float = 30.0             # seconds per script
    batch_timeout: float = 60.0             # seconds for the batch plain-text fetch

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BridgeConfig":
        """
        Build a config from DTPLUS_* environment variables.

        Unset or empty variables keep the default. Unparseable timeouts are
        logged and ignored.
        """
        env = os.environ if environ is None else environ
        config = cls()

        for field_name in ("osascript", "app_name", "app_id", "process_name"):
            value = env.get(_ENV_PREFIX + field_name.upper(), "").strip()
            if value:
                setattr(config, field_name, value)

        for field_name in ("timeout", "batch_timeout"):
            key = _ENV_PREFIX + field_name.upper()
            raw = env.get(key, "").strip()
            if not raw:
                continue
            try:
                value = float(raw)
            except ValueError:
                logger.warning("Ignoring %s=%r: not a number", key, raw)
                continue
            if value <= 0:
                logger.warning("Ignoring %s=%r: must be positive", key, raw)
                continue
            setattr(config, field_name, value)

        return config
