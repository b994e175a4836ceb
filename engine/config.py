"""
User configuration file support.

Reads/writes ``~/.speedcheck/config.json``.  Only the command-line front end
consults it; the engine itself takes plain constructor arguments.

Supported keys::

    ping_url = "https://..."          # latency probe resource
    download_url = "https://..."      # large download resource
    network_info_url = "https://..."  # IP / ISP lookup endpoint
    request_timeout = 10.0            # seconds
    network_info = true               # run the IP / ISP lookup
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from .constants import DEFAULT_REQUEST_TIMEOUT, DOWNLOAD_URL, NETWORK_INFO_URL, PING_URL

logger = logging.getLogger(__name__)

_CONFIG_DIR = os.path.join(Path.home(), ".speedcheck")
_CONFIG_FILE = "config.json"


def _config_path() -> str:
    return os.path.join(_CONFIG_DIR, _CONFIG_FILE)


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULTS: Dict[str, Any] = {
    "ping_url": PING_URL,
    "download_url": DOWNLOAD_URL,
    "network_info_url": NETWORK_INFO_URL,
    "request_timeout": DEFAULT_REQUEST_TIMEOUT,
    "network_info": True,
}


# ---------------------------------------------------------------------------
# Read / Write
# ---------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """Load config from disk, returning defaults for missing keys."""
    path = _config_path()
    config = dict(DEFAULTS)

    if not os.path.isfile(path):
        return config

    try:
        with open(path, encoding="utf-8") as fh:
            user = json.load(fh)
        if isinstance(user, dict):
            config.update({k: v for k, v in user.items() if k in DEFAULTS})
    except (json.JSONDecodeError, IOError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)

    return config


def save_config(config: Dict[str, Any]) -> str:
    """Write *config* to disk.  Returns the file path."""
    path = _config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)

    with open(path, "w", encoding="utf-8") as fh:
        json.dump(config, fh, indent=2, ensure_ascii=False)

    return path


def coerce_value(key: str, raw: str) -> Any:
    """Convert a command-line string to the type of ``DEFAULTS[key]``."""
    if key not in DEFAULTS:
        raise KeyError(f"Unknown config key: {key}")
    default = DEFAULTS[key]
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"{key} expects true/false, got {raw!r}")
    if isinstance(default, float):
        return float(raw)
    return raw


def get_config_value(key: str) -> Any:
    """Get a single config value."""
    return load_config().get(key, DEFAULTS.get(key))


def set_config_value(key: str, value: Any) -> str:
    """Set a single config value and persist.  Returns file path."""
    config = load_config()
    config[key] = value
    return save_config(config)


def config_path() -> str:
    """Return the config file path (for display purposes)."""
    return _config_path()
