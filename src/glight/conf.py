"""Config persistence for glight.

Config is stored at ~/.config/glight/config.json (XDG-compliant).  It
remembers the last command sent to each keyboard model so that
``glight refresh`` can re-apply it after a replug or resume.

Layout::

    {
      "devices": {
        "G213": {"type": "breathe", "color": "ffb4aa", "speed": 1000}
      }
    }
"""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

from .core.models import Command, command_from_dict, command_to_dict

log = logging.getLogger(__name__)

# =========================================================================
# Config file location (XDG-compliant)
# =========================================================================

_XDG_CONFIG = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
CONFIG_DIR = os.path.join(_XDG_CONFIG, 'glight')
CONFIG_PATH = os.path.join(CONFIG_DIR, 'config.json')


# =========================================================================
# Low-level config persistence
# =========================================================================

def load_config() -> dict:
    """Load user config from disk. Returns empty dict on missing/corrupt file."""
    try:
        with open(CONFIG_PATH, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: dict):
    """Save user config to disk."""
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(CONFIG_PATH, 'w') as f:
        json.dump(config, f, indent=2)


# =========================================================================
# Last command per model
# =========================================================================

def _devices(config: dict) -> dict:
    """The per-model section of *config*; a malformed one is replaced."""
    devices = config.get('devices')
    if not isinstance(devices, dict):
        if devices is not None:
            log.warning("Ignoring malformed 'devices' section in %s", CONFIG_PATH)
        devices = config['devices'] = {}
    return devices


def save_last_command(model_name: str, command: Command):
    """Remember *command* as the current lighting of *model_name*."""
    config = load_config()
    _devices(config)[model_name] = command_to_dict(command)
    save_config(config)


def get_last_command(model_name: str) -> Optional[Command]:
    """Saved command for *model_name*, or None if unset or unreadable."""
    entry = _devices(load_config()).get(model_name)
    if entry is None:
        return None
    try:
        return command_from_dict(entry)
    except ValueError as e:
        log.warning("Ignoring saved command for %s: %s", model_name, e)
        return None


def clear_last_command(model_name: str):
    """Forget the saved command for *model_name*."""
    config = load_config()
    if _devices(config).pop(model_name, None) is not None:
        save_config(config)
