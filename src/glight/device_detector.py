#!/usr/bin/env python3
"""
Keyboard model registry and bus-wide detection.

Supported models:
- Logitech G213 Prodigy: VID=0x046D, PID=0xC336  (5 sectors)

Each model owns its own protocol module (device_g213.py, ...); this module
only lists them and asks each one to find its keyboards.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import usb.core

from .device_base import DeviceModel, KeyboardDevice
from .device_g213 import G213Model

log = logging.getLogger(__name__)

SUPPORTED_MODELS: Tuple[DeviceModel, ...] = (
    G213Model(),
)


def get_model(name: str) -> DeviceModel:
    """Look up a supported model by name (case-insensitive).

    Raises:
        KeyError: If no model has that name.
    """
    for model in SUPPORTED_MODELS:
        if model.get_name().lower() == name.strip().lower():
            return model
    known = ", ".join(m.get_name() for m in SUPPORTED_MODELS)
    raise KeyError(f"Unknown model {name!r} (supported: {known})")


def find_all_devices(devices: Optional[Iterable] = None,
                     models: Optional[Iterable[DeviceModel]] = None) -> List[KeyboardDevice]:
    """Open every connected keyboard of every supported model.

    The bus is enumerated once and the same device list is offered to each
    model.

    Args:
        devices: Pre-enumerated USB devices; defaults to the whole bus.
        models: Models to look for; defaults to SUPPORTED_MODELS.
    """
    if devices is None:
        log.debug("Scanning USB bus...")
        devices = usb.core.find(find_all=True)
    devices = list(devices)

    found: List[KeyboardDevice] = []
    for model in (SUPPORTED_MODELS if models is None else models):
        model_devices = model.find(devices)
        log.debug("%s: %d device(s)", model.get_name(), len(model_devices))
        found.extend(model_devices)
    return found
