"""
glight - Lighting control for Logitech G-series RGB keyboards

Talks to the keyboard directly over USB (pyusb/libusb): the kernel HID
driver is detached for the duration of each command and reattached after.

Features:
- Static color for the whole keyboard or a single sector
- Breathe and color cycle hardware effects
- Last command remembered per model, re-applied with ``glight refresh``

Usage:
    # As a library
    from glight import find_all_devices, ColorSector, RgbColor
    for kbd in find_all_devices():
        with kbd:
            kbd.send_command(ColorSector(RgbColor(255, 0, 0)))

    # Command line
    glight list
    glight color ff0000
"""

from glight.__version__ import __version__

from glight.core.models import (
    MIN_SPEED,
    Breathe,
    ColorSector,
    Command,
    Cycle,
    DeviceIdentity,
    ModelInfo,
    RgbColor,
    Speed,
)
from glight.device_base import DeviceModel, KeyboardDevice
from glight.device_detector import SUPPORTED_MODELS, find_all_devices, get_model
from glight.errors import (
    DeviceClosedError,
    DeviceOpenError,
    GlightError,
    InvalidArgumentError,
    LeaseError,
    TransportError,
)

__all__ = [
    # Version
    "__version__",
    # Data model
    "MIN_SPEED",
    "Breathe",
    "ColorSector",
    "Command",
    "Cycle",
    "DeviceIdentity",
    "ModelInfo",
    "RgbColor",
    "Speed",
    # Devices
    "DeviceModel",
    "KeyboardDevice",
    "SUPPORTED_MODELS",
    "find_all_devices",
    "get_model",
    # Errors
    "DeviceClosedError",
    "DeviceOpenError",
    "GlightError",
    "InvalidArgumentError",
    "LeaseError",
    "TransportError",
]
