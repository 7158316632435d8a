"""
glight Core - data model shared by every device module.

Models: RgbColor, Speed, the Command variants, DeviceIdentity, ModelInfo.
"""

from .models import (
    MIN_SPEED,
    Breathe,
    ColorSector,
    Command,
    Cycle,
    DeviceIdentity,
    ModelInfo,
    RgbColor,
    Speed,
    check_speed,
    command_from_dict,
    command_to_dict,
)

__all__ = [
    'MIN_SPEED',
    'Breathe',
    'ColorSector',
    'Command',
    'Cycle',
    'DeviceIdentity',
    'ModelInfo',
    'RgbColor',
    'Speed',
    'check_speed',
    'command_from_dict',
    'command_to_dict',
]
