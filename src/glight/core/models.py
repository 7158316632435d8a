"""
glight Models - Pure data classes with no USB dependencies.

Colors, speeds, the lighting command variants, and per-model metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import InvalidArgumentError

# Effects slower than this are rejected; the firmware misbehaves below it.
MIN_SPEED = 32
MAX_SPEED = 0xFFFF


def is_plain_int(value) -> bool:
    """True for int values; bool is rejected even though it subclasses int."""
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# Identity / metadata
# =============================================================================

@dataclass(frozen=True)
class DeviceIdentity:
    """USB vendor/product id pair of a hardware model."""
    vendor_id: int
    product_id: int

    def __post_init__(self):
        for name in ('vendor_id', 'product_id'):
            value = getattr(self, name)
            if not is_plain_int(value) or not 0 <= value <= 0xFFFF:
                raise InvalidArgumentError(name, value, "must fit in 16 bits")

    def __str__(self) -> str:
        return f"{self.vendor_id:04x}:{self.product_id:04x}"


@dataclass(frozen=True)
class ModelInfo:
    """Constant metadata describing one supported keyboard model."""
    name: str
    identity: DeviceIdentity
    sector_count: int
    default_color: 'RgbColor'


# =============================================================================
# Color / speed
# =============================================================================

@dataclass(frozen=True)
class RgbColor:
    """24-bit RGB color, one byte per channel."""
    red: int
    green: int
    blue: int

    def __post_init__(self):
        for name in ('red', 'green', 'blue'):
            value = getattr(self, name)
            if not is_plain_int(value) or not 0 <= value <= 255:
                raise InvalidArgumentError(name, value, "must be in 0..255")

    @classmethod
    def from_hex(cls, text: str) -> 'RgbColor':
        """Parse ``rrggbb`` (optionally prefixed with ``#``)."""
        raw = text.strip().lstrip('#')
        if len(raw) != 6:
            raise InvalidArgumentError("color", text, "expected 6 hex digits")
        try:
            value = int(raw, 16)
        except ValueError:
            raise InvalidArgumentError("color", text, "expected 6 hex digits") from None
        return cls.from_int(value)

    @classmethod
    def from_int(cls, value: int) -> 'RgbColor':
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def to_int(self) -> int:
        return (self.red << 16) | (self.green << 8) | self.blue

    def to_hex(self) -> str:
        """Big-endian R, G, B as 6 lowercase hex digits."""
        return f"{self.to_int():06x}"

    def to_bytes(self) -> bytes:
        return bytes((self.red, self.green, self.blue))

    def __str__(self) -> str:
        return f"#{self.to_hex()}"


@dataclass(frozen=True)
class Speed:
    """Effect speed in firmware units (unsigned 16-bit).

    The lower bound of MIN_SPEED is checked by the commands that use a
    speed, so a Speed can be built before knowing where it goes.
    """
    value: int

    def __post_init__(self):
        if not is_plain_int(self.value) or not 0 <= self.value <= MAX_SPEED:
            raise InvalidArgumentError("speed", self.value, "must fit in 16 bits")


def check_speed(speed: Speed) -> None:
    """Raise InvalidArgumentError if *speed* is below MIN_SPEED."""
    if speed.value < MIN_SPEED:
        raise InvalidArgumentError("speed", speed.value, f"{speed.value} < {MIN_SPEED}")


# =============================================================================
# Commands
# =============================================================================

@dataclass(frozen=True)
class Command:
    """Base for the lighting command variants."""


@dataclass(frozen=True)
class ColorSector(Command):
    """Static color for one sector, or for all sectors when sector is None."""
    color: RgbColor
    sector: Optional[int] = None


@dataclass(frozen=True)
class Breathe(Command):
    """Pulse a single color in and out."""
    color: RgbColor
    speed: Speed


@dataclass(frozen=True)
class Cycle(Command):
    """Cycle through the color wheel."""
    speed: Speed


def command_to_dict(cmd: Command) -> Dict[str, Any]:
    """Serialize a command to a JSON-friendly dict."""
    if isinstance(cmd, ColorSector):
        return {'type': 'color', 'color': cmd.color.to_hex(), 'sector': cmd.sector}
    if isinstance(cmd, Breathe):
        return {'type': 'breathe', 'color': cmd.color.to_hex(), 'speed': cmd.speed.value}
    if isinstance(cmd, Cycle):
        return {'type': 'cycle', 'speed': cmd.speed.value}
    raise TypeError(f"Unknown command type: {type(cmd).__name__}")


def command_from_dict(data: Dict[str, Any]) -> Command:
    """Inverse of command_to_dict().

    Raises:
        ValueError: On an unknown type or malformed fields.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a dict, got {type(data).__name__}")
    kind = data.get('type')
    try:
        if kind == 'color':
            sector = data.get('sector')
            if sector is not None and not is_plain_int(sector):
                raise ValueError(f"Malformed color command sector: {sector!r}")
            return ColorSector(RgbColor.from_hex(data['color']), sector)
        if kind == 'breathe':
            return Breathe(RgbColor.from_hex(data['color']), Speed(data['speed']))
        if kind == 'cycle':
            return Cycle(Speed(data['speed']))
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed {kind} command: {data!r}") from e
    raise ValueError(f"Unknown command type: {kind!r}")
