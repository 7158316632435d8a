#!/usr/bin/env python3
"""
Logitech G213 Prodigy keyboard: VID 0x046D, PID 0xC336.

Five lighting sectors across the keyboard.  Commands are 20-byte frames
sent as a HID SET_REPORT control transfer (output report 0x11) to
interface 1; the firmware answers each one with a 20-byte report on
interrupt endpoint 0x82.

Frame layouts (hex, multi-byte fields big-endian):

    color    11 ff 0c 3a SS 01 RR GG BB 02 00 00 00 00 00 00 00 00 00 00
    breathe  11 ff 0c 3a 00 02 RR GG BB TT TT 00 64 00 00 00 00 00 00 00
    cycle    11 ff 0c 3a 00 03 ff ff ff 00 00 TT TT 64 00 00 00 00 00 00

SS = sector + 1 (0 = all sectors), TT TT = speed.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .core.models import (
    Breathe,
    ColorSector,
    Command,
    Cycle,
    DeviceIdentity,
    ModelInfo,
    RgbColor,
    Speed,
    check_speed,
    is_plain_int,
)
from .device_base import DeviceModel, KeyboardDevice
from .errors import InvalidArgumentError
from .usb_device import ControlChannel, find_devices

log = logging.getLogger(__name__)

# =========================================================================
# Constants
# =========================================================================

G213_VID = 0x046D  # Logitech
G213_PID = 0xC336

G213_SECTORS = 5

# Renders as white on the G213's LEDs; plain ffffff comes out blue-ish.
G213_DEFAULT_COLOR = RgbColor(0xFF, 0xB4, 0xAA)

# Control transfer: class request SET_REPORT, output report 0x11
REQUEST_TYPE = 0x21
REQUEST = 0x09
VALUE = 0x0211
INTERFACE = 0x0001

# Acknowledgment read
ENDPOINT_ADDRESS = 0x82
ACK_SIZE = 20
ACK_TIMEOUT_MS = 60_000

FRAME_SIZE = 20
FRAME_HEADER = bytes([0x11, 0xFF, 0x0C, 0x3A])

MODE_STATIC = 0x01
MODE_BREATHE = 0x02
MODE_CYCLE = 0x03

# Brightness byte of the breathe/cycle frames (0x64 = 100%)
EFFECT_BRIGHTNESS = 0x64

G213_CHANNEL = ControlChannel(
    request_type=REQUEST_TYPE,
    request=REQUEST,
    value=VALUE,
    interface=INTERFACE,
    ack_endpoint=ENDPOINT_ADDRESS,
    ack_size=ACK_SIZE,
    ack_timeout_ms=ACK_TIMEOUT_MS,
)

G213_INFO = ModelInfo(
    name="G213",
    identity=DeviceIdentity(G213_VID, G213_PID),
    sector_count=G213_SECTORS,
    default_color=G213_DEFAULT_COLOR,
)


# =========================================================================
# Packet builder
# =========================================================================

class G213PacketBuilder:
    """Builds 20-byte G213 command frames.

    Every build_* method validates its arguments first and raises
    InvalidArgumentError on a bad value; past that point encoding cannot
    fail and always yields FRAME_SIZE bytes.
    """

    @staticmethod
    def _frame(body: bytes) -> bytes:
        """Header + *body*, zero-padded to FRAME_SIZE."""
        frame = FRAME_HEADER + body
        return frame + b'\x00' * (FRAME_SIZE - len(frame))

    @staticmethod
    def sector_byte(sector: Optional[int], sector_count: int = G213_SECTORS) -> int:
        """0 for all sectors, else sector + 1."""
        if sector is None:
            return 0
        if not is_plain_int(sector):
            raise InvalidArgumentError("sector", sector, "must be an int")
        if sector < 0:
            raise InvalidArgumentError("sector", sector, f"{sector} < 0")
        if sector > sector_count - 1:
            raise InvalidArgumentError("sector", sector, f"{sector} > {sector_count - 1}")
        return sector + 1

    @staticmethod
    def build_color_packet(color: RgbColor, sector: Optional[int] = None,
                           sector_count: int = G213_SECTORS) -> bytes:
        """Static color for one sector (or all when *sector* is None)."""
        selector = G213PacketBuilder.sector_byte(sector, sector_count)
        return G213PacketBuilder._frame(
            bytes([selector, MODE_STATIC]) + color.to_bytes() + b'\x02'
        )

    @staticmethod
    def build_breathe_packet(color: RgbColor, speed: Speed) -> bytes:
        check_speed(speed)
        return G213PacketBuilder._frame(
            bytes([0x00, MODE_BREATHE])
            + color.to_bytes()
            + speed.value.to_bytes(2, 'big')
            + bytes([0x00, EFFECT_BRIGHTNESS])
        )

    @staticmethod
    def build_cycle_packet(speed: Speed) -> bytes:
        check_speed(speed)
        # The firmware ignores the color field in cycle mode.
        return G213PacketBuilder._frame(
            bytes([0x00, MODE_CYCLE, 0xFF, 0xFF, 0xFF, 0x00, 0x00])
            + speed.value.to_bytes(2, 'big')
            + bytes([EFFECT_BRIGHTNESS])
        )

    @staticmethod
    def encode(command: Command, sector_count: int = G213_SECTORS) -> bytes:
        """Dispatch *command* to the matching build_* method."""
        if isinstance(command, ColorSector):
            return G213PacketBuilder.build_color_packet(
                command.color, command.sector, sector_count)
        if isinstance(command, Breathe):
            return G213PacketBuilder.build_breathe_packet(command.color, command.speed)
        if isinstance(command, Cycle):
            return G213PacketBuilder.build_cycle_packet(command.speed)
        raise TypeError(f"G213 does not support {type(command).__name__}")


# =========================================================================
# Model / device
# =========================================================================

class G213Device(KeyboardDevice):
    """An opened G213."""

    @property
    def channel(self) -> ControlChannel:
        return G213_CHANNEL

    def encode(self, command: Command) -> bytes:
        return G213PacketBuilder.encode(command, self.model.get_sectors())


class G213Model(DeviceModel):
    """Logitech G213 Prodigy."""

    @property
    def info(self) -> ModelInfo:
        return G213_INFO

    def find(self, devices: Optional[Iterable] = None) -> List[KeyboardDevice]:
        return [G213Device(self, handle)
                for handle in find_devices(G213_INFO.identity, devices)]
