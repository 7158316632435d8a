"""
Base classes for keyboard models and opened keyboards.

DeviceModel is the per-model capability interface (discovery + constant
metadata).  KeyboardDevice is an opened keyboard that accepts commands; its
send_command() is a template method:

    encode → lease interface → control write → interrupt read → release

Subclasses supply the encoder and the wire constants.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

import usb.util

from .core.models import Command, ModelInfo, RgbColor
from .errors import DeviceClosedError
from .usb_device import ControlChannel, DetachedInterface, describe_device, send_payload

log = logging.getLogger(__name__)


class KeyboardDevice(ABC):
    """An opened keyboard, exclusively owned by the caller.

    After close() the handle is gone and every send raises
    DeviceClosedError.
    """

    def __init__(self, model: 'DeviceModel', handle):
        self.model = model
        self._handle = handle

    @property
    @abstractmethod
    def channel(self) -> ControlChannel:
        """Wire constants for this model's command channel."""

    @abstractmethod
    def encode(self, command: Command) -> bytes:
        """Validate *command* and render it to the firmware's byte layout.

        Raises:
            InvalidArgumentError: If a parameter is out of range.
        """

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def send_command(self, command: Command) -> bytes:
        """Send one command and wait for the firmware's acknowledgment.

        Validation happens before the interface is touched, so an invalid
        argument never detaches the kernel driver.

        Returns:
            The acknowledgment bytes.

        Raises:
            InvalidArgumentError, DeviceClosedError, LeaseError, TransportError
        """
        if self._handle is None:
            raise DeviceClosedError(f"{self.model.get_name()} device is closed")

        payload = self.encode(command)
        channel = self.channel
        with DetachedInterface(self._handle, channel.interface):
            ack = send_payload(self._handle, payload, channel)
        log.info("Sent %s to %s", command, self.get_debug_info())
        return ack

    def get_debug_info(self) -> str:
        if self._handle is None:
            return f"{self.model.get_name()} (closed)"
        return f"{self.model.get_name()} {describe_device(self._handle)}"

    def close(self) -> None:
        """Release the USB handle.  Safe to call twice."""
        if self._handle is not None:
            try:
                usb.util.dispose_resources(self._handle)
            except Exception as e:
                log.debug("dispose_resources failed: %s", e)
            self._handle = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_debug_info()!r})"


class DeviceModel(ABC):
    """One supported hardware variant: its constants and how to find it."""

    @property
    @abstractmethod
    def info(self) -> ModelInfo:
        """Constant metadata for this model."""

    @abstractmethod
    def find(self, devices: Optional[Iterable] = None) -> List[KeyboardDevice]:
        """Open every connected keyboard of this model.

        Args:
            devices: Pre-enumerated USB devices; defaults to the whole bus.
        """

    def get_sectors(self) -> int:
        return self.info.sector_count

    def get_default_color(self) -> RgbColor:
        return self.info.default_color

    def get_name(self) -> str:
        return self.info.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
