#!/usr/bin/env python3
"""
Raw USB layer shared by all keyboard models.

Three pieces, all on top of pyusb (libusb backend):

  • ``find_devices``: scan the bus for a VID/PID pair and open each match.
    A device that cannot be opened is logged and skipped.
  • ``DetachedInterface``: context manager that detaches the kernel driver
    from one interface and claims it; on exit the interface is released and
    the driver reattached, whatever happened inside the ``with`` block.
  • ``send_payload``: one control transfer carrying a command, then one
    interrupt read for the firmware's acknowledgment.

Usage::

    channel = ControlChannel(request_type=0x21, request=0x09, value=0x0211,
                             interface=1, ack_endpoint=0x82, ack_size=20)
    for dev in find_devices(DeviceIdentity(0x046D, 0xC336)):
        with DetachedInterface(dev, channel.interface):
            send_payload(dev, payload, channel)

Requires: ``pip install pyusb`` + ``apt install libusb-1.0-0``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

import usb.core
import usb.util

from .core.models import DeviceIdentity
from .errors import DeviceOpenError, LeaseError, TransportError

log = logging.getLogger(__name__)

# libusb treats a zero timeout as "wait forever"
NO_TIMEOUT = 0

# Exceptions that mean "this device's descriptor can't be read"
_DESCRIPTOR_ERRORS = (usb.core.USBError, OSError, ValueError, AttributeError)


# =========================================================================
# Device Matcher
# =========================================================================

def _matches(device, identity: DeviceIdentity) -> bool:
    """Whether *device*'s descriptor carries *identity*'s VID/PID."""
    try:
        vid = device.idVendor
        pid = device.idProduct
    except _DESCRIPTOR_ERRORS as e:
        log.debug("Skipping device with unreadable descriptor: %s", e)
        return False
    return vid == identity.vendor_id and pid == identity.product_id


def open_device(device) -> None:
    """Force libusb to open *device*.

    pyusb opens handles lazily; reading the active configuration is the
    first call that needs one, so permission and "no such device" errors
    surface here instead of in the middle of a transfer.

    Raises:
        DeviceOpenError: If the handle could not be opened.
    """
    try:
        device.get_active_configuration()
    except (usb.core.USBError, OSError) as e:
        raise DeviceOpenError(
            f"Cannot open USB device {describe_device(device)}: {e}"
        ) from e


def find_devices(identity: DeviceIdentity,
                 devices: Optional[Iterable] = None) -> List:
    """Return every opened device on the bus matching *identity*.

    Args:
        identity: VID/PID pair to look for.
        devices: Pre-enumerated devices.  Defaults to the whole bus
            (``usb.core.find(find_all=True)``).

    Returns:
        Opened ``usb.core.Device`` objects, in enumeration order.  Devices
        that failed to open are left out.
    """
    if devices is None:
        devices = usb.core.find(find_all=True)

    found = []
    for device in devices:
        if not _matches(device, identity):
            continue
        try:
            open_device(device)
        except DeviceOpenError as e:
            log.warning("%s", e)
            continue
        log.info("Opened USB device %s", describe_device(device))
        found.append(device)

    log.debug("USB scan for %s found %d device(s)", identity, len(found))
    return found


def describe_device(device) -> str:
    """Short device label for logs, e.g. ``bus 001 address 004 (046d:c336)``."""
    try:
        return (f"bus {device.bus:03d} address {device.address:03d} "
                f"({device.idVendor:04x}:{device.idProduct:04x})")
    except (TypeError, ValueError, AttributeError):
        return repr(device)


# =========================================================================
# Scoped Interface Lease
# =========================================================================

class DetachedInterface:
    """Exclusive access to one interface for the duration of a ``with`` block.

    Entering detaches the kernel driver (if one is bound) and claims the
    interface.  Exiting always releases the interface and reattaches the
    driver if it was bound on entry.  Release problems are logged, never
    raised, so they cannot hide the outcome of the block.

    A lease object can be held once at a time: acquiring it again before
    release() raises LeaseError.  This does not stop two separate lease
    objects on the same device; callers sharing a device across threads
    must serialise themselves.
    """

    def __init__(self, device, interface: int):
        self.device = device
        self.interface = interface
        self._reattach = False
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> None:
        """Detach the kernel driver and claim the interface.

        Raises:
            LeaseError: If this lease object is already held, or if
                detaching or claiming failed.  Nothing is left detached or
                claimed in that case.
        """
        if self._held:
            raise LeaseError("acquire", RuntimeError("lease already held"))

        try:
            if self.device.is_kernel_driver_active(self.interface):
                self.device.detach_kernel_driver(self.interface)
                self._reattach = True
                log.debug("Detached kernel driver from interface %d", self.interface)
        except usb.core.USBError as e:
            raise LeaseError("detach_kernel_driver", e) from e

        try:
            usb.util.claim_interface(self.device, self.interface)
        except usb.core.USBError as e:
            self._attach_driver()
            raise LeaseError("claim_interface", e) from e

        self._held = True

    def release(self) -> None:
        """Release the interface and reattach the kernel driver (best-effort)."""
        if not self._held:
            return
        self._held = False
        try:
            usb.util.release_interface(self.device, self.interface)
        except usb.core.USBError as e:
            log.warning("Failed to release interface %d: %s", self.interface, e)
        self._attach_driver()

    def _attach_driver(self) -> None:
        if not self._reattach:
            return
        self._reattach = False
        try:
            self.device.attach_kernel_driver(self.interface)
            log.debug("Reattached kernel driver to interface %d", self.interface)
        except usb.core.USBError as e:
            log.warning("Failed to reattach kernel driver to interface %d: %s",
                        self.interface, e)

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, *exc):
        self.release()
        return False


# =========================================================================
# Transfer Executor
# =========================================================================

@dataclass(frozen=True)
class ControlChannel:
    """Per-model wire constants for the command write and the ack read.

    Attributes:
        request_type: bmRequestType of the control transfer.
        request: bRequest of the control transfer.
        value: wValue of the control transfer.
        interface: wIndex of the control transfer; also the leased interface.
        ack_endpoint: Interrupt IN endpoint the acknowledgment arrives on.
        ack_size: Acknowledgment length in bytes.
        write_timeout_ms: Control write timeout (0 = unbounded).
        ack_timeout_ms: Interrupt read timeout.
    """
    request_type: int
    request: int
    value: int
    interface: int
    ack_endpoint: int
    ack_size: int
    write_timeout_ms: int = NO_TIMEOUT
    ack_timeout_ms: int = 60_000


def send_payload(device, payload: bytes, channel: ControlChannel) -> bytes:
    """Write *payload* as a control transfer, then read the acknowledgment.

    The interface named by *channel* must already be claimed (see
    DetachedInterface).  No retries: the first failure is raised.

    Returns:
        The acknowledgment bytes.

    Raises:
        TransportError: ``phase="write_control"`` or ``"read_interrupt"``;
            ``timed_out`` is set when the acknowledgment never arrived.
    """
    log.debug("Control write %02x/%02x value=%04x index=%d: %s",
              channel.request_type, channel.request, channel.value,
              channel.interface, payload.hex())
    try:
        device.ctrl_transfer(
            channel.request_type,
            channel.request,
            channel.value,
            channel.interface,
            payload,
            timeout=channel.write_timeout_ms,
        )
    except usb.core.USBError as e:
        raise TransportError("write_control", e) from e

    try:
        ack = device.read(channel.ack_endpoint, channel.ack_size,
                          timeout=channel.ack_timeout_ms)
    except usb.core.USBTimeoutError as e:
        raise TransportError("read_interrupt", e, timed_out=True) from e
    except usb.core.USBError as e:
        raise TransportError("read_interrupt", e) from e

    ack = bytes(ack)
    log.debug("Ack from endpoint 0x%02x: %s", channel.ack_endpoint, ack.hex())
    return ack
