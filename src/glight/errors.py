"""
Exceptions raised by glight.

Every failure that reaches the caller is a ``GlightError`` subclass.  The
pyusb exception that caused it (if any) is chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Optional


class GlightError(Exception):
    """Base class for all glight errors."""


class InvalidArgumentError(GlightError, ValueError):
    """A caller-supplied value violates a documented constraint.

    Attributes:
        field: Name of the offending parameter (e.g. ``"sector"``).
        value: The rejected value.
        detail: Short human-readable description of the bound.
    """

    def __init__(self, field: str, value: object, detail: str = ""):
        self.field = field
        self.value = value
        self.detail = detail
        msg = f"invalid argument {field}={value!r}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class DeviceOpenError(GlightError):
    """Opening a matched USB device failed (permission, busy, unplugged)."""


class DeviceClosedError(GlightError):
    """A command was sent to a device handle that has been closed."""


class LeaseError(GlightError):
    """Detaching the kernel driver or claiming the interface failed.

    No transfer was attempted.
    """

    def __init__(self, phase: str, cause: Optional[BaseException] = None):
        self.phase = phase
        self.cause = cause
        msg = f"interface lease failed during {phase}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class TransportError(GlightError):
    """The control write or the interrupt read failed.

    The command's effect on the device is unknown; treat it as not delivered.

    Attributes:
        phase: ``"write_control"`` or ``"read_interrupt"``.
        timed_out: True when the acknowledgment read hit its timeout.
    """

    def __init__(self, phase: str, cause: Optional[BaseException] = None,
                 timed_out: bool = False):
        self.phase = phase
        self.cause = cause
        self.timed_out = timed_out
        msg = f"USB transfer failed during {phase}"
        if timed_out:
            msg += " (timed out, delivery status unknown)"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
