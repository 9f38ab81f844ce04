from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from serial.tools import list_ports

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortInfo:
    """
    Representation of one serial port as seen by pyserial.

    Attributes:
        port: Port name to open with pyserial (e.g. 'COM3', '/dev/ttyUSB0').
        description: Human readable description, if available.
        vid: USB Vendor ID (integer) or None if not a USB device.
        pid: USB Product ID (integer) or None if not a USB device.
        hwid: Raw hardware ID string from pyserial (for debugging).
    """
    port: str
    description: Optional[str]
    vid: Optional[int]
    pid: Optional[int]
    hwid: str

    def describe(self) -> str:
        """One line summary used in help text."""
        if self.description and self.description != "n/a":
            return f"{self.port} ({self.description})"
        return self.port


def _port_to_info(port) -> PortInfo:
    """Convert pyserial's ListPortInfo to PortInfo."""
    return PortInfo(
        port=port.device,
        description=port.description,
        vid=port.vid,
        pid=port.pid,
        hwid=port.hwid,
    )


def find_ports() -> List[PortInfo]:
    """
    List the serial ports present on this machine, sorted by name.

    Enumeration problems are logged and reported as "no ports" since the
    list is only ever used for help and diagnostics.
    """
    try:
        ports = list_ports.comports()
    except OSError as e:
        logger.warning(f"Could not enumerate serial ports: {e}")
        return []
    return sorted((_port_to_info(p) for p in ports), key=lambda info: info.port)


def is_port_available(port: str) -> bool:
    """Check whether ``port`` is one of the enumerated serial ports.

    pyserial URLs (``loop://``, ``socket://...``) are never enumerated, so
    they are always reported as available.
    """
    if "://" in port:
        return True
    return any(info.port == port for info in find_ports())
