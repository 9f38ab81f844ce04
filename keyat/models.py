"""Immutable data models shared by the link, script and session layers.

All models are frozen dataclasses so they can be handed between the
transmitting activity and the echo drainer without copying.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Adapter wire constants
TERMINATOR = b"\r"
IMMEDIATE_MARKER = "~I"
DELAY_MARKER = "~Z"
COMMENT_PREFIX = ";"

# Pacing defaults (seconds)
CHARACTER_DELAY = 0.042  # shortest delay the PS/2 side accepts without dropping keys
SETTLE_MARGIN = 1.0
KEY_POLL_INTERVAL = 0.042

# Link defaults
DEFAULT_BAUDRATE = 9600
READ_TIMEOUT = 0.5  # seconds
WRITE_TIMEOUT = 0.5  # seconds


class DirectiveKind(Enum):
    """Escape directives understood by the adapter."""
    IMMEDIATE = "immediate"
    DELAY = "delay"


@dataclass(frozen=True)
class Directive:
    """A directive found in a script line.
    
    Attributes:
        kind: Which directive matched
        seconds: Settle time requested by a DELAY directive (0 for IMMEDIATE)
    """
    kind: DirectiveKind
    seconds: int = 0

    @classmethod
    def immediate(cls) -> Directive:
        return cls(kind=DirectiveKind.IMMEDIATE)

    @classmethod
    def delay(cls, seconds: int) -> Directive:
        return cls(kind=DirectiveKind.DELAY, seconds=seconds)

    @property
    def needs_settle(self) -> bool:
        """True if the adapter pauses after this directive."""
        return self.kind is DirectiveKind.DELAY and self.seconds > 0


@dataclass(frozen=True)
class LinkSettings:
    """Serial parameters for opening the link.
    
    Attributes:
        port: Device name ('COM3', '/dev/ttyUSB0') or pyserial URL ('loop://')
        baudrate: Baud rate
        bytesize: Data bits (5-8)
        parity: pyserial parity constant ('N', 'E', 'O', 'M', 'S')
        stopbits: pyserial stop bits (1, 1.5, 2)
        xonxoff: Software flow control
        rtscts: Hardware flow control
        read_timeout: Seconds a single-byte read may block
        write_timeout: Seconds a write may block before failing
    """
    port: str
    baudrate: int = DEFAULT_BAUDRATE
    bytesize: int = 8
    parity: str = "N"
    stopbits: float = 1
    xonxoff: bool = False
    rtscts: bool = False
    read_timeout: float = READ_TIMEOUT
    write_timeout: Optional[float] = WRITE_TIMEOUT

    def describe(self) -> str:
        """Short human readable form, e.g. 'COM3 9600 8N1'."""
        stop = int(self.stopbits) if self.stopbits == int(self.stopbits) else self.stopbits
        return f"{self.port} {self.baudrate} {self.bytesize}{self.parity}{stop}"


@dataclass(frozen=True)
class PacingSettings:
    """Timing constants used while talking to the adapter.
    
    Attributes:
        char_delay: Pause after every transmitted script character
        settle_margin: Extra seconds added to every ~Z settle
        key_poll_interval: Sleep between keyboard polls in interactive mode
    """
    char_delay: float = CHARACTER_DELAY
    settle_margin: float = SETTLE_MARGIN
    key_poll_interval: float = KEY_POLL_INTERVAL
