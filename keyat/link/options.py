"""Parsers for serial parameter names.

The adapter documentation (and the original Windows tooling) spells serial
options the .NET way: ``None``/``Odd``/``Even`` parity, ``One``/``Two`` stop
bits, ``XOnXOff``/``RequestToSend`` handshake. These helpers map those
names, case-insensitively, onto pyserial values.
"""
from __future__ import annotations

from typing import Dict, Tuple

import serial

PARITY_NAMES: Dict[str, str] = {
    "none": serial.PARITY_NONE,
    "odd": serial.PARITY_ODD,
    "even": serial.PARITY_EVEN,
    "mark": serial.PARITY_MARK,
    "space": serial.PARITY_SPACE,
}

STOPBITS_NAMES: Dict[str, float] = {
    "one": serial.STOPBITS_ONE,
    "1": serial.STOPBITS_ONE,
    "onepointfive": serial.STOPBITS_ONE_POINT_FIVE,
    "1.5": serial.STOPBITS_ONE_POINT_FIVE,
    "two": serial.STOPBITS_TWO,
    "2": serial.STOPBITS_TWO,
}

# (xonxoff, rtscts)
HANDSHAKE_NAMES: Dict[str, Tuple[bool, bool]] = {
    "none": (False, False),
    "xonxoff": (True, False),
    "requesttosend": (False, True),
    "requesttosendxonxoff": (True, True),
}

BYTESIZES = (serial.FIVEBITS, serial.SIXBITS, serial.SEVENBITS, serial.EIGHTBITS)


def _lookup(table: dict, name: str, what: str):
    try:
        return table[name.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown {what} '{name}'") from None


def parse_parity(name: str) -> str:
    """Map 'None', 'Odd', 'Even', 'Mark' or 'Space' to a pyserial constant."""
    return _lookup(PARITY_NAMES, name, "parity")


def parse_stopbits(name: str) -> float:
    """Map 'One', 'OnePointFive', 'Two' (or 1, 1.5, 2) to pyserial stop bits.
    
    .NET also lists 'None', which no UART supports, so it is rejected.
    """
    return _lookup(STOPBITS_NAMES, name, "stop bits")


def parse_handshake(name: str) -> Tuple[bool, bool]:
    """Map a handshake name to ``(xonxoff, rtscts)``."""
    return _lookup(HANDSHAKE_NAMES, name, "handshake")


def parse_bytesize(value: str) -> int:
    """Parse the data bits argument (5-8)."""
    try:
        bits = int(value)
    except ValueError:
        raise ValueError(f"data bits must be a number, got '{value}'") from None
    if bits not in BYTESIZES:
        raise ValueError(f"data bits must be one of {', '.join(map(str, BYTESIZES))}")
    return bits
