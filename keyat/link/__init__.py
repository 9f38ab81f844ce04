"""Link layer for the KeyAT adapter serial connection."""

from .base import Link
from .connection import SerialLink
from .port_finder import PortInfo, find_ports, is_port_available
from .options import parse_bytesize, parse_handshake, parse_parity, parse_stopbits

__all__ = [
    "Link",
    "SerialLink",
    "PortInfo",
    "find_ports",
    "is_port_available",
    "parse_bytesize",
    "parse_handshake",
    "parse_parity",
    "parse_stopbits",
]
