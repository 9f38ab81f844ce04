"""Serial link to the L3 KeyAT adapter.

Opens the port through ``serial.serial_for_url`` so that plain device names
('COM3', '/dev/ttyUSB0') and pyserial URLs ('loop://', 'socket://host:port',
'rfc2217://host:port') are all accepted.

This is a RAW BYTE layer. It does not pace or interpret anything; the
Transmitter decides what to write and when.
"""
from __future__ import annotations

import logging
from typing import Optional

import serial

from ..errors import LinkFaultError, LinkUnavailableError
from ..models import LinkSettings
from .base import Link

logger = logging.getLogger(__name__)


class SerialLink(Link):
    """pyserial backed Link.
    
    pyserial allows one thread to read while another writes, which is all
    the session needs: the echo drainer reads, the script runner or the
    interactive loop writes.
    
    Example:
        >>> link = SerialLink(LinkSettings(port="COM3", baudrate=9600))
        >>> link.open()
        >>> link.write(b"dir")
        >>> link.read_byte()
        b'd'
        >>> link.close()
    """
    
    def __init__(self, settings: LinkSettings):
        """Initialize serial link.
        
        Args:
            settings: Port name and serial parameters
        """
        self._settings = settings
        self._serial: Optional[serial.SerialBase] = None
    
    @property
    def settings(self) -> LinkSettings:
        return self._settings
    
    def open(self) -> None:
        """Open the serial port.
        
        Raises:
            LinkUnavailableError: Wrong port name, port busy, cable missing...
        """
        if self.is_open:
            logger.warning("Already open")
            return
        
        s = self._settings
        try:
            self._serial = serial.serial_for_url(
                s.port,
                baudrate=s.baudrate,
                bytesize=s.bytesize,
                parity=s.parity,
                stopbits=s.stopbits,
                xonxoff=s.xonxoff,
                rtscts=s.rtscts,
                timeout=s.read_timeout,
                write_timeout=s.write_timeout,
            )
        except (serial.SerialException, ValueError) as e:
            logger.error(f"Failed to open {s.port}: {e}")
            raise LinkUnavailableError(str(e), port=s.port) from e
        
        logger.info(f"Opened {s.describe()}")
    
    def close(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return
        try:
            self._serial.close()
        except serial.SerialException as e:
            logger.error(f"Error closing serial port: {e}")
        finally:
            self._serial = None
        logger.info(f"Closed {self._settings.port}")
    
    @property
    def is_open(self) -> bool:
        port = self._serial
        return port is not None and port.is_open
    
    def write(self, data: bytes) -> None:
        """Write bytes and wait until they have left the output buffer."""
        port = self._require_open()
        try:
            port.write(data)
            port.flush()
        except serial.SerialException as e:
            logger.error(f"Write error: {e}")
            self._handle_error()
            raise LinkFaultError(f"write failed: {e}") from e
    
    def read_byte(self) -> Optional[bytes]:
        """Read one byte, waiting at most ``read_timeout`` seconds."""
        port = self._require_open()
        try:
            data = port.read(1)
        except serial.SerialException as e:
            logger.error(f"Read error: {e}")
            self._handle_error()
            raise LinkFaultError(f"read failed: {e}") from e
        return data or None
    
    # Internal methods
    
    def _require_open(self) -> serial.SerialBase:
        port = self._serial
        if port is None:
            raise LinkFaultError(f"{self._settings.port} is not open")
        return port
    
    def _handle_error(self) -> None:
        """Drop the port after a transport fault (e.g. device unplugged).
        
        Later calls fail fast with LinkFaultError and ``is_open`` turns
        False, which ends the interactive phase.
        """
        port, self._serial = self._serial, None
        if port is not None:
            try:
                port.close()
            except serial.SerialException:
                logger.debug("Ignoring close error after fault")
        logger.info("Link closed due to error")
