"""Abstract base class for the link layer.

The Link interface is the only thing the script and session layers know
about the adapter connection. Implementations can be a real serial port,
a pyserial URL (loop://, socket://) or an in-memory fake for tests.

Key principles:
- Blocking writes that either succeed or raise LinkFaultError
- Single-byte reads that time out with None instead of blocking forever
- One reader and one writer may use the link concurrently
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class Link(ABC):
    """Abstract duplex byte link to the keyboard adapter.
    
    Links are responsible for:
    1. Managing connection lifecycle
    2. Writing bytes to the adapter
    3. Reading single bytes back with a bounded wait
    
    Links should NOT contain pacing or script logic. They are pure
    communication channels.
    """
    
    @abstractmethod
    def open(self) -> None:
        """Open the link.
        
        Raises:
            LinkUnavailableError: If the transport cannot be acquired
        """
        pass
    
    @abstractmethod
    def close(self) -> None:
        """Close the link.
        
        Should be safe to call multiple times.
        """
        pass
    
    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True while the link can be read from and written to."""
        pass
    
    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write bytes to the adapter, blocking until they are accepted.
        
        Raises:
            LinkFaultError: If the transport fails
        """
        pass
    
    @abstractmethod
    def read_byte(self) -> Optional[bytes]:
        """Read a single byte.
        
        Returns:
            One byte, or None if nothing arrived before the read timeout
            
        Raises:
            LinkFaultError: If the transport fails
        """
        pass
    
    def __enter__(self) -> Link:
        """Context manager support - open on enter."""
        self.open()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - close on exit."""
        self.close()
