"""Echo drainer: forwards everything the adapter sends back.

Runs on its own thread for the whole session, independent of whether the
script runner is mid-line or sitting in a ``~Z`` settle.
"""
from __future__ import annotations

import logging
import sys
import threading
import time
from typing import Callable, Optional

from ..errors import LinkFaultError
from ..link import Link

logger = logging.getLogger(__name__)

ERROR_BACKOFF = 0.1  # seconds


def console_sink(ch: str) -> None:
    """Write an echoed character to stdout immediately."""
    sys.stdout.write(ch)
    sys.stdout.flush()


class EchoDrainer:
    """Reads single bytes from the link and hands them to a sink.
    
    A read timeout just means nothing arrived; the loop goes round again.
    The loop stops when the session's running flag is cleared. A transport
    fault (LinkFaultError) ends the session: the drainer clears the flag
    itself so the interactive phase stops too.
    """
    
    def __init__(
        self,
        link: Link,
        running: threading.Event,
        sink: Callable[[str], None] = console_sink,
        error_backoff: float = ERROR_BACKOFF,
    ):
        """Initialize EchoDrainer.
        
        Args:
            link: Open link to read from (borrowed, never closed here)
            running: Session continuation flag
            sink: Receives each byte as a one character string
            error_backoff: Pause after an unexpected error before re-polling
        """
        self._link = link
        self._running = running
        self._sink = sink
        self._error_backoff = error_backoff
        self._thread: Optional[threading.Thread] = None
        self._fault: Optional[LinkFaultError] = None
    
    @property
    def fault(self) -> Optional[LinkFaultError]:
        """Transport fault that stopped the drainer, if any."""
        return self._fault
    
    def start(self) -> None:
        """Start the background drain thread."""
        self._thread = threading.Thread(
            target=self._drain_loop,
            daemon=True,
            name="EchoDrainer"
        )
        self._thread.start()
    
    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the drain thread to observe the cleared flag and exit."""
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=timeout)
    
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
    
    def _drain_loop(self) -> None:
        logger.debug("Echo drainer started")
        
        while self._running.is_set():
            try:
                data = self._link.read_byte()
                if data is None:
                    continue
                # latin-1 maps every byte to exactly one character
                self._sink(data.decode("latin-1"))
            
            except LinkFaultError as e:
                logger.error(f"Link failed, ending session: {e}")
                self._fault = e
                self._running.clear()
                break
            except Exception as e:
                if self._running.is_set():
                    logger.error(f"Echo drainer error: {e}")
                time.sleep(self._error_backoff)
        
        logger.debug("Echo drainer exiting")
