"""Session controller: owns the link and both session activities.

Lifecycle:
1. ``open()``      - open the link, set the running flag, start the drainer
2. ``run_script()`` - optional buffered script (drainer keeps echoing)
3. ``interact()``  - forward keystrokes until ESC or the link goes away
4. ``close()``     - clear the flag, join the drainer, then close the link

Exactly one of {script run, interactive loop} writes to the link at a time
while the drainer reads, so no lock is needed around link I/O.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..link import Link
from ..models import PacingSettings
from ..script import Pacer, ScriptRunner, Transmitter
from ..script.transmitter import DEFAULT_ENCODING
from .console import KeyboardInput
from .drainer import EchoDrainer, console_sink

logger = logging.getLogger(__name__)


class Session:
    """A live connection to the adapter.
    
    Example:
        >>> with Session(SerialLink(settings)) as session:
        ...     session.run_script(text, repeat=False)
        ...     session.interact(KeyboardInput())
    """
    
    def __init__(
        self,
        link: Link,
        pacing: Optional[PacingSettings] = None,
        sink: Callable[[str], None] = console_sink,
        encoding: str = DEFAULT_ENCODING,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize Session.
        
        Args:
            link: Link to own; opened by ``open()``, closed by ``close()``
            pacing: Timing constants (default: PacingSettings())
            sink: Receives echoed characters from the adapter
            encoding: Character encoding for transmitted text
            sleep: Pacer suspension function (default: time.sleep)
        """
        self._link = link
        self._pacer = Pacer(pacing, sleep=sleep)
        self._transmitter = Transmitter(link, self._pacer, encoding=encoding)
        self._sink = sink
        
        # Continuation flag shared with the drainer
        self._running = threading.Event()
        self._drainer: Optional[EchoDrainer] = None
    
    @property
    def running(self) -> bool:
        return self._running.is_set()
    
    @property
    def drainer(self) -> Optional[EchoDrainer]:
        return self._drainer
    
    def open(self) -> None:
        """Open the link and start echoing.
        
        Raises:
            LinkUnavailableError: If the link cannot be opened
        """
        self._link.open()
        self._running.set()
        
        self._drainer = EchoDrainer(self._link, self._running, sink=self._sink)
        self._drainer.start()
        logger.debug("Session started")
    
    def run_script(
        self,
        script_text: str,
        repeat: bool = False,
        on_repeat: Optional[Callable[[int], None]] = None,
    ) -> None:
        """Send a buffered script. Blocks until done (forever when repeating).
        
        Raises:
            DirectiveParseError: Malformed ``~Z`` line
            LinkFaultError: Transport failure while writing
        """
        runner = ScriptRunner(self._transmitter, on_repeat=on_repeat)
        runner.run(script_text, repeat=repeat)
    
    def interact(self, keyboard: KeyboardInput) -> None:
        """Forward keystrokes to the adapter until cancelled.
        
        Keys are written as typed with no pacing; human typing is slow
        enough for the adapter. Ends on a cancel key, or as soon as the
        link stops being open or the drainer ends the session.
        """
        keyboard.start()
        try:
            while self._running.is_set() and self._link.is_open:
                if not keyboard.key_available():
                    self._pacer.poll_wait()
                    continue
                
                key = keyboard.read_key()
                if keyboard.is_cancel(key):
                    logger.info("Cancel key pressed, ending session")
                    self._running.clear()
                    break
                
                self._transmitter.send_key(key)
        finally:
            keyboard.stop()
    
    def close(self) -> None:
        """Stop the drainer and close the link.
        
        The drainer is joined before the link is closed so it never reads
        from a closed port. Safe to call multiple times.
        """
        self._running.clear()
        
        if self._drainer:
            self._drainer.join()
        
        self._link.close()
        logger.debug("Session closed")
    
    def __enter__(self) -> Session:
        """Context manager support - open on enter."""
        self.open()
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - close on exit."""
        self.close()
