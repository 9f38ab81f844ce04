"""Drives the Transmitter over a whole script, optionally forever."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .transmitter import Transmitter

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"


class ScriptBuffer:
    """Working copy of a script that shrinks as lines are consumed.
    
    ``remaining`` is always exactly the unsent part of the script. The
    original text is kept untouched so the buffer can be reloaded.
    """
    
    def __init__(self, text: str):
        self._original = text
        self._remaining = text
    
    @property
    def original(self) -> str:
        return self._original
    
    @property
    def remaining(self) -> str:
        return self._remaining
    
    @property
    def exhausted(self) -> bool:
        return not self._remaining
    
    def next_line(self) -> str:
        """Remove and return the next line (without its separator).
        
        Content after the last separator is returned as a final line.
        """
        line, _, rest = self._remaining.partition(LINE_SEPARATOR)
        self._remaining = rest
        return line
    
    def reload(self) -> None:
        """Restore the working copy from the original text."""
        self._remaining = self._original


class ScriptRunner:
    """Sends a buffered script line by line.
    
    In repeat mode the script restarts from its first line every time it
    runs out, until the process is terminated. There is no way to cancel
    a run from inside the session.
    """
    
    def __init__(
        self,
        transmitter: Transmitter,
        on_repeat: Optional[Callable[[int], None]] = None,
    ):
        """Initialize ScriptRunner.
        
        Args:
            transmitter: Line sender
            on_repeat: Called with the pass number (2, 3, ...) each time
                the script restarts
        """
        self._transmitter = transmitter
        self._on_repeat = on_repeat
        self._repeat_count = 1
    
    @property
    def repeat_count(self) -> int:
        """Number of the pass currently being sent (starts at 1)."""
        return self._repeat_count
    
    def run(self, script_text: str, repeat: bool = False) -> None:
        """Send ``script_text``.
        
        Args:
            script_text: Whole script, lines separated by '\\n'
            repeat: Restart from the top whenever the script is exhausted
            
        Raises:
            DirectiveParseError: Malformed ``~Z`` line (ends the run)
            LinkFaultError: Transport failure
        """
        if repeat and not script_text:
            logger.warning("Script is empty, ignoring repeat")
            repeat = False
        
        buffer = ScriptBuffer(script_text)
        self._repeat_count = 1
        
        while True:
            self._send_all(buffer)
            if not repeat:
                break
            
            self._repeat_count += 1
            logger.info(f"Repeating script, pass {self._repeat_count}")
            if self._on_repeat:
                self._on_repeat(self._repeat_count)
            buffer.reload()
    
    def _send_all(self, buffer: ScriptBuffer) -> None:
        # An empty script still counts as one (empty) line
        while True:
            self._transmitter.send_line(buffer.next_line())
            if buffer.exhausted:
                break
