"""Interactive key capture from the local console.

Wraps pyserial's miniterm Console, which puts the terminal into raw mode on
POSIX and uses msvcrt on Windows. getkey() blocks, so a daemon thread
feeds keys into a queue and the session polls ``key_available()``.

The POSIX console hands out one character per getkey() call, so an arrow
key arrives as ESC, '[', 'A'. ``read_key()`` joins such escape sequences
back into one key, which keeps arrow keys from looking like the cancel key.
"""
from __future__ import annotations

import collections
import logging
import os
import queue
import threading
from typing import Callable, Optional

from serial.tools import miniterm

from ..errors import ConsoleUnavailableError

if os.name == "posix":
    import termios
    CONSOLE_ERRORS = (OSError, termios.error)
else:
    CONSOLE_ERRORS = (OSError,)

logger = logging.getLogger(__name__)

ESCAPE = "\x1b"
CTRL_C = "\x03"  # raw mode delivers Ctrl+C as a key instead of SIGINT
CANCEL_KEYS = (ESCAPE, CTRL_C)

# CSI ("ESC [") and SS3 ("ESC O") introducers used by cursor and function keys
SEQUENCE_INTRODUCERS = ("[", "O")
ESCAPE_SEQUENCE_TIMEOUT = 0.05  # seconds
MAX_SEQUENCE_LENGTH = 8


class KeyboardInput:
    """Keystroke source for the interactive phase."""
    
    def __init__(
        self,
        console_factory: Callable[[], miniterm.ConsoleBase] = miniterm.Console,
        sequence_timeout: float = ESCAPE_SEQUENCE_TIMEOUT,
    ):
        """Initialize KeyboardInput.
    
        Args:
            console_factory: Creates the platform console (replaceable in tests)
            sequence_timeout: How long to wait after ESC for the rest of an
                escape sequence before treating it as a lone ESC
        """
        self._console_factory = console_factory
        self._sequence_timeout = sequence_timeout
        self._console: Optional[miniterm.ConsoleBase] = None
        self._keys: queue.Queue[str] = queue.Queue()
        # Characters read ahead while looking for an escape sequence
        self._lookahead: collections.deque[str] = collections.deque()
        self._reader_thread: Optional[threading.Thread] = None
        self._active = False
    
    def start(self) -> None:
        """Switch the console to raw mode and start capturing keys.
    
        Raises:
            ConsoleUnavailableError: If stdin is not an interactive terminal
        """
        if self._active:
            return
    
        try:
            self._console = self._console_factory()
            self._console.setup()
        except CONSOLE_ERRORS as e:
            logger.error(f"Cannot open console: {e}")
            raise ConsoleUnavailableError(
                f"interactive mode needs a console ({e}); use --no-interactive"
            ) from e
        self._active = True
    
        self._reader_thread = threading.Thread(
            target=self._reader_loop,
            daemon=True,
            name="KeyboardReader"
        )
        self._reader_thread.start()
    
    def stop(self) -> None:
        """Restore the console.
    
        The reader thread may stay blocked in getkey(); it is a daemon and
        drops whatever it reads once inactive.
        """
        if not self._active:
            return
    
        self._active = False
        if self._console:
            try:
                self._console.cleanup()
            except Exception as e:
                logger.error(f"Error restoring console: {e}")
    
    def key_available(self) -> bool:
        """True if a key can be read without waiting."""
        return bool(self._lookahead) or not self._keys.empty()
    
    def read_key(self) -> str:
        """Return the next key, waiting for one if necessary.
    
        An escape sequence (ESC '[' ... or ESC 'O' x) is returned as one
        string, e.g. '\\x1b[A' for the up arrow. A lone ESC is returned
        only when nothing that starts a sequence follows it in time.
        """
        key = self._next_char()
        if key != ESCAPE:
            return key
    
        follower = self._next_char(self._sequence_timeout)
        if follower is None:
            return key
        if follower not in SEQUENCE_INTRODUCERS:
            self._lookahead.appendleft(follower)
            return key
    
        sequence = key + follower
        while len(sequence) < MAX_SEQUENCE_LENGTH:
            ch = self._next_char(self._sequence_timeout)
            if ch is None:
                break
            sequence += ch
            # SS3 carries one final character; CSI ends on 0x40-0x7E
            if follower == "O" or "@" <= ch <= "~":
                break
        return sequence
    
    @staticmethod
    def is_cancel(key: str) -> bool:
        return key in CANCEL_KEYS
    
    def _next_char(self, timeout: Optional[float] = None) -> Optional[str]:
        """Next captured character; None if ``timeout`` passes first."""
        if self._lookahead:
            return self._lookahead.popleft()
        try:
            return self._keys.get(timeout=timeout)
        except queue.Empty:
            return None
    
    def _reader_loop(self) -> None:
        logger.debug("Keyboard reader started")
    
        while self._active:
            try:
                key = self._console.getkey()
            except Exception as e:
                if self._active:
                    logger.error(f"Keyboard read error: {e}")
                    self._keys.put(ESCAPE)
                break
    
            if not self._active:
                break
            if not key:
                # End of input behaves like the cancel key
                logger.info("Console input closed")
                self._keys.put(ESCAPE)
                break
    
            # The adapter terminates lines with CR
            if key == "\n":
                key = "\r"
            self._keys.put(key)
    
        logger.debug("Keyboard reader exiting")
