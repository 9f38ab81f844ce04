"""Timing discipline for the adapter.

The adapter forwards keys to its PS/2 side at a fixed rate. Sending faster
fills its buffer and keys get lost, so every script character is followed
by a short pause. 42 ms (about 24 characters per second) is the shortest
delay found to work with the Commander X16.
"""
from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from ..models import PacingSettings

logger = logging.getLogger(__name__)


class Pacer:
    """Performs the two kinds of suspension used while sending a script.
    
    Both suspensions block the calling thread only and always run to
    completion.
    """
    
    def __init__(
        self,
        settings: Optional[PacingSettings] = None,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """Initialize Pacer.
        
        Args:
            settings: Timing constants (default: PacingSettings())
            sleep: Suspension function (default: time.sleep)
        """
        self._settings = settings or PacingSettings()
        self._sleep = sleep or time.sleep
    
    @property
    def settings(self) -> PacingSettings:
        return self._settings
    
    def inter_character_delay(self) -> None:
        """Pause after one transmitted character."""
        self._sleep(self._settings.char_delay)
    
    def settle(self, seconds: int) -> None:
        """Wait out a ``~Z`` pause performed by the adapter.
        
        Sleeps ``seconds`` plus the settle margin so transmission never
        resumes while the adapter is still asleep.
        """
        duration = seconds + self._settings.settle_margin
        logger.debug(f"Settling for {duration:.1f}s")
        self._sleep(duration)
    
    def poll_wait(self) -> None:
        """Pause between two keyboard polls in interactive mode."""
        self._sleep(self._settings.key_poll_interval)
