"""Session layer: echo drainer, keyboard input and the session controller."""

from .console import CANCEL_KEYS, KeyboardInput
from .controller import Session
from .drainer import EchoDrainer, console_sink

__all__ = [
    "Session",
    "EchoDrainer",
    "KeyboardInput",
    "CANCEL_KEYS",
    "console_sink",
]
