"""Script layer: line normalization, directive scanning, pacing, sending."""

from .directives import parse_delay, scan
from .normalizer import is_comment, normalize, strip_carriage_returns
from .pacer import Pacer
from .runner import ScriptBuffer, ScriptRunner
from .transmitter import Transmitter

__all__ = [
    "normalize",
    "is_comment",
    "strip_carriage_returns",
    "scan",
    "parse_delay",
    "Pacer",
    "Transmitter",
    "ScriptBuffer",
    "ScriptRunner",
]
