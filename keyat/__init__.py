"""KeyAT Serial Helper - paced script sender for the L3 KeyAT keyboard adapter."""

from .errors import (
    KeyATError,
    LinkUnavailableError,
    LinkFaultError,
    ScriptSourceError,
    DirectiveParseError,
    ConsoleUnavailableError,
)
from .models import Directive, DirectiveKind, LinkSettings, PacingSettings
from .link import Link, SerialLink
from .script import Pacer, Transmitter, ScriptRunner
from .session import Session, EchoDrainer, KeyboardInput

__version__ = "1.0.0"

__all__ = [
    "KeyATError",
    "LinkUnavailableError",
    "LinkFaultError",
    "ScriptSourceError",
    "DirectiveParseError",
    "ConsoleUnavailableError",
    "Directive",
    "DirectiveKind",
    "LinkSettings",
    "PacingSettings",
    "Link",
    "SerialLink",
    "Pacer",
    "Transmitter",
    "ScriptRunner",
    "Session",
    "EchoDrainer",
    "KeyboardInput",
]
