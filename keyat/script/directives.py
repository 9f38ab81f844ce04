"""Scanner for adapter escape directives.

Handles two markers, anywhere in a line:
- ``~I``       - immediate mode, terminator only
- ``~Z<n>``    - adapter sleeps n seconds, terminator then settle

Only one directive fires per line. ``~I`` is checked first, so
``hello~I~Z5`` is an IMMEDIATE line.
"""
from __future__ import annotations

import re
from typing import Optional

from ..errors import DirectiveParseError
from ..models import DELAY_MARKER, IMMEDIATE_MARKER, Directive

# Optional sign, ASCII digits, surrounding blanks tolerated
_INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")

# Longest pause accepted from a ~Z directive, in seconds (one day)
MAX_DELAY_SECONDS = 24 * 60 * 60


def parse_delay(text: str, line: Optional[str] = None) -> int:
    """Parse the parameter that follows a ``~Z`` marker.
    
    Args:
        text: Everything after the marker up to the end of the line
        line: Full line, for the error message
        
    Raises:
        DirectiveParseError: If text is not a base-10 integer, or asks
            for more than MAX_DELAY_SECONDS
    """
    if not _INTEGER.fullmatch(text):
        raise DirectiveParseError(
            f"~Z must be followed by a number of seconds, got {text!r}",
            line=line,
        )
    try:
        value = int(text)
    except ValueError as e:
        # more digits than int() will convert
        raise DirectiveParseError(f"~Z delay is not a usable number: {e}", line=line) from e
    if value > MAX_DELAY_SECONDS:
        raise DirectiveParseError(
            f"~Z delay of {value} seconds exceeds the {MAX_DELAY_SECONDS} second limit",
            line=line,
        )
    return value


def scan(clean_line: str) -> Optional[Directive]:
    """Find the directive carried by a normalized line.
    
    Args:
        clean_line: Line with carriage returns already removed
        
    Returns:
        Directive, or None if the line has no marker
        
    Raises:
        DirectiveParseError: For ``~Z`` followed by anything but an integer
        
    Examples:
        >>> scan("hello~I")
        Directive(kind=<DirectiveKind.IMMEDIATE: 'immediate'>, seconds=0)
        >>> scan("~Z3").seconds
        3
        >>> scan("plain text") is None
        True
    """
    if IMMEDIATE_MARKER in clean_line:
        return Directive.immediate()
    
    idx = clean_line.find(DELAY_MARKER)
    if idx >= 0:
        param = clean_line[idx + len(DELAY_MARKER):]
        return Directive.delay(parse_delay(param, line=clean_line))
    
    return None
