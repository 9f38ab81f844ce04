"""Per-line send algorithm.

Ordinary lines are typed character by character and are NOT terminated:
the adapter only gets a carriage return after a line carrying ``~I`` or
``~Z<n>``. Comment lines send no characters but their directive still
fires, so ``;~Z3`` is a silent four second pause.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..link import Link
from ..models import TERMINATOR, Directive
from .directives import scan
from .normalizer import normalize
from .pacer import Pacer

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "ascii"


class Transmitter:
    """Sends script lines to the adapter with pacing.
    
    Responsibilities:
    - Normalize the line and skip comment text
    - Write characters one at a time with the inter-character delay
    - Send the terminator (and settle) requested by a directive
    """
    
    def __init__(self, link: Link, pacer: Pacer, encoding: str = DEFAULT_ENCODING):
        """Initialize Transmitter.
        
        Args:
            link: Open link to write to
            pacer: Timing source
            encoding: Character encoding; unencodable characters become '?'
        """
        self._link = link
        self._pacer = pacer
        self._encoding = encoding
    
    def send_line(self, raw_line: str) -> Optional[Directive]:
        """Send one script line.
        
        Args:
            raw_line: Line without its newline; carriage returns allowed
            
        Returns:
            The directive that fired, or None
            
        Raises:
            DirectiveParseError: Malformed ``~Z`` parameter
            LinkFaultError: Transport failure while writing
        """
        line, comment = normalize(raw_line)
        
        if line and not comment:
            self._send_characters(line)
        
        directive = scan(line)
        if directive is None:
            return None
        
        logger.debug(f"Directive {directive.kind.name} in {line!r}")
        self._link.write(TERMINATOR)
        if directive.needs_settle:
            self._pacer.settle(directive.seconds)
        return directive
    
    def send_key(self, key: str) -> None:
        """Send a single typed key with no pacing."""
        self._link.write(self._encode(key))
    
    def _send_characters(self, line: str) -> None:
        for ch in line:
            self._link.write(self._encode(ch))
            self._pacer.inter_character_delay()
    
    def _encode(self, text: str) -> bytes:
        return text.encode(self._encoding, errors="replace")
