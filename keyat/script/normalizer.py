"""Line normalization for script text.

Pure functions with no side effects.
"""
from __future__ import annotations

from typing import Tuple

from ..models import COMMENT_PREFIX


def strip_carriage_returns(line: str) -> str:
    """Remove every carriage return, wherever it appears.
    
    DOS text files leave one trailing CR per line, but hand edited files
    can carry several, or carry them mid-line.
    """
    return line.replace("\r", "")


def is_comment(line: str) -> bool:
    """A comment is any line whose first character is ';'."""
    return line.startswith(COMMENT_PREFIX)


def normalize(raw_line: str) -> Tuple[str, bool]:
    """Clean a raw script line.
    
    Args:
        raw_line: Line as split from the script, without its newline
        
    Returns:
        (clean_line, is_comment) tuple
        
    Examples:
        >>> normalize("dir\\r")
        ('dir', False)
        >>> normalize(";~Z3\\r\\r")
        (';~Z3', True)
    """
    clean = strip_carriage_returns(raw_line)
    return clean, is_comment(clean)
