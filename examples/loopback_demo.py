#!/usr/bin/env python3
"""
Loopback demo.

Sends a short script through pyserial's loop:// handler, so every byte the
transmitter writes comes straight back through the echo drainer. No
adapter required.
"""

import sys
import logging
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from keyat.link import SerialLink
from keyat.models import LinkSettings, PacingSettings
from keyat.session import Session

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(levelname)s - %(message)s'
)

SCRIPT = "hello~I\n;this is ignored\nworld~Z1\n"


def main():
    echoed = []
    link = SerialLink(LinkSettings(port="loop://", read_timeout=0.1))
    session = Session(link, pacing=PacingSettings(char_delay=0.01), sink=echoed.append)
    
    print("Opening loopback session...")
    with session:
        session.run_script(SCRIPT)
    
    print(f"Echoed back: {''.join(echoed)!r}")


if __name__ == "__main__":
    main()
