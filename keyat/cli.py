"""Command line entry point.

    keyat <port> <baud> <dataBits> <parity> <stopBits> <handshake> [file] [REPEAT]

Sends ``file`` (if given) to the adapter with pacing, then forwards
keystrokes until ESC is pressed. Anything given as an eighth argument turns
on repeat mode, which sends the file over and over until the process is
killed.
"""
from __future__ import annotations

import argparse
import codecs
import logging
import sys
from datetime import datetime
from typing import List, Optional

from .errors import (
    ConsoleUnavailableError,
    DirectiveParseError,
    LinkFaultError,
    LinkUnavailableError,
    ScriptSourceError,
)
from .link import (
    SerialLink,
    find_ports,
    is_port_available,
    parse_bytesize,
    parse_handshake,
    parse_parity,
    parse_stopbits,
)
from .models import CHARACTER_DELAY, READ_TIMEOUT, LinkSettings, PacingSettings
from .session import KeyboardInput, Session

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_LINK_UNAVAILABLE = 3
EXIT_SCRIPT_UNREADABLE = 4
EXIT_DIRECTIVE_PARSE = 5
EXIT_LINK_FAULT = 6
EXIT_NO_CONSOLE = 7
EXIT_INTERRUPTED = 130

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _option(parse):
    """Adapt a ValueError-raising parser for argparse ``type=``."""
    def convert(value):
        try:
            return parse(value)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e)) from None
    convert.__name__ = parse.__name__
    return convert


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise ValueError(f"must be positive, got {number}")
    return number


def _text_encoding(value: str) -> str:
    try:
        codecs.lookup(value)
        "?".encode(value, errors="replace")
    except LookupError as e:
        raise ValueError(str(e)) from None
    return value


def _milliseconds(value: str) -> float:
    number = float(value)
    if number < 0:
        raise ValueError(f"must not be negative, got {value}")
    return number / 1000.0


def _help_epilog() -> str:
    lines = ["example: COM3 9600 8 None 1 None sample.txt REPEAT", "", "Available ports:"]
    ports = find_ports()
    if ports:
        lines.extend(f"   {info.describe()}" for info in ports)
    else:
        lines.append("   (none found)")
    lines += [
        "",
        "Baud: 300, 600, 1200, 2400, 4800, 9600, 19200, 38400, 57600, etc.",
        "DataBits: 8 or 7",
        "Parity: None, Odd, Even, Mark, Space",
        "StopBits: One, OnePointFive, Two",
        "Handshake: None, XOnXOff, RequestToSend, RequestToSendXOnXOff",
        "",
        "Script directives:",
        "   ~I      send CR after the line (immediate mode)",
        "   ~Z<n>   send CR, then wait n+1 seconds while the adapter sleeps",
        "   ;...    comment line, not typed (directives still apply)",
    ]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keyat",
        description="Paced script sender and terminal for the L3 KeyAT "
                    "RS-232 to PS/2 keyboard adapter.",
        epilog=_help_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("port", help="serial port (COM3, /dev/ttyUSB0) or pyserial URL")
    parser.add_argument("baud", type=_option(_positive_int), help="baud rate")
    parser.add_argument("data_bits", type=_option(parse_bytesize), help="data bits (5-8)")
    parser.add_argument("parity", type=_option(parse_parity), help="parity name")
    parser.add_argument("stop_bits", type=_option(parse_stopbits), help="stop bits name")
    parser.add_argument("handshake", type=_option(parse_handshake), help="handshake name")
    parser.add_argument("file", nargs="?", help="script file to send before interactive mode")
    parser.add_argument("repeat", nargs="?", help="any value (e.g. REPEAT) repeats the file forever")
    parser.add_argument(
        "--char-delay",
        type=_option(_milliseconds),
        default=CHARACTER_DELAY,
        metavar="MS",
        help=f"pause after each script character (default {CHARACTER_DELAY * 1000:.0f})",
    )
    parser.add_argument(
        "--read-timeout",
        type=_option(_milliseconds),
        default=READ_TIMEOUT,
        metavar="MS",
        help=f"echo read timeout (default {READ_TIMEOUT * 1000:.0f})",
    )
    parser.add_argument(
        "--encoding",
        type=_option(_text_encoding),
        default="ascii",
        help="encoding for sent text; unencodable characters become '?' (default ascii)",
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="exit after sending the file instead of forwarding keystrokes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def settings_from_args(args: argparse.Namespace) -> LinkSettings:
    xonxoff, rtscts = args.handshake
    return LinkSettings(
        port=args.port,
        baudrate=args.baud,
        bytesize=args.data_bits,
        parity=args.parity,
        stopbits=args.stop_bits,
        xonxoff=xonxoff,
        rtscts=rtscts,
        read_timeout=args.read_timeout,
    )


def pacing_from_args(args: argparse.Namespace) -> PacingSettings:
    return PacingSettings(char_delay=args.char_delay)


def load_script(path: str) -> str:
    """Read the whole script into memory.
    
    Line endings are kept as they are; the normalizer strips CRs.
    
    Raises:
        ScriptSourceError: If the file cannot be opened or decoded
    """
    try:
        with open(path, encoding="utf-8-sig", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptSourceError(str(e), path=path) from e


def _report_repeat(count: int) -> None:
    print(f"  REPEATING {count} [{datetime.now():%Y-%m-%d %H:%M:%S}]  ", flush=True)


def _fail(message: str, status: int) -> int:
    print(message, file=sys.stderr)
    return status


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    
    parser = build_parser()
    if not argv:
        parser.print_help()
        return EXIT_USAGE
    
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    
    script: Optional[str] = None
    if args.file:
        try:
            script = load_script(args.file)
        except ScriptSourceError as e:
            return _fail(
                f"Unable to open or buffer the specified input file.\n{e}",
                EXIT_SCRIPT_UNREADABLE,
            )
    
    settings = settings_from_args(args)
    logger.debug(f"Link settings: {settings}")
    session = Session(
        SerialLink(settings),
        pacing=pacing_from_args(args),
        encoding=args.encoding,
    )
    
    try:
        session.open()
    except LinkUnavailableError as e:
        message = str(e)
        if not is_port_available(settings.port):
            ports = ", ".join(info.port for info in find_ports()) or "none"
            message += f"\nPort {settings.port} not found. Available ports: {ports}"
        return _fail(message, EXIT_LINK_UNAVAILABLE)
    
    try:
        if script is not None:
            print(f"Sending file [{args.file}]", flush=True)
            session.run_script(script, repeat=args.repeat is not None, on_repeat=_report_repeat)
            print("!!! END OF FILE", flush=True)
        
        if not args.no_interactive:
            print("INTERACTIVE MODE: press ESC or CTRL+C to exit", flush=True)
            session.interact(KeyboardInput())
    except DirectiveParseError as e:
        return _fail(f"Bad directive: {e}", EXIT_DIRECTIVE_PARSE)
    except LinkFaultError as e:
        return _fail(f"Link failure: {e}", EXIT_LINK_FAULT)
    except ConsoleUnavailableError as e:
        return _fail(f"Cannot enter interactive mode: {e}", EXIT_NO_CONSOLE)
    except KeyboardInterrupt:
        return _fail("Interrupted", EXIT_INTERRUPTED)
    finally:
        session.close()
    
    if session.drainer and session.drainer.fault:
        return _fail(f"Link failure: {session.drainer.fault}", EXIT_LINK_FAULT)
    return EXIT_OK
