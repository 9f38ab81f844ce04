"""Unit tests for Transmitter (per-line send algorithm)."""
import unittest

from fakes import FakeLink, Timeline

from keyat.errors import DirectiveParseError
from keyat.models import Directive, PacingSettings
from keyat.script.pacer import Pacer
from keyat.script.transmitter import Transmitter

CHAR = 0.042


def chars(text):
    """Expected timeline for typing ``text``: write then delay per character."""
    events = []
    for ch in text:
        events.append(("write", ch.encode("ascii")))
        events.append(("sleep", CHAR))
    return events


class TransmitterTestCase(unittest.TestCase):
    
    def setUp(self):
        self.timeline = Timeline()
        self.link = FakeLink(self.timeline)
        self.link.open()
        self.pacer = Pacer(PacingSettings(char_delay=CHAR), sleep=self.timeline.sleep)
        self.transmitter = Transmitter(self.link, self.pacer)


class TestPlainLines(TransmitterTestCase):
    """Lines without directives."""
    
    def test_plain_line_has_no_terminator(self):
        """Test that a line without a directive gets no CR."""
        result = self.transmitter.send_line("LIST")
        
        self.assertIsNone(result)
        self.assertEqual(self.timeline.events, chars("LIST"))
        self.assertNotIn(b"\r", self.link.writes)
    
    def test_write_count_equals_clean_length(self):
        """Test one write per character of the cleaned line."""
        for line in ("a", "PRINT 1+1", "x\ry\r"):
            with self.subTest(line=line):
                self.timeline.events.clear()
                self.transmitter.send_line(line)
                self.assertEqual(len(self.link.writes), len(line.replace("\r", "")))
    
    def test_delay_follows_last_character(self):
        """Test that the last character is also followed by a delay."""
        self.transmitter.send_line("ab")
        self.assertEqual(self.timeline.events[-1], ("sleep", CHAR))
    
    def test_crs_never_transmitted(self):
        """Test that CRs in the line are never written."""
        self.transmitter.send_line("\rA\r\rB\r")
        self.assertEqual(self.link.writes, [b"A", b"B"])
    
    def test_empty_line(self):
        """Test that an empty line sends nothing."""
        self.assertIsNone(self.transmitter.send_line(""))
        self.assertEqual(self.timeline.events, [])
    
    def test_comment_sends_nothing(self):
        """Test that a comment line without a directive sends nothing."""
        self.assertIsNone(self.transmitter.send_line(";this is ignored"))
        self.assertEqual(self.timeline.events, [])
    
    def test_unencodable_characters_replaced(self):
        """Test that characters outside the encoding are sent as '?'."""
        self.transmitter.send_line("é")
        self.assertEqual(self.link.writes, [b"?"])
    
    def test_custom_encoding(self):
        """Test sending with a non-default encoding."""
        transmitter = Transmitter(self.link, self.pacer, encoding="latin-1")
        transmitter.send_line("é")
        self.assertEqual(self.link.writes, [b"\xe9"])


class TestDirectiveLines(TransmitterTestCase):
    """Lines carrying ~I or ~Z."""
    
    def test_immediate(self):
        """The whole line, marker included, is typed, then CR, no settle."""
        result = self.transmitter.send_line("hello~I")
        
        self.assertEqual(result, Directive.immediate())
        self.assertEqual(self.timeline.events, chars("hello~I") + [("write", b"\r")])
    
    def test_delay(self):
        """Test that ~Z sends CR and then settles."""
        result = self.transmitter.send_line("world~Z2")
        
        self.assertEqual(result, Directive.delay(2))
        self.assertEqual(
            self.timeline.events,
            chars("world~Z2") + [("write", b"\r"), ("sleep", 3.0)],
        )
    
    def test_delay_zero_sends_terminator_without_settle(self):
        """Test that ~Z0 sends CR without settling."""
        self.transmitter.send_line("~Z0")
        self.assertEqual(self.timeline.events, chars("~Z0") + [("write", b"\r")])
    
    def test_delay_negative_sends_terminator_without_settle(self):
        """Test that a negative ~Z sends CR without settling."""
        self.transmitter.send_line("~Z-3")
        self.assertEqual(self.timeline.events, chars("~Z-3") + [("write", b"\r")])
    
    def test_comment_directive_still_fires(self):
        """;~Z3 types nothing, sends CR and waits four seconds."""
        result = self.transmitter.send_line(";~Z3")
        
        self.assertEqual(result, Directive.delay(3))
        self.assertEqual(self.timeline.events, [("write", b"\r"), ("sleep", 4.0)])
    
    def test_comment_immediate(self):
        """Test that ~I in a comment still sends CR."""
        self.transmitter.send_line(";~I")
        self.assertEqual(self.timeline.events, [("write", b"\r")])
    
    def test_immediate_beats_delay(self):
        """Test that ~I wins when both markers are present."""
        self.transmitter.send_line("hello~I~Z5")
        
        self.assertEqual(self.link.writes[-1], b"\r")
        self.assertEqual(self.link.writes.count(b"\r"), 1)
        self.assertNotIn(6.0, self.timeline.sleeps)
    
    def test_directive_after_dos_line_ending(self):
        """Test ~Z on a line that still carries its CR."""
        self.transmitter.send_line("RUN~Z1\r")
        self.assertEqual(self.timeline.events[-2:], [("write", b"\r"), ("sleep", 2.0)])
    
    def test_bad_delay_raises_after_characters(self):
        """Characters go out first; the malformed ~Z then stops the line."""
        with self.assertRaises(DirectiveParseError):
            self.transmitter.send_line("x~Zy")
        
        self.assertEqual(self.link.writes, [b"x", b"~", b"Z", b"y"])
    
    def test_bad_delay_in_comment_raises(self):
        """Test that a bad ~Z in a comment still raises."""
        with self.assertRaises(DirectiveParseError):
            self.transmitter.send_line(";~Z soon")
        self.assertEqual(self.link.writes, [])


class TestSendKey(TransmitterTestCase):
    """Interactive keys."""
    
    def test_key_written_without_delay(self):
        """Test that a typed key is written with no delay."""
        self.transmitter.send_key("q")
        self.assertEqual(self.timeline.events, [("write", b"q")])
    
    def test_escape_sequence_key(self):
        """Test that a multi-character key is written in one call."""
        self.transmitter.send_key("\x1b[A")
        self.assertEqual(self.link.writes, [b"\x1b[A"])


if __name__ == '__main__':
    unittest.main()
