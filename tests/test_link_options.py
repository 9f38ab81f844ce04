"""Unit tests for serial option names and port enumeration."""
import unittest
from unittest.mock import MagicMock, patch

import serial

from keyat.link.options import parse_bytesize, parse_handshake, parse_parity, parse_stopbits
from keyat.link.port_finder import PortInfo, find_ports, is_port_available


class TestOptionNames(unittest.TestCase):
    """Tests for the .NET style option names."""
    
    def test_parity(self):
        """Test parity names in any case."""
        self.assertEqual(parse_parity("None"), serial.PARITY_NONE)
        self.assertEqual(parse_parity("odd"), serial.PARITY_ODD)
        self.assertEqual(parse_parity("EVEN"), serial.PARITY_EVEN)
        self.assertEqual(parse_parity("Mark"), serial.PARITY_MARK)
        self.assertEqual(parse_parity("space"), serial.PARITY_SPACE)
    
    def test_parity_unknown(self):
        """Test that an unknown parity name raises ValueError."""
        with self.assertRaises(ValueError):
            parse_parity("sometimes")
    
    def test_stopbits(self):
        """Test stop-bit names and numbers."""
        self.assertEqual(parse_stopbits("One"), 1)
        self.assertEqual(parse_stopbits("1"), 1)
        self.assertEqual(parse_stopbits("OnePointFive"), 1.5)
        self.assertEqual(parse_stopbits("two"), 2)
    
    def test_stopbits_none_rejected(self):
        """Test that StopBits.None is refused."""
        with self.assertRaises(ValueError):
            parse_stopbits("None")
    
    def test_handshake(self):
        """Test handshake names mapped to (xonxoff, rtscts)."""
        self.assertEqual(parse_handshake("None"), (False, False))
        self.assertEqual(parse_handshake("XOnXOff"), (True, False))
        self.assertEqual(parse_handshake("RequestToSend"), (False, True))
        self.assertEqual(parse_handshake("requesttosendxonxoff"), (True, True))
    
    def test_bytesize(self):
        """Test accepted and rejected data bit counts."""
        self.assertEqual(parse_bytesize("8"), 8)
        self.assertEqual(parse_bytesize("7"), 7)
        for bad in ("9", "eight", "4"):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    parse_bytesize(bad)


def _fake_port(device, description="USB Serial", vid=0x0403, pid=0x6001):
    port = MagicMock()
    port.device = device
    port.description = description
    port.vid = vid
    port.pid = pid
    port.hwid = f"USB VID:PID={vid:04X}:{pid:04X}"
    return port


class TestPortFinder(unittest.TestCase):
    """Tests for port enumeration."""
    
    @patch('keyat.link.port_finder.list_ports.comports')
    def test_find_ports_sorted(self, mock_comports):
        """Test that find_ports() returns ports sorted by name."""
        mock_comports.return_value = [_fake_port("COM4"), _fake_port("COM3")]
        
        ports = find_ports()
        
        self.assertEqual([p.port for p in ports], ["COM3", "COM4"])
        self.assertEqual(ports[0].vid, 0x0403)
    
    @patch('keyat.link.port_finder.list_ports.comports')
    def test_find_ports_error(self, mock_comports):
        """Test that an enumeration failure gives an empty list."""
        mock_comports.side_effect = OSError("no /dev")
        self.assertEqual(find_ports(), [])
    
    @patch('keyat.link.port_finder.list_ports.comports')
    def test_is_port_available(self, mock_comports):
        """Test port presence against the enumerated ports."""
        mock_comports.return_value = [_fake_port("/dev/ttyUSB0")]
        
        self.assertTrue(is_port_available("/dev/ttyUSB0"))
        self.assertFalse(is_port_available("/dev/ttyUSB1"))
    
    def test_urls_always_available(self):
        """Test that pyserial URLs are treated as present."""
        self.assertTrue(is_port_available("loop://"))
    
    def test_describe(self):
        """Test the one line port description."""
        info = PortInfo(port="COM3", description="USB Serial", vid=None, pid=None, hwid="")
        self.assertEqual(info.describe(), "COM3 (USB Serial)")
        plain = PortInfo(port="/dev/ttyS0", description="n/a", vid=None, pid=None, hwid="")
        self.assertEqual(plain.describe(), "/dev/ttyS0")


if __name__ == '__main__':
    unittest.main()
