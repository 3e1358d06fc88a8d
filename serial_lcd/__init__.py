"""Driver for Adafruit USB/serial backpack character LCDs."""

from .glyph import HEART, Glyph, make_char
from .lcd import LCD, open_lcd
from .protocol import COMMAND, Autoscroll, BlockCursor, Opcode, UnderlineCursor
from .transport import ByteSink, DryRunSink, LockedSink, open_serial

__version__ = "0.1.0"
