"""Adafruit USB/serial backpack LCD driver.

Typical usage::

    with open_lcd("/dev/tty.usbmodem1451", 9600) as lcd:
        lcd.set_size(16, 2)
        lcd.set_brightness(255)
        lcd.set_contrast(200)
        lcd.set_cursor(UnderlineCursor.OFF, BlockCursor.OFF)
        lcd.set_bg(0, 0, 255)
        lcd.clear()
        lcd.home()
        print("Hi there!", end="", file=lcd)

Every operation is one write on the underlying sink. Errors raised by the sink
(e.g. serial.SerialException) reach the caller as-is. The driver keeps no
state and does no locking: share one LCD between threads only through a
LockedSink.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from .glyph import SLOTS, Glyph
from .protocol import (
    COMMAND,
    Arg,
    Autoscroll,
    BlockCursor,
    Opcode,
    UnderlineCursor,
    frame,
    pack,
)
from .transport import ByteSink, open_serial

log = logging.getLogger(__name__)

TEXT_ENCODING = "latin-1"


class LCD:
    def __init__(self, sink: ByteSink) -> None:
        self._sink = sink

    @property
    def sink(self) -> ByteSink:
        return self._sink

    def __enter__(self) -> "LCD":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _send(self, data: bytes) -> None:
        log.debug("write %s", data.hex(" "))
        self._sink.write(data)

    def raw(self, *data: Arg) -> None:
        """Write bytes verbatim with no command prefix."""
        self._send(pack(*data))

    def write(self, text: Union[str, bytes, bytearray]) -> int:
        """Print text at the cursor. Characters 0-7 show the custom glyphs."""
        if isinstance(text, str):
            data = text.encode(TEXT_ENCODING, errors="replace")
        else:
            data = bytes(text)
        if data:
            self._send(data)
        return len(text)

    def flush(self) -> None:
        flush = getattr(self._sink, "flush", None)
        if flush is not None:
            flush()

    def read(self, size: int = 1) -> bytes:
        return self._sink.read(size)

    def close(self) -> None:
        self._sink.close()

    # backlight and display

    def set_bg(self, r: int, g: int, b: int) -> None:
        """Set the RGB backlight color. The device saves it to EEPROM."""
        self._send(frame(Opcode.SET_RGB_BACKLIGHT_COLOR, r, g, b))

    def on(self) -> None:
        self._send(frame(Opcode.BACKLIGHT_ON, 0))

    def off(self) -> None:
        self._send(frame(Opcode.BACKLIGHT_OFF))

    def set_on(self, state: bool) -> None:
        if state:
            self.on()
        else:
            self.off()

    def set_brightness(self, b: int) -> None:
        """0-255, 255 is the brightest."""
        self._send(frame(Opcode.BRIGHTNESS, b))

    def set_contrast(self, c: int) -> None:
        """0-255, usually 200 is a nice value."""
        self._send(frame(Opcode.CONTRAST, c))

    def set_autoscroll(self, state: Union[Autoscroll, bool, int]) -> None:
        """Choose whether overflowing text scrolls up (ON) or wraps to the top (OFF)."""
        if isinstance(state, bool):
            state = Autoscroll.ON if state else Autoscroll.OFF
        self._send(frame(Autoscroll(state)))

    def set_size(self, cols: int, rows: int) -> None:
        """Tell the backpack which panel is attached. Saved to EEPROM."""
        self._send(frame(Opcode.SET_LCD_SIZE, cols, rows))

    def clear(self) -> None:
        self._send(frame(Opcode.CLEAR))

    def set_splash(self, text: str, capacity: int = 32) -> None:
        """Store the startup splash screen, padded with spaces to ``capacity``.

        Use 32 for a 16x2 panel and 80 for a 20x4 one.
        """
        body = text.encode(TEXT_ENCODING, errors="replace")[:capacity]
        self._send(frame(Opcode.SET_STARTUP_SPLASH, body.ljust(capacity, b" ")))

    # cursor

    def set_cursor(self, underline: UnderlineCursor, block: BlockCursor) -> None:
        self._send(pack(COMMAND, UnderlineCursor(underline), COMMAND, BlockCursor(block)))

    def home(self) -> None:
        """Move the cursor to 1,1."""
        self._send(frame(Opcode.GO_HOME))

    def move_to(self, col: int, row: int) -> None:
        """Set the cursor position. Columns and rows start at 1."""
        self._send(frame(Opcode.SET_CURSOR_POSITION, col, row))

    def move_forward(self) -> None:
        self._send(frame(Opcode.CURSOR_FORWARD))

    def move_back(self) -> None:
        self._send(frame(Opcode.CURSOR_BACK))

    # custom characters

    def create_custom_char(self, slot: int, glyph: Union[Glyph, Iterable[int]]) -> None:
        if not 0 <= slot < SLOTS:
            raise ValueError(f"custom character slot must be 0-{SLOTS - 1}, got {slot}")
        if not isinstance(glyph, Glyph):
            glyph = Glyph.from_bytes(glyph)
        self._send(frame(Opcode.CREATE_CUSTOM_CHARACTER, slot, bytes(glyph)))

    def save_custom_chars(self, bank: int) -> None:
        self._send(frame(Opcode.SAVE_CUSTOM_CHARACTERS_TO_EEPROM_BANK, bank))

    def load_custom_chars(self, bank: int) -> None:
        self._send(frame(Opcode.LOAD_CUSTOM_CHARACTERS_FROM_EEPROM_BANK, bank))


def open_lcd(
    port: str, baud: int = 9600, timeout: float = 1.0, write_timeout: Optional[float] = None
) -> LCD:
    return LCD(open_serial(port, baud, timeout=timeout, write_timeout=write_timeout))
