from __future__ import annotations

from enum import IntEnum
from typing import Iterable, Union

COMMAND = 0xFE  # every framed command starts with this byte


class Opcode(IntEnum):
    # basic
    BACKLIGHT_ON = 0x42  # expects one extra argument which is ignored
    BACKLIGHT_OFF = 0x46
    BRIGHTNESS = 0x99
    CONTRAST = 0x91
    CLEAR = 0x58
    SET_STARTUP_SPLASH = 0x40

    # cursor
    SET_CURSOR_POSITION = 0x47
    GO_HOME = 0x48
    CURSOR_BACK = 0x4C
    CURSOR_FORWARD = 0x4D

    # RGB backlight, size and custom characters
    SET_RGB_BACKLIGHT_COLOR = 0xD0
    SET_LCD_SIZE = 0xD1
    CREATE_CUSTOM_CHARACTER = 0x4E
    SAVE_CUSTOM_CHARACTERS_TO_EEPROM_BANK = 0xC1
    LOAD_CUSTOM_CHARACTERS_FROM_EEPROM_BANK = 0xC0


class Autoscroll(IntEnum):
    """Autoscroll state. The value is the opcode itself.

    ON scrolls so the newest text is always on the bottom line, OFF wraps
    back to the top of the display.
    """

    ON = 0x51
    OFF = 0x52


class UnderlineCursor(IntEnum):
    ON = 0x4A
    OFF = 0x4B


class BlockCursor(IntEnum):
    ON = 0x53
    OFF = 0x54


Arg = Union[int, bytes, bytearray, Iterable[int]]


def pack(*args: Arg) -> bytes:
    """Flatten ints and byte strings into one byte sequence.

    Raises ValueError for any value outside 0-255.
    """
    out = bytearray()
    for a in args:
        if isinstance(a, int):
            out += bytes([a])
        else:
            out += bytes(a)
    return bytes(out)


def frame(opcode: int, *args: Arg) -> bytes:
    return pack(COMMAND, opcode, *args)
