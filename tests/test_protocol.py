from __future__ import annotations

import pytest

from serial_lcd.protocol import (
    COMMAND,
    Autoscroll,
    BlockCursor,
    Opcode,
    UnderlineCursor,
    frame,
    pack,
)


def test_state_enums_are_opcodes() -> None:
    assert COMMAND == 0xFE
    assert (Autoscroll.ON, Autoscroll.OFF) == (0x51, 0x52)
    assert (UnderlineCursor.ON, UnderlineCursor.OFF) == (0x4A, 0x4B)
    assert (BlockCursor.ON, BlockCursor.OFF) == (0x53, 0x54)


def test_opcode_table() -> None:
    assert Opcode.SET_RGB_BACKLIGHT_COLOR == 0xD0
    assert Opcode.SET_LCD_SIZE == 0xD1
    assert Opcode.CREATE_CUSTOM_CHARACTER == 0x4E
    assert Opcode.SAVE_CUSTOM_CHARACTERS_TO_EEPROM_BANK == 0xC1
    assert Opcode.LOAD_CUSTOM_CHARACTERS_FROM_EEPROM_BANK == 0xC0
    assert Opcode.SET_STARTUP_SPLASH == 0x40


def test_frame_prefixes_command_byte() -> None:
    assert frame(Opcode.CLEAR) == b"\xfe\x58"
    assert frame(Opcode.SET_CURSOR_POSITION, 3, 2) == b"\xfe\x47\x03\x02"


def test_pack_flattens_ints_and_bytes() -> None:
    assert pack(1, b"\x02\x03", [4, 5]) == b"\x01\x02\x03\x04\x05"


@pytest.mark.parametrize("bad", [-1, 256, 1000])
def test_pack_rejects_out_of_range(bad: int) -> None:
    with pytest.raises(ValueError):
        frame(Opcode.BRIGHTNESS, bad)
