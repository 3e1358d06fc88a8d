"""Custom character bitmaps.

Characters are 5x8 pixels. Each row is one byte and its low 5 bits define the
pixels of that row, most significant bit on the left. A glyph is authored as
eight short strings where a space or a "." is an unlit pixel and anything else
is lit::

    heart = make_char([
        ".....",
        ".*.*.",
        "*.*.*",
        "*...*",
        "*...*",
        ".*.*.",
        "..*..",
        ".....",
    ])
    lcd.create_custom_char(0, heart)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence

ROWS = 8
COLS = 5
SLOTS = 8
_OFF = {" ", "."}


@dataclass(frozen=True)
class Glyph:
    rows: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "rows", bytes(self.rows))
        if len(self.rows) != ROWS:
            raise ValueError(f"glyph must have {ROWS} rows, got {len(self.rows)}")

    @classmethod
    def from_bytes(cls, data: Iterable[int]) -> "Glyph":
        return cls(bytes(data))

    @classmethod
    def from_pattern(cls, lines: Sequence[str], strict: bool = False) -> "Glyph":
        return make_char(lines, strict=strict)

    def to_pattern(self, on: str = "*", off: str = ".") -> List[str]:
        return [
            "".join(on if row & (1 << bit) else off for bit in range(COLS - 1, -1, -1))
            for row in self.rows
        ]

    def __bytes__(self) -> bytes:
        return self.rows

    def __iter__(self) -> Iterator[int]:
        return iter(self.rows)

    def __len__(self) -> int:
        return ROWS


def _compile_row(line: str) -> int:
    pixels = 0
    for c in line:
        # keep to one byte: long rows shift their leading pixels out
        pixels = (pixels << 1) & 0xFF
        if c not in _OFF:
            pixels |= 1
    return pixels


def make_char(lines: Sequence[str], strict: bool = False) -> Glyph:
    """Compile eight rows of pixel text into a Glyph.

    Row width is not checked unless ``strict`` is set: extra characters shift
    earlier pixels out and missing ones leave the low bits unset.
    """
    if len(lines) != ROWS:
        raise ValueError(f"expected {ROWS} rows, got {len(lines)}")
    if strict:
        for i, line in enumerate(lines):
            if len(line) != COLS:
                raise ValueError(f"row {i} must be {COLS} characters, got {len(line)}")
    return Glyph(bytes(_compile_row(line) for line in lines))


HEART = make_char(
    [
        ".....",
        ".*.*.",
        "*.*.*",
        "*...*",
        "*...*",
        ".*.*.",
        "..*..",
        ".....",
    ]
)
