from __future__ import annotations

# Make `import serial_lcd` work from a plain checkout without installing.
import sys
from pathlib import Path

import pytest

PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from serial_lcd.lcd import LCD  # noqa: E402


class FakeSerial:
    def __init__(self, fail_with: BaseException | None = None) -> None:
        self.writes: list[bytes] = []
        self.fail_with = fail_with
        self.closed = False

    def write(self, b: bytes) -> int:
        if self.fail_with is not None:
            raise self.fail_with
        self.writes.append(bytes(b))
        return len(b)

    def read(self, size: int = 1) -> bytes:
        return b"\x00" * size

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True

    @property
    def data(self) -> bytes:
        return b"".join(self.writes)


@pytest.fixture
def ser() -> FakeSerial:
    return FakeSerial()


@pytest.fixture
def lcd(ser: FakeSerial) -> LCD:
    return LCD(ser)
