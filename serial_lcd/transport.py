from __future__ import annotations

import sys
import threading
from typing import Optional, Protocol, TextIO

import serial


class ByteSink(Protocol):
    def write(self, data: bytes) -> Optional[int]: ...

    def read(self, size: int = 1) -> bytes: ...

    def close(self) -> None: ...


def open_serial(
    port: str, baud: int = 9600, timeout: float = 1.0, write_timeout: Optional[float] = None
) -> serial.Serial:
    """Open the LCD's serial port. SerialException propagates to the caller."""
    return serial.Serial(port, baud, timeout=timeout, write_timeout=write_timeout)


class DryRunSink:
    """Prints every write as a hex line instead of sending it anywhere."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream
        self.closed = False

    def write(self, data: bytes) -> int:
        if self.closed:
            raise OSError("write to closed dry-run sink")
        out = self._stream if self._stream is not None else sys.stdout
        print(bytes(data).hex(" "), file=out)
        return len(data)

    def read(self, size: int = 1) -> bytes:
        return b""

    def flush(self) -> None:
        return None

    def close(self) -> None:
        self.closed = True


class LockedSink:
    """Serializes writes from several threads onto one sink.

    Each write is held under the lock for its full length, so frames from
    different threads never interleave.
    """

    def __init__(self, sink: ByteSink) -> None:
        self._sink = sink
        self._lock = threading.Lock()

    def write(self, data: bytes) -> Optional[int]:
        with self._lock:
            return self._sink.write(data)

    def read(self, size: int = 1) -> bytes:
        with self._lock:
            return self._sink.read(size)

    def close(self) -> None:
        with self._lock:
            self._sink.close()
