from __future__ import annotations

import argparse
import logging
import sys
import threading
import time
from typing import Callable, List, Optional

import serial

from .config import AppConfig, DisplayConfig, load_and_validate_config, validate_config
from .glyph import HEART
from .lcd import LCD
from .protocol import BlockCursor, UnderlineCursor
from .transport import ByteSink, DryRunSink, LockedSink, open_serial

Delay = Callable[[int], None]

# transport failures as raised by pyserial or the OS
TRANSPORT_ERRORS = (serial.SerialException, OSError)


def sleep_ms(ms: int) -> None:
    time.sleep(ms / 1000.0)


def no_delay(ms: int) -> None:
    return None


def add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=None, help="Path to YAML config (defaults built in)")
    p.add_argument("--port", default=None, help="Serial port, overrides the config")
    p.add_argument("--baud", type=int, default=None, help="Baud rate, overrides the config")
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Enable INFO-level logging (default is ERROR)",
    )


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Exercise an Adafruit serial backpack LCD")
    add_common_args(p)
    p.add_argument(
        "--dry-run", action="store_true", help="Print frames as hex to stdout instead of serial"
    )
    p.add_argument("--no-cycle", action="store_true", help="Skip the background color cycle")
    return p.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    lvl = logging.INFO if verbose else logging.ERROR
    logging.basicConfig(level=lvl, format="%(levelname)s:%(name)s:%(message)s", stream=sys.stderr)


def load_settings(args: argparse.Namespace) -> AppConfig:
    cfg = load_and_validate_config(args.config) if args.config else AppConfig()
    if args.port:
        cfg.serial.port = args.port
    if args.baud is not None:
        cfg.serial.baud = args.baud
    validate_config(cfg)
    return cfg


def configure_panel(lcd: LCD, d: DisplayConfig, delay: Delay = no_delay) -> None:
    lcd.set_size(d.cols, d.rows)
    delay(d.command_delay_ms)
    lcd.set_contrast(d.contrast)
    delay(d.command_delay_ms)
    lcd.set_brightness(d.brightness)
    delay(d.command_delay_ms)


def apply_display(lcd: LCD, d: DisplayConfig, delay: Delay = no_delay) -> None:
    """Push the configured size, contrast, brightness and color to the panel."""
    configure_panel(lcd, d, delay)
    lcd.set_bg(*d.color)
    delay(d.command_delay_ms)


def setup(lcd: LCD, d: DisplayConfig, delay: Delay = no_delay) -> None:
    step = d.command_delay_ms
    configure_panel(lcd, d, delay)
    lcd.set_cursor(UnderlineCursor.OFF, BlockCursor.OFF)
    delay(step)
    lcd.create_custom_char(0, HEART)
    delay(step)
    lcd.clear()
    delay(step)
    lcd.home()
    delay(step)
    lcd.write(" We \x00 Arduino!")
    lcd.write("     - Adafruit")
    delay(step)


def cycle_colors(lcd: LCD, delay: Delay = no_delay, stop: Optional[threading.Event] = None) -> None:
    """Fade blue -> red -> green -> blue."""
    for red in range(255):
        if stop is not None and stop.is_set():
            return
        lcd.set_bg(red, 0, 255 - red)
        delay(1)
    for green in range(255):
        if stop is not None and stop.is_set():
            return
        lcd.set_bg(255 - green, green, 0)
        delay(1)
    for blue in range(255):
        if stop is not None and stop.is_set():
            return
        lcd.set_bg(0, 255 - blue, blue)
        delay(1)


def scatter(lcd: LCD, d: DisplayConfig, count: int = 100, delay: Delay = no_delay) -> None:
    for i in range(count):
        col = i % d.cols + 1
        row = (i // d.cols) % d.rows + 1
        lcd.move_to(col, row)
        lcd.raw(ord("*") + i % 5)
        delay(d.command_delay_ms)


class _CycleThread(threading.Thread):
    def __init__(self, lcd: LCD, delay: Delay, log: logging.Logger) -> None:
        super().__init__(daemon=True)
        self.lcd = lcd
        self.delay = delay
        self.log = log
        self.stop = threading.Event()
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            cycle_colors(self.lcd, self.delay, self.stop)
        except TRANSPORT_ERRORS as e:
            self.log.error("color cycle stopped: %s", e)
            self.error = e


def run_demo(
    lcd: LCD,
    cfg: AppConfig,
    cycle: bool = True,
    delay: Delay = no_delay,
    log: Optional[logging.Logger] = None,
) -> None:
    """Run the hardware test sequence.

    With ``cycle`` set the color fade runs on a second thread, so ``lcd`` must
    sit on a LockedSink. A transport error from either thread is re-raised here.
    """
    log = log or logging.getLogger(__name__)
    d = cfg.display

    lcd.clear()
    lcd.on()
    lcd.set_cursor(UnderlineCursor.OFF, BlockCursor.OFF)
    lcd.move_to(8, 2)
    lcd.write("xyz")
    delay(1000)

    worker: Optional[_CycleThread] = None
    if cycle:
        worker = _CycleThread(lcd, delay, log)
        worker.start()
    try:
        scatter(lcd, d, delay=delay)
        delay(250)
        setup(lcd, d, delay=delay)
    except BaseException:
        if worker is not None:
            worker.stop.set()
        raise
    finally:
        if worker is not None:
            worker.join()
    if worker is not None and worker.error is not None:
        raise worker.error
    delay(3000)
    lcd.set_bg(100, 0, 100)
    log.info("demo finished")


def open_sink(cfg: AppConfig, dry_run: bool, log: logging.Logger) -> Optional[ByteSink]:
    if dry_run:
        return DryRunSink()
    try:
        ser = open_serial(cfg.serial.port, cfg.serial.baud, timeout=cfg.serial.timeout)
    except TRANSPORT_ERRORS as e:
        log.error("Failed to open serial port %s: %s", cfg.serial.port, e)
        return None
    log.info("Opened serial port %s at %d baud", cfg.serial.port, cfg.serial.baud)
    return ser


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.verbose)
    log = logging.getLogger(__name__)
    try:
        cfg = load_settings(args)
    except Exception as e:
        log.error("Failed to load config: %s", e)
        return 2

    sink = open_sink(cfg, args.dry_run, log)
    if sink is None:
        return 3

    delay = no_delay if args.dry_run else sleep_ms
    with LCD(LockedSink(sink)) as lcd:
        try:
            run_demo(lcd, cfg, cycle=not args.no_cycle, delay=delay, log=log)
        except TRANSPORT_ERRORS as e:
            log.error("transport write failed: %s", e)
            return 4
        except KeyboardInterrupt:
            return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
