"""A tiny web server for driving the LCD interactively from a browser."""

from __future__ import annotations

import argparse
import logging
import sys
import threading
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Dict, List, Optional, Tuple
from urllib.parse import parse_qs

from .lcd import LCD
from .main import (
    TRANSPORT_ERRORS,
    add_common_args,
    apply_display,
    load_settings,
    open_sink,
    setup_logging,
    sleep_ms,
)
from .protocol import Autoscroll

log = logging.getLogger(__name__)

Form = Dict[str, List[str]]

HOME = """<html>
<body>
LCD Control:
<hr>
Text:<br><textarea rows=2 cols=16 oninput="set({txt:this.value})">Hi there!</textarea><br>
Brightness: <input min=0 max=255 step=1 type=range oninput="set({brightness:this.value})"><br>
Contrast: <input min=0 max=255 step=1 type=range oninput="set({contrast:this.value})"><br>
Background: <input type=color oninput="set({background:this.value})"><br>
Autoscroll: <input type=checkbox onchange="set({autoscroll:this.checked})"><br>
On: <input type=checkbox checked onchange="set({on:this.checked})"><br>
<script>
function set(vals) { fetch("/set", {method: "POST", body: new URLSearchParams(vals)}); }
</script>
</body>
</html>
"""


def get_text(key: str, form: Form) -> Optional[str]:
    vals = form.get(key)
    if vals is not None and len(vals) == 1:
        return vals[0]
    return None


def get_byte(key: str, form: Form) -> Optional[int]:
    txt = get_text(key, form)
    if txt is None or not (txt.isascii() and txt.isdigit()):
        return None
    num = int(txt)
    return num if num <= 255 else None


def parse_hex_color(txt: str) -> Optional[Tuple[int, int, int]]:
    """Parse "#rgb" or "#rrggbb". Returns None when malformed."""
    if not txt.startswith("#"):
        return None
    digits = txt[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    if len(digits) != 6:
        return None
    try:
        value = int(digits, 16)
    except ValueError:
        return None
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def apply_form(lcd: LCD, form: Form) -> None:
    """Translate form fields into LCD commands, always in the same order."""
    b = get_byte("brightness", form)
    if b is not None:
        lcd.set_brightness(b)
    c = get_byte("contrast", form)
    if c is not None:
        lcd.set_contrast(c)
    bg = get_text("background", form)
    rgb = parse_hex_color(bg) if bg is not None else None
    if rgb is not None:
        lcd.set_bg(*rgb)
    a = get_text("autoscroll", form)
    if a is not None:
        lcd.set_autoscroll(Autoscroll.ON if a == "true" else Autoscroll.OFF)
    on = get_text("on", form)
    if on is not None:
        lcd.set_on(on == "true")
    txt = get_text("txt", form)
    if txt is not None:
        lcd.clear()
        lcd.home()
        lcd.write(txt)


class LCDServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, addr: Tuple[str, int], lcd: LCD) -> None:
        super().__init__(addr, LCDRequestHandler)
        self.lcd = lcd
        # one request's commands reach the device before the next one starts
        self.lcd_lock = threading.Lock()


class LCDRequestHandler(BaseHTTPRequestHandler):
    server: LCDServer

    def _reply(self, status: HTTPStatus, body: str = "", ctype: str = "text/plain") -> None:
        data = body.encode()
        self.send_response(status)
        if data:
            self.send_header("Content-Type", f"{ctype}; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        if data:
            self.wfile.write(data)

    def do_GET(self) -> None:
        if self.path != "/":
            self._reply(HTTPStatus.NOT_FOUND, "not found\n")
            return
        self._reply(HTTPStatus.OK, HOME, "text/html")

    def do_POST(self) -> None:
        if self.path != "/set":
            self._reply(HTTPStatus.NOT_FOUND, "not found\n")
            return
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = -1
        if length < 0:
            self._reply(HTTPStatus.BAD_REQUEST, "bad Content-Length\n")
            return
        body = self.rfile.read(length).decode("utf-8", errors="replace")
        form = parse_qs(body, keep_blank_values=True)
        try:
            with self.server.lcd_lock:
                apply_form(self.server.lcd, form)
        except TRANSPORT_ERRORS as e:
            log.error("transport write failed: %s", e)
            self._reply(HTTPStatus.INTERNAL_SERVER_ERROR, f"{e}\n")
            return
        self._reply(HTTPStatus.NO_CONTENT)

    def log_message(self, format: str, *args) -> None:
        log.info("%s %s", self.address_string(), format % args)


def parse_addr(addr: str) -> Tuple[str, int]:
    host, _, port = addr.rpartition(":")
    return host, int(port)


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Web control panel for a serial backpack LCD")
    add_common_args(p)
    p.add_argument("--addr", default=None, help="Web address to bind to, e.g. :12000")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging(args.verbose)
    try:
        cfg = load_settings(args)
        addr = parse_addr(args.addr) if args.addr else (cfg.web.host, cfg.web.port)
    except Exception as e:
        log.error("Failed to load config: %s", e)
        return 2

    sink = open_sink(cfg, False, log)
    if sink is None:
        return 3

    with LCD(sink) as lcd:
        try:
            lcd.on()
            apply_display(lcd, cfg.display, sleep_ms)
            lcd.clear()
            lcd.home()
            lcd.write("Hi there!")
        except TRANSPORT_ERRORS as e:
            log.error("transport write failed: %s", e)
            return 4

        httpd = LCDServer(addr, lcd)
        log.info("serving on %s:%d", addr[0] or "*", addr[1])
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            pass
        finally:
            httpd.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
