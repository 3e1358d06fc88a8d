from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Tuple

import yaml


@dataclass
class SerialConfig:
    port: str = "/dev/tty.usbmodem1451"
    baud: int = 9600
    timeout: float = 1.0


@dataclass
class DisplayConfig:
    cols: int = 16
    rows: int = 2
    brightness: int = 255
    contrast: int = 200
    color: Tuple[int, int, int] = (0, 0, 255)
    command_delay_ms: int = 10  # the backpack drops bytes if commands arrive back to back


@dataclass
class WebConfig:
    host: str = ""
    port: int = 12000


@dataclass
class AppConfig:
    serial: SerialConfig = field(default_factory=SerialConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    web: WebConfig = field(default_factory=WebConfig)


def _as_int(val: Any, default: int) -> int:
    try:
        return int(val)
    except Exception:
        return default


def _as_float(val: Any, default: float) -> float:
    try:
        return float(val)
    except Exception:
        return default


def _as_color(val: Any, default: Tuple[int, int, int]) -> Tuple[int, int, int]:
    if not isinstance(val, (list, tuple)) or len(val) != 3:
        return default
    try:
        r, g, b = (int(c) for c in val)
    except Exception:
        return default
    return (r, g, b)


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    raw = data.get(key) or {}
    return raw if isinstance(raw, dict) else {}


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text())
    return data if isinstance(data, dict) else {}


def load_config(path: str | Path) -> AppConfig:
    data = _load_yaml(Path(path))

    serial_raw = _section(data, "serial")
    serial = SerialConfig(
        port=str(serial_raw.get("port", SerialConfig.port)),
        baud=_as_int(serial_raw.get("baud", SerialConfig.baud), SerialConfig.baud),
        timeout=_as_float(serial_raw.get("timeout", SerialConfig.timeout), SerialConfig.timeout),
    )

    disp_raw = _section(data, "display")
    d = DisplayConfig()
    display = DisplayConfig(
        cols=_as_int(disp_raw.get("cols", d.cols), d.cols),
        rows=_as_int(disp_raw.get("rows", d.rows), d.rows),
        brightness=_as_int(disp_raw.get("brightness", d.brightness), d.brightness),
        contrast=_as_int(disp_raw.get("contrast", d.contrast), d.contrast),
        color=_as_color(disp_raw.get("color", d.color), d.color),
        command_delay_ms=_as_int(
            disp_raw.get("command_delay_ms", d.command_delay_ms), d.command_delay_ms
        ),
    )

    web_raw = _section(data, "web")
    web = WebConfig(
        host=str(web_raw.get("host", WebConfig.host) or ""),
        port=_as_int(web_raw.get("port", WebConfig.port), WebConfig.port),
    )

    return AppConfig(serial=serial, display=display, web=web)


def validate_config(cfg: AppConfig) -> None:
    if not cfg.serial.port:
        raise ValueError("serial.port must be a non-empty string")
    if cfg.serial.baud <= 0:
        raise ValueError("serial.baud must be > 0")
    if cfg.serial.timeout < 0:
        raise ValueError("serial.timeout must be >= 0")

    d = cfg.display
    if not 1 <= d.cols <= 255:
        raise ValueError("display.cols must be between 1 and 255")
    if not 1 <= d.rows <= 255:
        raise ValueError("display.rows must be between 1 and 255")
    for name in ("brightness", "contrast"):
        val = getattr(d, name)
        if not 0 <= val <= 255:
            raise ValueError(f"display.{name} must be between 0 and 255")
    for i, c in enumerate(d.color):
        if not 0 <= c <= 255:
            raise ValueError(f"display.color[{i}] must be between 0 and 255")
    if d.command_delay_ms < 0:
        raise ValueError("display.command_delay_ms must be >= 0")

    if not 1 <= cfg.web.port <= 65535:
        raise ValueError("web.port must be between 1 and 65535")


def load_and_validate_config(path: str | Path) -> AppConfig:
    cfg = load_config(path)
    validate_config(cfg)
    return cfg
