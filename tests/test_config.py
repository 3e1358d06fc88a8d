from __future__ import annotations

from pathlib import Path

import pytest

from serial_lcd.config import (
    AppConfig,
    DisplayConfig,
    SerialConfig,
    WebConfig,
    load_and_validate_config,
    load_config,
    validate_config,
)


def test_load_minimal_tmpfile(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text(
        """
serial:
  port: /dev/ttyACM0
  baud: 57600
display:
  cols: 20
  rows: 4
  color: [255, 0, 128]
web:
  port: 8080
"""
    )
    cfg = load_config(cfg_path)
    assert isinstance(cfg, AppConfig)
    assert cfg.serial.port == "/dev/ttyACM0"
    assert cfg.serial.baud == 57600
    assert (cfg.display.cols, cfg.display.rows) == (20, 4)
    assert cfg.display.color == (255, 0, 128)
    assert cfg.display.contrast == 200
    assert cfg.web.port == 8080


def test_load_empty_file_gives_defaults(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("")
    assert load_config(cfg_path) == AppConfig()


def test_load_falls_back_on_garbage_values(tmp_path: Path) -> None:
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text(
        """
serial:
  baud: fast
display:
  brightness: max
  color: blue
web: nope
"""
    )
    cfg = load_config(cfg_path)
    assert cfg.serial.baud == 9600
    assert cfg.display.brightness == 255
    assert cfg.display.color == (0, 0, 255)
    assert cfg.web == WebConfig()


def test_example_config_is_valid() -> None:
    path = Path(__file__).resolve().parents[1] / "config.example.yaml"
    cfg = load_and_validate_config(path)
    assert cfg.serial.baud == 9600


@pytest.mark.parametrize(
    "cfg",
    [
        AppConfig(serial=SerialConfig(port="")),
        AppConfig(serial=SerialConfig(baud=0)),
        AppConfig(display=DisplayConfig(cols=0)),
        AppConfig(display=DisplayConfig(rows=256)),
        AppConfig(display=DisplayConfig(brightness=300)),
        AppConfig(display=DisplayConfig(contrast=-1)),
        AppConfig(display=DisplayConfig(color=(0, 256, 0))),
        AppConfig(display=DisplayConfig(command_delay_ms=-5)),
        AppConfig(web=WebConfig(port=70000)),
    ],
)
def test_validate_rejects(cfg: AppConfig) -> None:
    with pytest.raises(ValueError):
        validate_config(cfg)


def test_validate_ok_defaults() -> None:
    validate_config(AppConfig())
