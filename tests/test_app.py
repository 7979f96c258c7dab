import logging

import pytest

from orbit_sandbox3d.app import build_parser, config_from_args
from orbit_sandbox3d.errors import ShaderBuildError
from orbit_sandbox3d.logging_config import LOGGER_NAME, parse_level, setup_logging


def test_cli_defaults_match_config_defaults():
    args = build_parser().parse_args([])
    cfg = config_from_args(args)
    assert (cfg.window.width, cfg.window.height, cfg.window.fps) == (1200, 700, 60)
    assert cfg.camera.move_speed == 10.0
    assert cfg.camera.mouse_sensitivity == 0.1
    assert not args.cache_meshes


def test_cli_overrides():
    args = build_parser().parse_args(["--width", "800", "--height", "400", "--move-speed", "2.5", "--cache-meshes"])
    cfg = config_from_args(args)
    assert cfg.window.aspect == 2.0
    assert cfg.camera.move_speed == 2.5
    assert args.cache_meshes


def test_invalid_window_size_rejected():
    args = build_parser().parse_args(["--width", "0"])
    with pytest.raises(ValueError):
        config_from_args(args)


def test_parse_level():
    assert parse_level("debug") == logging.DEBUG
    with pytest.raises(ValueError):
        parse_level("chatty")


def test_setup_logging_replaces_handlers(tmp_path):
    log_file = tmp_path / "viewer.log"
    setup_logging(logging.INFO)
    logger = setup_logging(logging.DEBUG, str(log_file))
    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == 2
    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "hello" in log_file.read_text(encoding="utf-8")
    logger.handlers.clear()


def test_shader_build_error_carries_stage_and_log():
    exc = ShaderBuildError("fragment", "0:3: syntax error")
    assert exc.stage == "fragment"
    assert "syntax error" in str(exc)
