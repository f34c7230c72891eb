"""Tests for configuration loading and validation."""

import pytest
from omegaconf import OmegaConf
from omegaconf.errors import ValidationError
from vipax.config import EmulatorConfig, load_config, to_config, validate_config


def test_defaults():
    config = load_config()

    assert isinstance(config, EmulatorConfig)
    assert config.rom is None
    assert config.instructions_per_second == 700
    assert config.fps == 60
    assert config.fg_color == 0xFFA4FFFF
    assert config.log_level == "INFO"


def test_yaml_file(tmp_path):
    path = tmp_path / "vipax.yaml"
    path.write_text("rom: games/PONG.ch8\ninstructions_per_second: 1200\nbg_color: 255\n")

    config = load_config(str(path))

    assert config.rom == "games/PONG.ch8"
    assert config.instructions_per_second == 1200
    assert config.bg_color == 255
    assert config.fps == 60


def test_overrides_win_over_file(tmp_path):
    path = tmp_path / "vipax.yaml"
    path.write_text("fps: 30\nheadless: false\n")

    config = load_config(str(path), overrides=["fps=50", "headless=true"])

    assert config.fps == 50
    assert config.headless is True


def test_to_config_from_dictconfig():
    cfg = OmegaConf.create({"rom": "a.ch8", "frames": 10})
    config = to_config(cfg)

    assert config.rom == "a.ch8"
    assert config.frames == 10
    assert config.scale_factor == 10


def test_type_errors_are_rejected():
    with pytest.raises(ValidationError):
        load_config(overrides=["fps=fast"])


@pytest.mark.parametrize("field,value", [
    ("instructions_per_second", 0),
    ("fps", -1),
    ("scale_factor", 0),
    ("frames", -5),
    ("fg_color", 0x1_0000_0000),
    ("bg_color", -1),
])
def test_validation(field, value):
    config = EmulatorConfig(**{field: value})
    with pytest.raises(ValueError):
        validate_config(config)


def test_instruction_rate_below_frame_rate():
    with pytest.raises(ValueError, match="at least fps"):
        validate_config(EmulatorConfig(instructions_per_second=30, fps=60))
