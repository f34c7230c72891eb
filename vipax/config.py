"""Emulator configuration.

Defaults live in :class:`EmulatorConfig`; a YAML file and ``key=value``
overrides are merged on top with OmegaConf, which also type-checks them.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from omegaconf import OmegaConf


@dataclass
class EmulatorConfig:
    rom: Optional[str] = None
    seed: int = 0

    # Scheduling
    instructions_per_second: int = 700
    fps: int = 60

    # Window
    scale_factor: int = 10
    fg_color: int = 0xFFA4FFFF  # 0xRRGGBBAA
    bg_color: int = 0x000000FF
    pixel_outline: bool = True

    # Headless runs
    headless: bool = False
    frames: int = 600
    screenshot: Optional[str] = None
    progress: bool = True

    log_level: str = "INFO"


def validate_config(config: EmulatorConfig) -> EmulatorConfig:
    """Reject values the scheduler or renderer cannot work with."""
    for name in ("instructions_per_second", "fps", "scale_factor"):
        if getattr(config, name) <= 0:
            raise ValueError(f"{name} must be positive, got {getattr(config, name)}")
    if config.instructions_per_second < config.fps:
        raise ValueError(
            f"instructions_per_second ({config.instructions_per_second}) must be at least fps ({config.fps})"
        )
    if config.frames < 0:
        raise ValueError(f"frames must not be negative, got {config.frames}")
    for name in ("fg_color", "bg_color"):
        if not 0 <= getattr(config, name) <= 0xFFFFFFFF:
            raise ValueError(f"{name} must be a 0xRRGGBBAA value")
    return config


def to_config(cfg) -> EmulatorConfig:
    """Convert a DictConfig (e.g. from Hydra) into a validated EmulatorConfig."""
    merged = OmegaConf.merge(OmegaConf.structured(EmulatorConfig), cfg)
    return validate_config(OmegaConf.to_object(merged))


def load_config(path: Optional[str] = None, overrides: Sequence[str] = ()) -> EmulatorConfig:
    """Load configuration from defaults, an optional YAML file and dotlist overrides."""
    layers = [OmegaConf.structured(EmulatorConfig)]
    if path is not None:
        layers.append(OmegaConf.load(path))
    if overrides:
        layers.append(OmegaConf.from_dotlist(list(overrides)))
    return validate_config(OmegaConf.to_object(OmegaConf.merge(*layers)))
