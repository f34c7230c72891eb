"""
Run a CHIP-8 program in a window, or headless for a fixed number of frames.

    python main.py rom=roms/IBM.ch8
    python main.py rom=roms/IBM.ch8 headless=true frames=120 screenshot=ibm.png
"""

import hydra
from omegaconf import DictConfig
import jax.numpy as jnp

from vipax.config import to_config
from vipax.emulator import RomLoadError
from vipax.frontend import run_window
from vipax.logging import get_logger
from vipax.rendering import save_screenshot, unpack_rgb
from vipax.runner import Runner


def run_headless(config) -> None:
    logger = get_logger()
    runner = Runner.from_file(config.rom, instruction_frequency=config.instructions_per_second, fps=config.fps)
    state = runner.reset()
    state = runner.run(state, config.frames, progress=config.progress)
    lit = int(jnp.sum(state.display))
    logger.info(f"Ran {config.frames} frames: PC=0x{int(state.pc):03X}, I=0x{int(state.I):03X}, {lit} pixels lit")
    logger.debug("Registers: " + " ".join(f"V{i:X}={int(v):02X}" for i, v in enumerate(state.V)))

    if config.screenshot:
        save_screenshot(
            state.display,
            config.screenshot,
            scale=config.scale_factor,
            on_color=unpack_rgb(config.fg_color),
            off_color=unpack_rgb(config.bg_color),
            pixel_outline=config.pixel_outline,
        )
        logger.info(f"Screenshot saved: {config.screenshot}")


def run(config) -> None:
    """Run ``config.rom`` headless or in a window. Exits with status 1 on failure."""
    logger = get_logger()
    logger.set_level(config.log_level)

    if config.rom is None:
        logger.error("No ROM given, pass rom=<path>")
        raise SystemExit(1)

    try:
        if config.headless:
            run_headless(config)
        else:
            run_window(config)
    except RomLoadError as e:
        logger.error(str(e))
        raise SystemExit(1) from e


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> None:
    run(to_config(cfg))


if __name__ == "__main__":
    main()
