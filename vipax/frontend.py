"""Pygame window host for the interpreter."""

import numpy as np
import pygame

from vipax.config import EmulatorConfig
from vipax.constants import SCREEN_WIDTH, SCREEN_HEIGHT, NUM_KEYS, STATUS_NAMES
from vipax.emulator import load_rom
from vipax.logging import get_logger
from vipax.machine import (
    run_frame, toggle_pause, halt, is_running, is_halted, set_keypad, clear_draw_flag,
    instructions_per_frame,
)
from vipax.rendering import display_to_rgb, unpack_rgb
from vipax.state import create_state, EmulatorState

# COSMAC VIP hex keypad on the left side of a QWERTY keyboard:
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}


def handle_event(state: EmulatorState, keypad: np.ndarray, event) -> EmulatorState:
    """Apply one pygame event to the keypad latch and the execution state.

    ``keypad`` is updated in place.
    """
    logger = get_logger()
    if event.type == pygame.QUIT:
        return halt(state)
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return halt(state)
        if event.key == pygame.K_SPACE:
            state = toggle_pause(state)
            if not is_running(state):
                logger.info("======= PAUSED =======")
            else:
                logger.info("Resumed")
            return state
        if event.key in KEY_MAP:
            keypad[KEY_MAP[event.key]] = True
    elif event.type == pygame.KEYUP and event.key in KEY_MAP:
        keypad[KEY_MAP[event.key]] = False
    return state


def draw(surface, state: EmulatorState, config: EmulatorConfig):
    frame = display_to_rgb(
        state.display,
        scale=config.scale_factor,
        on_color=unpack_rgb(config.fg_color),
        off_color=unpack_rgb(config.bg_color),
        pixel_outline=config.pixel_outline,
    )
    # pygame surfaces are indexed (x, y)
    pygame.surfarray.blit_array(surface, frame.swapaxes(0, 1))
    pygame.display.flip()


def run_window(config: EmulatorConfig) -> EmulatorState:
    """Open a window and run ``config.rom`` until the user quits."""
    logger = get_logger()
    budget = instructions_per_frame(config.instructions_per_second, config.fps)

    state = load_rom(create_state(seed=config.seed), config.rom)

    pygame.init()
    try:
        screen = pygame.display.set_mode(
            (SCREEN_WIDTH * config.scale_factor, SCREEN_HEIGHT * config.scale_factor)
        )
        pygame.display.set_caption("CHIP-8")
        clock = pygame.time.Clock()
        keypad = np.zeros(NUM_KEYS, dtype=bool)

        screen.fill(unpack_rgb(config.bg_color))
        pygame.display.flip()
        logger.info(f"Running at {budget} instructions per frame, {config.fps} fps")
        logger.info("Controls: ESC=Quit, SPACE=Pause, 1234/QWER/ASDF/ZXCV=Keypad")

        while not is_halted(state):
            for event in pygame.event.get():
                state = handle_event(state, keypad, event)
            if not is_running(state):
                clock.tick(config.fps)
                continue

            state = run_frame(set_keypad(state, keypad), budget)
            if bool(state.draw_flag):
                draw(screen, state, config)
                state = clear_draw_flag(state)
            clock.tick(config.fps)
    finally:
        pygame.quit()

    logger.info(f"Stopped ({STATUS_NAMES[int(state.status)]}) at PC=0x{int(state.pc):03X}")
    return state
