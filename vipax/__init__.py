"""CHIP-8 interpreter built on JAX."""

from vipax.state import EmulatorState, StackState, create_state
from vipax.emulator import execute, fetch, step, load_rom, load_program, RomLoadError
from vipax.decode import DecodedInstruction, decode, disassemble
from vipax.constants import *
from vipax.timers import tick_timers
from vipax.machine import (
    run_frame, run_instructions, toggle_pause, halt, is_running, is_halted,
    set_keypad, clear_draw_flag, instructions_per_frame,
)
from vipax.rendering import display_to_rgb, create_color_scheme, save_screenshot
from vipax.runner import Runner

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "load_rom",
    "load_program",
    "RomLoadError",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "tick_timers",
    "run_frame",
    "run_instructions",
    "toggle_pause",
    "halt",
    "is_running",
    "is_halted",
    "set_keypad",
    "clear_draw_flag",
    "instructions_per_frame",
    "Runner",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "RUNNING",
    "PAUSED",
    "HALTED",
    "display_to_rgb",
    "create_color_scheme",
    "save_screenshot",
]
