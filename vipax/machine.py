"""Machine lifecycle and frame scheduling.

A host drives the interpreter one frame at a time: it latches the keypad,
calls :func:`run_frame`, then reads the display. The state has a single
owner; calls from several threads need synchronisation by the caller.
"""

from functools import partial

import jax
import jax.numpy as jnp

from vipax.constants import RUNNING, PAUSED, HALTED, NUM_KEYS
from vipax.emulator import step
from vipax.state import EmulatorState
from vipax.timers import tick_timers


def _set_status(state: EmulatorState, status: int) -> EmulatorState:
    return state.replace(status=jnp.asarray(status, dtype=jnp.uint8))


def toggle_pause(state: EmulatorState) -> EmulatorState:
    """Switch between RUNNING and PAUSED. A halted machine stays halted."""
    if is_halted(state):
        return state
    return _set_status(state, PAUSED if is_running(state) else RUNNING)


def halt(state: EmulatorState) -> EmulatorState:
    """Stop the machine for good."""
    return _set_status(state, HALTED)


def is_running(state: EmulatorState) -> bool:
    return int(state.status) == RUNNING


def is_halted(state: EmulatorState) -> bool:
    return int(state.status) == HALTED


def set_keypad(state: EmulatorState, keys) -> EmulatorState:
    """Latch the 16 key states for the next frame."""
    keypad = jnp.asarray(keys, dtype=jnp.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return state.replace(keypad=keypad)


def clear_draw_flag(state: EmulatorState) -> EmulatorState:
    return state.replace(draw_flag=jnp.zeros((), dtype=jnp.bool_))


def instructions_per_frame(instructions_per_second: int, fps: int = 60) -> int:
    """Number of instructions executed between two timer ticks."""
    if instructions_per_second <= 0 or fps <= 0:
        raise ValueError("instructions_per_second and fps must be positive")
    return instructions_per_second // fps


def run_instructions(state: EmulatorState, n: int) -> EmulatorState:
    """Execute exactly ``n`` instructions, ignoring the execution state."""
    return jax.lax.fori_loop(0, n, lambda _, s: step(s), state)


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, instructions_per_frame: int) -> EmulatorState:
    """Run one 60 Hz frame: the instruction batch, then a single timer tick.

    Paused and halted machines are returned unchanged.
    """
    def _frame(state):
        return tick_timers(run_instructions(state, instructions_per_frame))

    return jax.lax.cond(state.status == RUNNING, _frame, lambda s: s, state)
