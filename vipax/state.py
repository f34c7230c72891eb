"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from vipax.constants import (
    MEMORY_SIZE, FONT_START, FONT_DATA, PROGRAM_START, SCREEN_WIDTH, SCREEN_HEIGHT,
    STACK_SIZE, NUM_REGISTERS, NUM_KEYS, RUNNING,
)


def _zeros(shape, dtype):
    return field(default_factory=lambda: jnp.zeros(shape, dtype=dtype))


def _scalar(value, dtype):
    return field(default_factory=lambda: jnp.asarray(value, dtype=dtype))


class StackState(PyTreeNode):
    """Return-address stack for subroutine calls."""
    data: jnp.ndarray = _zeros(STACK_SIZE, jnp.uint16)
    pointer: jnp.ndarray = _zeros((), jnp.uint8)


class EmulatorState(PyTreeNode):
    """Main CHIP-8 machine state.

    The display is stored as ``(SCREEN_HEIGHT, SCREEN_WIDTH)`` so that
    ``display.ravel()`` is the row-major framebuffer. ``rng`` is the random
    source consumed by ``CXNN``; seeding it makes runs reproducible.
    """
    rng: jax.Array
    memory: jnp.ndarray = _zeros(MEMORY_SIZE, jnp.uint8)
    pc: jnp.ndarray = _scalar(PROGRAM_START, jnp.uint16)
    display: jnp.ndarray = _zeros((SCREEN_HEIGHT, SCREEN_WIDTH), jnp.bool_)
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = _zeros((), jnp.uint8)
    sound_timer: jnp.ndarray = _zeros((), jnp.uint8)
    keypad: jnp.ndarray = _zeros(NUM_KEYS, jnp.bool_)
    V: jnp.ndarray = _zeros(NUM_REGISTERS, jnp.uint8)
    I: jnp.ndarray = _zeros((), jnp.uint16)
    status: jnp.ndarray = _scalar(RUNNING, jnp.uint8)
    draw_flag: jnp.ndarray = _zeros((), jnp.bool_)


def create_state(rng: jax.Array = None, seed: int = 0) -> EmulatorState:
    """Create initial emulator state with font data loaded.

    Args:
        rng: PRNG key used by the random instruction. Built from ``seed`` when omitted.
        seed: Seed for the default key.
    """
    if rng is None:
        rng = jax.random.PRNGKey(seed)
    state = EmulatorState(rng)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(FONT_DATA))
