"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from vipax.state import EmulatorState
from vipax.decode import DecodedInstruction
from vipax.stack import push, can_push
from vipax.logging import report_stack_overflow
from vipax.instructions.system import unknown_instruction


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN.

    A call with all 16 stack slots in use is logged and ignored.
    """
    def _call(state):
        state = state.replace(stack=push(state.stack, state.pc))
        return execute_jump(state, instruction)

    def _overflow(state):
        report_stack_overflow(state.pc)
        return state

    return jax.lax.cond(can_push(state.stack), _call, _overflow, state)


def _skip_next(state: EmulatorState) -> EmulatorState:
    return state.replace(pc=state.pc + 2)


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            _skip_next,
            lambda s: s,
            state
        )
    return skip_instruction


def require_zero_low_nibble(execute_fn):
    """5XY0/9XY0 with a non-zero low nibble is not a valid opcode."""
    def checked(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return jax.lax.cond(
            instruction.n == 0,
            execute_fn,
            unknown_instruction,
            state, instruction
        )
    return checked


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = require_zero_low_nibble(make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
))

execute_skip_if_not_equal_register = require_zero_low_nibble(make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
))


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jump_address)


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key VX pressed/not pressed."""
    key_pressed = state.keypad[state.V[instruction.x] & 0xF]

    skip_if_pressed = make_skip_instruction(lambda s, inst: key_pressed)
    skip_if_released = make_skip_instruction(lambda s, inst: ~key_pressed)

    index = jnp.where(instruction.nn == 0x9E, 0, jnp.where(instruction.nn == 0xA1, 1, 2))
    return jax.lax.switch(
        index,
        [skip_if_pressed, skip_if_released, unknown_instruction],
        state, instruction
    )
