"""Tests for system instructions (0xxx) and the call stack."""

import jax
import jax.numpy as jnp
from vipax import execute, STACK_SIZE


def test_execute_clear_screen(fresh_state):
    """Test 00E0 - Clear display."""
    state = fresh_state.replace(display=fresh_state.display.at[0, 0].set(True))

    state = execute(state, 0x00E0)

    assert jnp.sum(state.display) == 0
    assert state.draw_flag


def test_execute_call_and_return(fresh_state):
    """Test 2NNN (call) and 00EE (return) together."""
    state = fresh_state
    initial_pc = state.pc

    # Call subroutine
    state = execute(state, 0x2300)  # Call 0x300
    assert state.pc == 0x300
    assert state.stack.pointer == 1
    assert state.stack.data[state.stack.pointer - 1] == initial_pc

    # Return from subroutine
    state = execute(state, 0x00EE)  # Return
    assert state.pc == initial_pc
    assert state.stack.pointer == 0


def test_nested_calls_return_in_order(fresh_state):
    state = execute(fresh_state, 0x2300)
    state = execute(state, 0x2400)
    state = execute(state, 0x2500)
    assert state.stack.pointer == 3

    state = execute(state, 0x00EE)
    assert state.pc == 0x400
    state = execute(state, 0x00EE)
    assert state.pc == 0x300
    state = execute(state, 0x00EE)
    assert state.pc == 0x200


def test_return_on_empty_stack_is_ignored(fresh_state, capsys):
    """00EE at depth 0 leaves the machine untouched and logs a warning."""
    state = execute(fresh_state, 0x00EE)

    assert state.pc == fresh_state.pc
    assert state.stack.pointer == 0
    jax.effects_barrier()
    assert "underflow" in capsys.readouterr().out


def test_call_on_full_stack_is_ignored(fresh_state, capsys):
    """2NNN at depth 16 does not push, does not jump, and logs a warning."""
    state = fresh_state
    for i in range(STACK_SIZE):
        state = execute(state, 0x2300 + 2 * i)
    assert state.stack.pointer == STACK_SIZE
    full_stack = state.stack.data
    pc = state.pc

    state = execute(state, 0x2FFE)

    assert state.stack.pointer == STACK_SIZE
    assert (state.stack.data == full_stack).all()
    assert state.pc == pc
    jax.effects_barrier()
    assert "overflow" in capsys.readouterr().out


def test_machine_code_routine_is_unknown(fresh_state, capsys):
    """0NNN is not supported: logged, no state change."""
    state = execute(fresh_state, 0x0123)

    assert state.pc == fresh_state.pc
    assert (state.memory == fresh_state.memory).all()
    jax.effects_barrier()
    assert "Unknown instruction 0x0123" in capsys.readouterr().out
