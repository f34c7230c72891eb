"""Tests for the bounded call stack."""

import jax.numpy as jnp
from vipax import STACK_SIZE
from vipax.stack import can_push, can_pop, push, pop


def test_push_pop_lifo(fresh_state):
    stack = push(fresh_state.stack, jnp.uint16(0x202))
    stack = push(stack, jnp.uint16(0x404))
    assert stack.pointer == 2

    stack, address = pop(stack)
    assert address == 0x404
    stack, address = pop(stack)
    assert address == 0x202
    assert stack.pointer == 0


def test_push_masks_to_12_bits(fresh_state):
    stack = push(fresh_state.stack, jnp.uint16(0x1ABC))
    assert stack.data[0] == 0xABC


def test_bounds(fresh_state):
    stack = fresh_state.stack
    assert can_push(stack)
    assert not can_pop(stack)

    for i in range(STACK_SIZE):
        stack = push(stack, jnp.uint16(0x200 + 2 * i))

    assert stack.pointer == STACK_SIZE
    assert not can_push(stack)
    assert can_pop(stack)


def test_pop_empty_stays_at_zero(fresh_state):
    stack, _ = pop(fresh_state.stack)
    assert stack.pointer == 0


def test_pop_clears_slot(fresh_state):
    stack = push(fresh_state.stack, jnp.uint16(0x300))
    stack, _ = pop(stack)
    assert (stack.data == 0).all()
