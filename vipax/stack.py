"""CHIP-8 stack operations.

Callers are expected to check :func:`can_push` / :func:`can_pop` first; the
pointer never leaves ``[0, STACK_SIZE]``.
"""

import jax.numpy as jnp
from vipax.constants import ADDRESS_MASK, STACK_SIZE
from vipax.state import StackState


def can_push(stack: StackState) -> jnp.ndarray:
    return stack.pointer < STACK_SIZE


def can_pop(stack: StackState) -> jnp.ndarray:
    return stack.pointer > 0


def push(stack: StackState, address: jnp.ndarray) -> StackState:
    """Push address onto stack."""
    masked_address = jnp.astype(address & ADDRESS_MASK, jnp.uint16)
    pointer = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    new_data = stack.data.at[pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=jnp.astype(pointer + 1, jnp.uint8))


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    new_pointer = jnp.astype(jnp.maximum(jnp.astype(stack.pointer, jnp.int32) - 1, 0), jnp.uint8)
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
